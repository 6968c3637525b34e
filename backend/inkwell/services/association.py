"""
Content association checks.

A content item may point at a category, at a category and one of its
subcategories, or at nothing. A subcategory on its own is never valid.
"""

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.exceptions import ValidationError, NotFoundError
from inkwell.services.category_store import CategoryStore
from inkwell.services.subcategory_store import SubcategoryStore
from inkwell.services.taxonomies import Taxonomy


def validate_association(
    category_ref: Optional[uuid.UUID],
    subcategory_ref: Optional[uuid.UUID],
) -> None:
    if subcategory_ref is not None and category_ref is None:
        raise ValidationError("subcategory without category")


async def resolve_association(
    db: AsyncSession,
    taxonomy: Taxonomy,
    category_ref: Optional[uuid.UUID],
    subcategory_ref: Optional[uuid.UUID],
) -> None:
    """Check that both references exist in the taxonomy and belong together."""
    validate_association(category_ref, subcategory_ref)
    if category_ref is None:
        return

    category = await CategoryStore(db, taxonomy).get_by_id(category_ref)
    if not category:
        raise NotFoundError(f"{taxonomy.category_label} not found")

    if subcategory_ref is None:
        return

    subcategory = await SubcategoryStore(db, taxonomy).get_by_id(subcategory_ref)
    if not subcategory:
        raise NotFoundError(f"{taxonomy.subcategory_label} not found")
    if subcategory.category_id != category.id:
        raise ValidationError(
            f"{taxonomy.subcategory_label} does not belong to the selected {taxonomy.category_label.lower()}"
        )
