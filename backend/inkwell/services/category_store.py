"""
Category store.

CRUD for the top-level nodes of one taxonomy. Slugs are unique across the
taxonomy, new categories are appended after their siblings, and delete
cascades to subcategories inside a single transaction.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func, delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.exceptions import ValidationError, NotFoundError, CascadeDeleteError
from inkwell.models import Category, Subcategory
from inkwell.schemas.category import CategoryCreate, CategoryUpdate, OrderUpdate
from inkwell.services.slug import slugify
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)

CATEGORY_ORDERING = (Category.order, Category.created_at, Category.id)


async def commit_or_reject(db: AsyncSession, message: str):
    """Commit, turning a unique-constraint race into a ValidationError."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity error on commit: {e.orig}")
        raise ValidationError(message) from e


class CategoryStore:
    def __init__(self, db: AsyncSession, taxonomy: Taxonomy):
        self.db = db
        self.taxonomy = taxonomy

    @property
    def label(self) -> str:
        return self.taxonomy.category_label

    def _scoped(self):
        return select(Category).where(Category.taxonomy == self.taxonomy.key)

    async def get_by_id(self, category_id: uuid.UUID) -> Optional[Category]:
        result = await self.db.execute(self._scoped().where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str, active_only: bool = False) -> Optional[Category]:
        query = self._scoped().where(Category.slug == slug)
        if active_only:
            query = query.where(Category.is_active.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def require(self, category_id: uuid.UUID) -> Category:
        category = await self.get_by_id(category_id)
        if not category:
            raise NotFoundError(f"{self.label} not found")
        return category

    async def is_slug_taken(self, slug: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        query = select(Category.id).where(
            Category.taxonomy == self.taxonomy.key,
            Category.slug == slug,
        )
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Category).where(Category.taxonomy == self.taxonomy.key)
        )
        return result.scalar_one()

    async def list(self, featured_only: bool = False, active_only: bool = False) -> list[Category]:
        """Categories in display order, each with a live count of its active subcategories."""
        counts = (
            select(Subcategory.category_id, func.count(Subcategory.id).label("n"))
            .where(Subcategory.is_active.is_(True))
            .group_by(Subcategory.category_id)
            .subquery()
        )
        query = (
            select(Category, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.category_id == Category.id)
            .where(Category.taxonomy == self.taxonomy.key)
            .order_by(*CATEGORY_ORDERING)
        )
        if featured_only:
            query = query.where(Category.featured.is_(True))
        if active_only:
            query = query.where(Category.is_active.is_(True))

        result = await self.db.execute(query)
        categories = []
        for category, subcategory_count in result.all():
            category.subcategory_count = subcategory_count
            categories.append(category)
        return categories

    async def create(self, data: CategoryCreate) -> Category:
        name = (data.name or "").strip()
        if not name:
            raise ValidationError(f"{self.label} name is required")

        slug = slugify(data.slug if data.slug else name)
        if not slug:
            raise ValidationError(f"{self.label} slug is required")
        if await self.is_slug_taken(slug):
            raise ValidationError(f"A {self.label.lower()} with this slug already exists")

        # Racing creates may share an order value; list() breaks ties by created_at
        order = data.order if data.order is not None else await self.count()

        now = datetime.utcnow()
        category = Category(
            taxonomy=self.taxonomy.key,
            name=name,
            slug=slug,
            description=data.description,
            icon=data.icon,
            color=data.color,
            order=order,
            featured=data.featured,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )
        self.db.add(category)
        await commit_or_reject(self.db, f"A {self.label.lower()} with this slug already exists")

        logger.info(f"Created {self.taxonomy} category {category.slug} ({category.id})")
        return category

    async def update(self, category_id: uuid.UUID, patch: CategoryUpdate) -> Category:
        category = await self.require(category_id)
        changes = patch.model_dump(exclude_unset=True)
        regenerate_slug = changes.pop("regenerate_slug", False)
        requested_slug = changes.pop("slug", None)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError(f"{self.label} name is required")
            changes["name"] = name

        new_slug = None
        if requested_slug is not None:
            new_slug = slugify(requested_slug)
        elif regenerate_slug:
            new_slug = slugify(changes.get("name", category.name))

        if new_slug is not None:
            if not new_slug:
                raise ValidationError(f"{self.label} slug is required")
            if new_slug != category.slug and await self.is_slug_taken(new_slug, exclude_id=category.id):
                raise ValidationError(f"A {self.label.lower()} with this slug already exists")
            category.slug = new_slug

        for field, value in changes.items():
            if value is None and field in ("order", "featured", "is_active"):
                continue
            setattr(category, field, value)
        category.updated_at = datetime.utcnow()

        await commit_or_reject(self.db, f"A {self.label.lower()} with this slug already exists")
        return category

    async def delete(self, category_id: uuid.UUID) -> None:
        """Remove the category and all of its subcategories, or nothing at all."""
        category = await self.require(category_id)
        slug = category.slug

        try:
            await self._detach_content(category.id)
            removed = await self._delete_children(category.id)
            await self.db.execute(delete(Category).where(Category.id == category.id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Cascade delete of {self.taxonomy} category {category_id} failed: {e}")
            raise CascadeDeleteError(f"Failed to delete {self.label.lower()}; nothing was removed") from e

        logger.info(f"Deleted {self.taxonomy} category {slug} and {removed} subcategories")

    async def _delete_children(self, category_id: uuid.UUID) -> int:
        result = await self.db.execute(
            delete(Subcategory).where(Subcategory.category_id == category_id)
        )
        return result.rowcount

    async def _detach_content(self, category_id: uuid.UUID) -> None:
        content = self.taxonomy.content_model
        children = select(Subcategory.id).where(Subcategory.category_id == category_id)
        await self.db.execute(
            update(content)
            .where((content.category_id == category_id) | content.subcategory_id.in_(children))
            .values(category_id=None, subcategory_id=None)
            .execution_options(synchronize_session="fetch")
        )

    async def reorder(self, updates: list[OrderUpdate]) -> list[Category]:
        ids = [u.id for u in updates]
        result = await self.db.execute(self._scoped().where(Category.id.in_(ids)))
        found = {c.id: c for c in result.scalars().all()}

        missing = [str(i) for i in ids if i not in found]
        if missing:
            raise NotFoundError(f"{self.label} not found: {', '.join(missing)}")

        now = datetime.utcnow()
        for u in updates:
            found[u.id].order = u.order
            found[u.id].updated_at = now
        await self.db.commit()

        return [found[i] for i in ids]
