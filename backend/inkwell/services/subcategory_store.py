"""
Subcategory store.

Same contracts as CategoryStore, but every slug check, count and listing is
scoped to one parent category. The same slug may appear under two
different parents.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.exceptions import ValidationError, NotFoundError
from inkwell.models import Category, Subcategory
from inkwell.schemas.category import SubcategoryCreate, SubcategoryUpdate, OrderUpdate
from inkwell.services.category_store import CategoryStore, commit_or_reject
from inkwell.services.slug import slugify
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)

SUBCATEGORY_ORDERING = (Subcategory.order, Subcategory.name, Subcategory.id)


class SubcategoryStore:
    def __init__(self, db: AsyncSession, taxonomy: Taxonomy):
        self.db = db
        self.taxonomy = taxonomy
        self.categories = CategoryStore(db, taxonomy)

    @property
    def label(self) -> str:
        return self.taxonomy.subcategory_label

    @property
    def _duplicate_message(self) -> str:
        return f"A {self.label.lower()} with this slug already exists in this {self.categories.label.lower()}"

    def _scoped(self):
        return (
            select(Subcategory)
            .join(Category, Category.id == Subcategory.category_id)
            .where(Category.taxonomy == self.taxonomy.key)
        )

    async def get_by_id(self, subcategory_id: uuid.UUID) -> Optional[Subcategory]:
        result = await self.db.execute(self._scoped().where(Subcategory.id == subcategory_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, category_id: uuid.UUID, slug: str) -> Optional[Subcategory]:
        result = await self.db.execute(
            self._scoped().where(Subcategory.category_id == category_id, Subcategory.slug == slug)
        )
        return result.scalar_one_or_none()

    async def require(self, subcategory_id: uuid.UUID) -> Subcategory:
        subcategory = await self.get_by_id(subcategory_id)
        if not subcategory:
            raise NotFoundError(f"{self.label} not found")
        return subcategory

    async def is_slug_taken(
        self,
        category_id: uuid.UUID,
        slug: str,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        query = select(Subcategory.id).where(
            Subcategory.category_id == category_id,
            Subcategory.slug == slug,
        )
        if exclude_id is not None:
            query = query.where(Subcategory.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def count(self, category_id: uuid.UUID, active_only: bool = False) -> int:
        query = select(func.count()).select_from(Subcategory).where(Subcategory.category_id == category_id)
        if active_only:
            query = query.where(Subcategory.is_active.is_(True))
        result = await self.db.execute(query)
        return result.scalar_one()

    async def list(self, category_id: uuid.UUID, active_only: bool = False) -> list[Subcategory]:
        await self.categories.require(category_id)
        query = select(Subcategory).where(Subcategory.category_id == category_id)
        if active_only:
            query = query.where(Subcategory.is_active.is_(True))
        result = await self.db.execute(query.order_by(*SUBCATEGORY_ORDERING))
        return list(result.scalars().all())

    async def create(self, category_id: uuid.UUID, data: SubcategoryCreate) -> Subcategory:
        category = await self.categories.require(category_id)

        name = (data.name or "").strip()
        if not name:
            raise ValidationError(f"{self.label} name is required")

        slug = slugify(data.slug if data.slug else name)
        if not slug:
            raise ValidationError(f"{self.label} slug is required")
        if await self.is_slug_taken(category.id, slug):
            raise ValidationError(self._duplicate_message)

        order = data.order if data.order is not None else await self.count(category.id)

        now = datetime.utcnow()
        subcategory = Subcategory(
            category_id=category.id,
            name=name,
            slug=slug,
            description=data.description,
            icon=data.icon,
            order=order,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )
        self.db.add(subcategory)
        await commit_or_reject(self.db, self._duplicate_message)

        logger.info(f"Created {self.taxonomy} subcategory {category.slug}/{subcategory.slug}")
        return subcategory

    async def update(self, subcategory_id: uuid.UUID, patch: SubcategoryUpdate) -> Subcategory:
        subcategory = await self.require(subcategory_id)
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
            new_slug = slugify(changes.get("name", subcategory.name))

        if new_slug is not None:
            if not new_slug:
                raise ValidationError(f"{self.label} slug is required")
            if new_slug != subcategory.slug and await self.is_slug_taken(
                subcategory.category_id, new_slug, exclude_id=subcategory.id
            ):
                raise ValidationError(self._duplicate_message)
            subcategory.slug = new_slug

        for field, value in changes.items():
            if value is None and field in ("order", "is_active"):
                continue
            setattr(subcategory, field, value)
        subcategory.updated_at = datetime.utcnow()

        await commit_or_reject(self.db, self._duplicate_message)
        return subcategory

    async def delete(self, subcategory_id: uuid.UUID) -> None:
        subcategory = await self.require(subcategory_id)
        content = self.taxonomy.content_model

        try:
            await self.db.execute(
                update(content)
                .where(content.subcategory_id == subcategory.id)
                .values(subcategory_id=None)
                .execution_options(synchronize_session="fetch")
            )
            await self.db.execute(delete(Subcategory).where(Subcategory.id == subcategory.id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Deleted {self.taxonomy} subcategory {subcategory_id}")

    async def reorder(self, category_id: uuid.UUID, updates: list[OrderUpdate]) -> list[Subcategory]:
        await self.categories.require(category_id)

        ids = [u.id for u in updates]
        result = await self.db.execute(
            select(Subcategory).where(
                Subcategory.category_id == category_id,
                Subcategory.id.in_(ids),
            )
        )
        found = {s.id: s for s in result.scalars().all()}

        missing = [str(i) for i in ids if i not in found]
        if missing:
            raise NotFoundError(f"{self.label} not found: {', '.join(missing)}")

        now = datetime.utcnow()
        for u in updates:
            found[u.id].order = u.order
            found[u.id].updated_at = now
        await self.db.commit()

        return [found[i] for i in ids]
