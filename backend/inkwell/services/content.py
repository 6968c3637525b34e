from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.exceptions import ValidationError
from inkwell.schemas.content import ContentCreate
from inkwell.services.association import resolve_association
from inkwell.services.category_store import commit_or_reject
from inkwell.services.slug import slugify
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)


class ContentService:
    """Create and filter the posts or books classified by one taxonomy."""

    def __init__(self, db: AsyncSession, taxonomy: Taxonomy):
        self.db = db
        self.taxonomy = taxonomy
        self.model = taxonomy.content_model

    async def create(self, data: ContentCreate):
        title = (data.title or "").strip()
        if not title:
            raise ValidationError("Title is required")

        slug = slugify(data.slug if data.slug else title)
        if not slug:
            raise ValidationError("Slug is required")

        await resolve_association(self.db, self.taxonomy, data.category_id, data.subcategory_id)

        existing = await self.db.execute(select(self.model.id).where(self.model.slug == slug).limit(1))
        if existing.first() is not None:
            raise ValidationError(f"An item with slug '{slug}' already exists")

        now = datetime.utcnow()
        fields = data.model_dump(exclude={"title", "slug"})
        item = self.model(title=title, slug=slug, created_at=now, updated_at=now, **fields)
        self.db.add(item)
        await commit_or_reject(self.db, f"An item with slug '{slug}' already exists")

        logger.info(f"Created {self.taxonomy.content_path} item {slug}")
        return item

    async def list(
        self,
        category_id: Optional[uuid.UUID] = None,
        subcategory_id: Optional[uuid.UUID] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list, int]:
        """Newest first. Returns (items, total matching the filter)."""
        conditions = []
        if category_id is not None:
            conditions.append(self.model.category_id == category_id)
        if subcategory_id is not None:
            conditions.append(self.model.subcategory_id == subcategory_id)

        total = await self.db.execute(select(func.count()).select_from(self.model).where(*conditions))
        result = await self.db.execute(
            select(self.model)
            .where(*conditions)
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total.scalar_one()
