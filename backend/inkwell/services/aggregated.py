import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from inkwell.models import Category, Subcategory
from inkwell.services.category_store import CATEGORY_ORDERING
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)


class AggregatedFetcher:
    """Loads a whole taxonomy tree in one statement for display pages."""

    def __init__(self, db: AsyncSession, taxonomy: Taxonomy):
        self.db = db
        self.taxonomy = taxonomy

    async def fetch_all_with_children(self, featured_only: bool = False, active_only: bool = False) -> list[Category]:
        children = Category.subcategories
        if active_only:
            children = children.and_(Subcategory.is_active.is_(True))

        query = (
            select(Category)
            .options(joinedload(children))
            .where(Category.taxonomy == self.taxonomy.key)
            .order_by(*CATEGORY_ORDERING)
            .execution_options(populate_existing=True)
        )
        if featured_only:
            query = query.where(Category.featured.is_(True))
        if active_only:
            query = query.where(Category.is_active.is_(True))

        result = await self.db.execute(query)
        categories = list(result.unique().scalars().all())

        # Inactive children never count, even when they are listed
        for category in categories:
            category.subcategory_count = sum(1 for s in category.subcategories if s.is_active)

        logger.debug(f"Fetched {len(categories)} {self.taxonomy} categories with children")
        return categories
