"""
Seed the database with starter topics and book genres for development.
Run with: python scripts/seed_data.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inkwell.core.database import async_session_maker, engine, Base
from inkwell.schemas.category import CategoryCreate, SubcategoryCreate
from inkwell.services.category_store import CategoryStore
from inkwell.services.subcategory_store import SubcategoryStore
from inkwell.services.taxonomies import Taxonomy, BLOG_TOPICS, LIBRARY_GENRES

TOPICS = {
    "Lập trình": ["Python", "JavaScript", "Cơ sở dữ liệu"],
    "Science": ["Physics", "Mathematics"],
    "Notes": [],
}

GENRES = {
    "Fiction": ["Science fiction", "Mystery"],
    "Non-fiction": ["History", "Biography"],
    "Poetry": [],
}


async def seed_taxonomy(taxonomy: Taxonomy, tree: dict[str, list[str]]):
    async with async_session_maker() as session:
        categories = CategoryStore(session, taxonomy)
        if await categories.count():
            print(f"{taxonomy.category_label} list already seeded, skipping...")
            return

        subcategories = SubcategoryStore(session, taxonomy)
        for name, children in tree.items():
            category = await categories.create(CategoryCreate(name=name, featured=bool(children)))
            for child in children:
                await subcategories.create(category.id, SubcategoryCreate(name=child))
        print(f"{taxonomy.category_label} list seeded ({len(tree)} entries)")


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await seed_taxonomy(BLOG_TOPICS, TOPICS)
    await seed_taxonomy(LIBRARY_GENRES, GENRES)
    print("Done!")


if __name__ == "__main__":
    asyncio.run(main())
