import time
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.database import get_db
from inkwell.core.security import require_admin
from inkwell.schemas.content import (
    PostCreate, BookCreate, PostResponse, BookResponse, PostListResponse, BookListResponse,
)
from inkwell.services.content import ContentService
from inkwell.services.taxonomies import Taxonomy, BLOG_TOPICS, LIBRARY_GENRES

# (create schema, item schema, list schema) per content collection
CONTENT_SCHEMAS = {
    BLOG_TOPICS.key: (PostCreate, PostResponse, PostListResponse),
    LIBRARY_GENRES.key: (BookCreate, BookResponse, BookListResponse),
}


def build_content_router(taxonomy: Taxonomy) -> APIRouter:
    """Filtered listing and creation for the content a taxonomy classifies."""
    create_schema, item_schema, list_schema = CONTENT_SCHEMAS[taxonomy.key]
    router = APIRouter(tags=[taxonomy.content_path])
    path = f"/{taxonomy.content_path}"

    @router.get(path, response_model=list_schema)
    async def list_content(
        category_id: Optional[uuid.UUID] = Query(default=None, alias="categoryId"),
        subcategory_id: Optional[uuid.UUID] = Query(default=None, alias="subCategoryId"),
        limit: int = Query(default=20, ge=1, le=100),
        offset: int = Query(default=0, ge=0),
        db: AsyncSession = Depends(get_db),
    ):
        started = time.perf_counter()
        items, total = await ContentService(db, taxonomy).list(
            category_id=category_id,
            subcategory_id=subcategory_id,
            limit=limit,
            offset=offset,
        )
        return list_schema(
            items=[item_schema.model_validate(i) for i in items],
            total=total,
            query_time_ms=int((time.perf_counter() - started) * 1000),
        )

    @router.post(path, response_model=item_schema, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
    async def create_content(request: create_schema, db: AsyncSession = Depends(get_db)):
        return await ContentService(db, taxonomy).create(request)

    return router
