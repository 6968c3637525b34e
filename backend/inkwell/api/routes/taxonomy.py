import time
import uuid
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.core.config import settings
from inkwell.core.database import get_db
from inkwell.core.exceptions import NotFoundError
from inkwell.core.security import require_admin
from inkwell.schemas.category import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryTreeResponse,
    CategoryListResponse, CategoryTreeListResponse,
    SubcategoryCreate, SubcategoryUpdate, SubcategoryResponse, ReorderRequest,
)
from inkwell.services.aggregated import AggregatedFetcher
from inkwell.services.category_store import CategoryStore
from inkwell.services.subcategory_store import SubcategoryStore
from inkwell.services.taxonomies import Taxonomy

logger = logging.getLogger(__name__)

NO_CACHE = "no-cache, no-store, must-revalidate"


def _cache_control(response: Response, fresh: bool, max_age: int, swr: int):
    if fresh:
        response.headers["Cache-Control"] = NO_CACHE
    else:
        response.headers["Cache-Control"] = f"public, max-age={max_age}, stale-while-revalidate={swr}"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def build_taxonomy_router(taxonomy: Taxonomy) -> APIRouter:
    """Category and subcategory endpoints for one taxonomy."""
    router = APIRouter(tags=[taxonomy.category_path])
    categories = f"/{taxonomy.category_path}"
    children = taxonomy.subcategory_path
    admin = [Depends(require_admin)]

    # Reads

    @router.get(categories, response_model=CategoryListResponse)
    async def list_categories(
        response: Response,
        featured: bool = False,
        active: bool = False,
        fresh: bool = False,
        db: AsyncSession = Depends(get_db),
    ):
        """List categories in display order with their subcategory counts."""
        started = time.perf_counter()
        items = await CategoryStore(db, taxonomy).list(featured_only=featured, active_only=active)
        elapsed = _elapsed_ms(started)

        _cache_control(response, fresh, settings.CATEGORY_CACHE_MAX_AGE, settings.CATEGORY_CACHE_SWR)
        response.headers["X-Query-Time"] = f"{elapsed}ms"
        return CategoryListResponse(
            items=[CategoryResponse.model_validate(c) for c in items],
            query_time_ms=elapsed,
            total=len(items),
        )

    @router.get(f"{categories}/with-children", response_model=CategoryTreeListResponse)
    async def list_categories_with_children(
        response: Response,
        featured: bool = False,
        active: bool = False,
        fresh: bool = False,
        db: AsyncSession = Depends(get_db),
    ):
        """Every category with its subcategories embedded, in one query."""
        started = time.perf_counter()
        items = await AggregatedFetcher(db, taxonomy).fetch_all_with_children(
            featured_only=featured, active_only=active
        )
        elapsed = _elapsed_ms(started)

        _cache_control(response, fresh, settings.TREE_CACHE_MAX_AGE, settings.TREE_CACHE_SWR)
        response.headers["X-Query-Time"] = f"{elapsed}ms"
        return CategoryTreeListResponse(
            items=[CategoryTreeResponse.model_validate(c) for c in items],
            query_time_ms=elapsed,
            total=len(items),
        )

    @router.get(f"{categories}/slug/{{slug}}", response_model=CategoryResponse)
    async def get_category_by_slug(slug: str, db: AsyncSession = Depends(get_db)):
        """Public lookup; inactive categories are hidden."""
        store = CategoryStore(db, taxonomy)
        category = await store.get_by_slug(slug, active_only=True)
        if not category:
            raise NotFoundError(f"{store.label} not found")
        category.subcategory_count = await SubcategoryStore(db, taxonomy).count(category.id, active_only=True)
        return category

    # Bulk reorder must be registered before /{category_id}
    @router.put(f"{categories}/order", response_model=list[CategoryResponse], dependencies=admin)
    async def reorder_categories(request: ReorderRequest, db: AsyncSession = Depends(get_db)):
        return await CategoryStore(db, taxonomy).reorder(request.updates)

    @router.get(f"{categories}/{{category_id}}", response_model=CategoryResponse)
    async def get_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
        category = await CategoryStore(db, taxonomy).require(category_id)
        category.subcategory_count = await SubcategoryStore(db, taxonomy).count(category.id, active_only=True)
        return category

    @router.get(f"{categories}/{{category_id}}/{children}", response_model=list[SubcategoryResponse])
    async def list_subcategories(
        category_id: uuid.UUID,
        active: bool = False,
        db: AsyncSession = Depends(get_db),
    ):
        return await SubcategoryStore(db, taxonomy).list(category_id, active_only=active)

    @router.get(f"/{children}/{{subcategory_id}}", response_model=SubcategoryResponse)
    async def get_subcategory(subcategory_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
        return await SubcategoryStore(db, taxonomy).require(subcategory_id)

    # Admin mutations

    @router.post(categories, response_model=CategoryResponse, status_code=status.HTTP_201_CREATED, dependencies=admin)
    async def create_category(request: CategoryCreate, db: AsyncSession = Depends(get_db)):
        return await CategoryStore(db, taxonomy).create(request)

    @router.put(f"{categories}/{{category_id}}", response_model=CategoryResponse, dependencies=admin)
    async def update_category(
        category_id: uuid.UUID,
        request: CategoryUpdate,
        db: AsyncSession = Depends(get_db),
    ):
        category = await CategoryStore(db, taxonomy).update(category_id, request)
        category.subcategory_count = await SubcategoryStore(db, taxonomy).count(category.id, active_only=True)
        return category

    @router.delete(f"{categories}/{{category_id}}", dependencies=admin)
    async def delete_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
        """Delete a category together with all of its subcategories."""
        store = CategoryStore(db, taxonomy)
        await store.delete(category_id)
        return {"message": f"{store.label} deleted successfully"}

    @router.post(
        f"{categories}/{{category_id}}/{children}",
        response_model=SubcategoryResponse,
        status_code=status.HTTP_201_CREATED,
        dependencies=admin,
    )
    async def create_subcategory(
        category_id: uuid.UUID,
        request: SubcategoryCreate,
        db: AsyncSession = Depends(get_db),
    ):
        return await SubcategoryStore(db, taxonomy).create(category_id, request)

    @router.put(
        f"{categories}/{{category_id}}/{children}/order",
        response_model=list[SubcategoryResponse],
        dependencies=admin,
    )
    async def reorder_subcategories(
        category_id: uuid.UUID,
        request: ReorderRequest,
        db: AsyncSession = Depends(get_db),
    ):
        return await SubcategoryStore(db, taxonomy).reorder(category_id, request.updates)

    @router.put(f"/{children}/{{subcategory_id}}", response_model=SubcategoryResponse, dependencies=admin)
    async def update_subcategory(
        subcategory_id: uuid.UUID,
        request: SubcategoryUpdate,
        db: AsyncSession = Depends(get_db),
    ):
        return await SubcategoryStore(db, taxonomy).update(subcategory_id, request)

    @router.delete(f"/{children}/{{subcategory_id}}", dependencies=admin)
    async def delete_subcategory(subcategory_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
        store = SubcategoryStore(db, taxonomy)
        await store.delete(subcategory_id)
        return {"message": f"{store.label} deleted successfully"}

    return router
