from inkwell.schemas.category import (
    CategoryBase, CategoryCreate, CategoryUpdate, CategoryResponse,
    CategoryTreeResponse, CategoryListResponse, CategoryTreeListResponse,
    SubcategoryBase, SubcategoryCreate, SubcategoryUpdate, SubcategoryResponse,
    OrderUpdate, ReorderRequest,
)
from inkwell.schemas.content import (
    ContentCreate, PostCreate, BookCreate,
    ContentResponse, PostResponse, BookResponse, PostListResponse, BookListResponse,
)

__all__ = [
    # Category
    "CategoryBase", "CategoryCreate", "CategoryUpdate", "CategoryResponse",
    "CategoryTreeResponse", "CategoryListResponse", "CategoryTreeListResponse",
    # Subcategory
    "SubcategoryBase", "SubcategoryCreate", "SubcategoryUpdate", "SubcategoryResponse",
    "OrderUpdate", "ReorderRequest",
    # Content
    "ContentCreate", "PostCreate", "BookCreate",
    "ContentResponse", "PostResponse", "BookResponse", "PostListResponse", "BookListResponse",
]
