from uuid import UUID
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CategoryBase(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    featured: bool = False
    is_active: bool = True


class CategoryCreate(CategoryBase):
    order: Optional[int] = None  # appended after existing siblings when omitted


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None
    regenerate_slug: bool = False


class SubcategoryBase(BaseModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = True


class SubcategoryCreate(SubcategoryBase):
    order: Optional[int] = None


class SubcategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None
    regenerate_slug: bool = False


class SubcategoryResponse(BaseModel):
    id: UUID
    category_id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CategoryResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    order: int
    featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime
    subcategory_count: int = 0

    class Config:
        from_attributes = True


class CategoryTreeResponse(CategoryResponse):
    subcategories: list[SubcategoryResponse]


class CategoryListResponse(BaseModel):
    items: list[CategoryResponse]
    query_time_ms: int
    total: int


class CategoryTreeListResponse(BaseModel):
    items: list[CategoryTreeResponse]
    query_time_ms: int
    total: int


class OrderUpdate(BaseModel):
    id: UUID
    order: int


class ReorderRequest(BaseModel):
    updates: list[OrderUpdate]
