from uuid import UUID
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ContentCreate(BaseModel):
    title: str
    slug: Optional[str] = None
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None


class PostCreate(ContentCreate):
    excerpt: Optional[str] = None
    published: bool = False


class BookCreate(ContentCreate):
    author: Optional[str] = None
    published_year: Optional[int] = None
    featured: bool = False


class ContentResponse(BaseModel):
    id: UUID
    title: str
    slug: str
    category_id: Optional[UUID] = None
    subcategory_id: Optional[UUID] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PostResponse(ContentResponse):
    excerpt: Optional[str] = None
    published: bool


class BookResponse(ContentResponse):
    author: Optional[str] = None
    published_year: Optional[int] = None
    featured: bool


class PostListResponse(BaseModel):
    items: list[PostResponse]
    total: int
    query_time_ms: int


class BookListResponse(BaseModel):
    items: list[BookResponse]
    total: int
    query_time_ms: int
