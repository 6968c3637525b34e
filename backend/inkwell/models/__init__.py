from inkwell.models.taxonomy import Category, Subcategory
from inkwell.models.content import Post, Book

__all__ = [
    # Taxonomy
    "Category",
    "Subcategory",
    # Content
    "Post",
    "Book",
]
