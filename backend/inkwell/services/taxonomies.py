"""
Taxonomy descriptors.

The category engine is written once and parameterized by a ``Taxonomy``:
which rows of the shared ``categories`` table it owns, which content model
its nodes classify, and how it is labelled in messages and URLs.
"""

from dataclasses import dataclass
from inkwell.core.database import Base
from inkwell.models import Post, Book


@dataclass(frozen=True)
class Taxonomy:
    key: str  # value stored in categories.taxonomy
    content_model: type[Base]
    category_label: str
    subcategory_label: str
    category_path: str  # URL collection segments
    subcategory_path: str
    content_path: str

    def __str__(self) -> str:
        return self.key


BLOG_TOPICS = Taxonomy(
    key="topics",
    content_model=Post,
    category_label="Topic",
    subcategory_label="Subtopic",
    category_path="topics",
    subcategory_path="subtopics",
    content_path="posts",
)

LIBRARY_GENRES = Taxonomy(
    key="genres",
    content_model=Book,
    category_label="Book genre",
    subcategory_label="Subgenre",
    category_path="bookgenres",
    subcategory_path="subgenres",
    content_path="books",
)

TAXONOMIES = (BLOG_TOPICS, LIBRARY_GENRES)
