from inkwell.client.api import TaxonomyClient, ContentFilter
from inkwell.client.selection import (
    SelectionController, NoSelection, CategorySelected, SubcategorySelected,
)

__all__ = [
    "TaxonomyClient",
    "ContentFilter",
    "SelectionController",
    "NoSelection",
    "CategorySelected",
    "SubcategorySelected",
]
