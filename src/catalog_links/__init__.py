#!filepath: src/catalog_links/__init__.py
from catalog_links.cache import ResolutionCache
from catalog_links.errors import (
    CategoryPathError,
    InvalidInput,
    LookupFailed,
    MaxDepthExceeded,
)
from catalog_links.link_builder import LinkBuilder
from catalog_links.lookup import (
    CategoryLookup,
    InMemoryCategoryLookup,
    ProductCategoryLookup,
    SqliteCategoryLookup,
)
from catalog_links.models import AncestorChain, CategoryNode, LinkRequest, ProductRef
from catalog_links.resolver import CategoryPathResolver

__all__ = [
    "AncestorChain",
    "CategoryLookup",
    "CategoryNode",
    "CategoryPathError",
    "CategoryPathResolver",
    "InMemoryCategoryLookup",
    "InvalidInput",
    "LinkBuilder",
    "LinkRequest",
    "LookupFailed",
    "MaxDepthExceeded",
    "ProductCategoryLookup",
    "ProductRef",
    "ResolutionCache",
    "SqliteCategoryLookup",
]
