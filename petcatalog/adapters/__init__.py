"""Adapters package initialization."""
from petcatalog.adapters.html_document import load_document
from petcatalog.adapters.catalog_store import (
    CatalogStore,
    InMemoryCatalogStore,
    RestCatalogStore,
    create_catalog_store,
)

__all__ = [
    "load_document",
    "CatalogStore",
    "InMemoryCatalogStore",
    "RestCatalogStore",
    "create_catalog_store",
]
