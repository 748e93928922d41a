"""Catalog API client: paginated book listing and plain-text downloads."""

from typelit.catalog.client import CatalogClient, CatalogError, DownloadError
from typelit.catalog.schemas import CatalogBook, CatalogPage

__all__ = [
    "CatalogBook",
    "CatalogClient",
    "CatalogError",
    "CatalogPage",
    "DownloadError",
]
