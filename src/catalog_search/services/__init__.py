"""Catalog query services."""

from .catalog_service import CatalogSearchService
from .release_selection import default_release

__all__ = ["CatalogSearchService", "default_release"]
