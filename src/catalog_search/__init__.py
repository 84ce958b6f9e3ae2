"""Search and aggregation query layer for a software-library catalog."""

from .domain import ArtifactCoordinate, Package, PackageReference, Release, ReleaseSelection
from .services import CatalogSearchService

__version__ = "0.1.0"

__all__ = [
    "ArtifactCoordinate",
    "CatalogSearchService",
    "Package",
    "PackageReference",
    "Release",
    "ReleaseSelection",
    "__version__",
]
