"""Domain objects for the catalog search layer."""

from .package_info import GithubInfo, Package
from .references import ArtifactCoordinate, PackageReference
from .release_info import Release, ReleaseOptions, ReleaseSelection

__all__ = [
    "ArtifactCoordinate",
    "GithubInfo",
    "Package",
    "PackageReference",
    "Release",
    "ReleaseOptions",
    "ReleaseSelection",
]
