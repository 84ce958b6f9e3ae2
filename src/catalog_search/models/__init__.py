"""Result models for the catalog search layer."""

from .responses import FacetCount, PageResult, Pagination, ProjectDetail

__all__ = ["FacetCount", "PageResult", "Pagination", "ProjectDetail"]
