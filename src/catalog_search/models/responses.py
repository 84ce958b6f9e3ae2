"""Pydantic models for query results.

Shapes returned by the catalog service. Entities inside them are the frozen
domain dataclasses, which pydantic validates and serializes directly.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..domain.package_info import Package
from ..domain.release_info import ReleaseOptions


class Pagination(BaseModel):
    """Page metadata echoed back with every search.

    ``current`` is the page actually served, after clamping.
    """

    current: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total: int = Field(ge=0)


class PageResult(BaseModel):
    """One page of package search results."""

    pagination: Pagination
    items: List[Package] = Field(default_factory=list)


class FacetCount(BaseModel):
    """Number of packages carrying one value of a faceted field."""

    term: str
    count: int = Field(ge=0)


class ProjectDetail(BaseModel):
    """A package with its release count and the release chosen for display."""

    package: Package
    release_count: int = Field(ge=0)
    release_options: Optional[ReleaseOptions] = None
