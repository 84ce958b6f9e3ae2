"""Query construction and execution against the catalog document index.

Submodules:
- core: query builder, pagination and sort strategies
- backends: the DocumentIndex contract and its implementations
"""

from .exceptions import (
    ErrorCategory,
    IndexUnavailable,
    InvalidFacetError,
    MalformedResult,
    SearchException,
)

__all__ = [
    "ErrorCategory",
    "IndexUnavailable",
    "InvalidFacetError",
    "MalformedResult",
    "SearchException",
]
