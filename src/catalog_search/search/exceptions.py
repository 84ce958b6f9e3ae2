"""Search-specific exceptions with structured error responses.

This module defines the error handling framework for the catalog query
layer. Absence (no matching package, no release for a coordinate) is never
an exception here; lookups return None or an empty list. What remains are
failures an outer layer must translate for its own callers.
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorCategory(Enum):
    """Categories of search errors for classification and handling."""

    NETWORK = "network"
    BACKEND_ERROR = "backend_error"
    INVALID_INPUT = "invalid_input"
    CONFIGURATION = "configuration"


class SearchException(Exception):
    """Base exception for catalog queries with structured error responses.

    All search exceptions include:
    - Human-readable error message
    - Error category for classification
    - Detailed cause of the failure
    - The action a caller can take
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        cause: str,
        collection: Optional[str] = None,
        required_action: str = "",
        documentation: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.cause = cause
        self.collection = collection
        self.required_action = required_action
        self.documentation = documentation

    def to_response(self) -> Dict[str, Any]:
        """Convert exception to a structured error response.

        Returns:
            Dictionary with error, category, details and fix instructions
        """
        response: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "error_category": self.category.value,
            "details": {
                "cause": self.cause,
                "collection": self.collection,
            },
            "fix": {
                "required_action": self.required_action,
            },
        }

        if self.documentation:
            response["fix"]["documentation"] = self.documentation

        return response


class IndexUnavailable(SearchException):
    """Raised when the document index cannot be reached or rejects a request.

    Never retried by the query layer; retry policy belongs to the caller or
    the transport.
    """

    def __init__(self, cause: str, collection: Optional[str] = None):
        super().__init__(
            message="Document index unavailable",
            category=ErrorCategory.NETWORK,
            cause=cause,
            collection=collection,
            required_action="Check the index connection settings and retry",
            documentation="https://www.elastic.co/guide/en/elasticsearch/client/python-api/current/connecting.html",
        )


class MalformedResult(SearchException):
    """Raised when an index document cannot be decoded into its entity.

    Only the operation that read the document fails; concurrent operations
    are unaffected.
    """

    def __init__(self, entity: str, cause: str, collection: Optional[str] = None):
        super().__init__(
            message=f"Malformed {entity} document",
            category=ErrorCategory.BACKEND_ERROR,
            cause=cause,
            collection=collection,
            required_action="Reindex the offending document",
        )
        self.entity = entity


class InvalidFacetError(SearchException):
    """Raised when a facet is requested for a field that has none."""

    def __init__(self, field: str, allowed: tuple):
        super().__init__(
            message=f"Unknown facet: {field}",
            category=ErrorCategory.INVALID_INPUT,
            cause=f"Facets are available for {', '.join(allowed)}",
            required_action="Request one of the supported facet fields",
        )
        self.field = field
