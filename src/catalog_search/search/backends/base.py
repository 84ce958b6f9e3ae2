"""Base index interface for catalog queries.

This module defines the narrow contract every document index must honor:
an Elasticsearch-style request body goes in, a total hit count, a page of raw
hits and any aggregation buckets come out. The query layer never talks to a
cluster any other way.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BackendStatus(Enum):
    """Index availability status."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass
class IndexResponse:
    """Response from a document index.

    Attributes:
        total: Number of documents matching the query, not just those returned
        hits: Raw hits, each with ``_id``, ``_score`` and ``_source``
        aggregations: Aggregation results keyed by aggregation name
        took_ms: Time spent by the index, if reported
    """

    total: int
    hits: List[Dict[str, Any]] = field(default_factory=list)
    aggregations: Dict[str, Any] = field(default_factory=dict)
    took_ms: Optional[float] = None

    def buckets(self, name: str) -> List[Dict[str, Any]]:
        """Buckets of a terms aggregation, or an empty list if it is absent."""
        return self.aggregations.get(name, {}).get("buckets", [])


class DocumentIndex(ABC):
    """Abstract base class for document indices."""

    def __init__(self, name: str):
        self.name = name
        self._status = BackendStatus.UNAVAILABLE
        self._last_error: Optional[str] = None

    @property
    def status(self) -> BackendStatus:
        return self._status

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def _update_status(self, status: BackendStatus, error: Optional[str] = None):
        self._status = status
        self._last_error = error

    @abstractmethod
    async def search(self, collection: str, body: Dict[str, Any]) -> IndexResponse:
        """Execute one request against a collection.

        Args:
            collection: Logical collection name (packages or releases)
            body: Request DSL with any of ``query``, ``sort``, ``from``,
                ``size`` and ``aggs``

        Returns:
            IndexResponse with hits and aggregations

        Raises:
            IndexUnavailable: If the index cannot serve the request
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the index is reachable."""
        pass

    async def close(self) -> None:
        """Release any connection held by the index."""
        pass
