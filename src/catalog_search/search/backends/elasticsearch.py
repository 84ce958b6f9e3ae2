"""Elasticsearch backend for catalog queries.

Each logical collection lives in its own index:
- Packages: {index_prefix}-projects
- Releases: {index_prefix}-releases

This backend simply:
1. Resolves the physical index for the collection
2. Executes one search request
3. Normalizes the response into an IndexResponse
"""

import logging
import time
from typing import Any, Dict, Optional

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from ...config.index import IndexConfig
from ..exceptions import IndexUnavailable
from .base import BackendStatus, DocumentIndex, IndexResponse

logger = logging.getLogger(__name__)

# Request DSL keys accepted by AsyncElasticsearch.search, renamed where the
# client avoids Python keywords.
REQUEST_KEYS = {
    "query": "query",
    "sort": "sort",
    "from": "from_",
    "size": "size",
    "aggs": "aggs",
}


def total_hits(hits: Dict[str, Any]) -> int:
    """Read the hit total from either the 7.x+ object form or the legacy integer form.

    Examples:
        >>> total_hits({"total": {"value": 42, "relation": "eq"}})
        42
        >>> total_hits({"total": 7})
        7
    """
    total = hits.get("total", 0)
    if isinstance(total, dict):
        return int(total.get("value", 0))
    return int(total or 0)


class ElasticsearchIndex(DocumentIndex):
    """Document index backed by an Elasticsearch cluster."""

    def __init__(self, config: Optional[IndexConfig] = None, client: Optional[AsyncElasticsearch] = None):
        super().__init__("elasticsearch")
        self.config = config or IndexConfig.from_environment()
        self._client = client

    def _get_client(self) -> AsyncElasticsearch:
        if self._client is None:
            self.config.validate_or_raise()
            self._client = AsyncElasticsearch(
                hosts=[self.config.url],
                basic_auth=self.config.basic_auth,
                request_timeout=self.config.request_timeout,
            )
            logger.info(f"Elasticsearch client created for {self.config.url} (prefix={self.config.index_prefix})")
        return self._client

    @staticmethod
    def to_client_kwargs(body: Dict[str, Any]) -> Dict[str, Any]:
        """Translate a request body into AsyncElasticsearch.search keyword arguments.

        Raises:
            ValueError: If the body carries a key this backend does not forward
        """
        unknown = set(body) - set(REQUEST_KEYS)
        if unknown:
            raise ValueError(f"Unsupported request keys: {sorted(unknown)}")
        return {REQUEST_KEYS[key]: value for key, value in body.items()}

    async def search(self, collection: str, body: Dict[str, Any]) -> IndexResponse:
        index = self.config.index_for(collection)
        kwargs = self.to_client_kwargs(body)
        start_time = time.time()

        try:
            response = await self._get_client().search(index=index, **kwargs)
        except (ApiError, TransportError) as e:
            self._update_status(BackendStatus.ERROR, str(e))
            logger.warning(f"Search on {index} failed: {e}")
            raise IndexUnavailable(cause=str(e), collection=collection) from e

        self._update_status(BackendStatus.AVAILABLE)
        raw = getattr(response, "body", response)
        hits = raw.get("hits", {})
        query_time = (time.time() - start_time) * 1000
        logger.debug(f"Search on {index} took {query_time:.1f}ms (index reported {raw.get('took')}ms)")

        return IndexResponse(
            total=total_hits(hits),
            hits=hits.get("hits", []),
            aggregations=raw.get("aggregations", {}),
            took_ms=raw.get("took"),
        )

    async def health_check(self) -> bool:
        """Check if Elasticsearch responds to ping."""
        try:
            healthy = await self._get_client().ping()
        except (ApiError, TransportError) as e:
            self._update_status(BackendStatus.ERROR, f"Health check failed: {e}")
            return False

        if healthy:
            self._update_status(BackendStatus.AVAILABLE)
        else:
            self._update_status(BackendStatus.UNAVAILABLE, f"No response from {self.config.url}")
        return bool(healthy)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("Elasticsearch client closed")
