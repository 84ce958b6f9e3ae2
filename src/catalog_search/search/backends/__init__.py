"""Document index backends."""

from .base import BackendStatus, DocumentIndex, IndexResponse
from .memory import InMemoryIndex

__all__ = ["BackendStatus", "DocumentIndex", "IndexResponse", "InMemoryIndex"]
