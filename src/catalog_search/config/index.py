"""Document index connection settings.

Handles:
- Cluster URL validation (HTTP/HTTPS format)
- Index prefix validation and physical index naming
- Optional basic-auth credentials
- Environment variable integration (CATALOG_SEARCH_*)
"""

from __future__ import annotations

import os
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from ..constants import PROJECTS_COLLECTION, RELEASES_COLLECTION
from .base import Configuration, ConfigValidationResult, SerializationError

DEFAULT_URL = "http://localhost:9200"
DEFAULT_INDEX_PREFIX = "catalog"
DEFAULT_TIMEOUT = 30.0

# Physical index suffix per logical collection.
INDEX_SUFFIXES = {
    PROJECTS_COLLECTION: "projects",
    RELEASES_COLLECTION: "releases",
}


class IndexConfig(Configuration):
    """Configuration for the Elasticsearch cluster holding the catalog.

    Example usage:
        # From environment variables, explicit values win
        config = IndexConfig.with_defaults(url="http://search:9200")

        result = config.validate()
        if not result.success:
            for error in result.errors:
                print(f"Configuration error: {error}")
    """

    def __init__(
        self,
        url: Optional[str] = DEFAULT_URL,
        index_prefix: Optional[str] = DEFAULT_INDEX_PREFIX,
        request_timeout: float = DEFAULT_TIMEOUT,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.url = url
        self.index_prefix = index_prefix
        self.request_timeout = request_timeout
        self.username = username
        self.password = password

    def index_for(self, collection: str) -> str:
        """Physical index name for a logical collection.

        Raises:
            KeyError: If the collection is unknown
        """
        return f"{self.index_prefix}-{INDEX_SUFFIXES[collection]}"

    @property
    def basic_auth(self) -> Optional[tuple]:
        if self.username and self.password:
            return (self.username, self.password)
        return None

    def validate(self) -> ConfigValidationResult:
        result = ConfigValidationResult.success_result()

        if not self.url:
            result.add_error("Index URL is required")
        else:
            for error in self._validate_url(self.url):
                result.add_error(error)

        if not self.index_prefix:
            result.add_error("Index prefix is required")
        elif not re.match(r"^[a-z0-9][a-z0-9_\-]*$", self.index_prefix):
            result.add_error(
                f"Index prefix '{self.index_prefix}' must be lowercase letters, numbers, "
                "'-' or '_' and start with a letter or number"
            )

        if self.request_timeout is None or self.request_timeout <= 0:
            result.add_error("Request timeout must be a positive number of seconds")

        if bool(self.username) != bool(self.password):
            result.add_error("Username and password must be set together")

        return result

    def _validate_url(self, url: str) -> list[str]:
        errors = []
        if not (url.startswith("http://") or url.startswith("https://")):
            errors.append("Index URL must start with 'http://' or 'https://' (e.g., 'http://localhost:9200')")
            return errors

        parsed = urlparse(url)
        if not parsed.netloc:
            errors.append("Index URL must specify a hostname (e.g., 'http://localhost:9200')")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the configuration. The password is never included."""
        return {
            "url": self.url,
            "index_prefix": self.index_prefix,
            "request_timeout": self.request_timeout,
            "username": self.username,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IndexConfig:
        try:
            return cls(
                url=data.get("url", DEFAULT_URL),
                index_prefix=data.get("index_prefix", DEFAULT_INDEX_PREFIX),
                request_timeout=float(data.get("request_timeout", DEFAULT_TIMEOUT)),
                username=data.get("username"),
                password=data.get("password"),
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to deserialize IndexConfig: {e}")

    @classmethod
    def from_environment(cls) -> IndexConfig:
        """Create IndexConfig from environment variables.

        Reads:
        - CATALOG_SEARCH_ES_URL: Cluster URL
        - CATALOG_SEARCH_INDEX_PREFIX: Prefix of the physical indices
        - CATALOG_SEARCH_TIMEOUT: Request timeout in seconds
        - CATALOG_SEARCH_ES_USER / CATALOG_SEARCH_ES_PASSWORD: Basic auth
        """
        return cls.from_dict(
            {
                "url": os.environ.get("CATALOG_SEARCH_ES_URL", DEFAULT_URL),
                "index_prefix": os.environ.get("CATALOG_SEARCH_INDEX_PREFIX", DEFAULT_INDEX_PREFIX),
                "request_timeout": os.environ.get("CATALOG_SEARCH_TIMEOUT", DEFAULT_TIMEOUT),
                "username": os.environ.get("CATALOG_SEARCH_ES_USER"),
                "password": os.environ.get("CATALOG_SEARCH_ES_PASSWORD"),
            }
        )

    @classmethod
    def with_defaults(cls, **kwargs: Any) -> IndexConfig:
        """Create IndexConfig with explicit parameters taking precedence over environment."""
        env_config = cls.from_environment()
        return cls(
            url=kwargs.get("url", env_config.url),
            index_prefix=kwargs.get("index_prefix", env_config.index_prefix),
            request_timeout=kwargs.get("request_timeout", env_config.request_timeout),
            username=kwargs.get("username", env_config.username),
            password=kwargs.get("password", env_config.password),
        )
