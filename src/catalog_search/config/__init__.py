"""Configuration for the catalog search layer."""

from .base import (
    ConfigValidationResult,
    Configuration,
    ConfigurationError,
    SerializationError,
    ValidationError,
)
from .index import IndexConfig

__all__ = [
    "ConfigValidationResult",
    "Configuration",
    "ConfigurationError",
    "IndexConfig",
    "SerializationError",
    "ValidationError",
]
