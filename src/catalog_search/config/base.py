"""Base configuration classes and validation framework.

Provides:
- Abstract Configuration base class with a validation interface
- ConfigValidationResult for structured validation responses
- Error hierarchy for configuration failures
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List


class ConfigurationError(Exception):
    """Base exception for all configuration-related errors."""

    pass


class ValidationError(ConfigurationError):
    """Raised when configuration validation fails (bad URL, missing value, ...)."""

    pass


class SerializationError(ConfigurationError):
    """Raised when to_dict/from_dict cannot convert a configuration."""

    pass


@dataclass
class ConfigValidationResult:
    """Result of configuration validation with success state and error details.

    Attributes:
        success: True if validation passed, False otherwise
        errors: List of error messages describing validation failures
    """

    success: bool
    errors: List[str]

    def add_error(self, error: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(error)
        self.success = False

    @classmethod
    def success_result(cls) -> ConfigValidationResult:
        return cls(success=True, errors=[])


class Configuration(ABC):
    """Abstract base class for all configuration types.

    Subclasses must implement:
    - validate(): Perform configuration-specific validation
    - to_dict(): Convert configuration to dictionary
    - from_dict(): Create configuration from dictionary (class method)
    """

    @abstractmethod
    def validate(self) -> ConfigValidationResult:
        """Validate this configuration and return detailed results."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary.

        Raises:
            SerializationError: If configuration cannot be serialized
        """
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> Configuration:
        """Create configuration instance from dictionary data.

        Raises:
            SerializationError: If data cannot be deserialized
        """
        pass

    def validate_or_raise(self) -> None:
        """Validate configuration and raise ValidationError if invalid.

        Raises:
            ValidationError: If configuration validation fails
        """
        result = self.validate()
        if not result.success:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in result.errors)
            raise ValidationError(error_msg)
