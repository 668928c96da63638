"""Custom exception hierarchy for the SW5E derived-stats engine.

All exceptions inherit from Sw5eEngineError so a host integration can catch
engine failures at a single boundary while keeping domain-specific context.
The computation core itself is fail-soft: these exceptions are raised at the
edges (snapshot parsing, configuration, rule table construction), not while
resolving numbers.

Example:
    >>> from sw5e_engine.core.exceptions import SnapshotValidationError
    >>> raise SnapshotValidationError("Bad actor data", actor_name="Kira")
"""

from __future__ import annotations

from typing import Any


class Sw5eEngineError(Exception):
    """Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(Sw5eEngineError):
    """Raised when engine configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class RuleTableError(ConfigurationError):
    """Raised when a rule table is malformed.

    Rule tables are static data; a table with the wrong number of entries
    is rejected once at construction so lookups never have to check shape.
    """

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rule table error.

        Args:
            message: Human-readable error description.
            table: Name of the offending table (e.g. 'power_max_level').
            key: Archetype or row key inside the table.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if key:
            combined_details["key"] = key
        super().__init__(message, config_key=table, details=combined_details)


# =============================================================================
# Validation Exceptions
# =============================================================================


class ValidationError(Sw5eEngineError):
    """Raised when data validation fails."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class SnapshotValidationError(ValidationError):
    """Raised when raw actor data cannot be turned into an ActorSnapshot.

    Attributes:
        errors: One entry per rejected field, formatted as 'path: reason'.
    """

    def __init__(
        self,
        message: str,
        *,
        actor_name: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize snapshot validation error.

        Args:
            message: Human-readable error description.
            actor_name: Name of the actor whose data was rejected.
            errors: Field-level error descriptions.
            details: Optional dictionary containing additional error context.
        """
        self.errors = list(errors or [])
        combined_details = details or {}
        if actor_name:
            combined_details["actor_name"] = actor_name
        if self.errors:
            combined_details["errors"] = self.errors
        super().__init__(message, details=combined_details)


# =============================================================================
# Computation Exceptions
# =============================================================================


class ComputationError(Sw5eEngineError):
    """Raised when a derivation stage fails unexpectedly.

    Numeric gaps never raise; this wraps programming errors so the host
    sees which stage broke.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize computation error with stage context.

        Args:
            message: Human-readable error description.
            stage: Name of the pipeline stage that failed.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if stage:
            combined_details["stage"] = stage
        super().__init__(message, details=combined_details)


__all__ = [
    "Sw5eEngineError",
    "ConfigurationError",
    "RuleTableError",
    "ValidationError",
    "SnapshotValidationError",
    "ComputationError",
]
