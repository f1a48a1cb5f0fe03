"""
Exception hierarchy for fleet infrastructure configuration.

Errors are raised while loading or validating stack configuration, before
any resource is registered with the Pulumi engine.

Dependencies: None
System role: Centralized error types for config and topology checks
"""

from typing import Any


class FleetError(Exception):
    """Base exception for all fleet infrastructure errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigValidationError(FleetError):
    """Raised when a stack configuration value is missing or invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            field: Config key that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        self.field = field
        super().__init__(message, details)


class TopologyError(FleetError):
    """Raised when the declared network topology is structurally invalid."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(
            f"Invalid topology: {len(self.errors)} problem(s) found",
            {"errors": self.errors},
        )
