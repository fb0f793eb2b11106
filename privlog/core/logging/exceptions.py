"""
Exceptions for the privlog logging facade.

Building and emitting messages never raises; these exceptions cover
misuse of the surrounding registry and configuration APIs.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for consistent error handling."""

    UNKNOWN_LABEL = "unknown_label"
    INVALID_CONFIGURATION = "invalid_configuration"


class PrivlogError(Exception):
    """
    Base exception for privlog errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error details (optional)
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_CONFIGURATION,
        details: dict[str, Any] | None = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details
        }


class UnknownLabelError(PrivlogError):
    """Raised when a logger is required for a label that was never registered."""

    def __init__(self, label: str, registered: list[str] | None = None):
        super().__init__(
            message=f"No logger registered for label '{label}'",
            error_code=ErrorCode.UNKNOWN_LABEL,
            details={"label": label, "registered": registered or []}
        )
        self.label = label


class ConfigurationError(PrivlogError):
    """Raised when the logging system cannot be configured."""

    def __init__(
        self,
        message: str = "Invalid logging configuration",
        details: dict[str, Any] | None = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_CONFIGURATION,
            details=details
        )
