"""Custom exception classes for the auth triggers.

Cognito surfaces any exception raised by a trigger as a generic
authentication failure, so these classes mostly exist to give the logs a
precise, PII-free error description via ``to_dict()``.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for application errors.

    Attributes:
        message: Human-readable error message.
        detail: Optional additional context. Must never contain an OTP code
            or a phone number.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a loggable error description."""
        result: dict[str, Any] = {
            "type": type(self).__name__,
            "error": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when trigger input is missing or malformed.

    Use for missing user attributes or phone numbers that cannot be parsed.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(message, detail=detail)
        self.field = field


class ConfigurationError(AppError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, config_name: str, reason: Optional[str] = None):
        message = f"Missing required configuration: {config_name}"
        if reason:
            message = f"Invalid configuration {config_name}: {reason}"
        super().__init__(message)
        self.config_name = config_name


class DeliveryError(AppError):
    """Raised when the SMS gateway rejects or fails to deliver a code.

    Fatal for the current challenge round; never retried by the triggers.
    """
