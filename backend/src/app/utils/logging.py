"""Structured logging utilities for the Cognito trigger Lambdas.

This module provides JSON-formatted logging with request context,
suitable for CloudWatch Logs Insights queries.

SECURITY NOTES:
- Use mask_phone() when logging phone numbers
- Never log OTP codes, challenge answers, or tokens
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Mapping
from typing import MutableMapping
from typing import Optional


def mask_phone(phone_number: str, visible_digits: int = 2) -> str:
    """Mask a phone number for safe logging.

    SECURITY: Phone numbers are PII and should not be logged in plain text.
    The country prefix and the last few digits are kept for debugging.

    Args:
        phone_number: The phone number to mask, in any format.
        visible_digits: Number of trailing digits to keep.

    Returns:
        A masked version like "+81***78".

    Examples:
        >>> mask_phone("+819012345678")
        '+81***78'
        >>> mask_phone("090-1234-5678")
        '09***78'
    """
    digits = "".join(ch for ch in phone_number or "" if ch.isdigit())
    if len(digits) <= visible_digits + 2:
        return "***"

    prefix = "+" if phone_number.strip().startswith("+") else ""
    return f"{prefix}{digits[:2]}***{digits[-visible_digits:]}"


def hash_for_correlation(value: str) -> str:
    """Generate a short hash for log correlation without exposing PII.

    Use this to correlate the define/create/verify invocations of a single
    user without logging the username itself.
    """
    return hashlib.sha256(value.encode()).hexdigest()[:12]


# Context variables for request tracking
request_id: ContextVar[str] = ContextVar("request_id", default="")
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Produces log entries compatible with CloudWatch Logs Insights,
    including request context and exception details.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        req_id = request_id.get()
        if req_id:
            log_data["request_id"] = req_id

        corr_id = correlation_id.get()
        if corr_id:
            log_data["correlation_id"] = corr_id

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict) and extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that nests extra context under a single key."""

    def process(
        self,
        msg: str,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[str, MutableMapping[str, Any]]:
        """Process log message to include extra context."""
        extra = dict(kwargs.get("extra", {}))

        if self.extra:
            extra.update(self.extra)

        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging for Lambda execution.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to
               LOG_LEVEL environment variable or INFO.
    """
    log_level: str = level or os.getenv("LOG_LEVEL") or "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredLogFormatter())
    root_logger.addHandler(handler)

    # Reduce noise from libraries
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name (typically __name__).
        **extra: Additional context to include in all log messages.

    Returns:
        A ContextLogger instance.
    """
    logger = logging.getLogger(name)
    return ContextLogger(logger, extra)


def set_request_context(
    req_id: Optional[str] = None,
    corr_id: Optional[str] = None,
) -> None:
    """Set request context for logging.

    Call this at the start of each Lambda invocation to set
    context that will be included in all log messages.

    Args:
        req_id: AWS request ID from Lambda context.
        corr_id: Correlation ID, e.g. a hash of the Cognito username.
    """
    if req_id:
        request_id.set(req_id)
    if corr_id:
        correlation_id.set(corr_id)


def clear_request_context() -> None:
    """Clear request context after Lambda invocation."""
    request_id.set("")
    correlation_id.set("")


def log_trigger_event(logger: ContextLogger, event: Mapping[str, Any]) -> None:
    """Log Cognito trigger event details at DEBUG level.

    Only structural fields are logged; user attributes, challenge
    parameters and answers are left out.
    """
    request = event.get("request") or {}
    log_data = {
        "trigger_source": event.get("triggerSource"),
        "user_pool_id": event.get("userPoolId"),
        "challenge_name": request.get("challengeName"),
        "session_length": len(request.get("session") or []),
    }
    logger.debug("Cognito trigger received", extra={"event": log_data})
