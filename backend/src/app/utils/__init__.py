"""Utility modules for the auth triggers."""

from app.utils.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    hash_for_correlation,
    log_trigger_event,
    mask_phone,
    set_request_context,
)
from app.utils.validators import normalize_phone_number, validate_region

__all__ = [
    "clear_request_context",
    "configure_logging",
    "get_logger",
    "hash_for_correlation",
    "log_trigger_event",
    "mask_phone",
    "normalize_phone_number",
    "set_request_context",
    "validate_region",
]
