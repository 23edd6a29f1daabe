"""Cognito Pre Sign-up trigger.

This Lambda auto-confirms every registrant and marks the phone number as
verified. Sign-in proves possession of the phone through the SMS code
challenge, so no separate verification step is run here.

SECURITY NOTES:
- Phone numbers are masked in logs to comply with privacy regulations
- Never log passwords or sensitive user data
"""

from app.utils.logging import configure_logging, get_logger, mask_phone

configure_logging()
logger = get_logger(__name__)


def lambda_handler(event, _context):
    """Handle pre-signup trigger."""

    request = event.get("request", {})
    response = event.setdefault("response", {})
    user_attributes = request.get("userAttributes") or {}
    phone_number = user_attributes.get("phone_number", "")

    # SECURITY: Mask phone number in logs to protect PII
    logger.info(f"Pre-signup for {mask_phone(phone_number)}")

    response["autoConfirmUser"] = True
    response["autoVerifyPhone"] = True

    return event
