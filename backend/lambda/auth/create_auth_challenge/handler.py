"""Cognito Create Auth Challenge trigger.

This Lambda creates the custom authentication challenge by generating
a one-time code and sending it by SMS. When Cognito calls it again within
the same session, the code already issued is recovered from the session
history and no new SMS is sent.

SECURITY NOTES:
- OTP codes are generated using cryptographically secure random (secrets module)
- Phone numbers are masked in logs to comply with privacy regulations
- Never log OTP codes
- The code only goes into privateChallengeParameters and challengeMetadata,
  never into publicChallengeParameters
"""

from functools import partial

from app.auth.otp_challenge import CHALLENGE_NAME
from app.auth.otp_challenge import issue_challenge
from app.auth.otp_challenge import parse_session
from app.exceptions import AppError
from app.exceptions import ValidationError
from app.services.sms import send_sign_in_code
from app.utils.logging import clear_request_context
from app.utils.logging import configure_logging
from app.utils.logging import get_logger
from app.utils.logging import hash_for_correlation
from app.utils.logging import log_trigger_event
from app.utils.logging import mask_phone
from app.utils.logging import set_request_context

configure_logging()
logger = get_logger(__name__)


def lambda_handler(event, context):
    """Create a custom authentication challenge."""

    set_request_context(
        getattr(context, "aws_request_id", None),
        hash_for_correlation(str(event.get("userName") or "")),
    )
    try:
        log_trigger_event(logger, event)

        request = event.get("request", {})
        response = event.setdefault("response", {})

        if (request.get("challengeName") or CHALLENGE_NAME) != CHALLENGE_NAME:
            return event

        user_attributes = request.get("userAttributes") or {}
        phone_number = user_attributes.get("phone_number") or ""
        if not phone_number:
            logger.error("User has no phone_number attribute")
            raise ValidationError("phone_number is required", field="phone_number")

        session = parse_session(request.get("session"))

        # SECURITY: Mask phone number in logs to protect PII
        logger.info(f"Creating auth challenge for {mask_phone(phone_number)}")

        try:
            challenge = issue_challenge(
                phone_number,
                session,
                partial(send_sign_in_code, phone_number),
            )
        except AppError as exc:
            logger.error("Failed to send challenge SMS", extra={"error": exc.to_dict()})
            raise
        except Exception as exc:
            # SECURITY: Log error type but not full details which may contain PII
            logger.error(f"Failed to send challenge SMS: {type(exc).__name__}")
            raise

        if challenge.is_new:
            logger.info("Challenge SMS sent successfully")
        elif not challenge.code:
            logger.warning(
                "No code found in challenge metadata",
                extra={"session_length": len(session)},
            )
        else:
            logger.info(
                "Re-presenting issued challenge",
                extra={"session_length": len(session)},
            )

        challenge.apply(response)
        return event
    finally:
        clear_request_context()
