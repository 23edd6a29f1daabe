"""Cognito Verify Auth Challenge trigger.

This Lambda verifies the user's response to the SMS code challenge.

SECURITY NOTES:
- Phone numbers are masked in logs to comply with privacy regulations
- Never log the expected or provided OTP codes
- The comparison is exact and constant-time
"""

from app.auth.otp_challenge import verify_answer
from app.utils.logging import clear_request_context
from app.utils.logging import configure_logging
from app.utils.logging import get_logger
from app.utils.logging import hash_for_correlation
from app.utils.logging import mask_phone
from app.utils.logging import set_request_context

configure_logging()
logger = get_logger(__name__)


def lambda_handler(event, context):
    """Verify the authentication challenge response."""

    set_request_context(
        getattr(context, "aws_request_id", None),
        hash_for_correlation(str(event.get("userName") or "")),
    )
    try:
        request = event.get("request", {})
        expected = (request.get("privateChallengeParameters") or {}).get("code")
        provided = request.get("challengeAnswer")
        response = event.setdefault("response", {})
        phone_number = (request.get("userAttributes") or {}).get("phone_number", "")

        is_correct = verify_answer(expected, provided)
        response["answerCorrect"] = is_correct

        # SECURITY: Mask phone number in logs to protect PII
        masked_phone = mask_phone(phone_number)
        if is_correct:
            logger.info(f"Challenge verified successfully for {masked_phone}")
        else:
            logger.warning(f"Challenge verification failed for {masked_phone}")

        return event
    finally:
        clear_request_context()
