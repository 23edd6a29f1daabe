"""Cognito Define Auth Challenge trigger.

This Lambda determines whether to issue tokens, fail authentication,
or continue with the SMS code challenge based on the session history.
"""

from typing import Any

from app.auth.otp_challenge import challenge_state
from app.auth.otp_challenge import define_challenge
from app.auth.otp_challenge import max_challenge_attempts
from app.auth.otp_challenge import parse_session
from app.utils.logging import clear_request_context
from app.utils.logging import configure_logging
from app.utils.logging import get_logger
from app.utils.logging import hash_for_correlation
from app.utils.logging import log_trigger_event
from app.utils.logging import set_request_context

configure_logging()
logger = get_logger(__name__)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Define the authentication challenge flow."""

    set_request_context(
        getattr(context, "aws_request_id", None),
        hash_for_correlation(str(event.get("userName") or "")),
    )
    try:
        log_trigger_event(logger, event)

        max_attempts = max_challenge_attempts()
        session = parse_session(event.get("request", {}).get("session"))
        response = event.setdefault("response", {})

        decision = define_challenge(session, max_attempts)
        decision.apply(response)
        state = challenge_state(session, max_attempts)

        if decision.issue_tokens:
            logger.info(
                "Auth successful",
                extra={"session_length": len(session), "state": state.value},
            )
        elif decision.fail_authentication:
            logger.warning(
                "Auth failed",
                extra={
                    "session_length": len(session),
                    "max_attempts": max_attempts,
                    "state": state.value,
                },
            )
        else:
            logger.debug("Issuing custom challenge", extra={"state": state.value})
        return event
    finally:
        clear_request_context()
