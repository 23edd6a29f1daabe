"""Authentication helpers for Cognito custom auth flows."""

from app.auth.otp_challenge import (
    CHALLENGE_NAME,
    ChallengeDecision,
    ChallengeState,
    IssuedChallenge,
    SessionEntry,
    define_challenge,
    issue_challenge,
    parse_session,
    verify_answer,
)

__all__ = [
    "CHALLENGE_NAME",
    "ChallengeDecision",
    "ChallengeState",
    "IssuedChallenge",
    "SessionEntry",
    "define_challenge",
    "issue_challenge",
    "parse_session",
    "verify_answer",
]
