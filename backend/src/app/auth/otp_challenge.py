"""SMS one-time-code custom auth challenge for Cognito.

Cognito drives the custom auth flow by calling three triggers in turn:

- Define Auth Challenge decides whether to issue a challenge, issue tokens
  or fail the attempt (``define_challenge``).
- Create Auth Challenge generates a code and sends it by SMS, or recovers
  the code already issued in this session (``issue_challenge``).
- Verify Auth Challenge Response compares the answer with the code
  (``verify_answer``).

None of the triggers keep state. The only state is the session history
Cognito passes on every call; the issued code travels forward in the
``challengeMetadata`` of each round as ``CODE-<digits>``.
"""

from __future__ import annotations

import enum
import os
import re
import secrets
import string
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Optional

from app.exceptions import ConfigurationError

CHALLENGE_NAME = "CUSTOM_CHALLENGE"
MAX_ATTEMPTS = 3
CODE_LENGTH = 6
METADATA_PREFIX = "CODE-"

_CODE_RE = re.compile(r"CODE-([0-9]+)")


class ChallengeState(str, enum.Enum):
    """Composite state of one authentication attempt."""

    AWAITING_CHALLENGE = "AWAITING_CHALLENGE"
    CHALLENGE_ISSUED = "CHALLENGE_ISSUED"
    AUTHENTICATED = "AUTHENTICATED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class SessionEntry:
    """One completed challenge round from the Cognito session history."""

    challenge_name: str
    challenge_result: bool
    challenge_metadata: str = ""

    @classmethod
    def from_event(cls, raw: Mapping[str, Any]) -> "SessionEntry":
        return cls(
            challenge_name=str(raw.get("challengeName") or ""),
            challenge_result=bool(raw.get("challengeResult")),
            challenge_metadata=str(raw.get("challengeMetadata") or ""),
        )

    @property
    def is_custom_challenge(self) -> bool:
        return self.challenge_name == CHALLENGE_NAME

    @property
    def issued_code(self) -> str:
        return extract_code(self.challenge_metadata)


@dataclass(frozen=True)
class ChallengeDecision:
    """Outcome of the Define Auth Challenge step."""

    issue_tokens: bool
    fail_authentication: bool
    challenge_name: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.issue_tokens or self.fail_authentication

    def apply(self, response: MutableMapping[str, Any]) -> None:
        """Write the decision into a Cognito trigger response."""
        response["issueTokens"] = self.issue_tokens
        response["failAuthentication"] = self.fail_authentication
        if self.challenge_name:
            response["challengeName"] = self.challenge_name


@dataclass(frozen=True)
class IssuedChallenge:
    """A code bound to the current round, plus where it was sent."""

    code: str
    phone_number: str
    is_new: bool

    @property
    def metadata(self) -> str:
        return format_metadata(self.code)

    def public_parameters(self) -> dict[str, str]:
        # Returned to the client, so the code must never appear here.
        return {"phoneNumber": self.phone_number}

    def private_parameters(self) -> dict[str, str]:
        return {"code": self.code}

    def apply(self, response: MutableMapping[str, Any]) -> None:
        """Write the challenge into a Cognito trigger response."""
        response["publicChallengeParameters"] = self.public_parameters()
        response["privateChallengeParameters"] = self.private_parameters()
        response["challengeMetadata"] = self.metadata


def max_challenge_attempts() -> int:
    """Return the attempt ceiling from MAX_CHALLENGE_ATTEMPTS (default 3)."""
    value = os.getenv("MAX_CHALLENGE_ATTEMPTS")
    if value is None or not value.strip():
        return MAX_ATTEMPTS
    try:
        attempts = int(value)
    except ValueError as exc:
        raise ConfigurationError(
            "MAX_CHALLENGE_ATTEMPTS", "must be an integer"
        ) from exc
    if attempts < 1:
        raise ConfigurationError("MAX_CHALLENGE_ATTEMPTS", "must be at least 1")
    return attempts


def parse_session(raw_session: Optional[Iterable[Mapping[str, Any]]]) -> list[SessionEntry]:
    """Convert the Cognito ``request.session`` list into session entries."""
    return [SessionEntry.from_event(raw) for raw in raw_session or []]


def generate_code(length: int = CODE_LENGTH) -> str:
    """Generate a fixed-width numeric code.

    Each digit is drawn independently with the ``secrets`` module, so
    leading zeros are kept.
    """
    return "".join(secrets.choice(string.digits) for _ in range(length))


def format_metadata(code: str) -> str:
    return f"{METADATA_PREFIX}{code}"


def extract_code(metadata: Optional[str]) -> str:
    """Recover the code from challenge metadata.

    Returns an empty string when no ``CODE-<digits>`` marker is present.
    An empty code can never be verified, so the round fails closed.
    """
    match = _CODE_RE.search(metadata or "")
    return match.group(1) if match else ""


def define_challenge(
    session: list[SessionEntry],
    max_attempts: int = MAX_ATTEMPTS,
) -> ChallengeDecision:
    """Decide the next step of the auth flow from the session history.

    The attempt ceiling is checked first and wins even if the latest answer
    was correct. A wrong answer to our challenge ends the attempt; the
    client has to start a new sign-in to get another code.
    """
    if len(session) >= max_attempts:
        return ChallengeDecision(issue_tokens=False, fail_authentication=True)

    if session and session[-1].is_custom_challenge:
        passed = session[-1].challenge_result
        return ChallengeDecision(issue_tokens=passed, fail_authentication=not passed)

    return ChallengeDecision(
        issue_tokens=False,
        fail_authentication=False,
        challenge_name=CHALLENGE_NAME,
    )


def issue_challenge(
    phone_number: str,
    session: list[SessionEntry],
    deliver: Callable[[str], Any],
) -> IssuedChallenge:
    """Bind a code to the current round.

    On the first round a new code is generated and handed to ``deliver``;
    delivery errors propagate to the caller. On later rounds the code is
    recovered from the latest entry's metadata and nothing is sent.
    """
    if not session:
        code = generate_code()
        deliver(code)
        return IssuedChallenge(code=code, phone_number=phone_number, is_new=True)

    return IssuedChallenge(
        code=session[-1].issued_code,
        phone_number=phone_number,
        is_new=False,
    )


def verify_answer(expected: Optional[str], provided: Optional[str]) -> bool:
    """Exact comparison of the submitted answer with the issued code.

    No trimming or normalization is applied. A missing answer never matches,
    and neither does anything when no code was recovered for the round.
    """
    if not expected or provided is None:
        return False
    return secrets.compare_digest(
        expected.encode(errors="surrogatepass"),
        provided.encode(errors="surrogatepass"),
    )


def challenge_state(
    session: list[SessionEntry],
    max_attempts: int = MAX_ATTEMPTS,
    challenge_pending: bool = False,
) -> ChallengeState:
    """Map a session history onto the attempt's state machine.

    ``challenge_pending`` marks the window between Create Auth Challenge and
    the user's answer, which the session history does not record yet.
    """
    decision = define_challenge(session, max_attempts)
    if decision.issue_tokens:
        return ChallengeState.AUTHENTICATED
    if decision.fail_authentication:
        return ChallengeState.REJECTED
    if challenge_pending:
        return ChallengeState.CHALLENGE_ISSUED
    return ChallengeState.AWAITING_CHALLENGE
