"""Input validation utilities."""

from __future__ import annotations

import os
import re
from typing import Any
from typing import Optional

import phonenumbers
from phonenumbers.phonenumberutil import NumberParseException

from app.exceptions import ValidationError

DEFAULT_PHONE_REGION = "JP"
MAX_PHONE_REGION_LENGTH = 2
MAX_PHONE_NUMBER_LENGTH = 20


def default_phone_region() -> str:
    """Return the region used for numbers without a country prefix."""
    return validate_region(os.getenv("OTP_DEFAULT_REGION") or DEFAULT_PHONE_REGION)


def validate_region(value: Any) -> str:
    """Validate a phone region code (ISO 3166-1 alpha-2).

    Args:
        value: The region code to validate.

    Returns:
        The uppercase region code.

    Raises:
        ValidationError: If the region is not supported by phonenumbers.
    """
    if not isinstance(value, str):
        raise ValidationError("phone region must be a string", field="region")
    value = value.strip().upper()
    if len(value) != MAX_PHONE_REGION_LENGTH:
        raise ValidationError("phone region must be 2 characters", field="region")
    if value not in phonenumbers.SUPPORTED_REGIONS:
        raise ValidationError(
            "phone region must be a valid ISO country code",
            field="region",
        )
    return value


def normalize_phone_number(raw: Any, region_hint: Optional[str] = None) -> str:
    """Normalize a phone number to the E.164 format required by SNS.

    Numbers already carrying a "+<country>" prefix keep their country;
    national numbers are resolved against region_hint (or the configured
    default region).

    Args:
        raw: The phone number as stored in the user attributes.
        region_hint: ISO region used when the number has no country prefix.

    Returns:
        The number formatted as E.164, e.g. "+819012345678".

    Raises:
        ValidationError: If the number is empty or cannot be parsed.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("phone_number is required", field="phone_number")

    number = raw.strip()
    if len(re.sub(r"[\s()-]+", "", number)) > MAX_PHONE_NUMBER_LENGTH:
        raise ValidationError(
            f"phone_number must be at most {MAX_PHONE_NUMBER_LENGTH} characters",
            field="phone_number",
        )

    region = validate_region(region_hint) if region_hint else default_phone_region()

    try:
        parsed = phonenumbers.parse(number, region, keep_raw_input=True)
    except NumberParseException as exc:
        raise ValidationError(
            "phone_number must be a valid number",
            field="phone_number",
        ) from exc

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
