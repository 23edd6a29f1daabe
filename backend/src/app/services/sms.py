"""SNS SMS sending helpers."""

from __future__ import annotations

import os
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from app.exceptions import DeliveryError
from app.services.aws_clients import get_sns_client
from app.utils.logging import get_logger, mask_phone
from app.utils.validators import normalize_phone_number

logger = get_logger(__name__)

DEFAULT_MESSAGE_TEMPLATE = "検証コード：　{code}"
DEFAULT_SMS_TYPE = "Transactional"


def build_sign_in_message(code: str, template: Optional[str] = None) -> str:
    """Render the SMS body carrying a sign-in code.

    The template comes from OTP_MESSAGE_TEMPLATE and must contain a
    "{code}" placeholder.
    """
    template = template or os.getenv("OTP_MESSAGE_TEMPLATE") or DEFAULT_MESSAGE_TEMPLATE
    if "{code}" not in template:
        template = f"{template} {{code}}"
    return template.replace("{code}", code)


def send_sms(
    *,
    phone_number: str,
    message: str,
    sender_id: Optional[str] = None,
    sms_type: Optional[str] = None,
) -> str:
    """Publish a single SMS via SNS and return its message id.

    Raises:
        DeliveryError: If SNS rejects the request or cannot be reached.
    """
    attributes: dict[str, Any] = {
        "AWS.SNS.SMS.SMSType": {
            "DataType": "String",
            "StringValue": sms_type or os.getenv("SMS_TYPE") or DEFAULT_SMS_TYPE,
        }
    }
    sender_id = sender_id or os.getenv("SMS_SENDER_ID")
    if sender_id:
        attributes["AWS.SNS.SMS.SenderID"] = {
            "DataType": "String",
            "StringValue": sender_id,
        }

    try:
        response = get_sns_client().publish(
            PhoneNumber=phone_number,
            Message=message,
            MessageAttributes=attributes,
        )
    except ClientError as exc:
        error_code = exc.response.get("Error", {}).get("Code", "Unknown")
        raise DeliveryError("SMS delivery was rejected", detail=error_code) from exc
    except BotoCoreError as exc:
        raise DeliveryError(
            "SMS gateway is unavailable", detail=type(exc).__name__
        ) from exc

    return response.get("MessageId", "")


def send_sign_in_code(
    phone_number: str,
    code: str,
    region_hint: Optional[str] = None,
) -> str:
    """Normalize the destination and deliver a sign-in code by SMS."""
    destination = normalize_phone_number(phone_number, region_hint)
    logger.info(f"Sending sign-in code to {mask_phone(destination)}")
    return send_sms(phone_number=destination, message=build_sign_in_message(code))
