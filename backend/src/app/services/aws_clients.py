"""Shared boto3 client factory with caching.

Clients are cached per (service, region) for the lifetime of the Lambda
execution environment, so warm invocations reuse connections.
"""

from __future__ import annotations

import os
from typing import Any

import boto3
from botocore.config import Config

_CLIENT_CACHE: dict[tuple[str, str | None], Any] = {}

# SMS delivery must fit inside the Cognito trigger deadline (5 seconds).
_SNS_CONFIG = Config(
    connect_timeout=2,
    read_timeout=3,
    retries={"max_attempts": 1, "mode": "standard"},
)


def get_client(
    service: str,
    region_name: str | None = None,
    config: Config | None = None,
) -> Any:
    """Return a cached boto3 client for the given service."""
    cache_key = (service, region_name)
    if cache_key in _CLIENT_CACHE:
        return _CLIENT_CACHE[cache_key]
    client = boto3.client(  # type: ignore[call-overload]
        service,
        region_name=region_name,
        config=config,
    )
    _CLIENT_CACHE[cache_key] = client
    return client


def clear_client_cache() -> None:
    """Clear cached boto3 clients (useful in tests)."""
    _CLIENT_CACHE.clear()


def get_sns_client(region_name: str | None = None) -> Any:
    """Return the SNS client used for SMS delivery.

    SMS_REGION overrides the Lambda region, since SMS sending is only
    enabled in some regions.
    """
    region = region_name or os.getenv("SMS_REGION") or None
    return get_client("sns", region_name=region, config=_SNS_CONFIG)
