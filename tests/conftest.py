"""Pytest configuration and fixtures for backend tests.

This module provides shared fixtures for testing the Cognito auth triggers,
including trigger event factories, a handler loader, and a mocked SNS client.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from types import SimpleNamespace
from typing import Any
from typing import Callable
from typing import Optional
from uuid import uuid4

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1] / 'backend'

# Add backend source to path for imports
sys.path.insert(0, str(BACKEND_DIR / 'src'))

_CONFIG_ENV_VARS = (
    'MAX_CHALLENGE_ATTEMPTS',
    'OTP_DEFAULT_REGION',
    'OTP_MESSAGE_TEMPLATE',
    'SMS_SENDER_ID',
    'SMS_TYPE',
    'SMS_REGION',
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> None:
    """Run every test against default configuration and a fresh client cache."""
    from app.services.aws_clients import clear_client_cache

    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_client_cache()
    yield
    clear_client_cache()


# --- Handler Fixtures ---


def _load_handler(trigger: str) -> ModuleType:
    path = BACKEND_DIR / 'lambda' / 'auth' / trigger / 'handler.py'
    spec = importlib.util.spec_from_file_location(f'{trigger}_handler', path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def load_handler() -> Callable[[str], ModuleType]:
    """Load a trigger's handler module by its directory name."""
    return _load_handler


@pytest.fixture
def lambda_context() -> SimpleNamespace:
    """Minimal Lambda context object."""
    return SimpleNamespace(aws_request_id=str(uuid4()))


# --- Cognito Event Fixtures ---


def session_entry(
    result: bool,
    metadata: str = '',
    challenge_name: str = 'CUSTOM_CHALLENGE',
) -> dict[str, Any]:
    """Build one raw session history entry as Cognito sends it."""
    return {
        'challengeName': challenge_name,
        'challengeResult': result,
        'challengeMetadata': metadata,
    }


def make_trigger_event(
    trigger_source: str,
    session: Optional[list[dict[str, Any]]] = None,
    phone_number: Optional[str] = '+819012345678',
    **request: Any,
) -> dict[str, Any]:
    """Build a Cognito custom auth trigger event."""
    user_attributes: dict[str, Any] = {'sub': str(uuid4())}
    if phone_number is not None:
        user_attributes['phone_number'] = phone_number
    event_request: dict[str, Any] = {
        'userAttributes': user_attributes,
        'session': session if session is not None else [],
    }
    event_request.update(request)
    return {
        'version': '1',
        'region': 'ap-northeast-1',
        'userPoolId': 'ap-northeast-1_TestPool',
        'userName': 'test-user',
        'triggerSource': trigger_source,
        'callerContext': {'awsSdkVersion': 'aws-sdk-unknown', 'clientId': 'client'},
        'request': event_request,
        'response': {},
    }


@pytest.fixture
def trigger_event() -> Callable[..., dict[str, Any]]:
    """Factory for Cognito trigger events."""
    return make_trigger_event


# --- Mock Fixtures ---


@pytest.fixture
def mock_sns_client(mocker):
    """Mock the SNS client used for SMS delivery."""
    client = mocker.MagicMock()
    client.publish.return_value = {'MessageId': 'msg-1'}
    mocker.patch('app.services.sms.get_sns_client', return_value=client)
    return client
