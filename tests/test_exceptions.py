"""Tests for custom exception classes."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from app.exceptions import (  # noqa: E402
    AppError,
    ConfigurationError,
    DeliveryError,
    ValidationError,
)


class TestAppError:
    """Tests for base AppError class."""

    def test_stores_message(self) -> None:
        error = AppError('Something went wrong')
        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    def test_to_dict_without_detail(self) -> None:
        assert AppError('Error message').to_dict() == {
            'type': 'AppError',
            'error': 'Error message',
        }

    def test_to_dict_with_detail(self) -> None:
        result = AppError('Error', detail='Additional info').to_dict()
        assert result == {'type': 'AppError', 'error': 'Error', 'detail': 'Additional info'}


class TestValidationError:
    """Tests for ValidationError class."""

    def test_includes_field_in_detail(self) -> None:
        error = ValidationError('phone_number is required', field='phone_number')
        assert error.field == 'phone_number'
        assert 'phone_number' in error.detail

    def test_without_field(self) -> None:
        error = ValidationError('Invalid input')
        assert error.field is None
        assert error.to_dict() == {'type': 'ValidationError', 'error': 'Invalid input'}


class TestConfigurationError:
    """Tests for ConfigurationError class."""

    def test_missing_config(self) -> None:
        error = ConfigurationError('SMS_REGION')
        assert error.config_name == 'SMS_REGION'
        assert error.message == 'Missing required configuration: SMS_REGION'

    def test_invalid_config_reason(self) -> None:
        error = ConfigurationError('MAX_CHALLENGE_ATTEMPTS', 'must be an integer')
        assert 'MAX_CHALLENGE_ATTEMPTS' in error.message
        assert 'must be an integer' in error.message


class TestDeliveryError:
    """Tests for DeliveryError class."""

    def test_is_app_error(self) -> None:
        error = DeliveryError('SMS gateway is unavailable', detail='ReadTimeoutError')
        assert isinstance(error, AppError)
        assert error.to_dict() == {
            'type': 'DeliveryError',
            'error': 'SMS gateway is unavailable',
            'detail': 'ReadTimeoutError',
        }
