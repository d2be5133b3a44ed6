"""Unit tests for notification request validation.

Tests cover:
- Required fields per channel
- Email and phone shape checks (phone whitespace ignored)
- Title and message length bounds
- First violated rule wins
"""

import pytest

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import NotificationChannel
from src.domain.validators import (
    is_valid_email,
    is_valid_phone,
    normalize_phone,
    validate_notification_request,
)
from src.domain.value_objects import NotificationRequest


def _email_request(**overrides) -> NotificationRequest:
    fields = {
        "user_id": "user-123",
        "channel": NotificationChannel.EMAIL,
        "email": "jane@example.com",
        "title": "Hello",
        "message": "Body",
    }
    fields.update(overrides)
    return NotificationRequest(**fields)


def _sms_request(**overrides) -> NotificationRequest:
    fields = {
        "user_id": "user-123",
        "channel": NotificationChannel.SMS,
        "phone": "+15551234567",
        "message": "Body",
    }
    fields.update(overrides)
    return NotificationRequest(**fields)


@pytest.mark.unit
class TestValidateNotificationRequest:
    """Test the ordered validation rules."""

    def test_valid_email_request_passes(self):
        request = _email_request()

        result = validate_notification_request(request)

        assert isinstance(result, Success)
        assert result.value is request

    def test_valid_sms_request_with_spaces_passes(self):
        result = validate_notification_request(_sms_request(phone="+1 555 123 4567"))

        assert isinstance(result, Success)

    @pytest.mark.parametrize("user_id", ["", "   "])
    def test_blank_user_id_rejected(self, user_id):
        result = validate_notification_request(_email_request(user_id=user_id))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.USER_ID_REQUIRED
        assert result.error.field == "user_id"

    def test_missing_channel_rejected(self):
        result = validate_notification_request(_email_request(channel=None))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CHANNEL_REQUIRED

    @pytest.mark.parametrize("email", [None, "", "  "])
    def test_email_channel_requires_email(self, email):
        result = validate_notification_request(_email_request(email=email))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.EMAIL_REQUIRED
        assert result.error.field == "email"

    @pytest.mark.parametrize(
        "email",
        ["jane", "jane@example", "ja ne@example.com", "jane@example.com\n"],
    )
    def test_malformed_email_rejected(self, email):
        result = validate_notification_request(_email_request(email=email))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_EMAIL

    def test_sms_channel_requires_phone(self):
        result = validate_notification_request(_sms_request(phone=None))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PHONE_REQUIRED
        assert result.error.field == "phone"

    @pytest.mark.parametrize("phone", ["0123456", "+0123", "555-123-4567", "+1"])
    def test_malformed_phone_rejected(self, phone):
        result = validate_notification_request(_sms_request(phone=phone))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_PHONE_NUMBER

    def test_email_channel_ignores_phone(self):
        result = validate_notification_request(_email_request(phone="not-a-phone"))

        assert isinstance(result, Success)

    def test_title_limit_is_inclusive(self):
        assert isinstance(
            validate_notification_request(_email_request(title="t" * 200)), Success
        )

        result = validate_notification_request(_email_request(title="t" * 201))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.TITLE_TOO_LONG

    def test_message_limit_is_inclusive(self):
        assert isinstance(
            validate_notification_request(_email_request(message="m" * 1000)), Success
        )

        result = validate_notification_request(_email_request(message="m" * 1001))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.MESSAGE_TOO_LONG

    def test_first_violation_wins(self):
        request = _email_request(user_id="", email=None, title="t" * 500)

        result = validate_notification_request(request)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.USER_ID_REQUIRED


@pytest.mark.unit
class TestValidatorHelpers:
    """Test helper predicates."""

    def test_is_valid_email(self):
        assert is_valid_email("a@b.co") is True
        assert is_valid_email("a@@b.co") is False
        assert is_valid_email("a@b.co\n") is False

    def test_normalize_phone_strips_all_whitespace(self):
        assert normalize_phone(" +1 555\t123 4567 ") == "+15551234567"

    def test_is_valid_phone_accepts_number_without_plus(self):
        assert is_valid_phone("15551234567") is True
        assert is_valid_phone("+1234567890123456") is False
