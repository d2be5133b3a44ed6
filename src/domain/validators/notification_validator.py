"""Notification request validation.

Pure functions returning Result types. The dispatcher raises
NotificationValidationError on Failure, before any lifecycle event is
published or any provider is called.

Rules (first violation wins, checked in this order):
    1. user_id is non-blank
    2. channel is present
    3. EMAIL channel: email present and shaped local@domain.tld
    4. SMS channel: phone present and E.164-shaped after whitespace removal
    5. title at most 200 characters
    6. message at most 1000 characters
"""

import re

from src.core.constants import (
    EMAIL_PATTERN,
    MESSAGE_MAX_LENGTH,
    PHONE_PATTERN,
    TITLE_MAX_LENGTH,
)
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Result, Success
from src.domain.enums import NotificationChannel
from src.domain.value_objects import NotificationRequest

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_PHONE_RE = re.compile(PHONE_PATTERN)
_WHITESPACE_RE = re.compile(r"\s+")


def is_valid_email(email: str) -> bool:
    """Check an address against the basic local@domain.tld shape."""
    return _EMAIL_RE.fullmatch(email) is not None


def normalize_phone(phone: str) -> str:
    """Strip all whitespace from a phone number."""
    return _WHITESPACE_RE.sub("", phone)


def is_valid_phone(phone: str) -> bool:
    """Check a phone number against E.164 shape (whitespace ignored).

    Example:
        >>> is_valid_phone("+1 555 123 4567")
        True
        >>> is_valid_phone("0123")
        False
    """
    return _PHONE_RE.fullmatch(normalize_phone(phone)) is not None


def _invalid(code: ErrorCode, message: str, field: str) -> Failure[ValidationError]:
    return Failure(error=ValidationError(code=code, message=message, field=field))


def validate_notification_request(
    request: NotificationRequest,
) -> Result[NotificationRequest, ValidationError]:
    """Validate a notification request.

    Args:
        request: Request to validate.

    Returns:
        Success(request): Request is deliverable.
        Failure(ValidationError): First violated rule, with ``field`` set.
    """
    if not request.user_id or not request.user_id.strip():
        return _invalid(ErrorCode.USER_ID_REQUIRED, "User ID is required", "user_id")

    if request.channel is None:
        return _invalid(ErrorCode.CHANNEL_REQUIRED, "Channel is required", "channel")

    if request.channel == NotificationChannel.EMAIL:
        if not request.email or not request.email.strip():
            return _invalid(
                ErrorCode.EMAIL_REQUIRED,
                "Email is required for email notifications",
                "email",
            )
        if not is_valid_email(request.email):
            return _invalid(ErrorCode.INVALID_EMAIL, "Invalid email format", "email")

    if request.channel == NotificationChannel.SMS:
        if not request.phone or not request.phone.strip():
            return _invalid(
                ErrorCode.PHONE_REQUIRED,
                "Phone number is required for SMS notifications",
                "phone",
            )
        if not is_valid_phone(request.phone):
            return _invalid(
                ErrorCode.INVALID_PHONE_NUMBER, "Invalid phone number format", "phone"
            )

    if request.title is not None and len(request.title) > TITLE_MAX_LENGTH:
        return _invalid(
            ErrorCode.TITLE_TOO_LONG,
            f"Title must not exceed {TITLE_MAX_LENGTH} characters",
            "title",
        )

    if request.message is not None and len(request.message) > MESSAGE_MAX_LENGTH:
        return _invalid(
            ErrorCode.MESSAGE_TOO_LONG,
            f"Message must not exceed {MESSAGE_MAX_LENGTH} characters",
            "message",
        )

    return Success(value=request)
