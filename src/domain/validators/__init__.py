"""Validators package exports."""

from src.domain.validators.notification_validator import (
    is_valid_email,
    is_valid_phone,
    normalize_phone,
    validate_notification_request,
)

__all__ = [
    "is_valid_email",
    "is_valid_phone",
    "normalize_phone",
    "validate_notification_request",
]
