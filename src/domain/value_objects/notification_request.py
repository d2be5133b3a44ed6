"""Notification request value object.

A NotificationRequest is what the dispatcher validates and hands to a
channel provider. It is built by the trigger engine from a business event and
a matching trigger, decoded from a stream message, or supplied directly.
"""

from dataclasses import dataclass, field
from typing import Any

from src.domain.enums import NotificationChannel, NotificationType


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationRequest:
    """Request to deliver one notification over one channel.

    Validation happens in the dispatcher (see
    src/domain/validators/notification_validator.py), not at construction,
    so callers can build partial requests and receive a structured
    ValidationError.

    Attributes:
        user_id: Recipient user id (non-blank).
        channel: Delivery channel. None is treated as missing.
        notification_type: Notification category.
        title: Optional title, at most 200 characters.
        message: Optional body, at most 1000 characters.
        email: Recipient address, required for EMAIL.
        phone: Recipient number, required for SMS.
        metadata: Free-form context (template, originating event, ...).
    """

    user_id: str
    channel: NotificationChannel | None
    notification_type: NotificationType = NotificationType.INFO
    title: str | None = None
    message: str | None = None
    email: str | None = None
    phone: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
