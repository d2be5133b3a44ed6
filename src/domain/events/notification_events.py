"""Notification lifecycle events.

Lifecycle events describe the outcome of attempting to deliver a notification.
The NotificationDispatcher publishes them on the event bus; the listener
registry fans them out to observers (logging, metrics) in priority order.

Correlation:
    Queued, Sent and Failed events produced by one ``send`` call share the
    same ``notification_id`` (notif_<epoch-ms>_<suffix>).

Events:
    - notification.queued: request passed validation, provider call pending
    - notification.sent: provider accepted the notification
    - notification.failed: provider failed (error re-raised to the caller)
    - welcome.email.sent: welcome email flow completed
    - verification.code.sent: SMS verification code issued
    - verification.code.verified: SMS verification code approved
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar

from src.domain.enums import NotificationChannel, NotificationType
from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationLifecycleEvent(DomainEvent):
    """Base class for notification lifecycle events.

    Attributes:
        notification_id: Id shared by every event of one delivery attempt.
        user_id: Recipient user.
        channel: Delivery channel.
        notification_type: Notification category.
        title: Optional title (email subject).
        message: Optional body.
        email: Recipient email, when relevant.
        phone: Recipient phone, when relevant.
        metadata: Request metadata, carried through unchanged.
    """

    notification_id: str
    user_id: str
    channel: NotificationChannel
    notification_type: NotificationType
    title: str | None = None
    message: str | None = None
    email: str | None = None
    phone: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationQueued(NotificationLifecycleEvent):
    """Request validated and handed to the provider."""

    event_type: ClassVar[str] = "notification.queued"

    queue_id: str
    priority: int


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationSent(NotificationLifecycleEvent):
    """Provider accepted the notification.

    Attributes:
        provider: Provider name (e.g., "sendgrid", "twilio").
        provider_message_id: Provider-side id, when the provider returns one.
        delivery_time_ms: Elapsed time of the provider call (>= 0).
    """

    event_type: ClassVar[str] = "notification.sent"

    provider: str
    delivery_time_ms: float
    provider_message_id: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationFailed(NotificationLifecycleEvent):
    """Provider failed to deliver the notification."""

    event_type: ClassVar[str] = "notification.failed"

    error: str
    retry_count: int = 0
    max_retries: int = 3


@dataclass(frozen=True, kw_only=True, slots=True)
class WelcomeEmailSent(NotificationLifecycleEvent):
    """Welcome email rendered from a template and delivered."""

    event_type: ClassVar[str] = "welcome.email.sent"

    template: str
    provider: str


@dataclass(frozen=True, kw_only=True, slots=True)
class VerificationCodeSent(NotificationLifecycleEvent):
    """Verification code issued to a phone number."""

    event_type: ClassVar[str] = "verification.code.sent"

    expires_at: datetime
    provider: str


@dataclass(frozen=True, kw_only=True, slots=True)
class VerificationCodeVerified(NotificationLifecycleEvent):
    """Verification code approved for a phone number."""

    event_type: ClassVar[str] = "verification.code.verified"

    verified_at: datetime


type NotificationLifecycleEventUnion = (
    NotificationQueued
    | NotificationSent
    | NotificationFailed
    | WelcomeEmailSent
    | VerificationCodeSent
    | VerificationCodeVerified
)
"""Closed union of every lifecycle event variant."""


SUPPORTED_LIFECYCLE_EVENTS: tuple[str, ...] = (
    NotificationSent.event_type,
    NotificationFailed.event_type,
    NotificationQueued.event_type,
    WelcomeEmailSent.event_type,
    VerificationCodeSent.event_type,
    VerificationCodeVerified.event_type,
)
"""Lifecycle event types the listener registry subscribes to on the bus."""
