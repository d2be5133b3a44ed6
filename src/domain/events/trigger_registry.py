"""Business event trigger registry - single source of truth.

Maps each business event type onto its ordered list of notification
triggers. The table is static: the trigger engine reads it, nothing writes
it. Order within a list is significant (triggers are processed sequentially
in table order).

Adding a trigger:
    1. Add a NotificationTrigger entry under the event type below
    2. Add title/message wording for the event in
       src/application/services/business_event_processor.py if the event
       type is new

Event types without an entry have no triggers.
"""

from types import MappingProxyType

from src.domain.enums import NotificationChannel, NotificationType
from src.domain.events.business_events import (
    AccountLocked,
    LoginAttempted,
    OrderDelivered,
    OrderPlaced,
    OrderShipped,
    PasswordResetRequested,
    PaymentProcessed,
    SubscriptionCancelled,
    SubscriptionCreated,
    UserRegistered,
    UserVerified,
)
from src.domain.value_objects import NotificationTrigger

_HAS_EMAIL = {"has_email": True}
_HAS_PHONE = {"has_phone": True}


BUSINESS_EVENT_TRIGGERS: MappingProxyType[str, tuple[NotificationTrigger, ...]] = (
    MappingProxyType(
        {
            UserRegistered.event_type: (
                NotificationTrigger(
                    event_type=UserRegistered.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="welcome-email",
                    conditions=_HAS_EMAIL,
                    priority=1,
                ),
                NotificationTrigger(
                    event_type=UserRegistered.event_type,
                    notification_type=NotificationType.INFO,
                    channel=NotificationChannel.SMS,
                    template="welcome-sms",
                    conditions=_HAS_PHONE,
                    delay_ms=5000,
                    priority=2,
                ),
            ),
            UserVerified.event_type: (
                NotificationTrigger(
                    event_type=UserVerified.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="verification-success",
                    conditions={"user_verified": True},
                    priority=1,
                ),
            ),
            OrderPlaced.event_type: (
                NotificationTrigger(
                    event_type=OrderPlaced.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="order-confirmation",
                    conditions=_HAS_EMAIL,
                    priority=1,
                ),
                NotificationTrigger(
                    event_type=OrderPlaced.event_type,
                    notification_type=NotificationType.INFO,
                    channel=NotificationChannel.SMS,
                    template="order-confirmation-sms",
                    conditions=_HAS_PHONE,
                    delay_ms=2000,
                    priority=2,
                ),
            ),
            OrderShipped.event_type: (
                NotificationTrigger(
                    event_type=OrderShipped.event_type,
                    notification_type=NotificationType.INFO,
                    channel=NotificationChannel.EMAIL,
                    template="order-shipped",
                    conditions=_HAS_EMAIL,
                    priority=1,
                ),
                NotificationTrigger(
                    event_type=OrderShipped.event_type,
                    notification_type=NotificationType.INFO,
                    channel=NotificationChannel.SMS,
                    template="order-shipped-sms",
                    conditions=_HAS_PHONE,
                    priority=2,
                ),
            ),
            OrderDelivered.event_type: (
                NotificationTrigger(
                    event_type=OrderDelivered.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="order-delivered",
                    conditions=_HAS_EMAIL,
                ),
            ),
            PaymentProcessed.event_type: (
                NotificationTrigger(
                    event_type=PaymentProcessed.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="payment-success",
                    conditions=_HAS_EMAIL,
                ),
            ),
            PasswordResetRequested.event_type: (
                NotificationTrigger(
                    event_type=PasswordResetRequested.event_type,
                    notification_type=NotificationType.ALERT,
                    channel=NotificationChannel.EMAIL,
                    template="password-reset",
                    conditions=_HAS_EMAIL,
                ),
            ),
            AccountLocked.event_type: (
                NotificationTrigger(
                    event_type=AccountLocked.event_type,
                    notification_type=NotificationType.ALERT,
                    channel=NotificationChannel.EMAIL,
                    template="account-locked",
                    conditions=_HAS_EMAIL,
                    priority=1,
                ),
                NotificationTrigger(
                    event_type=AccountLocked.event_type,
                    notification_type=NotificationType.ALERT,
                    channel=NotificationChannel.SMS,
                    template="account-locked-sms",
                    conditions=_HAS_PHONE,
                    priority=2,
                ),
            ),
            LoginAttempted.event_type: (
                NotificationTrigger(
                    event_type=LoginAttempted.event_type,
                    notification_type=NotificationType.ALERT,
                    channel=NotificationChannel.EMAIL,
                    template="login-alert",
                    conditions={"has_email": True, "success": False},
                ),
            ),
            SubscriptionCreated.event_type: (
                NotificationTrigger(
                    event_type=SubscriptionCreated.event_type,
                    notification_type=NotificationType.SUCCESS,
                    channel=NotificationChannel.EMAIL,
                    template="subscription-welcome",
                    conditions=_HAS_EMAIL,
                ),
            ),
            SubscriptionCancelled.event_type: (
                NotificationTrigger(
                    event_type=SubscriptionCancelled.event_type,
                    notification_type=NotificationType.INFO,
                    channel=NotificationChannel.EMAIL,
                    template="subscription-cancelled",
                    conditions=_HAS_EMAIL,
                ),
            ),
        }
    )
)
"""Ordered triggers per business event type (read-only)."""


def get_triggers(event_type: str) -> tuple[NotificationTrigger, ...]:
    """Get the ordered triggers for an event type.

    Args:
        event_type: Business event tag (e.g., "order.placed").

    Returns:
        Triggers in table order; empty tuple when the type has none.
    """
    return BUSINESS_EVENT_TRIGGERS.get(event_type, ())


def get_all_triggers() -> list[NotificationTrigger]:
    """Get every trigger in the registry, grouped by event type."""
    return [
        trigger for triggers in BUSINESS_EVENT_TRIGGERS.values() for trigger in triggers
    ]
