"""Domain events package.

Two event families share the DomainEvent base:
    - business_events: facts from upstream producers (closed union)
    - notification_events: delivery lifecycle outcomes

trigger_registry maps business event types onto notification triggers.
"""

from src.domain.events.base_event import DomainEvent, generate_event_id
from src.domain.events.business_events import (
    BUSINESS_EVENT_TYPES,
    AccountLocked,
    AccountUnlocked,
    BusinessEvent,
    BusinessEventUnion,
    LoginAttempted,
    LoginLocation,
    OrderDelivered,
    OrderItem,
    OrderPlaced,
    OrderShipped,
    PasswordResetCompleted,
    PasswordResetRequested,
    PaymentProcessed,
    ShippingAddress,
    SubscriptionCancelled,
    SubscriptionCreated,
    SubscriptionRenewed,
    UserRegistered,
    UserVerified,
)
from src.domain.events.notification_events import (
    SUPPORTED_LIFECYCLE_EVENTS,
    NotificationFailed,
    NotificationLifecycleEvent,
    NotificationLifecycleEventUnion,
    NotificationQueued,
    NotificationSent,
    VerificationCodeSent,
    VerificationCodeVerified,
    WelcomeEmailSent,
)

__all__ = [
    "DomainEvent",
    "generate_event_id",
    # Business events
    "BUSINESS_EVENT_TYPES",
    "BusinessEvent",
    "BusinessEventUnion",
    "UserRegistered",
    "UserVerified",
    "OrderItem",
    "ShippingAddress",
    "OrderPlaced",
    "OrderShipped",
    "OrderDelivered",
    "PaymentProcessed",
    "PasswordResetRequested",
    "PasswordResetCompleted",
    "AccountLocked",
    "AccountUnlocked",
    "LoginLocation",
    "LoginAttempted",
    "SubscriptionCreated",
    "SubscriptionCancelled",
    "SubscriptionRenewed",
    # Lifecycle events
    "SUPPORTED_LIFECYCLE_EVENTS",
    "NotificationLifecycleEvent",
    "NotificationLifecycleEventUnion",
    "NotificationQueued",
    "NotificationSent",
    "NotificationFailed",
    "WelcomeEmailSent",
    "VerificationCodeSent",
    "VerificationCodeVerified",
]
