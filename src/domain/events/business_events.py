"""Business domain events (facts emitted by upstream producers).

Business events describe things that happened in the wider business domain,
independent of notifications: a user registered, an order shipped, a login
attempt failed. The trigger engine maps each event onto zero or more
notification requests using the static trigger table in
src/domain/events/trigger_registry.py.

Architecture:
    - Closed union: BusinessEventUnion lists every variant. Sites that need
      per-variant behavior (title/message generation, contact resolution)
      match exhaustively over the union with ``assert_never`` so a new
      variant cannot be added without handling it.
    - Every variant carries ``user_id`` and optional ``metadata``.
    - Contact details may come from the variant itself (``email``/``phone``
      fields) or from ``metadata["email"]`` / ``metadata["phone"]``.

Events (14):
    user.registered, user.verified, order.placed, order.shipped,
    order.delivered, payment.processed, password.reset.requested,
    password.reset.completed, account.locked, account.unlocked,
    login.attempt, subscription.created, subscription.cancelled,
    subscription.renewed
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Literal

from src.domain.events.base_event import DomainEvent


# =============================================================================
# Payload value objects
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderItem:
    """Line item of a placed order."""

    id: str
    name: str
    quantity: int
    price: Decimal


@dataclass(frozen=True, kw_only=True, slots=True)
class ShippingAddress:
    """Destination of a placed order."""

    street: str
    city: str
    state: str
    zip_code: str
    country: str


@dataclass(frozen=True, kw_only=True, slots=True)
class LoginLocation:
    """Approximate geolocation of a login attempt."""

    country: str
    city: str


# =============================================================================
# Base
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class BusinessEvent(DomainEvent):
    """Base class for business events.

    Attributes:
        user_id: User the event concerns (recipient of any notification).
        metadata: Free-form producer context. ``email``/``phone`` keys act as
            contact fallbacks; ``user_verified`` may be set to False to
            suppress triggers that require a verified user.
    """

    user_id: str
    metadata: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# User events
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class UserRegistered(BusinessEvent):
    """User created an account."""

    event_type: ClassVar[str] = "user.registered"

    email: str
    name: str
    phone: str | None = None
    source: str = "api"


@dataclass(frozen=True, kw_only=True, slots=True)
class UserVerified(BusinessEvent):
    """User verified their email address or phone number."""

    event_type: ClassVar[str] = "user.verified"

    verification_type: Literal["email", "phone"]
    verified_at: datetime


# =============================================================================
# Order and payment events
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderPlaced(BusinessEvent):
    """Order was placed and confirmed."""

    event_type: ClassVar[str] = "order.placed"

    order_id: str
    amount: Decimal
    currency: str
    items: tuple[OrderItem, ...] = ()
    shipping_address: ShippingAddress | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderShipped(BusinessEvent):
    """Order left the warehouse."""

    event_type: ClassVar[str] = "order.shipped"

    order_id: str
    tracking_number: str
    carrier: str
    estimated_delivery: datetime


@dataclass(frozen=True, kw_only=True, slots=True)
class OrderDelivered(BusinessEvent):
    """Order reached the customer."""

    event_type: ClassVar[str] = "order.delivered"

    order_id: str
    delivered_at: datetime
    signature: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class PaymentProcessed(BusinessEvent):
    """Payment for an order was processed."""

    event_type: ClassVar[str] = "payment.processed"

    order_id: str
    amount: Decimal
    currency: str
    payment_method: str
    status: Literal["success", "failed", "pending"]
    transaction_id: str


# =============================================================================
# Security events
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class PasswordResetRequested(BusinessEvent):
    """User asked for a password reset link."""

    event_type: ClassVar[str] = "password.reset.requested"

    email: str
    reset_token: str
    expires_at: datetime


@dataclass(frozen=True, kw_only=True, slots=True)
class PasswordResetCompleted(BusinessEvent):
    """User set a new password through the reset flow."""

    event_type: ClassVar[str] = "password.reset.completed"

    email: str
    reset_at: datetime


@dataclass(frozen=True, kw_only=True, slots=True)
class AccountLocked(BusinessEvent):
    """Account was locked (too many failed logins, fraud review, ...)."""

    event_type: ClassVar[str] = "account.locked"

    reason: str
    locked_at: datetime
    unlock_at: datetime | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class AccountUnlocked(BusinessEvent):
    """Account lock was lifted."""

    event_type: ClassVar[str] = "account.unlocked"

    unlocked_at: datetime
    unlocked_by: str


@dataclass(frozen=True, kw_only=True, slots=True)
class LoginAttempted(BusinessEvent):
    """Login was attempted (successful or not)."""

    event_type: ClassVar[str] = "login.attempt"

    email: str
    success: bool
    ip_address: str
    user_agent: str
    location: LoginLocation | None = None


# =============================================================================
# Subscription events
# =============================================================================


@dataclass(frozen=True, kw_only=True, slots=True)
class SubscriptionCreated(BusinessEvent):
    """Subscription plan was activated."""

    event_type: ClassVar[str] = "subscription.created"

    subscription_id: str
    plan_id: str
    plan_name: str
    amount: Decimal
    currency: str
    interval: Literal["monthly", "yearly"]
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True, kw_only=True, slots=True)
class SubscriptionCancelled(BusinessEvent):
    """Subscription was cancelled."""

    event_type: ClassVar[str] = "subscription.cancelled"

    subscription_id: str
    cancelled_at: datetime
    effective_date: datetime
    reason: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class SubscriptionRenewed(BusinessEvent):
    """Subscription was renewed for another billing period."""

    event_type: ClassVar[str] = "subscription.renewed"

    subscription_id: str
    renewed_at: datetime
    next_billing_date: datetime
    amount: Decimal
    currency: str


type BusinessEventUnion = (
    UserRegistered
    | UserVerified
    | OrderPlaced
    | OrderShipped
    | OrderDelivered
    | PaymentProcessed
    | PasswordResetRequested
    | PasswordResetCompleted
    | AccountLocked
    | AccountUnlocked
    | LoginAttempted
    | SubscriptionCreated
    | SubscriptionCancelled
    | SubscriptionRenewed
)
"""Closed union of every business event variant."""


BUSINESS_EVENT_TYPES: tuple[type[BusinessEvent], ...] = (
    UserRegistered,
    UserVerified,
    OrderPlaced,
    OrderShipped,
    OrderDelivered,
    PaymentProcessed,
    PasswordResetRequested,
    PasswordResetCompleted,
    AccountLocked,
    AccountUnlocked,
    LoginAttempted,
    SubscriptionCreated,
    SubscriptionCancelled,
    SubscriptionRenewed,
)
"""Every business event class, in declaration order."""
