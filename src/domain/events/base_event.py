"""Base domain event class.

This module defines the foundational DomainEvent base class used by both
event families in the system:

- Business events (src/domain/events/business_events.py): facts emitted by
  upstream producers, e.g. "a user registered" or "an order shipped".
- Notification lifecycle events (src/domain/events/notification_events.py):
  outcomes of delivery attempts, e.g. queued, sent, failed.

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (event_<epoch-ms>_<suffix>) for event tracking
    - occurred_at timestamp (UTC) for event ordering
    - event_type class-level string tag used for routing (event bus,
      listener registry, trigger table)

Usage:
    >>> @dataclass(frozen=True, kw_only=True, slots=True)
    >>> class OrderShipped(BusinessEvent):
    ...     event_type: ClassVar[str] = "order.shipped"
    ...     order_id: str
    >>>
    >>> event = OrderShipped(user_id="user-1", order_id="456")
    >>> event.event_type
    'order.shipped'
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar

from src.core.constants import EVENT_ID_PREFIX
from src.core.identifiers import generate_prefixed_id


def generate_event_id() -> str:
    """Generate a domain event id (event_<epoch-ms>_<suffix>)."""
    return generate_prefixed_id(EVENT_ID_PREFIX)


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    All domain events MUST:
        1. Inherit from this base class (directly or via a family base)
        2. Use past tense naming (OrderShipped, NOT ShipOrder)
        3. Be frozen dataclasses with kw_only=True and slots=True
        4. Declare a unique ``event_type`` ClassVar tag

    Attributes:
        event_type: Dotted string tag identifying the variant. Class-level,
            never passed to the constructor.
        event_id: Unique identifier for this event instance.
        occurred_at: Timestamp when the event occurred (UTC).
    """

    event_type: ClassVar[str] = ""

    event_id: str = field(default_factory=generate_event_id)
    """Unique identifier for this event instance."""

    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    """Timestamp when the event occurred (UTC timezone)."""
