"""Event bus protocol (port) for domain events.

Architecture:
    - Protocol (structural typing, NOT ABC inheritance)
    - Domain layer defines the interface (port)
    - Infrastructure layer implements adapters (in-memory today)
    - Container (src/core/container/events.py) provides factory function

Routing:
    Handlers subscribe to a string ``event_type`` tag ("order.placed",
    "notification.sent", ...). Every DomainEvent carries its tag as a
    class-level ``event_type`` attribute, so one bus carries both business
    events and notification lifecycle events.

Usage:
    >>> event_bus = get_event_bus()
    >>> event_bus.subscribe("notification.sent", registry.schedule)
    >>> await event_bus.publish(NotificationSent(...))
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Async function receiving one event and returning None."""


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        1. **Fail-open behavior**: One handler failure must NOT prevent other
           handlers from executing, and must NOT reach the publisher.
        2. **Async support**: All handlers are async.
        3. **No ordering guarantees**: Handlers run concurrently. Ordered
           fan-out is the listener registry's job.
    """

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register handler for an event type tag.

        Args:
            event_type: Event tag (e.g., "order.placed").
            handler: Async function called with each matching event.
        """
        ...

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove a previously registered handler.

        Returns:
            True if the handler was registered, False otherwise.
        """
        ...

    async def publish(self, event: DomainEvent) -> None:
        """Publish event to all handlers registered for its tag.

        Never raises because of handler failures.

        Args:
            event: Event to publish.
        """
        ...
