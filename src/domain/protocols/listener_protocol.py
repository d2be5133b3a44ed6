"""Event listener protocol (port).

A listener observes notification lifecycle events. The listener registry
holds listeners keyed by name and fans events out to them in ascending
priority order.

Contract:
    ``handle`` never raises. Filtering (enabled flag, subscribed event
    types), retries and error handling happen inside the listener.

Implementations:
    - RetryableListener: src/infrastructure/events/retryable_listener.py
      (wraps any async ``process_event`` function with bounded retry)
"""

from typing import Protocol

from src.domain.events.base_event import DomainEvent


class EventListenerProtocol(Protocol):
    """Observer of lifecycle events, managed by the listener registry."""

    @property
    def name(self) -> str:
        """Unique listener name (registry key)."""
        ...

    @property
    def event_types(self) -> frozenset[str]:
        """Event type tags this listener handles."""
        ...

    @property
    def priority(self) -> int:
        """Dispatch priority (lower runs first)."""
        ...

    @property
    def enabled(self) -> bool:
        """Whether the listener currently handles events."""
        ...

    def enable(self) -> None:
        """Start handling events."""
        ...

    def disable(self) -> None:
        """Stop handling events (handle becomes a no-op)."""
        ...

    async def handle(self, event: DomainEvent) -> None:
        """Handle one event. Never raises."""
        ...
