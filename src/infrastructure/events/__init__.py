"""Infrastructure event implementations.

Event Bus:
    - InMemoryEventBus: Tag-routed bus with fail-open concurrent fan-out

Listeners:
    - RetryableListener / with_retry: Composition-based retrying listener
    - ListenerRegistry: Priority-ordered, settle-all listener fan-out
    - listeners/: Logging and metrics lifecycle listeners

Usage:
    >>> event_bus = InMemoryEventBus(logger=logger)
    >>> registry = ListenerRegistry(logger=logger)
    >>> registry.register(create_logging_listener(logger, ...))
    >>> registry.bind(event_bus)
"""

from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus
from src.infrastructure.events.listener_registry import ListenerRegistry
from src.infrastructure.events.retryable_listener import (
    ListenerOptions,
    RetryableListener,
    with_retry,
)

__all__ = [
    "InMemoryEventBus",
    "ListenerOptions",
    "ListenerRegistry",
    "RetryableListener",
    "with_retry",
]
