# mypy: disable-error-code="arg-type"
"""Event bus and listener dependency factories.

Application-scoped singletons for in-process events:
- InMemoryEventBus carrying business and lifecycle events
- ListenerRegistry with the logging (priority 1) and metrics (priority 2)
  listeners, subscribed to every lifecycle event type
- NotificationMetrics aggregated by the metrics listener
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.protocols.event_bus_protocol import EventBusProtocol
    from src.infrastructure.events.listener_registry import ListenerRegistry
    from src.infrastructure.events.listeners import NotificationMetrics


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Returns:
        InMemoryEventBus implementing EventBusProtocol.

    Usage:
        event_bus = get_event_bus()
        await event_bus.publish(OrderPlaced(...))
    """
    from src.core.container.infrastructure import get_logger
    from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

    return InMemoryEventBus(logger=get_logger())


@lru_cache()
def get_notification_metrics() -> "NotificationMetrics":
    """Get in-process delivery metrics singleton (app-scoped)."""
    from src.infrastructure.events.listeners import NotificationMetrics

    return NotificationMetrics()


@lru_cache()
def get_listener_registry() -> "ListenerRegistry":
    """Get listener registry singleton (app-scoped).

    Registers the built-in lifecycle listeners and binds the registry to the
    event bus, so every lifecycle event published on ``get_event_bus()`` is
    fanned out in priority order.

    Returns:
        ListenerRegistry bound to the application event bus.
    """
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger
    from src.infrastructure.events.listener_registry import ListenerRegistry
    from src.infrastructure.events.listeners import (
        create_logging_listener,
        create_metrics_listener,
    )

    settings = get_settings()
    logger = get_logger()

    registry = ListenerRegistry(logger=logger)
    registry.register(
        create_logging_listener(
            logger,
            retry_attempts=settings.listener_retry_attempts,
            retry_delay_ms=settings.listener_retry_delay_ms,
        )
    )
    registry.register(
        create_metrics_listener(
            get_notification_metrics(),
            logger,
            retry_attempts=settings.listener_retry_attempts,
            retry_delay_ms=settings.listener_retry_delay_ms,
        )
    )
    registry.bind(get_event_bus())
    return registry
