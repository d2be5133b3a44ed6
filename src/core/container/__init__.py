"""Container module - Centralized dependency injection.

Re-exports every factory function from the submodules:

    from src.core.container import get_notification_dispatcher, get_logger

The container is organized into modules by concern:
- infrastructure: Logging, Redis client, in-process cache
- events: Event bus, listener registry, delivery metrics
- notifications: Providers, dispatcher, business event processing
- streams: Durable stream broker

All factories are ``lru_cache`` singletons. Tests reset them with
``<factory>.cache_clear()``.
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_cache,
    get_logger,
    get_notification_cache,
    get_redis_client,
)

# Events
from src.core.container.events import (
    get_event_bus,
    get_listener_registry,
    get_notification_metrics,
)

# Notifications
from src.core.container.notifications import (
    get_business_event_emitter,
    get_business_event_processor,
    get_email_provider,
    get_notification_dispatcher,
    get_notification_stream_consumer,
    get_sms_provider,
)

# Streams
from src.core.container.streams import get_stream_broker

__all__ = [
    # Infrastructure
    "get_logger",
    "get_redis_client",
    "get_cache",
    "get_notification_cache",
    # Events
    "get_event_bus",
    "get_listener_registry",
    "get_notification_metrics",
    # Notifications
    "get_email_provider",
    "get_sms_provider",
    "get_notification_dispatcher",
    "get_business_event_processor",
    "get_business_event_emitter",
    "get_notification_stream_consumer",
    # Streams
    "get_stream_broker",
]
