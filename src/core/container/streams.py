"""Stream broker dependency factory.

Application-scoped singleton for durable, consumer-group based messaging
over Redis Streams. Runs beside the in-process event bus.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infrastructure.messaging import RedisStreamBroker


@lru_cache()
def get_stream_broker() -> "RedisStreamBroker":
    """Get stream broker singleton (app-scoped).

    Shares the Redis connection pool from ``get_redis_client()``. Call
    ``shutdown()`` on exit; it stops every consumer task and closes the
    connection.

    Usage:
        broker = get_stream_broker()
        await broker.publish("notifications", "notification.requested", {...})
    """
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger, get_redis_client
    from src.infrastructure.messaging import RedisStreamBroker

    return RedisStreamBroker(
        redis_client=get_redis_client(),
        logger=get_logger(),
        poll_interval_seconds=get_settings().stream_poll_interval_seconds,
    )
