"""Infrastructure dependency factories.

Application-scoped singletons for core infrastructure services:
- Logging (console, human-readable or JSON)
- Redis client (stream broker connection pool)
- In-process cache (MemoryCache) and its notification namespacing
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.infrastructure.cache import MemoryCache, NotificationCache


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here (composition root):
    - development: ConsoleAdapter (human-readable)
    - testing/ci/production: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.core.config import get_settings
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
    )


@lru_cache()
def get_redis_client() -> "Redis":
    """Get Redis client singleton (app-scoped).

    Connection pool is shared by every stream consumer task. Responses stay
    as bytes; the broker decodes them.

    Returns:
        redis.asyncio.Redis client.
    """
    from redis.asyncio import ConnectionPool, Redis

    from src.core.config import get_settings

    pool = ConnectionPool.from_url(
        get_settings().redis_url,
        max_connections=50,
        decode_responses=False,
        socket_connect_timeout=5,
        retry_on_timeout=True,
        socket_keepalive=True,
    )
    return Redis(connection_pool=pool)


@lru_cache()
def get_cache() -> "MemoryCache":
    """Get in-process cache singleton (app-scoped).

    The background sweep is not started here; ``main.run`` starts it once
    the event loop is running.

    Returns:
        MemoryCache sized from settings.

    Usage:
        cache = get_cache()
        cache.set("template:welcome-email", html)
    """
    from src.core.config import get_settings
    from src.infrastructure.cache import MemoryCache

    settings = get_settings()
    return MemoryCache(
        logger=get_logger(),
        ttl_ms=settings.cache_ttl_ms,
        max_size=settings.cache_max_size,
        check_period_ms=settings.cache_check_period_ms,
    )


@lru_cache()
def get_notification_cache() -> "NotificationCache":
    """Get notification cache facade singleton (app-scoped)."""
    from src.infrastructure.cache import NotificationCache

    return NotificationCache(get_cache())
