"""Cache infrastructure package.

This package provides the bounded in-process cache.
All cache dependencies are managed through src.core.container.

Architecture:
- MemoryCache: Concrete in-memory implementation of CacheProtocol
- NotificationCache: Namespaced template/preferences/provider-config helpers
- Use src.core.container.get_cache() for dependency injection
"""

from src.infrastructure.cache.cache_keys import NotificationCacheKeys
from src.infrastructure.cache.memory_cache import (
    CacheEntry,
    CacheStatistics,
    MemoryCache,
)
from src.infrastructure.cache.notification_cache import NotificationCache

__all__ = [
    "CacheEntry",
    "CacheStatistics",
    "MemoryCache",
    "NotificationCache",
    "NotificationCacheKeys",
]
