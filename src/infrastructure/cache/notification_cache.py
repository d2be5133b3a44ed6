"""Notification-specific cache helpers.

Thin namespacing layer over a CacheProtocol implementation. Each helper pair
stores under its own key namespace with a fixed default TTL; none of them
changes the semantics of the underlying cache.

TTLs:
    - Templates: 30 minutes
    - User preferences: 1 hour
    - Provider configuration: 24 hours
"""

from typing import Any

from src.core.constants import (
    PROVIDER_CONFIG_CACHE_TTL_MS,
    TEMPLATE_CACHE_TTL_MS,
    USER_PREFERENCES_CACHE_TTL_MS,
)
from src.domain.protocols.cache_protocol import CacheProtocol
from src.infrastructure.cache.cache_keys import NotificationCacheKeys


class NotificationCache:
    """Namespaced accessors for templates, preferences and provider config.

    Attributes:
        _cache: Underlying cache (usually the application MemoryCache).
        _keys: Key builder.
    """

    def __init__(
        self,
        cache: CacheProtocol,
        keys: NotificationCacheKeys | None = None,
    ) -> None:
        self._cache = cache
        self._keys = keys or NotificationCacheKeys()

    @property
    def cache(self) -> CacheProtocol:
        return self._cache

    def cache_template(
        self, template_id: str, template: str, ttl_ms: int = TEMPLATE_CACHE_TTL_MS
    ) -> None:
        self._cache.set(self._keys.template(template_id), template, ttl_ms)

    def get_template(self, template_id: str) -> str | None:
        return self._cache.get(self._keys.template(template_id))

    def cache_user_preferences(
        self,
        user_id: str,
        preferences: dict[str, Any],
        ttl_ms: int = USER_PREFERENCES_CACHE_TTL_MS,
    ) -> None:
        self._cache.set(self._keys.user_preferences(user_id), preferences, ttl_ms)

    def get_user_preferences(self, user_id: str) -> dict[str, Any] | None:
        return self._cache.get(self._keys.user_preferences(user_id))

    def cache_provider_config(
        self,
        provider: str,
        config: dict[str, Any],
        ttl_ms: int = PROVIDER_CONFIG_CACHE_TTL_MS,
    ) -> None:
        self._cache.set(self._keys.provider_config(provider), config, ttl_ms)

    def get_provider_config(self, provider: str) -> dict[str, Any] | None:
        return self._cache.get(self._keys.provider_config(provider))

    def invalidate_user_preferences(self, user_id: str) -> bool:
        """Drop cached preferences after the user changes them."""
        return self._cache.delete(self._keys.user_preferences(user_id))
