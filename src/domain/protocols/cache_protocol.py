"""Cache protocol (port) for the bounded in-process cache.

Implementations:
    - MemoryCache: src/infrastructure/cache/memory_cache.py
"""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Bounded key/value store with per-entry TTL."""

    def get(self, key: str) -> Any | None:
        """Return the value, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store a value, evicting one entry first when at capacity."""
        ...

    def has(self, key: str) -> bool:
        """Whether a live (unexpired) entry exists."""
        ...

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...

    def size(self) -> int:
        """Number of stored entries (expired ones included until swept)."""
        ...
