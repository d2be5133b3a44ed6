"""Bounded in-memory cache with per-entry TTL and frequency-weighted eviction.

Architecture:
    - Implements CacheProtocol (structural typing)
    - Owned state: one dict of CacheEntry objects per cache instance
    - Lazy expiry: ``get``/``has`` drop an entry once
      ``now - created_at > ttl_ms``, before any sweep runs
    - Background sweep: ``start()`` launches an asyncio task deleting every
      expired entry each ``check_period_ms``; ``stop()`` cancels it
    - Eviction: inserting a NEW key at capacity evicts exactly one entry.
      Each entry's staleness score is ``now - last_accessed_at`` when it was
      never read, else ``(now - last_accessed_at) / access_count``. The entry
      that has gone longest without reads, weighted by how rarely it is
      read, is evicted (highest score; ties evict the oldest insertion)

Example (max_size=2):
    t=0   set A, set B
    t=10  get A                 (A: access_count=1, last_accessed_at=10)
    t=20  set C                 score(A) = (20-10)/1 = 10, score(B) = 20
                                → B evicted, A retained

Clock:
    Wall-clock epoch milliseconds from time.time(), so tests can control it
    with freezegun.
"""

import asyncio
import json
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from src.core.constants import (
    CACHE_CHECK_PERIOD_MS_DEFAULT,
    CACHE_ENTRY_OVERHEAD_BYTES,
    CACHE_MAX_SIZE_DEFAULT,
    CACHE_TTL_MS_DEFAULT,
)
from src.core.identifiers import epoch_ms
from src.domain.protocols.logger_protocol import LoggerProtocol


@dataclass(slots=True)
class CacheEntry:
    """Stored value plus bookkeeping.

    Attributes:
        key: Cache key.
        value: Cached value.
        created_at: Insertion time (epoch ms); TTL counts from here.
        ttl_ms: Lifetime in milliseconds.
        access_count: Successful reads since insertion.
        last_accessed_at: Last successful read, or insertion time.
    """

    key: str
    value: Any
    created_at: int
    ttl_ms: int
    access_count: int = 0
    last_accessed_at: int = 0

    def is_expired(self, now: int) -> bool:
        return now - self.created_at > self.ttl_ms

    def staleness_score(self, now: int) -> float:
        """Time since last read, divided by read count when there were reads."""
        idle = now - self.last_accessed_at
        if self.access_count == 0:
            return float(idle)
        return idle / self.access_count


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheStatistics:
    """Point-in-time cache statistics.

    Attributes:
        total_items: Stored entries (expired ones included until swept).
        expired_items: Stored entries already past their TTL.
        average_access_count: Mean reads per entry (0.0 when empty).
        oldest_item: Oldest created_at (epoch ms), None when empty.
        newest_item: Newest created_at (epoch ms), None when empty.
        memory_usage: Rough size estimate in bytes.
    """

    total_items: int
    expired_items: int
    average_access_count: float
    oldest_item: int | None
    newest_item: int | None
    memory_usage: int


class MemoryCache:
    """Bounded key/value cache owned by a single component graph.

    Thread Safety:
        NOT thread-safe. All access happens on the event loop thread; the
        sweep task runs on the same loop, so map mutations never interleave.

    Attributes:
        _entries: Key → CacheEntry (insertion ordered).
        _ttl_ms: Default TTL for ``set`` without an explicit ttl.
        _max_size: Capacity in entries.
        _check_period_ms: Sweep interval.
        _sweep_task: Running sweep task, if started.
        _logger: Logger for hits, misses, evictions and sweeps (debug).
    """

    def __init__(
        self,
        *,
        logger: LoggerProtocol,
        ttl_ms: int = CACHE_TTL_MS_DEFAULT,
        max_size: int = CACHE_MAX_SIZE_DEFAULT,
        check_period_ms: int = CACHE_CHECK_PERIOD_MS_DEFAULT,
    ) -> None:
        """Initialize an empty cache.

        Args:
            logger: Structured logger.
            ttl_ms: Default entry TTL in milliseconds.
            max_size: Maximum number of entries (at least 1).
            check_period_ms: Background sweep interval in milliseconds.

        Raises:
            ValueError: If max_size, ttl_ms or check_period_ms is not positive.
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl_ms <= 0 or check_period_ms <= 0:
            raise ValueError("ttl_ms and check_period_ms must be positive")

        self._entries: dict[str, CacheEntry] = {}
        self._ttl_ms = ttl_ms
        self._max_size = max_size
        self._check_period_ms = check_period_ms
        self._sweep_task: asyncio.Task[None] | None = None
        self._logger = logger

    # =========================================================================
    # Core operations
    # =========================================================================

    def get(self, key: str) -> Any | None:
        """Return a live value and record the read.

        Args:
            key: Cache key.

        Returns:
            Cached value, or None when absent or expired (expired entries are
            deleted on the spot).
        """
        entry = self._entries.get(key)
        if entry is None:
            self._logger.debug("cache_miss", key=key)
            return None

        now = epoch_ms()
        if entry.is_expired(now):
            del self._entries[key]
            self._logger.debug("cache_entry_expired", key=key)
            return None

        entry.access_count += 1
        entry.last_accessed_at = now
        self._logger.debug("cache_hit", key=key, access_count=entry.access_count)
        return entry.value

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Store a value.

        Inserting a new key while at capacity evicts one entry first.
        Overwriting an existing key never evicts and resets its statistics.

        Args:
            key: Cache key.
            value: Value to store.
            ttl_ms: Entry TTL; the cache default when None.
        """
        if key not in self._entries and len(self._entries) >= self._max_size:
            self._evict_one()

        now = epoch_ms()
        effective_ttl = self._ttl_ms if ttl_ms is None else ttl_ms
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            created_at=now,
            ttl_ms=effective_ttl,
            last_accessed_at=now,
        )
        self._logger.debug("cache_set", key=key, ttl_ms=effective_ttl)

    def has(self, key: str) -> bool:
        """Whether a live entry exists (expired entries are deleted)."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        if entry.is_expired(epoch_ms()):
            del self._entries[key]
            return False
        return True

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        if self._entries.pop(key, None) is None:
            return False
        self._logger.debug("cache_delete", key=key)
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._logger.info("cache_cleared")

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def values(self) -> list[Any]:
        return [entry.value for entry in self._entries.values()]

    def entries(self) -> list[tuple[str, Any]]:
        return [(key, entry.value) for key, entry in self._entries.items()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    # =========================================================================
    # Maintenance
    # =========================================================================

    def purge_expired(self) -> int:
        """Delete every expired entry.

        Returns:
            Number of entries removed.
        """
        now = epoch_ms()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        if expired:
            self._logger.debug("cache_expired_entries_purged", count=len(expired))
        return len(expired)

    def stats(self) -> CacheStatistics:
        """Compute point-in-time statistics."""
        now = epoch_ms()
        entries = list(self._entries.values())
        if not entries:
            return CacheStatistics(
                total_items=0,
                expired_items=0,
                average_access_count=0.0,
                oldest_item=None,
                newest_item=None,
                memory_usage=0,
            )

        return CacheStatistics(
            total_items=len(entries),
            expired_items=sum(1 for entry in entries if entry.is_expired(now)),
            average_access_count=sum(entry.access_count for entry in entries)
            / len(entries),
            oldest_item=min(entry.created_at for entry in entries),
            newest_item=max(entry.created_at for entry in entries),
            memory_usage=self._estimate_memory_usage(),
        )

    @property
    def is_running(self) -> bool:
        """Whether the background sweep task is active."""
        return self._sweep_task is not None and not self._sweep_task.done()

    def start(self) -> None:
        """Start the background sweep on the running event loop (idempotent)."""
        if self.is_running:
            return
        self._sweep_task = asyncio.create_task(
            self._sweep_loop(), name="memory-cache-sweep"
        )

    async def stop(self) -> None:
        """Cancel the background sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._check_period_ms / 1000)
            self.purge_expired()

    def _evict_one(self) -> None:
        now = epoch_ms()
        victim: CacheEntry | None = None
        victim_score = -1.0
        for entry in self._entries.values():
            score = entry.staleness_score(now)
            if score > victim_score:
                victim, victim_score = entry, score

        if victim is not None:
            del self._entries[victim.key]
            self._logger.debug(
                "cache_entry_evicted", key=victim.key, score=round(victim_score, 3)
            )

    def _estimate_memory_usage(self) -> int:
        total = 0
        for key, entry in self._entries.items():
            total += len(key) * 2
            total += len(json.dumps(entry.value, default=str)) * 2
            total += CACHE_ENTRY_OVERHEAD_BYTES
        return total
