"""Unit tests for MemoryCache.

Tests cover:
- Basic get/set/has/delete/clear and collection views
- Lazy TTL expiry on get/has and explicit purge
- Frequency-weighted eviction at capacity (highest staleness score evicted)
- Overwrite at capacity never evicts
- Statistics snapshot
- Background sweep lifecycle (start/stop)

Time is controlled with freezegun; epoch 1718000000000 ms is
2024-06-10 06:13:20 UTC.
"""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from src.infrastructure.cache.memory_cache import CacheEntry, MemoryCache

T0 = "2024-06-10 06:13:20"
T0_MS = 1_718_000_000_000


@pytest.fixture
def cache(mock_logger) -> MemoryCache:
    return MemoryCache(logger=mock_logger, ttl_ms=60_000, max_size=3)


@pytest.mark.unit
class TestMemoryCacheBasics:
    """Test core key/value operations."""

    def test_set_and_get(self, cache):
        cache.set("a", {"x": 1})

        assert cache.get("a") == {"x": 1}
        assert cache.has("a") is True
        assert cache.size() == 1

    def test_get_missing_returns_none(self, cache):
        assert cache.get("missing") is None
        assert cache.has("missing") is False

    def test_delete(self, cache):
        cache.set("a", 1)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        assert cache.get("a") is None

    def test_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.clear()

        assert cache.size() == 0
        assert len(cache) == 0

    def test_collection_views(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.keys() == ["a", "b"]
        assert cache.values() == [1, 2]
        assert cache.entries() == [("a", 1), ("b", 2)]
        assert list(cache) == ["a", "b"]

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_size": 0}, {"ttl_ms": 0}, {"check_period_ms": -1}],
    )
    def test_rejects_invalid_configuration(self, mock_logger, kwargs):
        with pytest.raises(ValueError):
            MemoryCache(logger=mock_logger, **kwargs)


@pytest.mark.unit
class TestMemoryCacheExpiry:
    """Test lazy TTL expiry and purge."""

    def test_entry_lives_exactly_ttl(self, cache):
        with freeze_time(T0) as frozen:
            cache.set("a", 1, ttl_ms=1000)

            frozen.tick(timedelta(seconds=1))
            assert cache.get("a") == 1

            frozen.tick(timedelta(seconds=1))
            assert cache.get("a") is None
            assert cache.size() == 0

    def test_has_drops_expired_entry(self, cache):
        with freeze_time(T0) as frozen:
            cache.set("a", 1, ttl_ms=1000)
            frozen.tick(timedelta(seconds=2))

            assert cache.has("a") is False
            assert cache.keys() == []

    def test_purge_expired_counts_removed(self, cache):
        with freeze_time(T0) as frozen:
            cache.set("short", 1, ttl_ms=1000)
            cache.set("long", 2, ttl_ms=10_000)
            frozen.tick(timedelta(seconds=5))

            removed = cache.purge_expired()

            assert removed == 1
            assert cache.keys() == ["long"]

    def test_default_ttl_used_when_not_given(self, mock_logger):
        cache = MemoryCache(logger=mock_logger, ttl_ms=2000)
        with freeze_time(T0) as frozen:
            cache.set("a", 1)
            frozen.tick(timedelta(seconds=3))

            assert cache.get("a") is None


@pytest.mark.unit
class TestMemoryCacheEviction:
    """Test frequency-weighted eviction."""

    def test_never_read_entry_evicted_before_recently_read(self, mock_logger):
        # Arrange
        cache = MemoryCache(logger=mock_logger, max_size=2)
        with freeze_time(T0) as frozen:
            cache.set("A", "a")
            cache.set("B", "b")

            frozen.tick(timedelta(seconds=10))
            assert cache.get("A") == "a"

            frozen.tick(timedelta(seconds=10))

            # Act: score(A) = 10s / 1 read, score(B) = 20s unread
            cache.set("C", "c")

        # Assert
        assert cache.keys() == ["A", "C"]

    def test_frequently_read_entry_survives(self, mock_logger):
        cache = MemoryCache(logger=mock_logger, max_size=2)
        with freeze_time(T0) as frozen:
            cache.set("hot", 1)
            cache.set("warm", 2)
            for _ in range(4):
                cache.get("hot")
            cache.get("warm")

            frozen.tick(timedelta(seconds=8))
            # hot: 8s / 4 = 2, warm: 8s / 1 = 8
            cache.set("new", 3)

        assert set(cache.keys()) == {"hot", "new"}

    def test_tie_evicts_oldest_insertion(self, mock_logger):
        cache = MemoryCache(logger=mock_logger, max_size=2)
        with freeze_time(T0):
            cache.set("first", 1)
            cache.set("second", 2)
            cache.set("third", 3)

        assert cache.keys() == ["second", "third"]

    def test_overwrite_at_capacity_does_not_evict(self, mock_logger):
        cache = MemoryCache(logger=mock_logger, max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)

        cache.set("a", 10)

        assert cache.size() == 2
        assert cache.get("a") == 10
        assert cache.get("b") == 2

    def test_size_never_exceeds_capacity(self, mock_logger):
        cache = MemoryCache(logger=mock_logger, max_size=3)

        for index in range(10):
            cache.set(f"k{index}", index)

        assert cache.size() == 3


@pytest.mark.unit
class TestCacheEntry:
    """Test staleness scoring."""

    def test_unread_entry_score_is_idle_time(self):
        entry = CacheEntry(
            key="a", value=1, created_at=0, ttl_ms=1000, last_accessed_at=0
        )

        assert entry.staleness_score(500) == 500.0

    def test_read_entry_score_divided_by_reads(self):
        entry = CacheEntry(
            key="a",
            value=1,
            created_at=0,
            ttl_ms=1000,
            access_count=4,
            last_accessed_at=100,
        )

        assert entry.staleness_score(500) == 100.0


@pytest.mark.unit
class TestMemoryCacheStats:
    """Test statistics."""

    def test_empty_stats(self, cache):
        stats = cache.stats()

        assert stats.total_items == 0
        assert stats.expired_items == 0
        assert stats.average_access_count == 0.0
        assert stats.oldest_item is None
        assert stats.newest_item is None
        assert stats.memory_usage == 0

    def test_stats_snapshot(self, cache):
        with freeze_time(T0) as frozen:
            cache.set("a", "x", ttl_ms=1000)
            frozen.tick(timedelta(seconds=5))
            cache.set("b", "y")
            cache.get("b")
            cache.get("b")

            stats = cache.stats()

        assert stats.total_items == 2
        assert stats.expired_items == 1
        assert stats.average_access_count == 1.0
        assert stats.oldest_item == T0_MS
        assert stats.newest_item == T0_MS + 5000
        assert stats.memory_usage > 0


@pytest.mark.unit
class TestMemoryCacheSweep:
    """Test the background sweep lifecycle."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, cache):
        assert cache.is_running is False

        cache.start()
        cache.start()
        assert cache.is_running is True

        await cache.stop()
        assert cache.is_running is False

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self, cache):
        await cache.stop()

        assert cache.is_running is False
