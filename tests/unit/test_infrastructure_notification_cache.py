"""Unit tests for NotificationCache and NotificationCacheKeys."""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from src.infrastructure.cache.cache_keys import NotificationCacheKeys
from src.infrastructure.cache.memory_cache import MemoryCache
from src.infrastructure.cache.notification_cache import NotificationCache


@pytest.fixture
def memory_cache(mock_logger) -> MemoryCache:
    return MemoryCache(logger=mock_logger)


@pytest.mark.unit
class TestNotificationCacheKeys:
    """Test key namespaces."""

    def test_key_patterns(self):
        keys = NotificationCacheKeys()

        assert keys.template("welcome") == "template:welcome"
        assert keys.user_preferences("user-1") == "user_prefs:user-1"
        assert keys.provider_config("sendgrid") == "provider_config:sendgrid"


@pytest.mark.unit
class TestNotificationCache:
    """Test namespaced accessors."""

    def test_template_round_trip_uses_namespace(self, memory_cache):
        cache = NotificationCache(memory_cache)

        cache.cache_template("welcome", "Hello {name}")

        assert cache.get_template("welcome") == "Hello {name}"
        assert memory_cache.keys() == ["template:welcome"]

    def test_namespaces_do_not_collide(self, memory_cache):
        cache = NotificationCache(memory_cache)

        cache.cache_template("x", "template")
        cache.cache_user_preferences("x", {"email": True})
        cache.cache_provider_config("x", {"region": "us"})

        assert cache.get_template("x") == "template"
        assert cache.get_user_preferences("x") == {"email": True}
        assert cache.get_provider_config("x") == {"region": "us"}
        assert memory_cache.size() == 3

    def test_invalidate_user_preferences(self, memory_cache):
        cache = NotificationCache(memory_cache)
        cache.cache_user_preferences("user-1", {"sms": False})

        assert cache.invalidate_user_preferences("user-1") is True
        assert cache.get_user_preferences("user-1") is None
        assert cache.invalidate_user_preferences("user-1") is False

    def test_default_ttls(self, memory_cache):
        cache = NotificationCache(memory_cache)
        with freeze_time("2024-06-10 06:13:20") as frozen:
            cache.cache_template("t", "body")
            cache.cache_user_preferences("u", {})
            cache.cache_provider_config("p", {})

            frozen.tick(timedelta(minutes=31))
            assert cache.get_template("t") is None
            assert cache.get_user_preferences("u") == {}

            frozen.tick(timedelta(minutes=30))
            assert cache.get_user_preferences("u") is None
            assert cache.get_provider_config("p") == {}

            frozen.tick(timedelta(hours=24))
            assert cache.get_provider_config("p") is None

    def test_exposes_underlying_cache(self, memory_cache):
        assert NotificationCache(memory_cache).cache is memory_cache
