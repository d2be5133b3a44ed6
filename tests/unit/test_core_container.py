"""Unit tests for the dependency container.

Tests cover:
- Singleton pattern (same instance returned, cache_clear resets)
- Provider selection by EMAIL_BACKEND / SMS_BACKEND
- ConfigurationError for a real backend without credentials
- Wiring: dispatcher providers, listener registry bound before delivery
"""

import os
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from src.core.config import Settings
from src.core.container import (
    get_business_event_emitter,
    get_cache,
    get_email_provider,
    get_event_bus,
    get_listener_registry,
    get_logger,
    get_notification_dispatcher,
    get_notification_metrics,
    get_sms_provider,
    get_stream_broker,
)
from src.core.errors import ConfigurationError
from src.domain.enums import NotificationChannel
from src.infrastructure.logging.console_adapter import ConsoleAdapter
from src.infrastructure.messaging import RedisStreamBroker
from src.infrastructure.notifications import (
    SendGridEmailProvider,
    StubEmailProvider,
    StubSmsProvider,
    TwilioSmsProvider,
)


def _patched_settings(**values):
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None, **values)
    return patch("src.core.config.get_settings", return_value=settings)


@pytest.mark.unit
class TestContainerSingletons:
    """Test lru_cache singletons."""

    def test_logger_is_console_adapter_singleton(self):
        with _patched_settings(environment="testing"):
            first = get_logger()
            second = get_logger()

        assert isinstance(first, ConsoleAdapter)
        assert first is second

    def test_cache_clear_builds_new_instance(self):
        first = get_event_bus()
        get_event_bus.cache_clear()

        assert get_event_bus() is not first

    def test_cache_uses_settings(self):
        with _patched_settings(cache_max_size=7):
            cache = get_cache()

        for index in range(10):
            cache.set(f"k{index}", index)
        assert cache.size() == 7

    def test_stream_broker_is_built_lazily(self):
        with _patched_settings(redis_url="redis://localhost:6379/1"):
            broker = get_stream_broker()

        assert isinstance(broker, RedisStreamBroker)


@pytest.mark.unit
class TestProviderSelection:
    """Test backend selection and credential checks."""

    def test_stub_backends_by_default(self):
        with _patched_settings():
            assert isinstance(get_email_provider(), StubEmailProvider)
            assert isinstance(get_sms_provider(), StubSmsProvider)

    def test_sendgrid_backend(self):
        with _patched_settings(
            email_backend="sendgrid",
            sendgrid_api_key="SG.key",
            sendgrid_from_email="noreply@example.com",
        ):
            assert isinstance(get_email_provider(), SendGridEmailProvider)

    def test_sendgrid_without_api_key_raises(self):
        with _patched_settings(email_backend="sendgrid"):
            with pytest.raises(ConfigurationError) as exc_info:
                get_email_provider()

        assert "SENDGRID_API_KEY" in str(exc_info.value)
        assert exc_info.value.context["backend"] == "sendgrid"

    def test_twilio_backend(self):
        with _patched_settings(
            sms_backend="twilio",
            twilio_account_sid="AC123",
            twilio_auth_token="token",
            twilio_phone_number="+15550000000",
        ):
            assert isinstance(get_sms_provider(), TwilioSmsProvider)

    def test_twilio_without_phone_number_raises(self):
        with _patched_settings(
            sms_backend="twilio",
            twilio_account_sid="AC123",
            twilio_auth_token="token",
        ):
            with pytest.raises(ConfigurationError) as exc_info:
                get_sms_provider()

        assert "TWILIO_PHONE_NUMBER" in str(exc_info.value)


@pytest.mark.unit
class TestContainerWiring:
    """Test cross-factory wiring."""

    def test_dispatcher_routes_email_and_sms(self):
        with _patched_settings():
            dispatcher = get_notification_dispatcher()

            assert dispatcher.provider_for(NotificationChannel.EMAIL) is (
                get_email_provider()
            )
            assert dispatcher.provider_for(NotificationChannel.SMS) is get_sms_provider()
            assert dispatcher.provider_for(NotificationChannel.PUSH) is None

    def test_registry_has_logging_and_metrics_listeners(self):
        with _patched_settings():
            registry = get_listener_registry()

        listeners = registry.listeners_for("notification.sent")
        names = [listener.name for listener in listeners]
        assert names == ["notification-logger", "notification-metrics"]

    @pytest.mark.asyncio
    async def test_emitted_event_updates_metrics(self):
        # Arrange
        with _patched_settings(environment="testing", log_level="CRITICAL"):
            emitter = get_business_event_emitter()
            metrics = get_notification_metrics()

            # Act
            await emitter.emit_password_reset_requested(
                user_id="user-1",
                email="jane@example.com",
                reset_token="tok",
                expires_at=datetime(2030, 1, 1, tzinfo=UTC),
            )
            await get_listener_registry().drain()

        # Assert
        stats = metrics.get_stats("email")
        assert stats["queued"] == 1
        assert stats["sent"] == 1
