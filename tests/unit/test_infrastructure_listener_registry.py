"""Unit tests for ListenerRegistry.

Tests cover:
- Registration, replacement and unregistration by name
- Ascending priority dispatch order (ties keep registration order)
- Enable/disable by name and status snapshot
- Settle-all dispatch: one failing listener does not stop the others
- Binding to lifecycle event types on the event bus
- Background dispatch: publishers never wait for listeners
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.domain.enums import NotificationChannel, NotificationType
from src.domain.events.notification_events import (
    SUPPORTED_LIFECYCLE_EVENTS,
    NotificationFailed,
    NotificationSent,
)
from src.infrastructure.events.listener_registry import ListenerRegistry
from src.infrastructure.events.retryable_listener import (
    ListenerOptions,
    RetryableListener,
)


def _sent_event() -> NotificationSent:
    return NotificationSent(
        notification_id="notif_1",
        user_id="user-1",
        channel=NotificationChannel.EMAIL,
        notification_type=NotificationType.INFO,
        provider="stub-email",
        delivery_time_ms=3.0,
    )


def _recording_listener(
    name: str,
    calls: list[str],
    *,
    priority: int = 0,
    event_types: frozenset[str] = frozenset({"notification.sent"}),
    enabled: bool = True,
) -> RetryableListener:
    async def process(event) -> None:
        calls.append(name)

    return RetryableListener(
        options=ListenerOptions(
            name=name,
            event_types=event_types,
            priority=priority,
            enabled=enabled,
            retry_attempts=1,
        ),
        process_event=process,
        logger=MagicMock(),
    )


class ExplodingListener:
    """Listener whose handle() raises, bypassing RetryableListener."""

    name = "exploding"
    event_types = frozenset({"notification.sent"})
    priority = 0
    enabled = True

    def enable(self) -> None:
        pass

    def disable(self) -> None:
        pass

    async def handle(self, event) -> None:
        raise RuntimeError("listener blew up")


@pytest.mark.unit
class TestListenerRegistration:
    """Test register/unregister/get."""

    def test_register_and_get(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)
        listener = _recording_listener("a", [])

        registry.register(listener)

        assert registry.get("a") is listener
        assert registry.listeners() == [listener]
        assert registry.listeners_for("notification.sent") == (listener,)
        assert registry.event_types() == ["notification.sent"]

    def test_register_same_name_replaces(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)
        first = _recording_listener("a", [])
        second = _recording_listener("a", [], priority=5)

        registry.register(first)
        registry.register(second)

        assert registry.get("a") is second
        assert len(registry.listeners()) == 1
        assert mock_logger.info.call_args.kwargs["replaced"] is True

    def test_unregister(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("a", []))

        assert registry.unregister("a") is True
        assert registry.unregister("a") is False
        assert registry.get("a") is None
        assert registry.listeners_for("notification.sent") == ()
        assert registry.event_types() == []

    def test_enable_disable_unknown_name(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)

        assert registry.enable("missing") is False
        assert registry.disable("missing") is False


@pytest.mark.unit
class TestListenerRegistryDispatch:
    """Test priority-ordered settle-all dispatch."""

    @pytest.mark.asyncio
    async def test_lower_priority_value_runs_first(self, mock_logger):
        # Arrange
        calls: list[str] = []
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("metrics", calls, priority=2))
        registry.register(_recording_listener("logger", calls, priority=1))
        registry.register(_recording_listener("audit", calls, priority=2))

        # Act
        await registry.dispatch(_sent_event())

        # Assert
        assert calls == ["logger", "metrics", "audit"]
        names = [item.name for item in registry.listeners_for("notification.sent")]
        assert names == ["logger", "metrics", "audit"]

    @pytest.mark.asyncio
    async def test_only_subscribed_listeners_invoked(self, mock_logger):
        calls: list[str] = []
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("sent-only", calls))
        registry.register(
            _recording_listener(
                "failed-only",
                calls,
                event_types=frozenset({"notification.failed"}),
            )
        )

        await registry.dispatch(_sent_event())

        assert calls == ["sent-only"]

    @pytest.mark.asyncio
    async def test_disabled_listener_skipped_until_enabled(self, mock_logger):
        calls: list[str] = []
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("a", calls))

        registry.disable("a")
        await registry.dispatch(_sent_event())
        assert calls == []

        registry.enable("a")
        await registry.dispatch(_sent_event())
        assert calls == ["a"]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_block_others(self, mock_logger):
        calls: list[str] = []
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(ExplodingListener())
        registry.register(_recording_listener("survivor", calls, priority=1))

        await registry.dispatch(_sent_event())

        assert calls == ["survivor"]
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.args == ("listener_dispatch_failed",)
        assert mock_logger.error.call_args.kwargs["listener"] == "exploding"

    @pytest.mark.asyncio
    async def test_no_listeners_is_noop(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)

        await registry.dispatch(_sent_event())

        mock_logger.debug.assert_called_once()
        mock_logger.error.assert_not_called()


@pytest.mark.unit
class TestListenerRegistryStatus:
    """Test status snapshot."""

    def test_status_reports_every_listener(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("a", [], priority=1))
        registry.register(_recording_listener("b", [], priority=2, enabled=False))

        status = registry.status()

        assert status == [
            {
                "name": "a",
                "event_types": ["notification.sent"],
                "enabled": True,
                "priority": 1,
            },
            {
                "name": "b",
                "event_types": ["notification.sent"],
                "enabled": False,
                "priority": 2,
            },
        ]

    def test_status_reflects_disable(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(_recording_listener("a", []))

        registry.disable("a")

        assert registry.status()[0]["enabled"] is False


@pytest.mark.unit
class TestListenerRegistryBind:
    """Test binding to the event bus."""

    @pytest.mark.asyncio
    async def test_bind_subscribes_lifecycle_events(self, mock_logger, event_bus):
        calls: list[str] = []
        registry = ListenerRegistry(logger=mock_logger)
        registry.register(
            _recording_listener(
                "all",
                calls,
                event_types=frozenset(SUPPORTED_LIFECYCLE_EVENTS),
            )
        )

        registry.bind(event_bus)
        await event_bus.publish(_sent_event())
        await event_bus.publish(
            NotificationFailed(
                notification_id="notif_2",
                user_id="user-1",
                channel=NotificationChannel.SMS,
                notification_type=NotificationType.ALERT,
                error="boom",
            )
        )
        await registry.drain()

        assert calls == ["all", "all"]

    @pytest.mark.asyncio
    async def test_publish_returns_before_listeners_settle(self, mock_logger, event_bus):
        # Arrange
        gate = asyncio.Event()
        calls: list[str] = []

        async def slow(event) -> None:
            await gate.wait()
            calls.append(event.event_type)

        registry = ListenerRegistry(logger=mock_logger)
        registry.register(
            RetryableListener(
                options=ListenerOptions(
                    name="slow", event_types=frozenset({"notification.sent"})
                ),
                process_event=slow,
                logger=MagicMock(),
            )
        )
        registry.bind(event_bus)

        # Act
        await asyncio.wait_for(event_bus.publish(_sent_event()), timeout=1)

        # Assert
        assert calls == []
        assert registry.pending_count() == 1

        gate.set()
        await registry.drain()
        assert calls == ["notification.sent"]
        assert registry.pending_count() == 0

    @pytest.mark.asyncio
    async def test_drain_without_pending_tasks(self, mock_logger):
        registry = ListenerRegistry(logger=mock_logger)

        await registry.drain()

        assert registry.pending_count() == 0
