"""Unit tests for RetryableListener and with_retry.

Tests cover:
- Linear backoff between attempts (delay_ms * attempt)
- Success after transient failures (error handler not called)
- Exhausted retries hand ListenerProcessingError to the handler once
- Enabled flag and event type filtering
- handle() never raises
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.errors import ListenerProcessingError
from src.domain.enums import NotificationChannel, NotificationType
from src.domain.events.notification_events import NotificationQueued, NotificationSent
from src.infrastructure.events.retryable_listener import (
    ListenerOptions,
    RetryableListener,
    with_retry,
)


def _sent_event() -> NotificationSent:
    return NotificationSent(
        notification_id="notif_1",
        user_id="user-1",
        channel=NotificationChannel.EMAIL,
        notification_type=NotificationType.INFO,
        provider="stub-email",
        delivery_time_ms=12.5,
    )


def _options(**overrides) -> ListenerOptions:
    fields = {
        "name": "test-listener",
        "event_types": frozenset({"notification.sent"}),
        "priority": 1,
        "retry_attempts": 3,
        "retry_delay_ms": 1000,
    }
    fields.update(overrides)
    return ListenerOptions(**fields)


class FlakyProcess:
    """process_event double failing a fixed number of times."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0

    async def __call__(self, event) -> None:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"attempt {self.calls} failed")


@pytest.mark.unit
class TestWithRetry:
    """Test the generic retry decorator."""

    @pytest.mark.asyncio
    async def test_returns_first_success(self, no_sleep):
        process = FlakyProcess(failures=0)
        wrapped = with_retry(process, attempts=3, delay_ms=1000, sleep=no_sleep)

        await wrapped(_sent_event())

        assert process.calls == 1
        assert no_sleep.delays == []

    @pytest.mark.asyncio
    async def test_reraises_after_last_attempt(self, no_sleep):
        process = FlakyProcess(failures=5)
        wrapped = with_retry(process, attempts=2, delay_ms=10, sleep=no_sleep)

        with pytest.raises(RuntimeError, match="attempt 2 failed"):
            await wrapped(_sent_event())

        assert process.calls == 2
        assert no_sleep.delays == [0.01]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            with_retry(FlakyProcess(0), attempts=0, delay_ms=0)


@pytest.mark.unit
class TestRetryableListenerRetry:
    """Test listener retry behavior."""

    @pytest.mark.asyncio
    async def test_succeeds_on_third_attempt_with_linear_backoff(self, no_sleep):
        # Arrange
        process = FlakyProcess(failures=2)
        on_error = AsyncMock()
        listener = RetryableListener(
            options=_options(),
            process_event=process,
            logger=MagicMock(),
            on_error=on_error,
            sleep=no_sleep,
        )

        # Act
        await listener.handle(_sent_event())

        # Assert
        assert process.calls == 3
        assert no_sleep.delays == [1.0, 2.0]
        on_error.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exhausted_retries_call_error_handler_once(self, no_sleep):
        process = FlakyProcess(failures=10)
        on_error = AsyncMock()
        listener = RetryableListener(
            options=_options(),
            process_event=process,
            logger=MagicMock(),
            on_error=on_error,
            sleep=no_sleep,
        )
        event = _sent_event()

        await listener.handle(event)

        assert process.calls == 3
        on_error.assert_awaited_once()
        handled_event, error = on_error.await_args.args
        assert handled_event is event
        assert isinstance(error, ListenerProcessingError)
        assert error.listener_name == "test-listener"
        assert error.attempts == 3
        assert isinstance(error.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_default_error_handler_logs(self, no_sleep):
        mock_logger = MagicMock()
        listener = RetryableListener(
            options=_options(retry_attempts=1),
            process_event=FlakyProcess(failures=1),
            logger=mock_logger,
            sleep=no_sleep,
        )

        await listener.handle(_sent_event())

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.args == ("listener_processing_failed",)

    @pytest.mark.asyncio
    async def test_failing_error_handler_is_contained(self, no_sleep):
        mock_logger = MagicMock()
        listener = RetryableListener(
            options=_options(retry_attempts=1),
            process_event=FlakyProcess(failures=1),
            logger=mock_logger,
            on_error=AsyncMock(side_effect=RuntimeError("handler broke")),
            sleep=no_sleep,
        )

        await listener.handle(_sent_event())

        assert mock_logger.error.call_args.args == ("listener_error_handler_failed",)

    @pytest.mark.asyncio
    async def test_retry_attempts_are_logged_as_warnings(self, no_sleep):
        mock_logger = MagicMock()
        listener = RetryableListener(
            options=_options(),
            process_event=FlakyProcess(failures=2),
            logger=mock_logger,
            sleep=no_sleep,
        )

        await listener.handle(_sent_event())

        assert mock_logger.warning.call_count == 2
        assert mock_logger.warning.call_args.kwargs["retry_in_ms"] == 2000


@pytest.mark.unit
class TestRetryableListenerFiltering:
    """Test enabled flag and event type filtering."""

    @pytest.mark.asyncio
    async def test_disabled_listener_ignores_events(self, no_sleep):
        process = FlakyProcess(failures=0)
        listener = RetryableListener(
            options=_options(enabled=False),
            process_event=process,
            logger=MagicMock(),
            sleep=no_sleep,
        )

        await listener.handle(_sent_event())
        assert process.calls == 0

        listener.enable()
        await listener.handle(_sent_event())
        assert process.calls == 1
        assert listener.enabled is True

    @pytest.mark.asyncio
    async def test_unsubscribed_event_type_ignored(self, no_sleep):
        process = FlakyProcess(failures=0)
        listener = RetryableListener(
            options=_options(),
            process_event=process,
            logger=MagicMock(),
            sleep=no_sleep,
        )
        queued = NotificationQueued(
            notification_id="notif_1",
            user_id="user-1",
            channel=NotificationChannel.SMS,
            notification_type=NotificationType.INFO,
            queue_id="notif_1",
            priority=2,
        )

        await listener.handle(queued)

        assert process.calls == 0
        assert listener.handles("notification.sent") is True
        assert listener.handles("notification.queued") is False


@pytest.mark.unit
class TestListenerOptions:
    """Test listener option validation."""

    def test_event_types_coerced_to_frozenset(self):
        options = ListenerOptions(name="x", event_types={"a", "b"})

        assert options.event_types == frozenset({"a", "b"})

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            ListenerOptions(name="x", retry_attempts=0)

    def test_defaults(self):
        options = ListenerOptions(name="x")

        assert options.event_types == frozenset()
        assert options.priority == 0
        assert options.enabled is True
        assert options.retry_attempts == 3
        assert options.retry_delay_ms == 1000
