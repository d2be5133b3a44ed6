"""Retrying event listener built by composition.

Any async ``process_event(event)`` function becomes a registry-managed
listener by wrapping it in RetryableListener. No subclassing is required:
the retry policy lives in the generic ``with_retry`` decorator and the
listener adds filtering (enabled flag, subscribed event types) and the
final error handler.

Retry policy:
    Up to ``retry_attempts`` calls. After failed attempt N (N < attempts)
    the listener waits ``retry_delay_ms * N`` milliseconds (linear backoff).
    After the last failure the error is wrapped in ListenerProcessingError
    and handed to the error handler exactly once. ``handle`` never raises.

Usage:
    >>> async def record(event: DomainEvent) -> None:
    ...     metrics.record(event)
    >>>
    >>> listener = RetryableListener(
    ...     options=ListenerOptions(
    ...         name="metrics",
    ...         event_types=frozenset({"notification.sent"}),
    ...         priority=2,
    ...     ),
    ...     process_event=record,
    ...     logger=logger,
    ... )
    >>> registry.register(listener)
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

from src.core.constants import (
    LISTENER_RETRY_ATTEMPTS_DEFAULT,
    LISTENER_RETRY_DELAY_MS_DEFAULT,
)
from src.core.errors import ListenerProcessingError
from src.domain.events.base_event import DomainEvent
from src.domain.protocols.logger_protocol import LoggerProtocol

P = ParamSpec("P")
R = TypeVar("R")

SleepFunc = Callable[[float], Awaitable[Any]]
"""Awaitable sleep taking seconds (asyncio.sleep or a test double)."""

ProcessEventFunc = Callable[[DomainEvent], Awaitable[None]]
"""Listener body: processes one event, raises on failure."""

ErrorHandlerFunc = Callable[[DomainEvent, ListenerProcessingError], Awaitable[None]]
"""Called once after every attempt failed."""

RetryCallback = Callable[[int, Exception], None]
"""Called after failed attempt N (1-based) when another attempt follows."""


def with_retry(
    func: Callable[P, Awaitable[R]],
    *,
    attempts: int,
    delay_ms: int,
    sleep: SleepFunc = asyncio.sleep,
    on_retry: RetryCallback | None = None,
) -> Callable[P, Awaitable[R]]:
    """Wrap an async callable with bounded linear-backoff retry.

    Args:
        func: Async callable to retry.
        attempts: Maximum number of calls (at least 1).
        delay_ms: Backoff multiplier; wait ``delay_ms * attempt`` ms after
            failed attempt ``attempt``.
        sleep: Awaitable sleep in seconds (injectable for tests).
        on_retry: Optional hook invoked before each backoff wait.

    Returns:
        Async callable with the same signature. Re-raises the last error
        once every attempt failed.

    Raises:
        ValueError: If attempts is less than 1.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        for attempt in range(1, attempts + 1):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if attempt == attempts:
                    raise
                if on_retry is not None:
                    on_retry(attempt, e)
                await sleep(delay_ms * attempt / 1000)
        raise AssertionError("unreachable")  # pragma: no cover

    return wrapper


@dataclass(frozen=True, kw_only=True, slots=True)
class ListenerOptions:
    """Registration settings of a listener.

    Attributes:
        name: Unique listener name (registry key).
        event_types: Event type tags the listener handles.
        priority: Dispatch priority; lower values are dispatched first.
        enabled: Initial enabled flag.
        retry_attempts: Maximum calls per event.
        retry_delay_ms: Linear backoff multiplier in milliseconds.
    """

    name: str
    event_types: frozenset[str] = field(default_factory=frozenset)
    priority: int = 0
    enabled: bool = True
    retry_attempts: int = LISTENER_RETRY_ATTEMPTS_DEFAULT
    retry_delay_ms: int = LISTENER_RETRY_DELAY_MS_DEFAULT

    def __post_init__(self) -> None:
        if not isinstance(self.event_types, frozenset):
            object.__setattr__(self, "event_types", frozenset(self.event_types))
        if self.retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")
        if self.retry_delay_ms < 0:
            raise ValueError("retry_delay_ms must not be negative")


class RetryableListener:
    """Listener wrapping a process function with filtering and retry.

    Implements EventListenerProtocol. State is limited to the enabled flag;
    everything else comes from the immutable ListenerOptions.

    Attributes:
        _options: Registration settings.
        _process: process_event wrapped by with_retry.
        _on_error: Optional custom error handler.
        _enabled: Mutable enabled flag.
        _logger: Structured logger.
    """

    def __init__(
        self,
        *,
        options: ListenerOptions,
        process_event: ProcessEventFunc,
        logger: LoggerProtocol,
        on_error: ErrorHandlerFunc | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize listener.

        Args:
            options: Registration settings (name, types, priority, retry).
            process_event: Async listener body; raising triggers a retry.
            logger: Structured logger.
            on_error: Replaces the default error log after exhausted retries.
            sleep: Awaitable sleep used for backoff waits.
        """
        self._options = options
        self._enabled = options.enabled
        self._on_error = on_error
        self._logger = logger
        self._process = with_retry(
            process_event,
            attempts=options.retry_attempts,
            delay_ms=options.retry_delay_ms,
            sleep=sleep,
            on_retry=self._log_retry,
        )

    @property
    def name(self) -> str:
        return self._options.name

    @property
    def event_types(self) -> frozenset[str]:
        return self._options.event_types

    @property
    def priority(self) -> int:
        return self._options.priority

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def options(self) -> ListenerOptions:
        return self._options

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def handles(self, event_type: str) -> bool:
        """Whether the listener subscribes to an event type tag."""
        return event_type in self._options.event_types

    async def handle(self, event: DomainEvent) -> None:
        """Process an event with retry; never raises.

        No-op when the listener is disabled or not subscribed to the
        event's type.

        Args:
            event: Lifecycle event to process.
        """
        if not self._enabled or not self.handles(event.event_type):
            return

        try:
            await self._process(event)
        except Exception as e:
            failure = ListenerProcessingError(
                listener_name=self.name,
                event_type=event.event_type,
                attempts=self._options.retry_attempts,
                cause=e,
            )
            await self._handle_error(event, failure)

    async def _handle_error(
        self, event: DomainEvent, error: ListenerProcessingError
    ) -> None:
        if self._on_error is None:
            self._logger.error(
                "listener_processing_failed",
                error=error,
                listener=self.name,
                event_type=event.event_type,
                event_id=event.event_id,
                attempts=error.attempts,
            )
            return

        try:
            await self._on_error(event, error)
        except Exception as handler_error:
            self._logger.error(
                "listener_error_handler_failed",
                error=handler_error,
                listener=self.name,
                event_type=event.event_type,
                event_id=event.event_id,
            )

    def _log_retry(self, attempt: int, error: Exception) -> None:
        self._logger.warning(
            "listener_attempt_failed",
            listener=self.name,
            attempt=attempt,
            max_attempts=self._options.retry_attempts,
            retry_in_ms=self._options.retry_delay_ms * attempt,
            error_type=type(error).__name__,
            error_message=str(error),
        )

