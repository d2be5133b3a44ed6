"""Notification delivery metrics.

Lightweight in-memory counters fed by lifecycle events: sent/failed/queued
counts per channel, average delivery time and success rate. Counters can be
exported to an observability platform; this module only keeps them.

Usage:
    metrics = NotificationMetrics()
    listener = create_metrics_listener(metrics, logger, ...)
    registry.register(listener)

    stats = metrics.get_stats("email")
    print(f"Email success rate: {stats['success_rate']:.2%}")
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Any

from src.domain.events.base_event import DomainEvent
from src.domain.events.notification_events import (
    SUPPORTED_LIFECYCLE_EVENTS,
    NotificationFailed,
    NotificationQueued,
    NotificationSent,
    VerificationCodeSent,
    VerificationCodeVerified,
    WelcomeEmailSent,
)
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.events.retryable_listener import (
    ListenerOptions,
    RetryableListener,
    SleepFunc,
)

METRICS_LISTENER_NAME = "notification-metrics"


@dataclass
class ChannelStats:
    """Delivery statistics for one channel.

    Attributes:
        queued: Requests that passed validation.
        sent: Requests the provider accepted.
        failed: Requests the provider failed.
        total_delivery_time_ms: Sum of delivery times of sent requests.
    """

    queued: int = 0
    sent: int = 0
    failed: int = 0
    total_delivery_time_ms: float = 0.0

    @property
    def average_delivery_time_ms(self) -> float:
        """Mean delivery time of sent requests (0.0 when none)."""
        if self.sent == 0:
            return 0.0
        return self.total_delivery_time_ms / self.sent

    @property
    def success_rate(self) -> float:
        """sent / (sent + failed), 0.0 when nothing completed."""
        completed = self.sent + self.failed
        if completed == 0:
            return 0.0
        return self.sent / completed

    def to_dict(self) -> dict[str, Any]:
        """Convert stats to dictionary for JSON serialization."""
        return {
            "queued": self.queued,
            "sent": self.sent,
            "failed": self.failed,
            "average_delivery_time_ms": round(self.average_delivery_time_ms, 2),
            "success_rate": round(self.success_rate, 4),
        }


class NotificationMetrics:
    """In-memory notification metrics tracker.

    Thread-safe counters keyed by channel, plus counters for the welcome
    email and verification flows.
    """

    def __init__(self) -> None:
        """Initialize metrics tracker with empty counters."""
        self._stats: dict[str, ChannelStats] = defaultdict(ChannelStats)
        self._flows: dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def record_queued(self, channel: str) -> None:
        with self._lock:
            self._stats[channel].queued += 1

    def record_sent(self, channel: str, delivery_time_ms: float) -> None:
        with self._lock:
            stats = self._stats[channel]
            stats.sent += 1
            stats.total_delivery_time_ms += delivery_time_ms

    def record_failed(self, channel: str) -> None:
        with self._lock:
            self._stats[channel].failed += 1

    def record_flow(self, flow: str) -> None:
        """Count a completed flow (welcome email, verification code, ...)."""
        with self._lock:
            self._flows[flow] += 1

    def get_stats(self, channel: str) -> dict[str, Any]:
        """Get statistics for one channel.

        Args:
            channel: Channel value (e.g., "email").

        Returns:
            Dictionary with queued, sent, failed, average delivery time and
            success rate.
        """
        with self._lock:
            return self._stats.get(channel, ChannelStats()).to_dict()

    def get_all_stats(self) -> dict[str, Any]:
        """Get statistics for all channels plus flow counters."""
        with self._lock:
            return {
                "channels": {
                    channel: stats.to_dict() for channel, stats in self._stats.items()
                },
                "flows": dict(self._flows),
            }

    def reset(self) -> None:
        """Reset every counter."""
        with self._lock:
            self._stats.clear()
            self._flows.clear()


class NotificationMetricsListener:
    """Process function updating NotificationMetrics from lifecycle events."""

    def __init__(self, metrics: NotificationMetrics, logger: LoggerProtocol) -> None:
        self._metrics = metrics
        self._logger = logger

    async def process_event(self, event: DomainEvent) -> None:
        match event:
            case NotificationQueued():
                self._metrics.record_queued(event.channel.value)
            case NotificationSent():
                self._metrics.record_sent(event.channel.value, event.delivery_time_ms)
            case NotificationFailed():
                self._metrics.record_failed(event.channel.value)
            case WelcomeEmailSent() | VerificationCodeSent() | VerificationCodeVerified():
                self._metrics.record_flow(event.event_type)
            case _:
                return

        self._logger.debug("metrics_updated", event_type=event.event_type)


def create_metrics_listener(
    metrics: NotificationMetrics,
    logger: LoggerProtocol,
    *,
    retry_attempts: int,
    retry_delay_ms: int,
    sleep: SleepFunc = asyncio.sleep,
) -> RetryableListener:
    """Build the registry-ready metrics listener (priority 2)."""
    body = NotificationMetricsListener(metrics, logger)
    options = ListenerOptions(
        name=METRICS_LISTENER_NAME,
        event_types=frozenset(SUPPORTED_LIFECYCLE_EVENTS),
        priority=2,
        retry_attempts=retry_attempts,
        retry_delay_ms=retry_delay_ms,
    )
    return RetryableListener(
        options=options, process_event=body.process_event, logger=logger, sleep=sleep
    )
