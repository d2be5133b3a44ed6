"""Lifecycle event listeners (logging, metrics)."""

from src.infrastructure.events.listeners.notification_logging_listener import (
    LOGGING_LISTENER_NAME,
    NotificationLoggingListener,
    create_logging_listener,
)
from src.infrastructure.events.listeners.notification_metrics_listener import (
    METRICS_LISTENER_NAME,
    NotificationMetrics,
    NotificationMetricsListener,
    create_metrics_listener,
)

__all__ = [
    "LOGGING_LISTENER_NAME",
    "METRICS_LISTENER_NAME",
    "NotificationLoggingListener",
    "NotificationMetrics",
    "NotificationMetricsListener",
    "create_logging_listener",
    "create_metrics_listener",
]
