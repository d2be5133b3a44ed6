"""Stream consumers (handlers registered on the durable stream broker)."""

from src.application.consumers.notification_stream_consumer import (
    NOTIFICATION_REQUESTED,
    NotificationStreamConsumer,
)

__all__ = [
    "NOTIFICATION_REQUESTED",
    "NotificationStreamConsumer",
]
