"""Domain value objects (immutable, no identity)."""

from src.domain.value_objects.notification_request import NotificationRequest
from src.domain.value_objects.notification_trigger import NotificationTrigger
from src.domain.value_objects.stream_message import (
    ConsumerGroupDescriptor,
    StreamMessage,
)

__all__ = [
    "ConsumerGroupDescriptor",
    "NotificationRequest",
    "NotificationTrigger",
    "StreamMessage",
]
