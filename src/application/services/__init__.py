"""Application services.

- NotificationDispatcher: validates and delivers notifications, publishing
  lifecycle events
- BusinessEventProcessor: turns business events into notifications
- BusinessEventEmitter: typed producer API for business events
"""

from src.application.services.business_event_emitter import BusinessEventEmitter
from src.application.services.business_event_processor import BusinessEventProcessor
from src.application.services.notification_dispatcher import NotificationDispatcher

__all__ = [
    "BusinessEventEmitter",
    "BusinessEventProcessor",
    "NotificationDispatcher",
]
