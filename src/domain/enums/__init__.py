"""Domain enums for business logic.

Available Enums:
    - NotificationChannel: Delivery channel (email, sms, push, in_app)
    - NotificationType: Notification category (alert, error, info, success, warning)
"""

from src.domain.enums.notification_channel import NotificationChannel
from src.domain.enums.notification_type import NotificationType

__all__ = [
    "NotificationChannel",
    "NotificationType",
]
