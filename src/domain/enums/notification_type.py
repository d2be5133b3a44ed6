"""Notification categories (tone of the message)."""

from enum import Enum


class NotificationType(str, Enum):
    """Category of a notification, used by templates and clients."""

    ALERT = "alert"
    ERROR = "error"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
