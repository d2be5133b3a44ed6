"""Notification delivery channels.

Each channel maps to at most one delivery provider in the dispatcher.

Usage:
    from src.domain.enums import NotificationChannel

    if request.channel == NotificationChannel.EMAIL:
        # email is required
"""

from enum import Enum


class NotificationChannel(str, Enum):
    """Channel a notification is delivered through.

    String Enum:
        Inherits from str for easy serialization into stream payloads.
    """

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    IN_APP = "in_app"
