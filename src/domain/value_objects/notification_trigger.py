"""Notification trigger rule.

A trigger maps a business event type onto a notification template and
channel. Triggers are static configuration (see
src/domain/events/trigger_registry.py) and are never mutated at runtime.

Condition keys:
    - has_email: event (or its metadata) carries an email address
    - has_phone: event (or its metadata) carries a phone number
    - user_verified: user is verified (metadata ``user_verified`` not False)
    - success: equality check against a login attempt's ``success`` flag

Unknown keys are ignored. A trigger with no conditions always matches.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.domain.enums import NotificationChannel, NotificationType


@dataclass(frozen=True, kw_only=True, slots=True)
class NotificationTrigger:
    """Rule turning a business event into a notification request.

    Attributes:
        event_type: Business event tag the trigger listens to.
        notification_type: Category of the produced notification.
        channel: Delivery channel of the produced notification.
        template: Template id recorded in request metadata.
        conditions: Named predicates, AND-ed together.
        delay_ms: Optional wait before dispatch (non-blocking).
        priority: Informational ordering hint from the trigger table.
    """

    event_type: str
    notification_type: NotificationType
    channel: NotificationChannel
    template: str
    conditions: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    delay_ms: int = 0
    priority: int = 0

    def __post_init__(self) -> None:
        # Freeze the mapping so the static table cannot be mutated through it.
        if not isinstance(self.conditions, MappingProxyType):
            object.__setattr__(
                self, "conditions", MappingProxyType(dict(self.conditions))
            )
