"""Business event trigger engine.

Turns business events into notifications. For each event the processor walks
the event type's triggers (src/domain/events/trigger_registry.py) in table
order. A trigger whose conditions hold becomes a NotificationRequest, waits
its configured delay, and is handed to the NotificationDispatcher.

Conditions (all present keys must hold):
    - has_email: the event carries an email (own field or metadata["email"])
    - has_phone: the event carries a phone (own field or metadata["phone"])
    - user_verified: metadata["user_verified"] is not False
    - success: equals LoginAttempted.success (login attempts only)
    Unknown keys are ignored; a trigger without conditions always fires.

Failure isolation:
    Every trigger runs in its own try/except. A failed trigger (invalid
    request, provider failure, ...) is logged and the next trigger runs.
    ``process_event`` never raises.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, assert_never

from src.application.services.notification_dispatcher import NotificationDispatcher
from src.domain.enums import NotificationChannel
from src.domain.events.business_events import (
    BUSINESS_EVENT_TYPES,
    AccountLocked,
    AccountUnlocked,
    BusinessEventUnion,
    LoginAttempted,
    OrderDelivered,
    OrderPlaced,
    OrderShipped,
    PasswordResetCompleted,
    PasswordResetRequested,
    PaymentProcessed,
    SubscriptionCancelled,
    SubscriptionCreated,
    SubscriptionRenewed,
    UserRegistered,
    UserVerified,
)
from src.domain.events.trigger_registry import get_triggers
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects import NotificationRequest, NotificationTrigger

SleepFunc = Callable[[float], Awaitable[Any]]


class BusinessEventProcessor:
    """Evaluate triggers for business events and dispatch notifications.

    App-scoped singleton, subscribed to every business event type at startup.

    Attributes:
        _dispatcher: Delivers the generated requests.
        _logger: Structured logger.
        _sleep: Awaitable sleep used for trigger delays.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        logger: LoggerProtocol,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._dispatcher = dispatcher
        self._logger = logger
        self._sleep = sleep

    def bind(self, event_bus: EventBusProtocol) -> None:
        """Subscribe ``process_event`` to every business event type."""
        for event_class in BUSINESS_EVENT_TYPES:
            event_bus.subscribe(event_class.event_type, self.process_event)

    async def process_event(self, event: BusinessEventUnion) -> None:
        """Run every trigger of the event's type, in table order.

        Args:
            event: Business event.
        """
        triggers = get_triggers(event.event_type)
        if not triggers:
            self._logger.debug(
                "no_triggers_for_event",
                event_type=event.event_type,
                event_id=event.event_id,
            )
            return

        self._logger.info(
            "business_event_processing",
            event_type=event.event_type,
            event_id=event.event_id,
            user_id=event.user_id,
            trigger_count=len(triggers),
        )

        for trigger in triggers:
            try:
                await self._process_trigger(event, trigger)
            except Exception as e:
                self._logger.error(
                    "trigger_processing_failed",
                    error=e,
                    event_type=event.event_type,
                    event_id=event.event_id,
                    template=trigger.template,
                )

    async def _process_trigger(
        self, event: BusinessEventUnion, trigger: NotificationTrigger
    ) -> None:
        if not self.conditions_met(event, trigger.conditions):
            self._logger.debug(
                "trigger_conditions_not_met",
                event_type=event.event_type,
                template=trigger.template,
            )
            return

        request = self.build_request(event, trigger)

        if trigger.delay_ms > 0:
            await self._sleep(trigger.delay_ms / 1000)

        notification_id = await self._dispatcher.send(request)
        self._logger.info(
            "trigger_notification_sent",
            event_type=event.event_type,
            template=trigger.template,
            notification_id=notification_id,
        )

    # =========================================================================
    # Trigger evaluation
    # =========================================================================

    @staticmethod
    def conditions_met(
        event: BusinessEventUnion, conditions: Mapping[str, Any]
    ) -> bool:
        """Whether every known condition holds for the event."""
        if conditions.get("has_email") and not contact_email(event):
            return False
        if conditions.get("has_phone") and not contact_phone(event):
            return False
        if conditions.get("user_verified"):
            if event.metadata.get("user_verified") is False:
                return False
        if "success" in conditions and isinstance(event, LoginAttempted):
            if event.success != conditions["success"]:
                return False
        return True

    @staticmethod
    def build_request(
        event: BusinessEventUnion, trigger: NotificationTrigger
    ) -> NotificationRequest:
        """Build the notification request for a matching trigger."""
        is_email = trigger.channel == NotificationChannel.EMAIL
        is_sms = trigger.channel == NotificationChannel.SMS
        return NotificationRequest(
            user_id=event.user_id,
            channel=trigger.channel,
            notification_type=trigger.notification_type,
            title=generate_title(event),
            message=generate_message(event),
            email=contact_email(event) if is_email else None,
            phone=contact_phone(event) if is_sms else None,
            metadata={
                "business_event": event.event_type,
                "source_event_id": event.event_id,
                "template": trigger.template,
                "priority": trigger.priority,
            },
        )


# =============================================================================
# Contact resolution and wording
# =============================================================================


def contact_email(event: BusinessEventUnion) -> str | None:
    """Email carried by the event itself, else metadata["email"]."""
    match event:
        case (
            UserRegistered()
            | PasswordResetRequested()
            | PasswordResetCompleted()
            | LoginAttempted()
        ):
            own: str | None = event.email
        case _:
            own = None
    return own or event.metadata.get("email") or None


def contact_phone(event: BusinessEventUnion) -> str | None:
    """Phone carried by the event itself, else metadata["phone"]."""
    own = event.phone if isinstance(event, UserRegistered) else None
    return own or event.metadata.get("phone") or None


def generate_title(event: BusinessEventUnion) -> str:
    match event:
        case UserRegistered():
            return "Welcome!"
        case UserVerified():
            return "Account Verified"
        case OrderPlaced():
            return "Order Confirmed"
        case OrderShipped():
            return "Order Shipped"
        case OrderDelivered():
            return "Order Delivered"
        case PaymentProcessed():
            return "Payment Processed"
        case PasswordResetRequested():
            return "Password Reset"
        case PasswordResetCompleted():
            return "Password Changed"
        case AccountLocked():
            return "Account Locked"
        case AccountUnlocked():
            return "Account Unlocked"
        case LoginAttempted():
            return "Login Attempt"
        case SubscriptionCreated():
            return "Subscription Activated"
        case SubscriptionCancelled():
            return "Subscription Cancelled"
        case SubscriptionRenewed():
            return "Subscription Renewed"
        case _:
            assert_never(event)


def generate_message(event: BusinessEventUnion) -> str:
    match event:
        case UserRegistered():
            return (
                f"Hello {event.name}! Welcome to our platform. "
                "Your account has been created successfully."
            )
        case UserVerified():
            return (
                "Your account has been verified successfully! "
                "You now have full access to every feature."
            )
        case OrderPlaced():
            return (
                f"Your order #{event.order_id} has been confirmed! "
                f"Value: {event.currency} {event.amount:.2f}"
            )
        case OrderShipped():
            return (
                f"Your order #{event.order_id} has been shipped! "
                f"Tracking number: {event.tracking_number}"
            )
        case OrderDelivered():
            return f"Your order #{event.order_id} has been delivered successfully!"
        case PaymentProcessed():
            return (
                f"Payment processed successfully! "
                f"Value: {event.currency} {event.amount:.2f}"
            )
        case PasswordResetRequested():
            return "You requested a password reset. Check your email to continue."
        case PasswordResetCompleted():
            return "Your password has been changed."
        case AccountLocked():
            return (
                "Your account has been locked for security reasons. "
                f"Reason: {event.reason}"
            )
        case AccountUnlocked():
            return "Your account has been unlocked."
        case LoginAttempted():
            if not event.success:
                return (
                    f"Login attempt failed. IP: {event.ip_address}. "
                    "If it was not you, change your password."
                )
            return "Login successful."
        case SubscriptionCreated():
            return (
                f"Subscription {event.plan_name} activated successfully! "
                f"Value: {event.currency} {event.amount:.2f}/{event.interval}"
            )
        case SubscriptionCancelled():
            return (
                "Your subscription has been cancelled. "
                f"Effective date: {event.effective_date.date().isoformat()}"
            )
        case SubscriptionRenewed():
            return (
                "Your subscription has been renewed. "
                f"Next billing date: {event.next_billing_date.date().isoformat()}"
            )
        case _:
            assert_never(event)
