"""Bridge from the durable notification stream to the dispatcher.

Producers in other processes append ``notification.requested`` messages to
the notification stream. Each message's ``data`` is a JSON object:

    {
        "user_id": "user-123",
        "channel": "email",
        "type": "info",
        "title": "Order Confirmed",
        "message": "Your order #456 has been confirmed!",
        "email": "jane@example.com",
        "phone": null,
        "metadata": {"template": "order-confirmation"}
    }

``type`` defaults to "info". The handler raises on a malformed payload or a
failed delivery, so the broker dead-letters the message instead of
acknowledging it.
"""

from typing import Any

from src.application.services.notification_dispatcher import NotificationDispatcher
from src.domain.enums import NotificationChannel, NotificationType
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects import NotificationRequest, StreamMessage

NOTIFICATION_REQUESTED = "notification.requested"


class NotificationStreamConsumer:
    """Stream handler dispatching ``notification.requested`` messages.

    Attributes:
        _dispatcher: Delivers the decoded requests.
        _logger: Structured logger.
    """

    def __init__(
        self, dispatcher: NotificationDispatcher, logger: LoggerProtocol
    ) -> None:
        self._dispatcher = dispatcher
        self._logger = logger

    async def handle(self, message: StreamMessage) -> None:
        """Decode one stream message and send it.

        Messages of any other event type are logged and acknowledged.

        Raises:
            ValueError: Payload is not a notification request object.
            NotificationValidationError: Request failed validation.
            NotificationDeliveryError: Provider failed.
        """
        if message.event_type != NOTIFICATION_REQUESTED:
            self._logger.debug(
                "stream_message_ignored",
                message_id=message.id,
                event_type=message.event_type,
            )
            return

        request = self.to_request(message.data)
        notification_id = await self._dispatcher.send(request)
        self._logger.info(
            "stream_notification_dispatched",
            message_id=message.id,
            notification_id=notification_id,
            channel=request.channel.value if request.channel else None,
        )

    @staticmethod
    def to_request(data: Any) -> NotificationRequest:
        """Build a NotificationRequest from a decoded stream payload.

        Raises:
            ValueError: Payload is not an object, or carries an unknown
                channel or type.
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"notification payload must be an object, got {type(data).__name__}"
            )

        channel = data.get("channel")
        metadata = data.get("metadata")
        return NotificationRequest(
            user_id=str(data.get("user_id") or ""),
            channel=NotificationChannel(channel) if channel else None,
            notification_type=NotificationType(data.get("type") or "info"),
            title=data.get("title"),
            message=data.get("message"),
            email=data.get("email"),
            phone=data.get("phone"),
            metadata=metadata if isinstance(metadata, dict) else {},
        )
