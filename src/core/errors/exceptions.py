"""Raised exceptions for failures the caller must observe.

Error values (DomainError subclasses) travel through Result types. A few
failures, however, must interrupt the caller: an invalid notification request,
a failed delivery, a broken stream append, or missing provider credentials at
startup. These exceptions carry the underlying error value where one exists.

Hierarchy:
    NotificationError
    ├── NotificationValidationError   (bad request shape, before any event)
    ├── NotificationDeliveryError     (provider failed, after Failed event)
    ├── ListenerProcessingError       (listener exhausted retries, never raised
    │                                  past the listener boundary)
    ├── StreamError                   (stream append / group creation failed)
    └── ConfigurationError            (missing provider credentials, fatal)

Usage:
    from src.core.errors import NotificationDeliveryError

    try:
        await dispatcher.send(request)
    except NotificationDeliveryError as e:
        logger.warning("delivery_failed", provider=e.error.provider_name)
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.core.errors.common_errors import ValidationError
    from src.domain.errors.provider_error import ProviderError


class NotificationError(Exception):
    """Base exception for the notification service."""


class NotificationValidationError(NotificationError):
    """Notification request failed validation.

    Raised synchronously before any provider call or lifecycle event.

    Attributes:
        error: ValidationError describing the first violated rule.
    """

    def __init__(self, error: "ValidationError") -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def field(self) -> str | None:
        """Name of the offending request field."""
        return self.error.field


class NotificationDeliveryError(NotificationError):
    """Provider failed to deliver a notification.

    Raised after the Failed lifecycle event was published.

    Attributes:
        notification_id: Id correlating the Queued and Failed events.
        error: ProviderError returned (or synthesized) for the attempt.
    """

    def __init__(self, notification_id: str, error: "ProviderError") -> None:
        super().__init__(error.message)
        self.notification_id = notification_id
        self.error = error


class ListenerProcessingError(NotificationError):
    """Listener failed on every retry attempt.

    Handed to the listener's error handler; never propagated to the
    dispatching registry or the event producer.
    """

    def __init__(
        self,
        listener_name: str,
        event_type: str,
        attempts: int,
        cause: BaseException,
    ) -> None:
        super().__init__(
            f"Listener '{listener_name}' failed to process '{event_type}' "
            f"after {attempts} attempt(s): {cause}"
        )
        self.listener_name = listener_name
        self.event_type = event_type
        self.attempts = attempts
        self.__cause__ = cause


class StreamError(NotificationError):
    """Stream broker operation failed.

    Attributes:
        stream: Stream key the operation targeted.
        operation: Broker operation name (publish, create_consumer_group, ...).
    """

    def __init__(self, message: str, *, stream: str, operation: str) -> None:
        super().__init__(message)
        self.stream = stream
        self.operation = operation


class ConfigurationError(NotificationError):
    """Required configuration is missing or invalid.

    Raised while building providers at startup. Not recoverable at runtime.
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context
