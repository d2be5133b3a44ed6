"""Lifecycle logging listener.

Writes one structured log line per notification lifecycle event:
    - notification.sent, welcome.email.sent, verification.code.*: info
    - notification.failed: error
    - notification.queued: debug

Registered with priority 1 so log lines precede metric updates.
"""

import asyncio

from src.domain.events.base_event import DomainEvent
from src.domain.events.notification_events import (
    SUPPORTED_LIFECYCLE_EVENTS,
    NotificationFailed,
    NotificationQueued,
    NotificationSent,
    VerificationCodeSent,
    VerificationCodeVerified,
    WelcomeEmailSent,
)
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.infrastructure.events.retryable_listener import (
    ListenerOptions,
    RetryableListener,
    SleepFunc,
)

LOGGING_LISTENER_NAME = "notification-logger"


class NotificationLoggingListener:
    """Process function writing lifecycle events to the structured log."""

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    async def process_event(self, event: DomainEvent) -> None:
        """Log one lifecycle event at its level.

        Non-lifecycle events are ignored.
        """
        match event:
            case NotificationQueued():
                self._logger.debug(
                    "notification_queued",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    channel=event.channel.value,
                    priority=event.priority,
                )
            case NotificationSent():
                self._logger.info(
                    "notification_sent",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    channel=event.channel.value,
                    provider=event.provider,
                    provider_message_id=event.provider_message_id,
                    delivery_time_ms=round(event.delivery_time_ms, 2),
                )
            case NotificationFailed():
                self._logger.error(
                    "notification_failed",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    channel=event.channel.value,
                    error_message=event.error,
                    retry_count=event.retry_count,
                    max_retries=event.max_retries,
                )
            case WelcomeEmailSent():
                self._logger.info(
                    "welcome_email_sent",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    template=event.template,
                    provider=event.provider,
                )
            case VerificationCodeSent():
                self._logger.info(
                    "verification_code_sent",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    expires_at=event.expires_at.isoformat(),
                    provider=event.provider,
                )
            case VerificationCodeVerified():
                self._logger.info(
                    "verification_code_verified",
                    notification_id=event.notification_id,
                    user_id=event.user_id,
                    verified_at=event.verified_at.isoformat(),
                )
            case _:
                return


def create_logging_listener(
    logger: LoggerProtocol,
    *,
    retry_attempts: int,
    retry_delay_ms: int,
    sleep: SleepFunc = asyncio.sleep,
) -> RetryableListener:
    """Build the registry-ready logging listener (priority 1)."""
    body = NotificationLoggingListener(logger)
    options = ListenerOptions(
        name=LOGGING_LISTENER_NAME,
        event_types=frozenset(SUPPORTED_LIFECYCLE_EVENTS),
        priority=1,
        retry_attempts=retry_attempts,
        retry_delay_ms=retry_delay_ms,
    )
    return RetryableListener(
        options=options, process_event=body.process_event, logger=logger, sleep=sleep
    )
