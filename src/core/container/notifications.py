"""Notification dependency factories.

Application-scoped singletons for notification delivery:
- Email provider (stub or SendGrid) and SMS provider (stub or Twilio),
  selected by EMAIL_BACKEND / SMS_BACKEND
- NotificationDispatcher over those providers
- BusinessEventProcessor bound to the event bus
- BusinessEventEmitter for producers
- NotificationStreamConsumer for the durable notification stream

Missing credentials for a selected real backend raise ConfigurationError
while the provider is built, which aborts startup.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.errors import ConfigurationError

if TYPE_CHECKING:
    from src.application.consumers import NotificationStreamConsumer
    from src.application.services import (
        BusinessEventEmitter,
        BusinessEventProcessor,
        NotificationDispatcher,
    )
    from src.domain.protocols.notification_provider_protocol import (
        NotificationProviderProtocol,
    )
    from src.infrastructure.notifications import StubSmsProvider, TwilioSmsProvider


def _require(value: str | None, setting: str, backend: str) -> str:
    if not value:
        raise ConfigurationError(
            f"{setting.upper()} is required when using the {backend} backend",
            setting=setting,
            backend=backend,
        )
    return value


@lru_cache()
def get_email_provider() -> "NotificationProviderProtocol":
    """Get email provider singleton (app-scoped).

    Returns correct adapter based on EMAIL_BACKEND:
        - 'stub': StubEmailProvider (logs only)
        - 'sendgrid': SendGridEmailProvider

    Raises:
        ConfigurationError: SendGrid selected without API key or sender.
    """
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger

    settings = get_settings()

    if settings.email_backend == "sendgrid":
        from src.infrastructure.notifications import SendGridEmailProvider

        return SendGridEmailProvider(
            api_key=_require(settings.sendgrid_api_key, "sendgrid_api_key", "sendgrid"),
            from_email=_require(
                settings.sendgrid_from_email, "sendgrid_from_email", "sendgrid"
            ),
            base_url=settings.sendgrid_api_base_url,
            timeout=settings.provider_timeout_seconds,
        )

    from src.infrastructure.notifications import StubEmailProvider

    return StubEmailProvider(logger=get_logger())


@lru_cache()
def get_sms_provider() -> "StubSmsProvider | TwilioSmsProvider":
    """Get SMS provider singleton (app-scoped).

    The SMS provider also serves phone verification codes.

    Returns correct adapter based on SMS_BACKEND:
        - 'stub': StubSmsProvider (logs only, codes kept in memory)
        - 'twilio': TwilioSmsProvider

    Raises:
        ConfigurationError: Twilio selected without SID, token or number.
    """
    from src.core.config import get_settings
    from src.core.container.infrastructure import get_logger

    settings = get_settings()

    if settings.sms_backend == "twilio":
        from src.infrastructure.notifications import TwilioSmsProvider

        return TwilioSmsProvider(
            account_sid=_require(
                settings.twilio_account_sid, "twilio_account_sid", "twilio"
            ),
            auth_token=_require(settings.twilio_auth_token, "twilio_auth_token", "twilio"),
            from_number=_require(
                settings.twilio_phone_number, "twilio_phone_number", "twilio"
            ),
            verify_service_sid=settings.twilio_verify_service_sid,
            base_url=settings.twilio_api_base_url,
            verify_base_url=settings.twilio_verify_base_url,
            timeout=settings.provider_timeout_seconds,
        )

    from src.infrastructure.notifications import StubSmsProvider

    return StubSmsProvider(logger=get_logger())


@lru_cache()
def get_notification_dispatcher() -> "NotificationDispatcher":
    """Get notification dispatcher singleton (app-scoped).

    The listener registry is built first so lifecycle events published by
    the dispatcher reach the logging and metrics listeners.

    Returns:
        NotificationDispatcher with email and SMS providers.
    """
    from src.application.services import NotificationDispatcher
    from src.core.config import get_settings
    from src.core.container.events import get_event_bus, get_listener_registry
    from src.core.container.infrastructure import get_logger, get_notification_cache
    from src.domain.enums import NotificationChannel

    get_listener_registry()
    sms_provider = get_sms_provider()

    return NotificationDispatcher(
        providers={
            NotificationChannel.EMAIL: get_email_provider(),
            NotificationChannel.SMS: sms_provider,
        },
        event_bus=get_event_bus(),
        logger=get_logger(),
        verification_provider=sms_provider,
        notification_cache=get_notification_cache(),
        provider_timeout_seconds=get_settings().provider_timeout_seconds,
    )


@lru_cache()
def get_business_event_processor() -> "BusinessEventProcessor":
    """Get business event processor singleton (app-scoped).

    Subscribed to every business event type on the application event bus.
    """
    from src.application.services import BusinessEventProcessor
    from src.core.container.events import get_event_bus
    from src.core.container.infrastructure import get_logger

    processor = BusinessEventProcessor(
        dispatcher=get_notification_dispatcher(), logger=get_logger()
    )
    processor.bind(get_event_bus())
    return processor


@lru_cache()
def get_business_event_emitter() -> "BusinessEventEmitter":
    """Get business event emitter singleton (app-scoped).

    Building the emitter also builds the processor, so emitted events are
    never published on a bus without trigger evaluation.

    Usage:
        emitter = get_business_event_emitter()
        await emitter.emit_user_registered(user_id=..., email=..., name=...)
    """
    from src.application.services import BusinessEventEmitter
    from src.core.container.events import get_event_bus
    from src.core.container.infrastructure import get_logger

    get_business_event_processor()
    return BusinessEventEmitter(event_bus=get_event_bus(), logger=get_logger())


@lru_cache()
def get_notification_stream_consumer() -> "NotificationStreamConsumer":
    """Get notification stream consumer singleton (app-scoped)."""
    from src.application.consumers import NotificationStreamConsumer
    from src.core.container.infrastructure import get_logger

    return NotificationStreamConsumer(
        dispatcher=get_notification_dispatcher(), logger=get_logger()
    )
