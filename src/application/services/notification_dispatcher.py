"""Notification dispatcher.

Validates notification requests, routes them to the provider of their
channel and publishes lifecycle events describing the outcome.

Lifecycle of ``send``:
    1. Validate. An invalid request raises NotificationValidationError
       before any event is published or any provider is called.
    2. Publish NotificationQueued (queue_id = notification_id, priority 2).
    3. Call the channel provider under a timeout.
    4. Success: publish NotificationSent with the measured delivery time and
       return the notification id.
       Failure: publish NotificationFailed, then raise
       NotificationDeliveryError carrying the ProviderError.

Delivery failures are never swallowed: they reach the caller after the
Failed event was published. Listener failures, by contrast, stay inside the
listener registry and never reach this service.

Architecture:
    - Application layer service (app-scoped singleton from the container)
    - Providers injected per channel (NotificationProviderProtocol)
    - Lifecycle events published on the EventBusProtocol and awaited
"""

import asyncio
import time
from collections.abc import Awaitable, Mapping
from datetime import UTC, datetime, timedelta
from string import Template
from typing import Any, NoReturn, TypeVar

from src.core.constants import (
    DELIVERY_MAX_RETRIES,
    NOTIFICATION_ID_PREFIX,
    PROVIDER_TIMEOUT_DEFAULT,
    QUEUED_PRIORITY_DEFAULT,
    VERIFICATION_CODE_TTL_MINUTES,
)
from src.core.enums import ErrorCode
from src.core.errors import (
    NotificationDeliveryError,
    NotificationValidationError,
    ValidationError,
)
from src.core.identifiers import generate_prefixed_id
from src.core.result import Failure, Result
from src.domain.enums import NotificationChannel, NotificationType
from src.domain.errors import ProviderError, ProviderUnavailableError
from src.domain.events.notification_events import (
    NotificationFailed,
    NotificationQueued,
    NotificationSent,
    VerificationCodeSent,
    VerificationCodeVerified,
    WelcomeEmailSent,
)
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.notification_provider_protocol import (
    NotificationProviderProtocol,
    VerificationProviderProtocol,
)
from src.domain.validators import is_valid_phone, validate_notification_request
from src.domain.value_objects import NotificationRequest
from src.infrastructure.cache.notification_cache import NotificationCache

T = TypeVar("T")

WELCOME_EMAIL_TEMPLATE_ID = "welcome-email"
WELCOME_EMAIL_TITLE = "Welcome to our platform"
DEFAULT_WELCOME_EMAIL_TEMPLATE = (
    "<html><body>"
    "<h1>Welcome, ${recipient}!</h1>"
    "<p>We are very happy to have you with us.</p>"
    "<p>Your registration was successful and you can now start using our "
    "platform.</p>"
    "<p>If you have any questions, please do not hesitate to contact us.</p>"
    "<p>Best regards,<br>Support Team</p>"
    "</body></html>"
)
SYSTEM_USER_ID = "system"


class NotificationDispatcher:
    """Validate, deliver and report notifications.

    Attributes:
        _providers: Channel → delivery provider.
        _verification_provider: Phone verification provider, if configured.
        _event_bus: Bus receiving lifecycle events.
        _notification_cache: Template cache for the welcome email flow.
        _provider_timeout: Upper bound for one provider call, in seconds.
        _logger: Structured logger.

    Example:
        >>> dispatcher = NotificationDispatcher(
        ...     providers={NotificationChannel.EMAIL: sendgrid},
        ...     event_bus=event_bus,
        ...     logger=logger,
        ... )
        >>> notification_id = await dispatcher.send(
        ...     NotificationRequest(
        ...         user_id="user-123",
        ...         channel=NotificationChannel.EMAIL,
        ...         email="jane@example.com",
        ...         title="Order confirmed",
        ...     )
        ... )
    """

    def __init__(
        self,
        *,
        providers: Mapping[NotificationChannel, NotificationProviderProtocol],
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
        verification_provider: VerificationProviderProtocol | None = None,
        notification_cache: NotificationCache | None = None,
        provider_timeout_seconds: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize dispatcher with dependencies.

        Args:
            providers: One delivery provider per supported channel.
            event_bus: Bus receiving lifecycle events.
            logger: Logger protocol implementation from container.
            verification_provider: Provider for verification codes.
            notification_cache: Template cache (welcome email flow).
            provider_timeout_seconds: Timeout applied to each provider call.
        """
        self._providers = dict(providers)
        self._verification_provider = verification_provider
        self._event_bus = event_bus
        self._notification_cache = notification_cache
        self._provider_timeout = provider_timeout_seconds
        self._logger = logger

    def provider_for(
        self, channel: NotificationChannel
    ) -> NotificationProviderProtocol | None:
        """Provider configured for a channel, if any."""
        return self._providers.get(channel)

    # =========================================================================
    # Delivery
    # =========================================================================

    async def send(self, request: NotificationRequest) -> str:
        """Deliver one notification.

        Args:
            request: Notification request.

        Returns:
            Notification id shared by the Queued and Sent events.

        Raises:
            NotificationValidationError: Request is invalid (no events).
            NotificationDeliveryError: Provider failed (after Failed event).
        """
        validation = validate_notification_request(request)
        if isinstance(validation, Failure):
            self._logger.warning(
                "notification_validation_failed",
                user_id=request.user_id,
                field=validation.error.field,
                error_code=validation.error.code.value,
            )
            raise NotificationValidationError(validation.error)

        notification_id = generate_prefixed_id(NOTIFICATION_ID_PREFIX)
        fields = self._lifecycle_fields(notification_id, request)

        await self._event_bus.publish(
            NotificationQueued(
                queue_id=notification_id,
                priority=QUEUED_PRIORITY_DEFAULT,
                **fields,
            )
        )

        provider = self.provider_for(fields["channel"])
        if provider is None:
            await self._fail(
                notification_id,
                fields,
                ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_NOT_CONFIGURED,
                    message=f"No provider for channel {fields['channel'].value}",
                    provider_name="none",
                    is_transient=False,
                ),
            )

        started = time.monotonic()
        result = await self._call_provider(provider.name, provider.send(request))
        if isinstance(result, Failure):
            await self._fail(notification_id, fields, result.error)

        delivery_time_ms = (time.monotonic() - started) * 1000
        await self._event_bus.publish(
            NotificationSent(
                provider=provider.name,
                provider_message_id=result.value,
                delivery_time_ms=delivery_time_ms,
                **fields,
            )
        )
        self._logger.info(
            "notification_sent",
            notification_id=notification_id,
            user_id=request.user_id,
            channel=fields["channel"].value,
            delivery_time_ms=round(delivery_time_ms, 2),
        )
        return notification_id

    async def send_welcome_email(
        self, user_id: str, email: str, name: str | None = None
    ) -> str:
        """Render the welcome template and deliver it by email.

        The template is read from the notification cache and seeded with the
        built-in default on a miss.

        Returns:
            Notification id of the delivered email.

        Raises:
            NotificationValidationError: user_id or email invalid.
            NotificationDeliveryError: Provider failed.
        """
        message = Template(self._welcome_template()).safe_substitute(
            recipient=name or email or "User"
        )
        request = NotificationRequest(
            user_id=user_id,
            channel=NotificationChannel.EMAIL,
            notification_type=NotificationType.SUCCESS,
            title=WELCOME_EMAIL_TITLE,
            message=message,
            email=email,
            metadata={"template": WELCOME_EMAIL_TEMPLATE_ID},
        )
        notification_id = await self.send(request)

        provider = self.provider_for(NotificationChannel.EMAIL)
        await self._event_bus.publish(
            WelcomeEmailSent(
                template=WELCOME_EMAIL_TEMPLATE_ID,
                provider=provider.name if provider is not None else "none",
                **self._lifecycle_fields(notification_id, request),
            )
        )
        self._logger.info(
            "welcome_email_sent", notification_id=notification_id, user_id=user_id
        )
        return notification_id

    # =========================================================================
    # Phone verification
    # =========================================================================

    async def send_verification_code(
        self, phone_number: str, user_id: str = SYSTEM_USER_ID
    ) -> str:
        """Issue a verification code by SMS.

        Args:
            phone_number: Recipient phone number.
            user_id: Requesting user, when known.

        Returns:
            Provider verification status (e.g., "pending").

        Raises:
            NotificationValidationError: Phone number missing or malformed.
            NotificationDeliveryError: Provider failed (after Failed event).
        """
        self._require_phone(phone_number)

        notification_id = generate_prefixed_id(NOTIFICATION_ID_PREFIX)
        expires_at = datetime.now(UTC) + timedelta(minutes=VERIFICATION_CODE_TTL_MINUTES)
        fields = self._verification_fields(notification_id, user_id, phone_number)

        provider = self._verification_provider
        if provider is None:
            await self._fail(notification_id, fields, self._verification_unavailable())

        result = await self._call_provider(
            provider.name, provider.send_verification_code(phone_number)
        )
        if isinstance(result, Failure):
            await self._fail(notification_id, fields, result.error)

        await self._event_bus.publish(
            VerificationCodeSent(expires_at=expires_at, provider=provider.name, **fields)
        )
        self._logger.info(
            "verification_code_sent",
            notification_id=notification_id,
            user_id=user_id,
            status=result.value,
        )
        return result.value

    async def check_verification_code(
        self, code: str, phone_number: str, user_id: str = SYSTEM_USER_ID
    ) -> bool:
        """Check a verification code.

        Returns:
            True when approved (VerificationCodeVerified published), False
            when the code is wrong or expired.

        Raises:
            NotificationValidationError: Code or phone number missing.
            NotificationDeliveryError: Provider failed (after Failed event).
        """
        if not code or not code.strip():
            raise NotificationValidationError(
                ValidationError(
                    code=ErrorCode.VALIDATION_FAILED,
                    message="Verification code is required",
                    field="code",
                )
            )
        self._require_phone(phone_number)

        notification_id = generate_prefixed_id(NOTIFICATION_ID_PREFIX)
        fields = self._verification_fields(notification_id, user_id, phone_number)

        provider = self._verification_provider
        if provider is None:
            await self._fail(notification_id, fields, self._verification_unavailable())

        result = await self._call_provider(
            provider.name, provider.check_verification_code(code, phone_number)
        )
        if isinstance(result, Failure):
            await self._fail(notification_id, fields, result.error)

        if not result.value:
            self._logger.info(
                "verification_code_rejected",
                notification_id=notification_id,
                user_id=user_id,
                error_code=ErrorCode.VERIFICATION_CODE_REJECTED.value,
            )
            return False

        await self._event_bus.publish(
            VerificationCodeVerified(verified_at=datetime.now(UTC), **fields)
        )
        self._logger.info(
            "verification_code_verified", notification_id=notification_id, user_id=user_id
        )
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _call_provider(
        self, provider_name: str, call: Awaitable[Result[T, ProviderError]]
    ) -> Result[T, ProviderError]:
        """Await a provider call under the dispatcher timeout.

        Timeouts and unexpected provider exceptions become
        ProviderUnavailableError so every failure takes the Failed path.
        """
        try:
            async with asyncio.timeout(self._provider_timeout):
                return await call
        except TimeoutError:
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_TIMEOUT,
                    message=f"Provider call exceeded {self._provider_timeout}s",
                    provider_name=provider_name,
                    is_transient=True,
                )
            )
        except Exception as e:
            self._logger.error(
                "provider_call_raised", error=e, provider=provider_name
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_UNAVAILABLE,
                    message=str(e) or type(e).__name__,
                    provider_name=provider_name,
                    details={"error_type": type(e).__name__},
                )
            )

    async def _fail(
        self, notification_id: str, fields: dict[str, Any], error: ProviderError
    ) -> NoReturn:
        """Publish NotificationFailed, then raise NotificationDeliveryError."""
        await self._event_bus.publish(
            NotificationFailed(
                error=error.message,
                retry_count=0,
                max_retries=DELIVERY_MAX_RETRIES,
                **fields,
            )
        )
        self._logger.error(
            "notification_delivery_failed",
            notification_id=notification_id,
            user_id=fields["user_id"],
            channel=fields["channel"].value,
            provider=error.provider_name,
            error_code=error.code.value,
            error_message=error.message,
        )
        raise NotificationDeliveryError(notification_id, error)

    def _welcome_template(self) -> str:
        if self._notification_cache is None:
            return DEFAULT_WELCOME_EMAIL_TEMPLATE

        template = self._notification_cache.get_template(WELCOME_EMAIL_TEMPLATE_ID)
        if template is None:
            template = DEFAULT_WELCOME_EMAIL_TEMPLATE
            self._notification_cache.cache_template(WELCOME_EMAIL_TEMPLATE_ID, template)
        return template

    @staticmethod
    def _lifecycle_fields(
        notification_id: str, request: NotificationRequest
    ) -> dict[str, Any]:
        return {
            "notification_id": notification_id,
            "user_id": request.user_id,
            "channel": request.channel,
            "notification_type": request.notification_type,
            "title": request.title,
            "message": request.message,
            "email": request.email,
            "phone": request.phone,
            "metadata": dict(request.metadata),
        }

    @staticmethod
    def _verification_fields(
        notification_id: str, user_id: str, phone_number: str
    ) -> dict[str, Any]:
        return {
            "notification_id": notification_id,
            "user_id": user_id,
            "channel": NotificationChannel.SMS,
            "notification_type": NotificationType.ALERT,
            "phone": phone_number,
        }

    @staticmethod
    def _require_phone(phone_number: str) -> None:
        if not phone_number or not phone_number.strip():
            raise NotificationValidationError(
                ValidationError(
                    code=ErrorCode.PHONE_REQUIRED,
                    message="Phone number is required",
                    field="phone",
                )
            )
        if not is_valid_phone(phone_number):
            raise NotificationValidationError(
                ValidationError(
                    code=ErrorCode.INVALID_PHONE_NUMBER,
                    message="Invalid phone number format",
                    field="phone",
                )
            )

    @staticmethod
    def _verification_unavailable() -> ProviderError:
        return ProviderUnavailableError(
            code=ErrorCode.PROVIDER_NOT_CONFIGURED,
            message="No verification provider configured",
            provider_name="none",
            is_transient=False,
        )
