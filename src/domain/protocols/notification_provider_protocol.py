"""Delivery provider protocols (ports).

Channel-specific providers (SendGrid email, Twilio SMS, stubs) implement
NotificationProviderProtocol. The dispatcher holds one provider per channel.
Verification codes go through VerificationProviderProtocol (Twilio Verify).

Contract:
    Providers return Result types. Success carries the provider-side message
    id when the provider returns one. Failure carries a ProviderError. A
    provider MAY raise; the dispatcher converts unexpected exceptions into
    ProviderUnavailableError so the lifecycle stays consistent.

Implementations:
    - SendGridEmailProvider: src/infrastructure/notifications/sendgrid_provider.py
    - TwilioSmsProvider: src/infrastructure/notifications/twilio_provider.py
    - StubEmailProvider/StubSmsProvider: src/infrastructure/notifications/stub_providers.py
"""

from typing import Protocol

from src.core.result import Result
from src.domain.enums import NotificationChannel
from src.domain.errors import ProviderError
from src.domain.value_objects import NotificationRequest


class NotificationProviderProtocol(Protocol):
    """Channel-specific delivery provider.

    Attributes:
        name: Provider name recorded on NotificationSent events.
        channel: Channel the provider delivers on.
    """

    @property
    def name(self) -> str:
        """Provider name (e.g., "sendgrid")."""
        ...

    @property
    def channel(self) -> NotificationChannel:
        """Channel this provider delivers on."""
        ...

    async def send(
        self, request: NotificationRequest
    ) -> Result[str | None, ProviderError]:
        """Deliver one notification.

        Args:
            request: Validated notification request.

        Returns:
            Success(message_id | None): Provider accepted the notification.
            Failure(ProviderError): Delivery failed.
        """
        ...


class VerificationProviderProtocol(Protocol):
    """Phone verification code provider."""

    @property
    def name(self) -> str:
        """Provider name (e.g., "twilio")."""
        ...

    async def send_verification_code(
        self, phone_number: str
    ) -> Result[str, ProviderError]:
        """Issue a verification code to a phone number.

        Returns:
            Success(status): Provider status (e.g., "pending").
            Failure(ProviderError): Code could not be issued.
        """
        ...

    async def check_verification_code(
        self, code: str, phone_number: str
    ) -> Result[bool, ProviderError]:
        """Check a code previously sent to a phone number.

        Returns:
            Success(True): Code approved.
            Success(False): Code rejected (wrong or expired).
            Failure(ProviderError): Provider call failed.
        """
        ...
