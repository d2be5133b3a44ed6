"""Provider error types for domain protocol contracts.

These errors are part of the NotificationProviderProtocol contract. They
define the failure cases that delivery provider implementations return.

Architecture:
- Domain layer errors (part of protocol contract)
- Inherit from DomainError (core layer)
- Used in Result types (railway-oriented programming)
- The dispatcher turns a Failure into a NotificationFailed event and a
  raised NotificationDeliveryError

Usage:
    from src.domain.errors import ProviderError, ProviderUnavailableError
    from src.core.result import Result, Success, Failure

    async def send(
        self, request: NotificationRequest
    ) -> Result[str | None, ProviderError]:
        if not reachable:
            return Failure(error=ProviderUnavailableError(...))
        return Success(value=message_id)
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderError(DomainError):
    """Base delivery provider error.

    Used for provider-specific errors from SendGrid, Twilio, etc.
    Subclassed for specific error types.

    Attributes:
        code: Domain ErrorCode.
        message: Human-readable message.
        provider_name: Name of the provider (sendgrid, twilio, ...).
        details: Additional context (API error code, response).
    """

    provider_name: str
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderAuthenticationError(ProviderError):
    """Provider rejected our credentials (401/403).

    Recovery: Fix the configured API key or account credentials.
    """


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderUnavailableError(ProviderError):
    """Provider API is unavailable.

    Raised when:
    - Provider API returns 5xx errors
    - Connection or read timeout occurs
    - The provider call exceeded the dispatcher timeout
    - No provider is configured for the requested channel

    Attributes:
        is_transient: Whether the error is likely transient (True = retry).
    """

    is_transient: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderRateLimitError(ProviderError):
    """Provider rate limit exceeded (429).

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header).
    """

    retry_after: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ProviderInvalidResponseError(ProviderError):
    """Provider rejected the request or returned an unexpected response.

    Attributes:
        status_code: HTTP status code, when one was received.
        response_body: Truncated raw response body for debugging.
    """

    status_code: int | None = None
    response_body: str | None = None
