"""Integration tests for SendGridEmailProvider.

Tests cover:
- Mail Send request construction (auth header, payload)
- Message id extraction from X-Message-Id
- Error translation to ProviderError types (shared base mapping)
- Timeout and connection error handling

Architecture:
- Uses pytest-httpx for HTTP mocking
"""

import httpx
import pytest
from pytest_httpx import HTTPXMock

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import NotificationChannel, NotificationType
from src.domain.errors import (
    ProviderAuthenticationError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)
from src.domain.value_objects import NotificationRequest
from src.infrastructure.notifications.sendgrid_provider import SendGridEmailProvider

SEND_URL = "https://api.sendgrid.test/v3/mail/send"


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def provider() -> SendGridEmailProvider:
    return SendGridEmailProvider(
        api_key="SG.test-key",
        from_email="noreply@example.com",
        base_url="https://api.sendgrid.test/",
        timeout=5.0,
    )


def _request(**overrides) -> NotificationRequest:
    fields = {
        "user_id": "user-1",
        "channel": NotificationChannel.EMAIL,
        "notification_type": NotificationType.SUCCESS,
        "title": "Order Confirmed",
        "message": "Your order #456 has been confirmed!",
        "email": "jane@example.com",
    }
    fields.update(overrides)
    return NotificationRequest(**fields)


# =============================================================================
# Test: send - Success
# =============================================================================


@pytest.mark.integration
class TestSendGridSendSuccess:
    """Test successful Mail Send calls."""

    @pytest.mark.asyncio
    async def test_returns_message_id_header(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST",
            url=SEND_URL,
            status_code=202,
            headers={"X-Message-Id": "msg-123"},
        )

        result = await provider.send(_request())

        assert isinstance(result, Success)
        assert result.value == "msg-123"

    @pytest.mark.asyncio
    async def test_sends_bearer_token_and_payload(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=SEND_URL, status_code=202)

        await provider.send(_request())

        request = httpx_mock.get_request()
        assert request is not None
        assert request.headers["Authorization"] == "Bearer SG.test-key"
        body = request.read()
        assert b'"jane@example.com"' in body
        assert b'"noreply@example.com"' in body
        assert b'"Order Confirmed"' in body
        assert b'"text/html"' in body

    @pytest.mark.asyncio
    async def test_missing_message_id_is_success_none(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=SEND_URL, status_code=202)

        result = await provider.send(_request())

        assert isinstance(result, Success)
        assert result.value is None

    def test_identity(self, provider: SendGridEmailProvider):
        assert provider.name == "sendgrid"
        assert provider.channel == NotificationChannel.EMAIL


# =============================================================================
# Test: send - Errors
# =============================================================================


@pytest.mark.integration
class TestSendGridSendErrors:
    """Test error translation."""

    @pytest.mark.asyncio
    async def test_missing_email_fails_without_request(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        result = await provider.send(_request(email=None))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.EMAIL_REQUIRED
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_401_returns_authentication_error(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=SEND_URL, status_code=401)

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderAuthenticationError)
        assert result.error.code == ErrorCode.PROVIDER_AUTHENTICATION_FAILED

    @pytest.mark.asyncio
    async def test_429_returns_rate_limit_with_retry_after(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST",
            url=SEND_URL,
            status_code=429,
            headers={"Retry-After": "60"},
        )

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderRateLimitError)
        assert result.error.retry_after == 60

    @pytest.mark.asyncio
    async def test_503_returns_unavailable(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=SEND_URL, status_code=503)

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderUnavailableError)
        assert result.error.is_transient is True

    @pytest.mark.asyncio
    async def test_400_returns_rejected(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST",
            url=SEND_URL,
            status_code=400,
            json={"errors": [{"message": "bad from"}]},
        )

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderInvalidResponseError)
        assert result.error.code == ErrorCode.PROVIDER_REJECTED
        assert result.error.status_code == 400
        assert "bad from" in (result.error.response_body or "")

    @pytest.mark.asyncio
    async def test_timeout_returns_unavailable(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_exception(httpx.TimeoutException("Connection timed out"))

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderUnavailableError)
        assert result.error.code == ErrorCode.PROVIDER_TIMEOUT

    @pytest.mark.asyncio
    async def test_connection_error_returns_unavailable(
        self, provider: SendGridEmailProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_exception(httpx.ConnectError("Failed to connect"))

        result = await provider.send(_request())

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_UNAVAILABLE
