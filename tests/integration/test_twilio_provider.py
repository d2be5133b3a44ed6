"""Integration tests for TwilioSmsProvider.

Tests cover:
- Messages API request construction (basic auth, form body)
- Verify v2 start and check (approved, pending, 404 expired)
- Verify service not configured
- Error translation to ProviderError types

Architecture:
- Uses pytest-httpx for HTTP mocking
"""

import base64

import httpx
import pytest
from pytest_httpx import HTTPXMock

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.enums import NotificationChannel
from src.domain.errors import ProviderInvalidResponseError, ProviderUnavailableError
from src.domain.value_objects import NotificationRequest
from src.infrastructure.notifications.twilio_provider import TwilioSmsProvider

MESSAGES_URL = "https://api.twilio.test/2010-04-01/Accounts/AC123/Messages.json"
VERIFY_URL = "https://verify.twilio.test/v2/Services/VA456/Verifications"
CHECK_URL = "https://verify.twilio.test/v2/Services/VA456/VerificationCheck"


# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def provider() -> TwilioSmsProvider:
    return TwilioSmsProvider(
        account_sid="AC123",
        auth_token="secret-token",
        from_number="+15550000000",
        verify_service_sid="VA456",
        base_url="https://api.twilio.test",
        verify_base_url="https://verify.twilio.test",
        timeout=5.0,
    )


def _sms_request(**overrides) -> NotificationRequest:
    fields = {
        "user_id": "user-1",
        "channel": NotificationChannel.SMS,
        "message": "Your order #456 has been shipped!",
        "phone": "+15551234567",
    }
    fields.update(overrides)
    return NotificationRequest(**fields)


# =============================================================================
# Test: send
# =============================================================================


@pytest.mark.integration
class TestTwilioSend:
    """Test the Messages API."""

    @pytest.mark.asyncio
    async def test_returns_message_sid(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST",
            url=MESSAGES_URL,
            status_code=201,
            json={"sid": "SM789", "status": "queued"},
        )

        result = await provider.send(_sms_request())

        assert isinstance(result, Success)
        assert result.value == "SM789"

    @pytest.mark.asyncio
    async def test_sends_basic_auth_and_form_body(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST", url=MESSAGES_URL, status_code=201, json={"sid": "SM1"}
        )

        await provider.send(_sms_request())

        request = httpx_mock.get_request()
        assert request is not None
        expected = base64.b64encode(b"AC123:secret-token").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        body = request.read().decode()
        assert "To=%2B15551234567" in body
        assert "From=%2B15550000000" in body
        assert "Body=" in body

    @pytest.mark.asyncio
    async def test_missing_phone_fails_without_request(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        result = await provider.send(_sms_request(phone=None))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PHONE_REQUIRED
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_invalid_json_returns_invalid_response(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST", url=MESSAGES_URL, status_code=201, text="not json"
        )

        result = await provider.send(_sms_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderInvalidResponseError)
        assert result.error.code == ErrorCode.PROVIDER_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_server_error_returns_unavailable(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=MESSAGES_URL, status_code=500)

        result = await provider.send(_sms_request())

        assert isinstance(result, Failure)
        assert isinstance(result.error, ProviderUnavailableError)

    def test_identity(self, provider: TwilioSmsProvider):
        assert provider.name == "twilio"
        assert provider.channel == NotificationChannel.SMS


# =============================================================================
# Test: verification
# =============================================================================


@pytest.mark.integration
class TestTwilioVerification:
    """Test the Verify v2 API."""

    @pytest.mark.asyncio
    async def test_send_verification_code_returns_status(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST", url=VERIFY_URL, status_code=201, json={"status": "pending"}
        )

        result = await provider.send_verification_code("+15551234567")

        assert isinstance(result, Success)
        assert result.value == "pending"
        body = httpx_mock.get_request().read().decode()
        assert "Channel=sms" in body

    @pytest.mark.asyncio
    async def test_check_approved(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST", url=CHECK_URL, status_code=200, json={"status": "approved"}
        )

        result = await provider.check_verification_code("123456", "+15551234567")

        assert isinstance(result, Success)
        assert result.value is True
        body = httpx_mock.get_request().read().decode()
        assert "Code=123456" in body

    @pytest.mark.asyncio
    async def test_check_wrong_code(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(
            method="POST", url=CHECK_URL, status_code=200, json={"status": "pending"}
        )

        result = await provider.check_verification_code("000000", "+15551234567")

        assert isinstance(result, Success)
        assert result.value is False

    @pytest.mark.asyncio
    async def test_check_expired_verification_is_rejected_code(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_response(method="POST", url=CHECK_URL, status_code=404)

        result = await provider.check_verification_code("123456", "+15551234567")

        assert isinstance(result, Success)
        assert result.value is False

    @pytest.mark.asyncio
    async def test_check_timeout(
        self, provider: TwilioSmsProvider, httpx_mock: HTTPXMock
    ):
        httpx_mock.add_exception(httpx.TimeoutException("timed out"))

        result = await provider.check_verification_code("123456", "+15551234567")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.PROVIDER_TIMEOUT

    @pytest.mark.asyncio
    async def test_verify_not_configured(self, httpx_mock: HTTPXMock):
        provider = TwilioSmsProvider(
            account_sid="AC123", auth_token="secret-token", from_number="+15550000000"
        )

        send_result = await provider.send_verification_code("+15551234567")
        check_result = await provider.check_verification_code("1", "+15551234567")

        assert isinstance(send_result, Failure)
        assert send_result.error.code == ErrorCode.PROVIDER_NOT_CONFIGURED
        assert isinstance(check_result, Failure)
        assert httpx_mock.get_requests() == []
