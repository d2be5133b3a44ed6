"""Unit tests for the logging stub providers."""

import pytest

from src.core.result import Success
from src.domain.enums import NotificationChannel
from src.domain.value_objects import NotificationRequest
from src.infrastructure.notifications.stub_providers import (
    StubEmailProvider,
    StubSmsProvider,
)


@pytest.mark.unit
class TestStubEmailProvider:
    """Test the email stub."""

    @pytest.mark.asyncio
    async def test_send_records_and_logs(self, mock_logger):
        provider = StubEmailProvider(mock_logger)
        request = NotificationRequest(
            user_id="user-1",
            channel=NotificationChannel.EMAIL,
            title="Welcome!",
            email="jane@example.com",
        )

        result = await provider.send(request)

        assert isinstance(result, Success)
        assert result.value.startswith("stub-email_")
        assert provider.sent == [request]
        assert provider.name == "stub-email"
        assert provider.channel == NotificationChannel.EMAIL
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args == ("stub_notification_delivered",)


@pytest.mark.unit
class TestStubSmsProvider:
    """Test the SMS and verification stub."""

    @pytest.mark.asyncio
    async def test_issued_code_verifies_once(self, mock_logger):
        provider = StubSmsProvider(mock_logger)

        status = await provider.send_verification_code("+15551234567")
        code = provider.issued_code("+15551234567")

        assert status == Success(value="pending")
        assert code is not None and len(code) == 6 and code.isdigit()

        first = await provider.check_verification_code(code, "+15551234567")
        second = await provider.check_verification_code(code, "+15551234567")

        assert first == Success(value=True)
        assert second == Success(value=False)
        assert provider.issued_code("+15551234567") is None

    @pytest.mark.asyncio
    async def test_wrong_code_rejected(self, mock_logger):
        provider = StubSmsProvider(mock_logger)
        await provider.send_verification_code("+15551234567")
        code = provider.issued_code("+15551234567")
        wrong = "000000" if code != "000000" else "111111"

        result = await provider.check_verification_code(wrong, "+15551234567")

        assert result == Success(value=False)
        assert provider.issued_code("+15551234567") == code

    @pytest.mark.asyncio
    async def test_unknown_phone_rejected(self, mock_logger):
        provider = StubSmsProvider(mock_logger)

        result = await provider.check_verification_code("123456", "+15550000000")

        assert result == Success(value=False)
