"""Logging stub providers for development and testing.

Stubs never touch the network. They log what would have been delivered and
report success, so the full dispatch lifecycle runs without vendor
credentials. Delivered requests are kept in memory for inspection.
"""

import secrets

from src.core.result import Result, Success
from src.domain.enums import NotificationChannel
from src.domain.errors import ProviderError
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.value_objects import NotificationRequest

STUB_VERIFICATION_STATUS = "pending"


class _StubProvider:
    def __init__(
        self, *, name: str, channel: NotificationChannel, logger: LoggerProtocol
    ) -> None:
        self._name = name
        self._channel = channel
        self._logger = logger
        self.sent: list[NotificationRequest] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def channel(self) -> NotificationChannel:
        return self._channel

    async def send(
        self, request: NotificationRequest
    ) -> Result[str | None, ProviderError]:
        self.sent.append(request)
        message_id = f"{self._name}_{secrets.token_hex(8)}"
        self._logger.info(
            "stub_notification_delivered",
            provider=self._name,
            channel=self._channel.value,
            user_id=request.user_id,
            title=request.title,
            message_id=message_id,
        )
        return Success(value=message_id)


class StubEmailProvider(_StubProvider):
    """Email provider that only logs."""

    def __init__(self, logger: LoggerProtocol) -> None:
        super().__init__(
            name="stub-email", channel=NotificationChannel.EMAIL, logger=logger
        )


class StubSmsProvider(_StubProvider):
    """SMS and verification provider that only logs.

    Issued verification codes are logged at debug level so a developer can
    complete the flow locally.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        super().__init__(name="stub-sms", channel=NotificationChannel.SMS, logger=logger)
        self._codes: dict[str, str] = {}

    async def send_verification_code(
        self, phone_number: str
    ) -> Result[str, ProviderError]:
        code = f"{secrets.randbelow(1_000_000):06d}"
        self._codes[phone_number] = code
        self._logger.debug(
            "stub_verification_code_issued", phone_number=phone_number, code=code
        )
        return Success(value=STUB_VERIFICATION_STATUS)

    async def check_verification_code(
        self, code: str, phone_number: str
    ) -> Result[bool, ProviderError]:
        approved = self._codes.get(phone_number) == code
        if approved:
            del self._codes[phone_number]
        return Success(value=approved)

    def issued_code(self, phone_number: str) -> str | None:
        """Last unverified code issued to a phone number."""
        return self._codes.get(phone_number)
