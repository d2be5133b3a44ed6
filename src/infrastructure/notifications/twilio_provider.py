"""Twilio SMS and phone verification provider.

APIs:
    Messages:  POST {api_base}/2010-04-01/Accounts/{sid}/Messages.json
               form: To, From, Body → 201 {"sid": "SM..."}
    Verify v2: POST {verify_base}/v2/Services/{service}/Verifications
               form: To, Channel=sms → 201 {"status": "pending"}
               POST {verify_base}/v2/Services/{service}/VerificationCheck
               form: To, Code → 200 {"status": "approved" | "pending"}

Authentication is HTTP basic auth with the account SID and auth token.
"""

from src.core.constants import PROVIDER_TIMEOUT_DEFAULT
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import NotificationChannel
from src.domain.errors import ProviderError, ProviderInvalidResponseError
from src.domain.value_objects import NotificationRequest
from src.infrastructure.notifications.base_http_provider import BaseHTTPProvider

TWILIO_PROVIDER_NAME = "twilio"
VERIFICATION_APPROVED_STATUS = "approved"


class TwilioSmsProvider(BaseHTTPProvider):
    """SMS provider and verification provider backed by Twilio.

    Implements NotificationProviderProtocol and VerificationProviderProtocol
    (structural typing).
    """

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        from_number: str,
        verify_service_sid: str | None = None,
        base_url: str = "https://api.twilio.com",
        verify_base_url: str = "https://verify.twilio.com",
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize Twilio provider.

        Args:
            account_sid: Twilio account SID.
            auth_token: Twilio auth token.
            from_number: Sending phone number (E.164).
            verify_service_sid: Verify service SID; verification is
                unavailable without it.
            base_url: Messages API base URL.
            verify_base_url: Verify API base URL.
            timeout: HTTP timeout in seconds.
        """
        super().__init__(
            base_url=base_url, provider_name=TWILIO_PROVIDER_NAME, timeout=timeout
        )
        self._auth = (account_sid, auth_token)
        self._account_sid = account_sid
        self._from_number = from_number
        self._verify_service_sid = verify_service_sid
        self._verify_base_url = verify_base_url.rstrip("/")

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.SMS

    async def send(
        self, request: NotificationRequest
    ) -> Result[str | None, ProviderError]:
        """Send one SMS.

        Returns:
            Success(message_sid): Twilio queued the message.
            Failure(ProviderError): Missing recipient or API failure.
        """
        if not request.phone:
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PHONE_REQUIRED,
                    message="Phone number is required for SMS notifications",
                    provider_name=self.name,
                )
            )

        result = await self._execute_and_parse_object(
            method="POST",
            path=f"/2010-04-01/Accounts/{self._account_sid}/Messages.json",
            operation="send_sms",
            form_data={
                "To": request.phone,
                "From": self._from_number,
                "Body": request.message or "",
            },
            auth=self._auth,
        )
        if isinstance(result, Failure):
            return result

        message_sid = result.value.get("sid")
        self._logger.info(
            "twilio_sms_sent", user_id=request.user_id, message_sid=message_sid
        )
        return Success(value=message_sid)

    async def send_verification_code(
        self, phone_number: str
    ) -> Result[str, ProviderError]:
        """Start a Verify v2 SMS verification.

        Returns:
            Success(status): Verification status (usually "pending").
            Failure(ProviderError): Verify not configured or API failure.
        """
        service_check = self._require_verify_service()
        if service_check is not None:
            return service_check

        result = await self._execute_and_parse_object(
            method="POST",
            path=f"/v2/Services/{self._verify_service_sid}/Verifications",
            operation="send_verification_code",
            form_data={"To": phone_number, "Channel": "sms"},
            auth=self._auth,
            base_url=self._verify_base_url,
        )
        if isinstance(result, Failure):
            return result

        status = str(result.value.get("status", ""))
        self._logger.info("twilio_verification_started", status=status)
        return Success(value=status)

    async def check_verification_code(
        self, code: str, phone_number: str
    ) -> Result[bool, ProviderError]:
        """Check a verification code.

        Twilio answers 404 once a verification has expired or was already
        approved; that is reported as a rejected code.

        Returns:
            Success(True): Code approved.
            Success(False): Code wrong or verification expired.
            Failure(ProviderError): Verify not configured or API failure.
        """
        service_check = self._require_verify_service()
        if service_check is not None:
            return service_check

        result = await self._execute_request(
            method="POST",
            path=f"/v2/Services/{self._verify_service_sid}/VerificationCheck",
            operation="check_verification_code",
            form_data={"To": phone_number, "Code": code},
            auth=self._auth,
            base_url=self._verify_base_url,
        )
        if isinstance(result, Failure):
            return result

        response = result.value
        if response.status_code == 404:
            self._logger.info("twilio_verification_not_found")
            return Success(value=False)

        parsed = self._parse_json_object(response, "check_verification_code")
        if isinstance(parsed, Failure):
            return parsed

        approved = parsed.value.get("status") == VERIFICATION_APPROVED_STATUS
        self._logger.info("twilio_verification_checked", approved=approved)
        return Success(value=approved)

    def _require_verify_service(self) -> Failure[ProviderError] | None:
        if self._verify_service_sid:
            return None
        return Failure(
            error=ProviderError(
                code=ErrorCode.PROVIDER_NOT_CONFIGURED,
                message="Twilio Verify service SID is not configured",
                provider_name=self.name,
            )
        )
