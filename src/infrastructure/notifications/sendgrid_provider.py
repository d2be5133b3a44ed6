"""SendGrid email delivery provider.

Sends HTML email through the SendGrid v3 Mail Send API.

API:
    POST {base_url}/v3/mail/send
    Authorization: Bearer <api key>
    202 Accepted on success; the message id is returned in X-Message-Id.
"""

from typing import Any

from src.core.constants import DEFAULT_NOTIFICATION_TITLE, PROVIDER_TIMEOUT_DEFAULT
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import NotificationChannel
from src.domain.errors import ProviderError, ProviderInvalidResponseError
from src.domain.value_objects import NotificationRequest
from src.infrastructure.notifications.base_http_provider import BaseHTTPProvider

SENDGRID_PROVIDER_NAME = "sendgrid"


class SendGridEmailProvider(BaseHTTPProvider):
    """Email provider backed by SendGrid.

    Implements NotificationProviderProtocol (structural typing).
    """

    def __init__(
        self,
        *,
        api_key: str,
        from_email: str,
        base_url: str = "https://api.sendgrid.com",
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize SendGrid provider.

        Args:
            api_key: SendGrid API key.
            from_email: Verified sender address.
            base_url: API base URL (overridable for tests).
            timeout: HTTP timeout in seconds.
        """
        super().__init__(
            base_url=base_url, provider_name=SENDGRID_PROVIDER_NAME, timeout=timeout
        )
        self._api_key = api_key
        self._from_email = from_email

    @property
    def channel(self) -> NotificationChannel:
        return NotificationChannel.EMAIL

    async def send(
        self, request: NotificationRequest
    ) -> Result[str | None, ProviderError]:
        """Send one email.

        Returns:
            Success(message_id | None): SendGrid accepted the message.
            Failure(ProviderError): Missing recipient or API failure.
        """
        if not request.email:
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.EMAIL_REQUIRED,
                    message="Email is required for email notifications",
                    provider_name=self.name,
                )
            )

        result = await self._execute_request(
            method="POST",
            path="/v3/mail/send",
            operation="send_email",
            headers={"Authorization": f"Bearer {self._api_key}"},
            json_data=self._build_payload(request),
        )
        if isinstance(result, Failure):
            return result

        response = result.value
        error_result = self._check_error_response(response, "send_email")
        if error_result is not None:
            return error_result

        message_id = response.headers.get("X-Message-Id")
        self._logger.info(
            "sendgrid_email_sent",
            user_id=request.user_id,
            message_id=message_id,
        )
        return Success(value=message_id)

    def _build_payload(self, request: NotificationRequest) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": request.email}]}],
            "from": {"email": self._from_email},
            "subject": request.title or DEFAULT_NOTIFICATION_TITLE,
            "content": [{"type": "text/html", "value": request.message or ""}],
        }
