"""Base HTTP provider for vendor delivery APIs.

This module provides a base class for delivery providers that talk to a
vendor REST API. It handles:
- HTTP request execution with timeout/connection error handling
- Response status code interpretation
- JSON parsing with error handling
- Structured logging with provider context

Subclasses only need to:
1. Build authentication (Bearer token, HTTP basic auth, ...)
2. Build the vendor request body and call the base methods

Architecture:
    - Infrastructure layer (adapter for external APIs)
    - Uses httpx for async HTTP
    - Returns Result types (no exceptions for delivery failures)
"""

from typing import Any

import httpx
import structlog

from src.core.constants import PROVIDER_TIMEOUT_DEFAULT, RESPONSE_BODY_MAX_LENGTH
from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import (
    ProviderAuthenticationError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)


class BaseHTTPProvider:
    """Base class for HTTP delivery providers with shared error mapping.

    Status mapping:
        - 2xx: success
        - 401/403: ProviderAuthenticationError
        - 429: ProviderRateLimitError (Retry-After honored when numeric)
        - 5xx: ProviderUnavailableError (transient)
        - other: ProviderInvalidResponseError (request rejected)
        - timeout / connection error: ProviderUnavailableError (transient)

    Attributes:
        _base_url: Vendor API base URL (without trailing slash).
        _provider_name: Provider identifier for logging and error messages.
        _timeout: HTTP request timeout in seconds.
        _logger: Structured logger with provider context.
    """

    def __init__(
        self,
        *,
        base_url: str,
        provider_name: str,
        timeout: float = PROVIDER_TIMEOUT_DEFAULT,
    ) -> None:
        """Initialize base HTTP provider.

        Args:
            base_url: Vendor API base URL (e.g., "https://api.sendgrid.com").
            provider_name: Provider identifier (e.g., "sendgrid", "twilio").
            timeout: HTTP request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._provider_name = provider_name
        self._timeout = timeout
        self._logger = structlog.get_logger(f"{provider_name}_provider")

    @property
    def name(self) -> str:
        return self._provider_name

    async def _execute_request(
        self,
        *,
        method: str,
        path: str,
        operation: str,
        headers: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        form_data: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        base_url: str | None = None,
    ) -> Result[httpx.Response, ProviderError]:
        """Execute HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: URL path relative to the base URL.
            operation: Operation name for logging.
            headers: Optional HTTP headers (authentication included).
            json_data: Optional JSON body.
            form_data: Optional form-encoded body.
            auth: Optional HTTP basic auth credentials.
            base_url: Overrides the provider base URL for this request.

        Returns:
            Success(httpx.Response): Raw HTTP response (any status).
            Failure(ProviderUnavailableError): On timeout or connection error.
        """
        url = f"{(base_url or self._base_url).rstrip('/')}{path}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    json=json_data,
                    data=form_data,
                    auth=auth,
                )
            return Success(value=response)

        except httpx.TimeoutException as e:
            self._logger.warning(
                f"{self._provider_name}_api_timeout",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_TIMEOUT,
                    message=f"{self._provider_name.title()} API request timed out",
                    provider_name=self._provider_name,
                    is_transient=True,
                )
            )

        except httpx.RequestError as e:
            self._logger.warning(
                f"{self._provider_name}_api_connection_error",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_UNAVAILABLE,
                    message=f"Failed to connect to {self._provider_name.title()} API: {e}",
                    provider_name=self._provider_name,
                    is_transient=True,
                )
            )

    def _check_error_response(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Failure[ProviderError] | None:
        """Check HTTP response for errors and return appropriate ProviderError.

        Args:
            response: HTTP response to check.
            operation: Operation name for logging.

        Returns:
            Failure(ProviderError) if error detected, None if response is OK.
        """
        status = response.status_code

        if response.is_success:
            return None

        if status == 429:
            retry_after = response.headers.get("Retry-After")
            retry_seconds = (
                int(retry_after) if retry_after and retry_after.isdigit() else None
            )
            self._logger.warning(
                f"{self._provider_name}_api_rate_limited",
                operation=operation,
                retry_after=retry_seconds,
            )
            return Failure(
                error=ProviderRateLimitError(
                    code=ErrorCode.PROVIDER_RATE_LIMITED,
                    message=f"{self._provider_name.title()} API rate limit exceeded",
                    provider_name=self._provider_name,
                    retry_after=retry_seconds,
                )
            )

        if status in (401, 403):
            self._logger.warning(
                f"{self._provider_name}_api_auth_failed",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=ProviderAuthenticationError(
                    code=ErrorCode.PROVIDER_AUTHENTICATION_FAILED,
                    message=f"{self._provider_name.title()} rejected the configured credentials",
                    provider_name=self._provider_name,
                    details={"status_code": status},
                )
            )

        if status >= 500:
            self._logger.warning(
                f"{self._provider_name}_api_server_error",
                operation=operation,
                status_code=status,
            )
            return Failure(
                error=ProviderUnavailableError(
                    code=ErrorCode.PROVIDER_UNAVAILABLE,
                    message=f"{self._provider_name.title()} API server error: {status}",
                    provider_name=self._provider_name,
                    is_transient=True,
                )
            )

        self._logger.warning(
            f"{self._provider_name}_api_request_rejected",
            operation=operation,
            status_code=status,
        )
        return Failure(
            error=ProviderInvalidResponseError(
                code=ErrorCode.PROVIDER_REJECTED,
                message=f"{self._provider_name.title()} rejected the request: {status}",
                provider_name=self._provider_name,
                status_code=status,
                response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
            )
        )

    def _parse_json_object(
        self,
        response: httpx.Response,
        operation: str,
    ) -> Result[dict[str, Any], ProviderError]:
        """Parse response as JSON object with error handling.

        Args:
            response: HTTP response to parse.
            operation: Operation name for logging.

        Returns:
            Success(dict): Parsed JSON object.
            Failure(ProviderError): On HTTP error or invalid JSON.
        """
        error_result = self._check_error_response(response, operation)
        if error_result is not None:
            return error_result

        try:
            data = response.json()
        except ValueError as e:
            self._logger.error(
                f"{self._provider_name}_api_invalid_json",
                operation=operation,
                error=str(e),
            )
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PROVIDER_INVALID_RESPONSE,
                    message=f"Invalid JSON response from {self._provider_name.title()}",
                    provider_name=self._provider_name,
                    status_code=response.status_code,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        if not isinstance(data, dict):
            self._logger.warning(
                f"{self._provider_name}_api_unexpected_format",
                operation=operation,
                data_type=type(data).__name__,
            )
            return Failure(
                error=ProviderInvalidResponseError(
                    code=ErrorCode.PROVIDER_INVALID_RESPONSE,
                    message=f"Expected object response from {self._provider_name.title()}",
                    provider_name=self._provider_name,
                    status_code=response.status_code,
                    response_body=response.text[:RESPONSE_BODY_MAX_LENGTH],
                )
            )

        self._logger.debug(
            f"{self._provider_name}_api_succeeded",
            operation=operation,
        )
        return Success(value=data)

    async def _execute_and_parse_object(
        self,
        *,
        method: str,
        path: str,
        operation: str,
        headers: dict[str, str] | None = None,
        json_data: dict[str, Any] | None = None,
        form_data: dict[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        base_url: str | None = None,
    ) -> Result[dict[str, Any], ProviderError]:
        """Execute request and parse a JSON object response."""
        result = await self._execute_request(
            method=method,
            path=path,
            operation=operation,
            headers=headers,
            json_data=json_data,
            form_data=form_data,
            auth=auth,
            base_url=base_url,
        )

        if isinstance(result, Failure):
            return result

        return self._parse_json_object(result.value, operation)
