"""Domain errors package.

Usage:
    from src.domain.errors import ProviderError, ProviderUnavailableError
"""

from src.domain.errors.provider_error import (
    ProviderAuthenticationError,
    ProviderError,
    ProviderInvalidResponseError,
    ProviderRateLimitError,
    ProviderUnavailableError,
)

__all__ = [
    "ProviderAuthenticationError",
    "ProviderError",
    "ProviderInvalidResponseError",
    "ProviderRateLimitError",
    "ProviderUnavailableError",
]
