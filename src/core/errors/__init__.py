"""Core errors package.

Exports all core-level error classes for convenient importing.

Usage:
    from src.core.errors import DomainError, ValidationError
    from src.core.errors import NotificationDeliveryError, StreamError
"""

from src.core.errors.common_errors import ValidationError
from src.core.errors.domain_error import DomainError
from src.core.errors.exceptions import (
    ConfigurationError,
    ListenerProcessingError,
    NotificationDeliveryError,
    NotificationError,
    NotificationValidationError,
    StreamError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "NotificationError",
    "NotificationValidationError",
    "NotificationDeliveryError",
    "ListenerProcessingError",
    "StreamError",
    "ConfigurationError",
]
