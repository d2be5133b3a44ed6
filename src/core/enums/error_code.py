"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, *_REQUIRED, *_TOO_LONG)
- Provider errors (PROVIDER_*)
- Listener and stream errors (LISTENER_*, STREAM_*)
- Configuration errors (CONFIGURATION_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    USER_ID_REQUIRED = "user_id_required"
    CHANNEL_REQUIRED = "channel_required"
    EMAIL_REQUIRED = "email_required"
    INVALID_EMAIL = "invalid_email"
    PHONE_REQUIRED = "phone_required"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    TITLE_TOO_LONG = "title_too_long"
    MESSAGE_TOO_LONG = "message_too_long"
    VALIDATION_FAILED = "validation_failed"

    # Provider errors
    PROVIDER_NOT_CONFIGURED = "provider_not_configured"
    PROVIDER_AUTHENTICATION_FAILED = "provider_authentication_failed"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    PROVIDER_INVALID_RESPONSE = "provider_invalid_response"
    PROVIDER_REJECTED = "provider_rejected"
    PROVIDER_TIMEOUT = "provider_timeout"

    # Verification errors
    VERIFICATION_CODE_REJECTED = "verification_code_rejected"

    # Listener errors
    LISTENER_PROCESSING_FAILED = "listener_processing_failed"

    # Stream errors
    STREAM_PUBLISH_FAILED = "stream_publish_failed"
    STREAM_GROUP_CREATE_FAILED = "stream_group_create_failed"
    STREAM_READ_FAILED = "stream_read_failed"

    # Configuration errors
    CONFIGURATION_MISSING = "configuration_missing"
