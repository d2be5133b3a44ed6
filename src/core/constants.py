"""Centralized constants for internal implementation details.

This module contains constants that are internal implementation details,
NOT environment-specific configuration. For environment-specific settings,
use `src/core/config.py` instead.

Categories:
- Identifiers: Prefixes and suffix length for generated ids
- Timeouts: Default timeouts for external service calls
- Validation limits: Notification request field limits
- Cache: Default TTLs and sizes
- Listeners: Default retry policy
- Streams: Default consumer settings and dead-letter naming

Example:
    >>> from src.core.constants import NOTIFICATION_ID_PREFIX
    >>> notification_id = generate_prefixed_id(NOTIFICATION_ID_PREFIX)
"""

# =============================================================================
# Identifiers
# =============================================================================

NOTIFICATION_ID_PREFIX: str = "notif"
"""Prefix for notification ids (notif_<epoch-ms>_<suffix>)."""

EVENT_ID_PREFIX: str = "event"
"""Prefix for domain event ids (event_<epoch-ms>_<suffix>)."""

ID_SUFFIX_LENGTH: int = 9
"""Number of random base36 characters appended to generated ids."""


# =============================================================================
# Timeouts
# =============================================================================

PROVIDER_TIMEOUT_DEFAULT: float = 30.0
"""Default timeout for delivery provider calls in seconds."""

VERIFICATION_CODE_TTL_MINUTES: int = 10
"""Lifetime of a verification code sent over SMS."""


# =============================================================================
# Validation Limits
# =============================================================================

TITLE_MAX_LENGTH: int = 200
"""Maximum notification title length in characters."""

MESSAGE_MAX_LENGTH: int = 1000
"""Maximum notification message length in characters."""

EMAIL_PATTERN: str = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
"""Basic local@domain.tld email shape."""

PHONE_PATTERN: str = r"^\+?[1-9]\d{1,14}$"
"""E.164 phone number shape (checked after whitespace is stripped)."""

RESPONSE_BODY_MAX_LENGTH: int = 500
"""Maximum provider response body length kept in error details."""


# =============================================================================
# Notification Defaults
# =============================================================================

QUEUED_PRIORITY_DEFAULT: int = 2
"""Priority recorded on NotificationQueued events."""

DELIVERY_MAX_RETRIES: int = 3
"""max_retries recorded on NotificationFailed events."""

DEFAULT_NOTIFICATION_TITLE: str = "Notification"
"""Subject used when an email request carries no title."""


# =============================================================================
# Cache
# =============================================================================

CACHE_TTL_MS_DEFAULT: int = 5 * 60 * 1000
"""Default cache entry TTL (5 minutes)."""

CACHE_MAX_SIZE_DEFAULT: int = 1000
"""Default maximum number of cache entries."""

CACHE_CHECK_PERIOD_MS_DEFAULT: int = 60 * 1000
"""Default interval between expired-entry sweeps (1 minute)."""

TEMPLATE_CACHE_TTL_MS: int = 30 * 60 * 1000
"""Default TTL for cached templates (30 minutes)."""

USER_PREFERENCES_CACHE_TTL_MS: int = 60 * 60 * 1000
"""Default TTL for cached user preferences (1 hour)."""

PROVIDER_CONFIG_CACHE_TTL_MS: int = 24 * 60 * 60 * 1000
"""Default TTL for cached provider configuration (24 hours)."""

CACHE_ENTRY_OVERHEAD_BYTES: int = 100
"""Rough per-entry overhead used by cache memory estimates."""


# =============================================================================
# Listeners
# =============================================================================

LISTENER_RETRY_ATTEMPTS_DEFAULT: int = 3
"""Default number of attempts a listener gets per event."""

LISTENER_RETRY_DELAY_MS_DEFAULT: int = 1000
"""Default linear backoff multiplier between listener attempts."""


# =============================================================================
# Streams
# =============================================================================

STREAM_BATCH_SIZE_DEFAULT: int = 10
"""Default number of messages read per poll."""

STREAM_BLOCK_MS_DEFAULT: int = 5000
"""Default blocking-read duration per poll."""

STREAM_POLL_INTERVAL_SECONDS: float = 0.1
"""Pause between poll iterations of a consumer task."""

DEAD_LETTER_SUFFIX: str = ":dead-letter"
"""Suffix appended to a stream key to name its dead-letter stream."""

BUSYGROUP_ERROR_PREFIX: str = "BUSYGROUP"
"""Redis error prefix returned when a consumer group already exists."""
