"""
Configuration management using Pydantic Settings.

This module provides type-safe, validated configuration loading from environment
variables (optionally from a .env file).

Architecture:
- Flat Settings structure (no nesting)
- All config loaded from environment variables
- Type validation via Pydantic
- Provider credentials are optional here; the container raises
  ConfigurationError when a selected backend lacks them

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    cache = MemoryCache(
        ttl_ms=settings.cache_ttl_ms,
        max_size=settings.cache_max_size,
        logger=logger,
    )

    if settings.is_production:
        # Real delivery providers
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.constants import (
    CACHE_CHECK_PERIOD_MS_DEFAULT,
    CACHE_MAX_SIZE_DEFAULT,
    CACHE_TTL_MS_DEFAULT,
    LISTENER_RETRY_ATTEMPTS_DEFAULT,
    LISTENER_RETRY_DELAY_MS_DEFAULT,
    PROVIDER_TIMEOUT_DEFAULT,
    STREAM_BATCH_SIZE_DEFAULT,
    STREAM_BLOCK_MS_DEFAULT,
    STREAM_POLL_INTERVAL_SECONDS,
)
from src.core.enums import Environment


class Settings(BaseSettings):
    """
    Main application settings (flat structure).

    Configuration precedence:
        1. Environment variables
        2. .env file in the working directory
        3. Default values (only for non-sensitive config)

    Returns:
        Settings: Application configuration loaded from environment.
    """

    # Environment detection
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development, testing, ci, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Application metadata
    app_name: str = Field(
        default="NotifyFlow",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )

    # Redis (stream broker)
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (e.g., redis://host:port/db)",
    )

    # Cache configuration
    cache_ttl_ms: int = Field(
        default=CACHE_TTL_MS_DEFAULT,
        description="Default cache entry TTL in milliseconds",
    )
    cache_max_size: int = Field(
        default=CACHE_MAX_SIZE_DEFAULT,
        description="Maximum number of cache entries before eviction",
    )
    cache_check_period_ms: int = Field(
        default=CACHE_CHECK_PERIOD_MS_DEFAULT,
        description="Interval between background sweeps of expired entries",
    )

    # Listener configuration
    listener_retry_attempts: int = Field(
        default=LISTENER_RETRY_ATTEMPTS_DEFAULT,
        description="Attempts a listener gets per lifecycle event",
    )
    listener_retry_delay_ms: int = Field(
        default=LISTENER_RETRY_DELAY_MS_DEFAULT,
        description="Linear backoff multiplier between listener attempts",
    )

    # Stream configuration
    stream_batch_size: int = Field(
        default=STREAM_BATCH_SIZE_DEFAULT,
        description="Messages read per consumer poll",
    )
    stream_block_ms: int = Field(
        default=STREAM_BLOCK_MS_DEFAULT,
        description="Blocking-read duration per consumer poll",
    )
    stream_poll_interval_seconds: float = Field(
        default=STREAM_POLL_INTERVAL_SECONDS,
        description="Pause between consumer poll iterations",
    )
    notification_stream: str = Field(
        default="notifications",
        description="Stream carrying notification.requested messages",
    )
    notification_stream_group: str = Field(
        default="notification-service",
        description="Consumer group draining the notification stream",
    )
    consumer_name: str = Field(
        default="notification-worker-1",
        description="Consumer name of this process within the group",
    )

    # Delivery providers
    provider_timeout_seconds: float = Field(
        default=PROVIDER_TIMEOUT_DEFAULT,
        description="Upper bound on a single provider send call",
    )
    email_backend: Literal["stub", "sendgrid"] = Field(
        default="stub",
        description="Email delivery backend (stub logs only)",
    )
    sms_backend: Literal["stub", "twilio"] = Field(
        default="stub",
        description="SMS and verification backend (stub logs only)",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key (required when email_backend=sendgrid)",
    )
    sendgrid_from_email: str | None = Field(
        default=None,
        description="Verified SendGrid sender address",
    )
    sendgrid_api_base_url: str = Field(
        default="https://api.sendgrid.com",
        description="SendGrid API base URL",
    )
    twilio_account_sid: str | None = Field(
        default=None,
        description="Twilio account SID (required when sms_backend=twilio)",
    )
    twilio_auth_token: str | None = Field(
        default=None,
        description="Twilio auth token (required when sms_backend=twilio)",
    )
    twilio_phone_number: str | None = Field(
        default=None,
        description="Twilio sender phone number for SMS",
    )
    twilio_verify_service_sid: str | None = Field(
        default=None,
        description="Twilio Verify service SID for verification codes",
    )
    twilio_api_base_url: str = Field(
        default="https://api.twilio.com",
        description="Twilio REST API base URL",
    )
    twilio_verify_base_url: str = Field(
        default="https://verify.twilio.com",
        description="Twilio Verify API base URL",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "cache_ttl_ms",
        "cache_max_size",
        "cache_check_period_ms",
        "listener_retry_attempts",
        "stream_batch_size",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """
        Ensure sizes, periods and attempt counts are positive.

        Args:
            v: Configured value.

        Returns:
            int: Validated value.

        Raises:
            ValueError: If value is zero or negative.
        """
        if v <= 0:
            raise ValueError("value must be greater than zero")
        return v

    @field_validator("listener_retry_delay_ms", "stream_block_ms")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """
        Ensure delays are not negative.

        Args:
            v: Configured delay.

        Returns:
            int: Validated delay.

        Raises:
            ValueError: If delay is negative.
        """
        if v < 0:
            raise ValueError("delay must not be negative")
        return v

    @field_validator(
        "sendgrid_api_base_url", "twilio_api_base_url", "twilio_verify_base_url"
    )
    @classmethod
    def validate_url(cls, v: str) -> str:
        """
        Remove trailing slashes from URLs.

        Args:
            v: URL string.

        Returns:
            str: URL without trailing slash.
        """
        return v.rstrip("/")

    # Convenience properties for environment checks
    @property
    def is_development(self) -> bool:
        """
        Check if running in development environment.

        Returns:
            bool: True if environment is DEVELOPMENT, False otherwise.
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """
        Check if running in testing environment.

        Returns:
            bool: True if environment is TESTING, False otherwise.
        """
        return self.environment == Environment.TESTING

    @property
    def is_ci(self) -> bool:
        """
        Check if running in CI environment.

        Returns:
            bool: True if environment is CI, False otherwise.
        """
        return self.environment == Environment.CI

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.

        Returns:
            bool: True if environment is PRODUCTION, False otherwise.
        """
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once per process.

    Returns:
        Settings: Cached settings instance.
    """
    return Settings()
