"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the service while
remaining backend-agnostic. Every component receives a logger through its
constructor; none reaches for a global.

Log Levels:
    - DEBUG: Cache hits/misses, empty dispatches, trigger conditions not met
    - INFO: Notifications sent, consumer groups created, lifecycle summaries
    - WARNING: Handler failures, listener retries, failed login events
    - ERROR: Exhausted listener retries, delivery failures, dead-lettering
    - CRITICAL: Startup configuration failures

Security:
    - NEVER log API keys, auth tokens, reset tokens or verification codes

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("notification_sent", notification_id=notification_id)

    consumer_logger = logger.bind(stream="notifications", group="workers")
    consumer_logger.warning("stream_read_failed", error_message=str(e))
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls are structured: a snake_case event message plus
    key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event message (avoid f-strings; use context).
            error: Optional exception instance; implementations add
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message (startup and unrecoverable failures)."""
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.

        Example:
            listener_logger = logger.bind(listener="metrics")
            listener_logger.warning("listener_attempt_failed", attempt=2)
        """
        ...

    def with_context(self, **context: Any) -> "LoggerProtocol":
        """Alias for bind()."""
        ...
