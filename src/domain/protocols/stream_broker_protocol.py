"""Stream broker protocol (port) for durable messaging.

The stream broker is a durable, at-least-once publish/consume primitive
with consumer groups, acknowledgement and dead-lettering. It runs beside the
in-process event bus for cross-process workloads.

Message states:
    pending (delivered to a consumer, not yet acknowledged)
    → acknowledged (handler succeeded)
    | dead-lettered (handler failed; copied to ``<stream>:dead-letter``)

Implementations:
    - RedisStreamBroker: src/infrastructure/messaging/redis_stream_broker.py
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from src.domain.value_objects import ConsumerGroupDescriptor, StreamMessage

StreamHandler = Callable[[StreamMessage], Awaitable[None]]
"""Async function processing one stream message. Raising dead-letters it."""


class StreamBrokerProtocol(Protocol):
    """Protocol for durable stream brokers."""

    async def publish(
        self,
        stream: str,
        event_type: str,
        data: Any,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Append a message and return the broker-assigned id.

        Raises:
            StreamError: If the append fails.
        """
        ...

    async def create_consumer_group(self, stream: str, group: str) -> None:
        """Create a consumer group (idempotent).

        Raises:
            StreamError: On any failure other than "group already exists".
        """
        ...

    async def subscribe(
        self,
        stream: str,
        group: str,
        consumer_name: str,
        handler: StreamHandler,
        batch_size: int = 10,
        block_ms: int = 5000,
    ) -> ConsumerGroupDescriptor:
        """Ensure the group exists and start a background consumer loop."""
        ...

    async def unsubscribe(self, descriptor: ConsumerGroupDescriptor) -> bool:
        """Stop one consumer loop. Returns False if it was not running."""
        ...

    async def shutdown(self) -> None:
        """Stop every consumer loop, then close the connection."""
        ...

    async def get_stream_info(self, stream: str) -> dict[str, Any]:
        """Pass-through stream info read."""
        ...

    async def get_consumer_group_info(
        self, stream: str, group: str
    ) -> dict[str, Any] | None:
        """Pass-through consumer group info read (None if unknown)."""
        ...

    async def get_pending_messages(self, stream: str, group: str) -> dict[str, Any]:
        """Pass-through pending-message summary read."""
        ...
