"""Stream broker value objects.

StreamMessage is a decoded stream entry; ConsumerGroupDescriptor identifies
one polling loop (stream + group + consumer name).
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, kw_only=True, slots=True)
class StreamMessage:
    """Entry read from a durable stream.

    Attributes:
        id: Broker-assigned entry id (e.g., "1718000000000-0").
        event_type: Producer-declared message type.
        data: Decoded JSON payload.
        timestamp: Producer timestamp in epoch milliseconds.
        metadata: Decoded JSON metadata (empty dict when absent).
        message_uuid: Producer-side id written in the ``id`` field.
        raw_fields: Original flat field mapping as read from the broker.
    """

    id: str
    event_type: str
    data: Any
    timestamp: int
    metadata: dict[str, Any] = field(default_factory=dict)
    message_uuid: str | None = None
    raw_fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True, slots=True)
class ConsumerGroupDescriptor:
    """Identity of a running consumer loop."""

    stream: str
    group: str
    consumer_name: str

    @property
    def key(self) -> str:
        """Unique key of the subscription (stream:group:consumer)."""
        return f"{self.stream}:{self.group}:{self.consumer_name}"
