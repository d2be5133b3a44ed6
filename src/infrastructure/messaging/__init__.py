"""Durable messaging infrastructure.

- RedisStreamBroker: Redis Streams implementation of StreamBrokerProtocol
"""

from src.infrastructure.messaging.redis_stream_broker import (
    RedisStreamBroker,
    dead_letter_stream,
)

__all__ = ["RedisStreamBroker", "dead_letter_stream"]
