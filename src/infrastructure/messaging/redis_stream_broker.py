"""Redis Streams broker implementing StreamBrokerProtocol.

Durable, at-least-once messaging with consumer groups. Producers append
entries with XADD; each subscription runs a background asyncio task reading
with XREADGROUP, acknowledging successfully handled entries and copying
failed ones to ``<stream>:dead-letter``.

Architecture:
    - Implements StreamBrokerProtocol without inheritance (structural typing)
    - One cancellable asyncio task per subscription, keyed by
      ``stream:group:consumer``; each holds a stop Event checked at the top
      of every iteration
    - Read errors are logged and the loop continues after the poll interval
    - Handler failures are dead-lettered and NOT acknowledged, so the entry
      stays in the group's pending list for inspection or claiming
    - ``shutdown()`` stops and joins every task, then closes the connection

Wire format (flat field list):
    id, eventType, data (JSON), timestamp (epoch ms), metadata (JSON)

Dead-letter entries prepend:
    originalStream, originalGroup, originalMessageId, error, timestamp
"""

import asyncio
import json
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.constants import (
    BUSYGROUP_ERROR_PREFIX,
    DEAD_LETTER_SUFFIX,
    STREAM_BATCH_SIZE_DEFAULT,
    STREAM_BLOCK_MS_DEFAULT,
    STREAM_POLL_INTERVAL_SECONDS,
)
from src.core.errors import StreamError
from src.core.identifiers import epoch_ms, random_base36
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.stream_broker_protocol import StreamHandler
from src.domain.value_objects import ConsumerGroupDescriptor, StreamMessage


def _decode(value: Any) -> Any:
    """Decode bytes returned by a client without decode_responses."""
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _decode_mapping(mapping: Any) -> Any:
    if isinstance(mapping, dict):
        return {_decode(key): _decode_mapping(value) for key, value in mapping.items()}
    if isinstance(mapping, list | tuple):
        return [_decode_mapping(item) for item in mapping]
    return _decode(mapping)


def dead_letter_stream(stream: str) -> str:
    """Dead-letter stream key for a source stream."""
    return f"{stream}{DEAD_LETTER_SUFFIX}"


@dataclass(slots=True)
class _Subscription:
    descriptor: ConsumerGroupDescriptor
    stop: asyncio.Event
    task: asyncio.Task[None]


class RedisStreamBroker:
    """Redis implementation of StreamBrokerProtocol.

    Note: Does NOT inherit from StreamBrokerProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance (owned; closed on shutdown).
        _poll_interval: Pause between poll iterations in seconds.
        _subscriptions: Running consumer loops keyed by descriptor key.
        _logger: Structured logger.
    """

    def __init__(
        self,
        redis_client: "Redis[Any]",
        logger: LoggerProtocol,
        poll_interval_seconds: float = STREAM_POLL_INTERVAL_SECONDS,
    ) -> None:
        """Initialize broker.

        Args:
            redis_client: Async Redis client instance.
            logger: Structured logger.
            poll_interval_seconds: Pause between poll iterations.
        """
        self._redis = redis_client
        self._logger = logger
        self._poll_interval = poll_interval_seconds
        self._subscriptions: dict[str, _Subscription] = {}

    # =========================================================================
    # Producing
    # =========================================================================

    async def publish(
        self,
        stream: str,
        event_type: str,
        data: Any,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Append a message to a stream.

        Args:
            stream: Stream key.
            event_type: Message type tag.
            data: JSON-serializable payload.
            metadata: Optional JSON-serializable metadata.

        Returns:
            Broker-assigned entry id (e.g., "1718000000000-0").

        Raises:
            StreamError: If the append fails or returns no id.
        """
        timestamp = epoch_ms()
        fields = {
            "id": f"{timestamp}-{random_base36()}",
            "eventType": event_type,
            "data": json.dumps(data, default=str),
            "timestamp": str(timestamp),
            "metadata": json.dumps(metadata or {}, default=str),
        }

        try:
            entry_id = await self._redis.xadd(stream, fields)  # type: ignore[arg-type]
        except RedisError as e:
            self._logger.error(
                "stream_publish_failed",
                error=e,
                stream=stream,
                event_type=event_type,
            )
            raise StreamError(
                f"Failed to publish {event_type} to {stream}",
                stream=stream,
                operation="publish",
            ) from e

        if not entry_id:
            self._logger.error(
                "stream_publish_failed", stream=stream, event_type=event_type
            )
            raise StreamError(
                f"Broker returned no entry id for {event_type} on {stream}",
                stream=stream,
                operation="publish",
            )

        decoded_id: str = _decode(entry_id)
        self._logger.info(
            "stream_message_published",
            stream=stream,
            event_type=event_type,
            entry_id=decoded_id,
        )
        return decoded_id

    # =========================================================================
    # Consumer groups
    # =========================================================================

    async def create_consumer_group(self, stream: str, group: str) -> None:
        """Create a consumer group starting at new entries (creates the stream).

        An existing group (BUSYGROUP reply) counts as success.

        Raises:
            StreamError: On any other failure.
        """
        try:
            await self._redis.xgroup_create(stream, group, id="$", mkstream=True)
        except RedisError as e:
            if str(e).startswith(BUSYGROUP_ERROR_PREFIX):
                self._logger.debug(
                    "stream_consumer_group_exists", stream=stream, group=group
                )
                return
            self._logger.error(
                "stream_consumer_group_create_failed",
                error=e,
                stream=stream,
                group=group,
            )
            raise StreamError(
                f"Failed to create group {group} on {stream}",
                stream=stream,
                operation="create_consumer_group",
            ) from e

        self._logger.info("stream_consumer_group_created", stream=stream, group=group)

    async def subscribe(
        self,
        stream: str,
        group: str,
        consumer_name: str,
        handler: StreamHandler,
        batch_size: int = STREAM_BATCH_SIZE_DEFAULT,
        block_ms: int = STREAM_BLOCK_MS_DEFAULT,
    ) -> ConsumerGroupDescriptor:
        """Ensure the group exists and start a background consumer loop.

        Args:
            stream: Stream key.
            group: Consumer group name.
            consumer_name: Consumer name within the group.
            handler: Async message handler; raising dead-letters the message.
            batch_size: Maximum entries per read (COUNT).
            block_ms: Blocking read duration (BLOCK).

        Returns:
            Descriptor identifying the loop (pass to ``unsubscribe``).

        Raises:
            StreamError: If the consumer group cannot be created.
        """
        descriptor = ConsumerGroupDescriptor(
            stream=stream, group=group, consumer_name=consumer_name
        )
        existing = self._subscriptions.get(descriptor.key)
        if existing is not None and not existing.task.done():
            self._logger.warning("stream_subscription_exists", key=descriptor.key)
            return existing.descriptor

        await self.create_consumer_group(stream, group)

        stop = asyncio.Event()
        task = asyncio.create_task(
            self._consume(descriptor, handler, batch_size, block_ms, stop),
            name=f"stream-consumer:{descriptor.key}",
        )
        self._subscriptions[descriptor.key] = _Subscription(
            descriptor=descriptor, stop=stop, task=task
        )
        self._logger.info(
            "stream_subscription_started",
            stream=stream,
            group=group,
            consumer=consumer_name,
            batch_size=batch_size,
            block_ms=block_ms,
        )
        return descriptor

    async def unsubscribe(self, descriptor: ConsumerGroupDescriptor) -> bool:
        """Stop one consumer loop and wait for it to exit.

        Returns:
            False if no loop was registered for the descriptor.
        """
        subscription = self._subscriptions.pop(descriptor.key, None)
        if subscription is None:
            return False
        await self._stop(subscription)
        self._logger.info("stream_subscription_stopped", key=descriptor.key)
        return True

    def subscriptions(self) -> list[ConsumerGroupDescriptor]:
        """Descriptors of every registered consumer loop."""
        return [subscription.descriptor for subscription in self._subscriptions.values()]

    async def shutdown(self) -> None:
        """Stop and join every consumer loop, then close the connection."""
        subscriptions = list(self._subscriptions.values())
        self._subscriptions.clear()

        for subscription in subscriptions:
            subscription.stop.set()
            subscription.task.cancel()
        await asyncio.gather(
            *(subscription.task for subscription in subscriptions),
            return_exceptions=True,
        )
        for subscription in subscriptions:
            self._logger.debug(
                "stream_subscription_stopped", key=subscription.descriptor.key
            )

        await self._redis.aclose()
        self._logger.info(
            "stream_broker_shutdown", stopped_subscriptions=len(subscriptions)
        )

    # =========================================================================
    # Polling
    # =========================================================================

    async def poll_once(
        self,
        descriptor: ConsumerGroupDescriptor,
        handler: StreamHandler,
        batch_size: int = STREAM_BATCH_SIZE_DEFAULT,
        block_ms: int = STREAM_BLOCK_MS_DEFAULT,
    ) -> int:
        """Read one batch for a consumer and process every entry.

        Each entry is acknowledged when the handler succeeds, or copied to
        the dead-letter stream (and left unacknowledged) when it raises.

        Returns:
            Number of entries read.

        Raises:
            StreamError: If the read itself fails.
        """
        try:
            response = await self._redis.xreadgroup(
                groupname=descriptor.group,
                consumername=descriptor.consumer_name,
                streams={descriptor.stream: ">"},
                count=batch_size,
                block=block_ms,
            )
        except RedisError as e:
            raise StreamError(
                f"Failed to read from {descriptor.stream}",
                stream=descriptor.stream,
                operation="read",
            ) from e

        entries = self._flatten_response(response)
        for entry_id, raw_fields in entries:
            await self._process_entry(descriptor, handler, entry_id, raw_fields)
        return len(entries)

    async def _consume(
        self,
        descriptor: ConsumerGroupDescriptor,
        handler: StreamHandler,
        batch_size: int,
        block_ms: int,
        stop: asyncio.Event,
    ) -> None:
        while not stop.is_set():
            try:
                await self.poll_once(descriptor, handler, batch_size, block_ms)
            except Exception as e:
                # Logged, then polling continues.
                self._logger.error(
                    "stream_poll_failed",
                    error=e,
                    stream=descriptor.stream,
                    group=descriptor.group,
                    consumer=descriptor.consumer_name,
                )
            await asyncio.sleep(self._poll_interval)

    async def _process_entry(
        self,
        descriptor: ConsumerGroupDescriptor,
        handler: StreamHandler,
        entry_id: str,
        raw_fields: dict[str, str],
    ) -> None:
        try:
            message = self.parse_message(entry_id, raw_fields)
            await handler(message)
        except Exception as e:
            self._logger.error(
                "stream_handler_failed",
                error=e,
                stream=descriptor.stream,
                group=descriptor.group,
                entry_id=entry_id,
            )
            await self._move_to_dead_letter(descriptor, entry_id, raw_fields, e)
            return

        try:
            await self._redis.xack(descriptor.stream, descriptor.group, entry_id)
        except RedisError as e:
            # Stays pending; redelivered to the group on claim.
            self._logger.error(
                "stream_ack_failed",
                error=e,
                stream=descriptor.stream,
                group=descriptor.group,
                entry_id=entry_id,
            )
            return
        self._logger.debug(
            "stream_message_acked", stream=descriptor.stream, entry_id=entry_id
        )

    async def _move_to_dead_letter(
        self,
        descriptor: ConsumerGroupDescriptor,
        entry_id: str,
        raw_fields: dict[str, str],
        error: Exception,
    ) -> None:
        target = dead_letter_stream(descriptor.stream)
        flat_fields: list[str] = [
            "originalStream",
            descriptor.stream,
            "originalGroup",
            descriptor.group,
            "originalMessageId",
            entry_id,
            "error",
            str(error),
            "timestamp",
            str(epoch_ms()),
        ]
        for key, value in raw_fields.items():
            flat_fields.extend((key, value))

        try:
            # Raw XADD keeps the duplicate "timestamp" field of the original entry.
            await self._redis.execute_command("XADD", target, "*", *flat_fields)
        except RedisError as e:
            self._logger.error(
                "stream_dead_letter_failed",
                error=e,
                stream=descriptor.stream,
                entry_id=entry_id,
            )
            return

        self._logger.warning(
            "stream_message_dead_lettered",
            stream=descriptor.stream,
            dead_letter_stream=target,
            entry_id=entry_id,
        )

    @staticmethod
    def parse_message(entry_id: str, raw_fields: dict[str, str]) -> StreamMessage:
        """Decode a wire entry into a StreamMessage.

        Raises:
            KeyError: If eventType, data or timestamp is missing.
            ValueError: If data/metadata is not JSON or timestamp not an int.
        """
        metadata_raw = raw_fields.get("metadata")
        return StreamMessage(
            id=entry_id,
            event_type=raw_fields["eventType"],
            data=json.loads(raw_fields["data"]),
            timestamp=int(raw_fields["timestamp"]),
            metadata=json.loads(metadata_raw) if metadata_raw else {},
            message_uuid=raw_fields.get("id"),
            raw_fields=dict(raw_fields),
        )

    @staticmethod
    def _flatten_response(response: Any) -> list[tuple[str, dict[str, str]]]:
        if not response:
            return []
        # RESP2 replies are [[stream, entries]]; RESP3 replies are {stream: [entries]}.
        if isinstance(response, dict):
            streams = list(response.values())
        else:
            streams = [entries for _, entries in response]

        flattened: list[tuple[str, dict[str, str]]] = []
        for entries in streams:
            for entry in entries or ():
                entry_id, fields = entry[0], entry[1]
                flattened.append((_decode(entry_id), _decode_mapping(fields or {})))
        return flattened

    async def _stop(self, subscription: _Subscription) -> None:
        subscription.stop.set()
        subscription.task.cancel()
        with suppress(asyncio.CancelledError):
            await subscription.task

    # =========================================================================
    # Introspection
    # =========================================================================

    async def get_stream_info(self, stream: str) -> dict[str, Any]:
        """XINFO STREAM pass-through."""
        info = await self._redis.xinfo_stream(stream)
        return _decode_mapping(info)

    async def get_consumer_group_info(
        self, stream: str, group: str
    ) -> dict[str, Any] | None:
        """XINFO GROUPS pass-through, filtered to one group."""
        groups = _decode_mapping(await self._redis.xinfo_groups(stream))
        for info in groups:
            if info.get("name") == group:
                return info
        return None

    async def get_pending_messages(self, stream: str, group: str) -> dict[str, Any]:
        """XPENDING summary pass-through."""
        pending = await self._redis.xpending(stream, group)
        return _decode_mapping(pending)
