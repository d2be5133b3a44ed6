"""In-memory event bus implementation.

This module implements the EventBusProtocol using an in-memory dictionary-based
registry keyed by event type tag. Suitable for single-process deployments;
cross-process workloads go through the stream broker instead.

Architecture:
    - Implements EventBusProtocol (hexagonal adapter pattern)
    - Dictionary-based handler registry (event_type tag → list of handlers)
    - Fail-open behavior (one handler failure doesn't break others)
    - Concurrent handler execution (asyncio.gather)

Usage:
    >>> bus = InMemoryEventBus(logger=get_logger())
    >>> bus.subscribe("order.placed", processor.process_event)
    >>> await bus.publish(OrderPlaced(user_id="u1", order_id="456", ...))
"""

import asyncio
from collections import defaultdict

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol


class InMemoryEventBus:
    """In-memory event bus with fail-open behavior.

    Executes handlers concurrently with asyncio.gather. A handler exception
    is logged at warning level and never reaches the publisher.

    Thread Safety:
        NOT thread-safe (single-threaded async design). The handler map is
        only mutated by subscribe/unsubscribe on the event loop thread.

    Attributes:
        _handlers: Event type tag → async handlers, in subscription order.
        _logger: Logger for handler failures and event publishing.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        """Initialize event bus with logger.

        Args:
            logger: Logger for handler failures (warning) and publishing (debug).
        """
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)
        self._logger = logger

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """Register event handler for an event type tag.

        Args:
            event_type: Event tag (e.g., "order.placed"). Exact match only.
            handler: Async function to call when a matching event is published.

        Notes:
            - No duplicate detection (same handler can be registered twice)
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """Remove the first registration of a handler.

        Args:
            event_type: Event tag the handler was registered for.
            handler: Previously registered handler.

        Returns:
            True if a registration was removed, False otherwise.
        """
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        return True

    def handler_count(self, event_type: str) -> int:
        """Number of handlers registered for an event type tag."""
        return len(self._handlers.get(event_type, ()))

    async def publish(self, event: DomainEvent) -> None:
        """Publish event to all handlers registered for its tag.

        Args:
            event: Domain event to publish.

        Flow:
            1. Look up handlers for event.event_type
            2. If no handlers, return immediately (no-op)
            3. Execute all handlers with asyncio.gather(return_exceptions=True)
            4. Log any handler exceptions (warning level)
            5. Return (never raise exceptions)
        """
        event_type = event.event_type
        # Snapshot so handlers subscribing during publish don't affect this round
        handlers = list(self._handlers.get(event_type, ()))

        if not handlers:
            return

        self._logger.debug(
            "event_publishing",
            event_type=event_type,
            event_id=event.event_id,
            handler_count=len(handlers),
        )

        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )

        for idx, result in enumerate(results):
            if isinstance(result, Exception):
                handler_name = getattr(
                    handlers[idx], "__qualname__", repr(handlers[idx])
                )
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event_type,
                    event_id=event.event_id,
                    handler_name=handler_name,
                    error_type=type(result).__name__,
                    error_message=str(result),
                    exc_info=result,
                )
