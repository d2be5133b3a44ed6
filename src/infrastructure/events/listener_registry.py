"""Priority-ordered listener registry.

Holds lifecycle event listeners keyed by name and fans events out to them.

Architecture:
    - Owns two structures: ``_listeners`` (name → listener) and a derived
      ``_index`` (event type → listeners ordered by ascending priority)
    - The index is rebuilt on every register/unregister/enable/disable so
      dispatch is a single lookup
    - Ascending priority: a listener with priority 1 is invoked before one
      with priority 2. Ties keep registration order (stable sort)
    - Settle-all fan-out: every matching listener is invoked, each failure
      is logged individually, and dispatch returns only after all settle
    - Bus fan-out is detached: ``bind`` subscribes ``schedule``, which runs
      ``dispatch`` as a tracked background task so listener retries never
      delay the publisher. ``drain`` waits for the pending tasks

Usage:
    >>> registry = ListenerRegistry(logger=logger)
    >>> registry.register(logging_listener)   # priority 1
    >>> registry.register(metrics_listener)   # priority 2
    >>> registry.bind(event_bus)               # subscribe to lifecycle events
    >>> await event_bus.publish(NotificationSent(...))
"""

import asyncio
from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from src.domain.events.base_event import DomainEvent
from src.domain.events.notification_events import SUPPORTED_LIFECYCLE_EVENTS
from src.domain.protocols.event_bus_protocol import EventBusProtocol
from src.domain.protocols.listener_protocol import EventListenerProtocol
from src.domain.protocols.logger_protocol import LoggerProtocol


class ListenerRegistry:
    """Registry of lifecycle listeners with priority-ordered dispatch.

    Thread Safety:
        NOT thread-safe. Mutations and dispatch run on the event loop thread;
        dispatch iterates an immutable tuple snapshot from the index.

    Attributes:
        _listeners: Registered listeners keyed by name (insertion ordered).
        _index: Event type → tuple of listeners, ascending priority.
        _logger: Logger for dispatch diagnostics.
        _pending: Background dispatch tasks started by ``schedule``.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        """Initialize an empty registry.

        Args:
            logger: Logger for registration changes and dispatch failures.
        """
        self._listeners: dict[str, EventListenerProtocol] = {}
        self._index: dict[str, tuple[EventListenerProtocol, ...]] = {}
        self._logger = logger
        self._pending: set[asyncio.Task[None]] = set()

    # =========================================================================
    # Registration
    # =========================================================================

    def register(self, listener: EventListenerProtocol) -> None:
        """Register a listener (replacing any listener with the same name).

        Args:
            listener: Listener to register.
        """
        replaced = listener.name in self._listeners
        self._listeners[listener.name] = listener
        self._rebuild_index()
        self._logger.info(
            "listener_registered",
            listener=listener.name,
            event_types=sorted(listener.event_types),
            priority=listener.priority,
            replaced=replaced,
        )

    def unregister(self, name: str) -> bool:
        """Remove a listener by name.

        Args:
            name: Listener name.

        Returns:
            True if a listener was removed, False if the name was unknown.
        """
        if self._listeners.pop(name, None) is None:
            return False
        self._rebuild_index()
        self._logger.info("listener_unregistered", listener=name)
        return True

    def enable(self, name: str) -> bool:
        """Enable a listener by name. Returns False if the name is unknown."""
        listener = self._listeners.get(name)
        if listener is None:
            return False
        listener.enable()
        self._rebuild_index()
        return True

    def disable(self, name: str) -> bool:
        """Disable a listener by name. Returns False if the name is unknown."""
        listener = self._listeners.get(name)
        if listener is None:
            return False
        listener.disable()
        self._rebuild_index()
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, name: str) -> EventListenerProtocol | None:
        """Look up a listener by name."""
        return self._listeners.get(name)

    def listeners(self) -> list[EventListenerProtocol]:
        """All registered listeners in registration order."""
        return list(self._listeners.values())

    def listeners_for(self, event_type: str) -> tuple[EventListenerProtocol, ...]:
        """Listeners subscribed to an event type, in dispatch order."""
        return self._index.get(event_type, ())

    def event_types(self) -> list[str]:
        """Event types with at least one subscribed listener."""
        return sorted(self._index)

    def status(self) -> list[dict[str, Any]]:
        """Snapshot of every listener's registration state.

        Returns:
            One dict per listener with name, event_types, enabled, priority.
        """
        return [
            {
                "name": listener.name,
                "event_types": sorted(listener.event_types),
                "enabled": listener.enabled,
                "priority": listener.priority,
            }
            for listener in self._listeners.values()
        ]

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def dispatch(self, event: DomainEvent) -> None:
        """Fan an event out to every listener subscribed to its type.

        Listeners are invoked in ascending priority order. Completion order is
        unspecified. Failures are caught and logged per listener; dispatch
        never raises.

        Args:
            event: Lifecycle event to dispatch.
        """
        listeners = self.listeners_for(event.event_type)

        if not listeners:
            self._logger.debug(
                "no_listeners_for_event",
                event_type=event.event_type,
                event_id=event.event_id,
            )
            return

        results = await asyncio.gather(
            *(listener.handle(event) for listener in listeners),
            return_exceptions=True,
        )

        for listener, result in zip(listeners, results, strict=True):
            if isinstance(result, Exception):
                self._logger.error(
                    "listener_dispatch_failed",
                    error=result,
                    listener=listener.name,
                    event_type=event.event_type,
                    event_id=event.event_id,
                )

    async def schedule(self, event: DomainEvent) -> None:
        """Start ``dispatch`` for an event in the background and return.

        The task is kept until it finishes so it is not garbage collected
        mid-flight and ``drain`` can wait for it.
        """
        task = asyncio.create_task(
            self.dispatch(event), name=f"listener-dispatch:{event.event_id}"
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait until every scheduled dispatch has settled."""
        while self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def pending_count(self) -> int:
        return len(self._pending)

    def bind(
        self,
        event_bus: EventBusProtocol,
        event_types: Iterable[str] = SUPPORTED_LIFECYCLE_EVENTS,
    ) -> None:
        """Subscribe ``schedule`` to lifecycle event types on a bus.

        Args:
            event_bus: Bus carrying lifecycle events.
            event_types: Tags to subscribe (defaults to every lifecycle event).
        """
        for event_type in event_types:
            event_bus.subscribe(event_type, self.schedule)

    def _rebuild_index(self) -> None:
        # Disabled listeners stay indexed; handle() is a no-op for them.
        grouped: dict[str, list[EventListenerProtocol]] = defaultdict(list)
        for listener in self._listeners.values():
            for event_type in listener.event_types:
                grouped[event_type].append(listener)

        self._index = {
            event_type: tuple(sorted(listeners, key=lambda item: item.priority))
            for event_type, listeners in grouped.items()
        }
