"""Outbound event queue.

The core never calls collaborators directly. Events are pushed onto this
queue during a tick and collaborators drain it once per tick. Optional
subscribers are also invoked synchronously on emit, which is handy for
logging and tests but never required.
"""

from __future__ import annotations

from collections import defaultdict
from typing import List, TypeVar
from collections.abc import Callable

T = TypeVar("T")


class EventQueue:
    """FIFO of domain events plus synchronous per-type subscribers.

    Example:
        queue = EventQueue()
        queue.emit(FeedingEvent(eater_id=a, prey_id=b, nutrition=12.0, frame=40))
        for event in queue.drain():
            scoreboard.handle(event)
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable]] = defaultdict(list)
        self._pending: List[object] = []

    def emit(self, event: object) -> None:
        """Queue an event and dispatch it to any subscribers of its type."""
        self._pending.append(event)
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in handlers:
                handler(event)

    def drain(self) -> List[object]:
        """Return all pending events in emit order and clear the queue."""
        events = self._pending
        self._pending = []
        return events

    def peek(self) -> List[object]:
        """Pending events without clearing them."""
        return list(self._pending)

    def pending_count(self) -> int:
        return len(self._pending)

    def of_type(self, event_type: type[T]) -> List[T]:
        """Pending events of one type (not cleared)."""
        return [event for event in self._pending if isinstance(event, event_type)]

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> bool:
        """Remove a handler; returns True if it was registered."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def clear(self) -> None:
        """Drop pending events and subscribers."""
        self._pending.clear()
        self._handlers.clear()
