"""Domain events and the outbound event queue."""

from lakesim.events.domain_events import (
    CatchEvent,
    EscapeEvent,
    FeedingEvent,
    HooksetEvent,
    LureBumpedEvent,
    MigratedEvent,
    SchoolDisbandedEvent,
    StrikeEvent,
    StrikeMissedEvent,
)
from lakesim.events.event_queue import EventQueue

__all__ = [
    "CatchEvent",
    "EscapeEvent",
    "EventQueue",
    "FeedingEvent",
    "HooksetEvent",
    "LureBumpedEvent",
    "MigratedEvent",
    "SchoolDisbandedEvent",
    "StrikeEvent",
    "StrikeMissedEvent",
]
