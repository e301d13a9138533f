"""Event queue infrastructure."""

from eventq.infrastructure.events.queue import (
    EventListener,
    EventQueue,
    event_listener,
)

__all__ = [
    "EventListener",
    "EventQueue",
    "event_listener",
]
