"""Synchronous event queue with default and dynamic listeners."""

import logging
from collections.abc import Callable, Mapping
from contextlib import suppress
from types import MappingProxyType
from typing import Any, TypeVar

from eventq.domain.entities.event import Event
from eventq.domain.exceptions import QueueConfigurationError

logger = logging.getLogger(__name__)

# Listener type: function that takes an Event; the return value is ignored
EventListener = Callable[[Event], Any]

L = TypeVar("L", bound=EventListener)

# Methods attached to a separate target object
BOUND_METHODS = ("on", "off", "trigger", "get_parent")


def _describe(listener: EventListener) -> str:
    """Return a readable name for a listener, for log messages."""
    return getattr(listener, "__qualname__", None) or repr(listener)


def event_listener(event_name: str) -> Callable[[L], L]:
    """Decorator for tagging a function as a listener for an event.

    Usage:
        @event_listener("chat")
        def on_chat(event: Event) -> None:
            ...

        queue.register_listener(on_chat)

    Args:
        event_name: The event name this listener handles.

    Returns:
        Decorator function.
    """

    def decorator(func: L) -> L:
        func._event_name = event_name  # type: ignore[attr-defined]
        return func

    return decorator


class EventQueue:
    """Event queue with simple synchronous listeners.

    The queue is bound to a target object. When a target is given, ``on``,
    ``off``, ``trigger`` and ``get_parent`` are attached to it, so the target
    itself gains the event API. Without a target the queue listens to itself.

    Default listeners are fixed at construction, one per event name. Dynamic
    listeners are added with ``on`` and removed with ``off``. On trigger the
    dynamic listeners run newest first, then the default listener unless a
    listener prevented or halted the event.
    """

    def __init__(
        self,
        defaults: Mapping[str, EventListener] | None = None,
        target: Any = None,
    ) -> None:
        """Initialize the queue.

        Args:
            defaults: Mapping of event name to default listener.
            target: Object to attach to. Defaults to the queue itself.

        Raises:
            QueueConfigurationError: If the defaults are invalid or the
                target cannot take the event methods.
        """
        self._listeners: dict[str, list[EventListener]] = {}
        self._defaults: Mapping[str, EventListener] = MappingProxyType(
            self._validate_defaults(defaults)
        )
        self._target: Any = self if target is None else target
        if target is not None:
            self._bind(target)

    @staticmethod
    def _validate_defaults(
        defaults: Mapping[str, EventListener] | None,
    ) -> dict[str, EventListener]:
        if defaults is None:
            return {}
        if not isinstance(defaults, Mapping):
            raise QueueConfigurationError(
                f"defaults must be a mapping, got {type(defaults).__name__}"
            )
        validated: dict[str, EventListener] = {}
        for event_name, listener in defaults.items():
            if not isinstance(event_name, str):
                raise QueueConfigurationError(
                    f"Default event name must be a string, got {event_name!r}"
                )
            if not callable(listener):
                raise QueueConfigurationError(
                    f"Default listener for '{event_name}' is not callable"
                )
            validated[event_name] = listener
        return validated

    def _bind(self, target: Any) -> None:
        attached: list[str] = []
        for attr in BOUND_METHODS:
            try:
                setattr(target, attr, getattr(self, attr))
            except (AttributeError, TypeError) as e:
                # Leave the target as it was before construction
                for name in attached:
                    with suppress(AttributeError, TypeError):
                        delattr(target, name)
                raise QueueConfigurationError(
                    f"Cannot attach '{attr}' to {type(target).__name__} object",
                    target=target,
                ) from e
            attached.append(attr)
        logger.debug("Event queue bound to %s", type(target).__name__)

    def get_parent(self) -> Any:
        """Return the object this queue is bound to."""
        return self._target

    @property
    def defaults(self) -> Mapping[str, EventListener]:
        """Read-only view of the default listeners."""
        return self._defaults

    def on(self, event_name: str, listener: EventListener) -> Any:
        """Register a listener for an event.

        Args:
            event_name: The event name to listen for.
            listener: Called with the Event on every trigger.

        Returns:
            The bound target, for chaining.

        Raises:
            TypeError: If the listener is not callable.
        """
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {listener!r}")
        self._listeners.setdefault(event_name, []).append(listener)
        logger.debug("Registered listener for %s: %s", event_name, _describe(listener))
        return self._target

    def register_listener(self, listener: EventListener) -> Any:
        """Register a listener that was decorated with @event_listener.

        Args:
            listener: The decorated listener function.

        Returns:
            The bound target, for chaining.

        Raises:
            ValueError: If the listener has no _event_name attribute.
        """
        event_name = getattr(listener, "_event_name", None)
        if event_name is None:
            raise ValueError(
                f"Listener {_describe(listener)} has no _event_name attribute. "
                "Use the @event_listener decorator."
            )
        return self.on(event_name, listener)

    def off(self, event_name: str | None = None) -> Any:
        """Remove dynamic listeners. Default listeners are never removed.

        Args:
            event_name: Event to clear. If omitted, every event is cleared.

        Returns:
            The bound target, for chaining.
        """
        if event_name is None:
            self._listeners.clear()
            logger.debug("Removed all listeners")
        elif self._listeners.pop(event_name, None) is not None:
            logger.debug("Removed listeners for %s", event_name)
        return self._target

    def trigger(self, event_name: str, data: Any = None) -> Any:
        """Fire an event.

        Listeners run synchronously. Exceptions raised by a listener are
        not caught; they abort the rest of the dispatch.

        Args:
            event_name: The event to fire.
            data: Payload passed to listeners as ``event.data``.

        Returns:
            The bound target, for chaining.
        """
        event = Event(name=event_name, target=self._target, data=data)
        chain = self.listeners(event_name)
        logger.debug("Triggering %s (%d listeners)", event_name, len(chain))

        for listener in chain:
            listener(event)
            if event.is_halted():
                logger.debug("%s halted by %s", event_name, _describe(listener))
                break

        default = self._defaults.get(event_name)
        if default is None:
            return self._target
        if event.is_prevented() or event.is_halted():
            logger.debug("Default listener for %s suppressed", event_name)
            return self._target

        default(event)
        return self._target

    def listeners(self, event_name: str) -> tuple[EventListener, ...]:
        """Return the dynamic listeners for an event in dispatch order."""
        return tuple(reversed(self._listeners.get(event_name, ())))

    def has_default(self, event_name: str) -> bool:
        """Return whether a default listener exists for the event."""
        return event_name in self._defaults

    def event_names(self) -> list[str]:
        """Return the event names that currently have dynamic listeners."""
        return list(self._listeners)
