"""Event entity passed to queue listeners."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=False)
class Event:
    """A single occurrence of a named event.

    A fresh instance is created for every trigger, so the flags never leak
    from one dispatch into the next. Both flags only ever go from False to
    True.

    Attributes:
        name: The event name that was triggered.
        target: The object the queue is bound to.
        data: Payload passed to trigger, if any.
    """

    name: str
    target: Any
    data: Any = None
    _prevented: bool = field(default=False, init=False, repr=False)
    _halted: bool = field(default=False, init=False, repr=False)

    @property
    def prevented(self) -> bool:
        """Whether the default listener has been suppressed."""
        return self._prevented

    @property
    def halted(self) -> bool:
        """Whether propagation to the remaining listeners has been stopped."""
        return self._halted

    def prevent_default(self) -> None:
        """Suppress the default listener for this occurrence."""
        object.__setattr__(self, "_prevented", True)

    def is_prevented(self) -> bool:
        """Return whether prevent_default has been called."""
        return self._prevented

    def halt(self) -> None:
        """Stop any remaining listeners, including the default, from running."""
        object.__setattr__(self, "_halted", True)

    def is_halted(self) -> bool:
        """Return whether halt has been called."""
        return self._halted
