"""Domain entities."""

from eventq.domain.entities.event import Event

__all__ = ["Event"]
