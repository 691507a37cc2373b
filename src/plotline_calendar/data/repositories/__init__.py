"""Backend repositories for first-class domain objects."""

from __future__ import annotations

from .events import EventCollaborator, EventRepository

__all__ = ["EventCollaborator", "EventRepository"]
