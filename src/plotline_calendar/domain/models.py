from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import List, Union

from .enums import Recurrence


@dataclass(slots=True)
class Event:
    """Master record of a (possibly recurring) calendar event."""

    id: str
    title: str
    start_date: datetime
    end_date: datetime
    description: str = ""
    event_type: str = ""
    recurrence: str = Recurrence.NONE.value
    invited_friends: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Naive timestamps are treated as UTC instants.
        if self.start_date.tzinfo is None:
            self.start_date = self.start_date.replace(tzinfo=timezone.utc)
        if self.end_date.tzinfo is None:
            self.end_date = self.end_date.replace(tzinfo=timezone.utc)

    @property
    def rule(self) -> Recurrence:
        return Recurrence.parse(self.recurrence)

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start_date

    def shifted_to(self, start: datetime) -> "Event":
        """Copy of this event starting at ``start`` with the same duration."""

        return replace(
            self,
            start_date=start,
            end_date=start + self.duration,
            invited_friends=list(self.invited_friends),
        )


@dataclass(frozen=True, slots=True)
class MasterOccurrence:
    """The master event shown at its own dates."""

    event: Event

    @property
    def master_id(self) -> str:
        return self.event.id

    @property
    def sequence(self) -> int:
        return 0

    @property
    def start_date(self) -> datetime:
        return self.event.start_date

    @property
    def end_date(self) -> datetime:
        return self.event.end_date

    @property
    def event_type(self) -> str:
        return self.event.event_type

    @property
    def is_derived(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class DerivedOccurrence:
    """A display-only projection of a recurring master onto a later date.

    ``sequence`` counts from 1 for the first repetition after the master.
    Mutations must always target ``master_id``.
    """

    event: Event
    master_id: str
    sequence: int

    @property
    def start_date(self) -> datetime:
        return self.event.start_date

    @property
    def end_date(self) -> datetime:
        return self.event.end_date

    @property
    def event_type(self) -> str:
        return self.event.event_type

    @property
    def is_derived(self) -> bool:
        return True


Occurrence = Union[MasterOccurrence, DerivedOccurrence]


__all__ = ["DerivedOccurrence", "Event", "MasterOccurrence", "Occurrence"]
