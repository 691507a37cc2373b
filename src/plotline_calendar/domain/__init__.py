"""Domain models for the calendar engine."""

from __future__ import annotations

from .enums import DayAccent, DisplayMode, Recurrence
from .models import DerivedOccurrence, Event, MasterOccurrence, Occurrence
from .ordering import EventRank, RankRule, rank_for, sort_by_rank

__all__ = [
    "DayAccent",
    "DerivedOccurrence",
    "DisplayMode",
    "Event",
    "EventRank",
    "MasterOccurrence",
    "Occurrence",
    "RankRule",
    "Recurrence",
    "rank_for",
    "sort_by_rank",
]
