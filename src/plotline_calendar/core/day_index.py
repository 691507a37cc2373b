"""Day-level queries over an expanded occurrence list.

Two containment rules coexist:

* ``occurrences_on_day`` uses the day's half-open ``[midnight, next
  midnight)`` window: an occurrence is listed when it starts before the
  next midnight and ends after this midnight.
* ``has_event`` compares calendar dates only: the day is marked when it
  falls between the local dates of the occurrence's start and end,
  inclusive. An occurrence ending exactly at midnight therefore marks the
  following day without being listed on it.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..domain import DayAccent, Occurrence, sort_by_rank

DayLike = Union[date, datetime]

LONG_SPAN_DAYS = 366


def local_day(value: DayLike, tz: tzinfo) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(tz).date()
    return value


def day_bounds(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """Local midnight of ``day`` and of the day after it."""

    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def overlaps_day(occurrence: Occurrence, day_start: datetime, day_end: datetime) -> bool:
    start = occurrence.start_date
    if start >= day_end:
        return False
    end = occurrence.end_date
    if end > day_start:
        return True
    # Zero-length occurrences belong to the day holding their instant.
    return end == start and start >= day_start


def _day_span(occurrence: Occurrence, tz: tzinfo) -> Optional[Tuple[date, date]]:
    try:
        return occurrence.start_date.astimezone(tz).date(), occurrence.end_date.astimezone(tz).date()
    except (OverflowError, ValueError):
        return None


def _date_range(start: date, end: date) -> Iterator[date]:
    delta = (end - start).days
    for index in range(delta + 1):
        yield start + timedelta(days=index)


def occurrences_on_day(
    day: DayLike,
    occurrences: Iterable[Occurrence],
    tz: tzinfo = timezone.utc,
) -> List[Occurrence]:
    """Occurrences overlapping ``day``, rent first, then subscriptions, then goals."""

    target = local_day(day, tz)
    try:
        day_start, day_end = day_bounds(target, tz)
    except OverflowError:
        return []
    matches = [item for item in occurrences if overlaps_day(item, day_start, day_end)]
    return sort_by_rank(matches, lambda item: item.event_type)


def has_event(day: DayLike, occurrences: Iterable[Occurrence], tz: tzinfo = timezone.utc) -> bool:
    target = local_day(day, tz)
    for item in occurrences:
        span = _day_span(item, tz)
        if span is not None and span[0] <= target <= span[1]:
            return True
    return False


def accent_for(occurrences: Sequence[Occurrence]) -> DayAccent:
    if not occurrences:
        return DayAccent.NONE
    if any(item.event_type == "rent" for item in occurrences):
        return DayAccent.RENT
    if any(item.event_type.lower().startswith("subscription") for item in occurrences):
        return DayAccent.SUBSCRIPTION
    return DayAccent.DEFAULT


@dataclass
class DayIndex:
    """Occurrences bucketed by the local dates they touch.

    Buckets hold positions into ``occurrences`` in ascending order, so
    every query sees candidates in the original expansion order before
    the rank sort is applied. Occurrences spanning more than
    ``LONG_SPAN_DAYS`` local dates are kept out of the buckets and scanned
    on every query instead.
    """

    occurrences: Tuple[Occurrence, ...] = ()
    tz: tzinfo = timezone.utc
    days_index: Dict[date, List[int]] = field(default_factory=dict, init=False, repr=False)
    long_spans: List[int] = field(default_factory=list, init=False, repr=False)
    _spans: Dict[int, Tuple[date, date]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.occurrences = tuple(self.occurrences)
        for position, occurrence in enumerate(self.occurrences):
            self._index(position, occurrence)

    @classmethod
    def build(cls, occurrences: Iterable[Occurrence], tz: tzinfo = timezone.utc) -> "DayIndex":
        return cls(occurrences=tuple(occurrences), tz=tz)

    def _index(self, position: int, occurrence: Occurrence) -> None:
        span = _day_span(occurrence, self.tz)
        if span is None:
            return
        first, last = span
        # An occurrence ending on an earlier date than it starts is on no day.
        if first > last:
            return
        self._spans[position] = span
        if (last - first).days > LONG_SPAN_DAYS:
            self.long_spans.append(position)
            return
        for day in _date_range(first, last):
            self.days_index.setdefault(day, []).append(position)

    def __len__(self) -> int:
        return len(self.occurrences)

    def _positions(self, day: date) -> List[int]:
        bucket = self.days_index.get(day, [])
        if not self.long_spans:
            return bucket
        return list(heapq.merge(bucket, self.long_spans))

    def _candidates(self, day: date) -> List[Occurrence]:
        return [self.occurrences[position] for position in self._positions(day)]

    def occurrences_on_day(self, day: DayLike) -> List[Occurrence]:
        target = local_day(day, self.tz)
        return occurrences_on_day(target, self._candidates(target), self.tz)

    def has_event(self, day: DayLike) -> bool:
        target = local_day(day, self.tz)
        for position in self._positions(target):
            first, last = self._spans[position]
            if first <= target <= last:
                return True
        return False

    def day_accent(self, day: DayLike) -> DayAccent:
        return accent_for(self.occurrences_on_day(day))

    def days_with_events(self, days: Iterable[date]) -> List[date]:
        return [day for day in days if self.has_event(day)]


__all__ = [
    "DayIndex",
    "accent_for",
    "day_bounds",
    "has_event",
    "local_day",
    "occurrences_on_day",
    "overlaps_day",
]
