"""Materialise recurring master events into concrete occurrences.

Expansion is pure given ``now``: the horizon is ``now`` plus a number of
calendar months, recomputed on every call. Steps are taken on the wall
clock of the calendar timezone: a weekly 09:00 stays at 09:00 across a
DST change and monthly steps clamp on local month ends.

Each recurring master yields itself followed by copies whose start
advances from the previous copy (so a monthly series anchored on the
31st settles on the clamped day after the first short month).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, Iterator, List, Optional

from dateutil.relativedelta import relativedelta

from ..domain import DerivedOccurrence, Event, MasterOccurrence, Occurrence, Recurrence

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_MONTHS = 6

RECURRENCE_STEPS: Dict[Recurrence, relativedelta] = {
    Recurrence.WEEKLY: relativedelta(weeks=1),
    Recurrence.BIWEEKLY: relativedelta(weeks=2),
    Recurrence.MONTHLY: relativedelta(months=1),
}


def compute_horizon(
    now: datetime,
    months: int = DEFAULT_HORIZON_MONTHS,
    tz: tzinfo = timezone.utc,
) -> Optional[datetime]:
    """Return ``now + months`` on the calendar of ``tz`` as a UTC instant.

    ``None`` means the calendar cannot represent the horizon.
    """

    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        return (now.astimezone(tz) + relativedelta(months=months)).astimezone(timezone.utc)
    except (OverflowError, ValueError):
        logger.debug("Horizon %s months after %s is out of range", months, now)
        return None


def iter_recurring_instances(
    event: Event,
    horizon: datetime,
    tz: tzinfo = timezone.utc,
) -> Iterator[DerivedOccurrence]:
    """Yield the derived instances of ``event`` strictly before ``horizon``.

    Nothing is yielded for non-recurring or unrecognised rules. Date
    arithmetic that leaves the representable range ends the series.
    """

    step = RECURRENCE_STEPS.get(event.rule)
    if step is None:
        return

    sequence = 0
    try:
        cursor = event.start_date.astimezone(tz)
    except (OverflowError, ValueError):
        logger.debug("Cannot place event %s on the calendar", event.id)
        return
    while cursor < horizon:
        try:
            cursor = cursor + step
            if cursor >= horizon:
                return
            shifted = event.shifted_to(cursor.astimezone(event.start_date.tzinfo))
        except (OverflowError, ValueError):
            logger.debug("Stopped expanding event %s after %d instance(s)", event.id, sequence)
            return
        sequence += 1
        yield DerivedOccurrence(event=shifted, master_id=event.id, sequence=sequence)


def iter_expand(
    events: Iterable[Event],
    now: datetime,
    *,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
    tz: tzinfo = timezone.utc,
) -> Iterator[Occurrence]:
    horizon = compute_horizon(now, horizon_months, tz)
    for event in events:
        yield MasterOccurrence(event)
        if horizon is not None:
            yield from iter_recurring_instances(event, horizon, tz)


def expand(
    events: Iterable[Event],
    now: datetime,
    *,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
    tz: tzinfo = timezone.utc,
) -> List[Occurrence]:
    """Expand master events into the ordered occurrence list.

    Each master appears first, immediately followed by its derived
    instances in chronological order.
    """

    return list(iter_expand(events, now, horizon_months=horizon_months, tz=tz))


__all__ = [
    "DEFAULT_HORIZON_MONTHS",
    "RECURRENCE_STEPS",
    "compute_horizon",
    "expand",
    "iter_expand",
    "iter_recurring_instances",
]
