"""Recurrence expansion, day queries and calendar navigation."""

from .day_index import DayIndex, day_bounds, has_event, occurrences_on_day
from .navigator import MONDAY, SUNDAY, CalendarNavigator, days_in_month, start_of_week
from .recurrence import DEFAULT_HORIZON_MONTHS, compute_horizon, expand, iter_expand

__all__ = [
    "CalendarNavigator",
    "DEFAULT_HORIZON_MONTHS",
    "DayIndex",
    "MONDAY",
    "SUNDAY",
    "compute_horizon",
    "day_bounds",
    "days_in_month",
    "expand",
    "has_event",
    "iter_expand",
    "occurrences_on_day",
    "start_of_week",
]
