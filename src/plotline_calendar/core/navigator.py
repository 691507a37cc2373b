from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Union

from dateutil.relativedelta import relativedelta

from ..domain import DisplayMode

logger = logging.getLogger(__name__)

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY


def days_in_month(anchor: date) -> List[date]:
    """Every date of the month containing ``anchor``, first to last."""

    _, length = calendar.monthrange(anchor.year, anchor.month)
    first = anchor.replace(day=1)
    return [first.replace(day=index) for index in range(1, length + 1)]


def start_of_week(anchor: date, first_weekday: int = SUNDAY) -> date:
    offset = (anchor.weekday() - first_weekday) % 7
    try:
        return anchor - timedelta(days=offset)
    except OverflowError:
        return anchor


@dataclass
class CalendarNavigator:
    """Cursor over the calendar: a focused date plus a month/week display mode.

    Stepping never fails; an unrepresentable target date leaves the cursor
    where it was.
    """

    focused_date: date = field(default_factory=date.today)
    display_mode: DisplayMode = DisplayMode.MONTH
    first_weekday: int = SUNDAY
    selected_day: Optional[date] = None

    def _shift(self, step: Union[relativedelta, timedelta]) -> None:
        try:
            self.focused_date = self.focused_date + step
        except (OverflowError, ValueError):
            logger.debug("Cannot move focus from %s by %s", self.focused_date, step)

    def next_month(self) -> None:
        self._shift(relativedelta(months=1))

    def previous_month(self) -> None:
        self._shift(relativedelta(months=-1))

    def next_week(self) -> None:
        self._shift(relativedelta(weeks=1))

    def previous_week(self) -> None:
        self._shift(relativedelta(weeks=-1))

    def show_month_view(self) -> None:
        self.display_mode = DisplayMode.MONTH

    def show_week_view(self) -> None:
        self.display_mode = DisplayMode.WEEK

    def step_forward(self) -> None:
        if self.display_mode is DisplayMode.WEEK:
            self.next_week()
        else:
            self.next_month()

    def step_backward(self) -> None:
        if self.display_mode is DisplayMode.WEEK:
            self.previous_week()
        else:
            self.previous_month()

    def select_day(self, day: date) -> None:
        self.selected_day = day

    def clear_selection(self) -> None:
        self.selected_day = None

    def default_event_date(self) -> date:
        """Date a new-event form starts on: the selected day, else the focus."""

        return self.selected_day or self.focused_date

    def days_in_current_month(self) -> List[date]:
        return days_in_month(self.focused_date)

    def week_days(self) -> List[date]:
        start = start_of_week(self.focused_date, self.first_weekday)
        days: list[date] = []
        for offset in range(7):
            try:
                days.append(start + timedelta(days=offset))
            except OverflowError:
                break
        return days

    def visible_days(self) -> List[date]:
        if self.display_mode is DisplayMode.WEEK:
            return self.week_days()
        return self.days_in_current_month()

    def leading_blank_days(self) -> int:
        """Empty grid cells before the 1st when rows open on ``first_weekday``."""

        first = self.focused_date.replace(day=1)
        return (first.weekday() - self.first_weekday) % 7

    def month_title(self) -> str:
        return f"{calendar.month_name[self.focused_date.month]} {self.focused_date.year}"

    def week_title(self) -> str:
        start = start_of_week(self.focused_date, self.first_weekday)
        return f"Week of {calendar.month_abbr[start.month]} {start.day}, {start.year}"


__all__ = ["CalendarNavigator", "MONDAY", "SUNDAY", "days_in_month", "start_of_week"]
