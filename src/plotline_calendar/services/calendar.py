from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from ..core import CalendarNavigator
from ..core.day_index import DayLike
from ..domain import DayAccent, DisplayMode, Occurrence, Recurrence
from .context import ServiceContext
from .sync import EventTarget, SyncController


@dataclass(slots=True)
class CalendarService:
    """Queries and commands the presentation layer drives the calendar with."""

    context: ServiceContext
    sync: Optional[SyncController] = None
    navigator: CalendarNavigator = field(init=False)

    def __post_init__(self) -> None:
        if self.sync is None:
            self.sync = SyncController.from_context(self.context)
        self.navigator = CalendarNavigator(
            focused_date=datetime.now(self.context.tz).date(),
            first_weekday=self.context.settings.calendar.first_weekday,
        )

    @property
    def controller(self) -> SyncController:
        assert self.sync is not None
        return self.sync

    # queries

    @property
    def focused_date(self) -> date:
        return self.navigator.focused_date

    @property
    def display_mode(self) -> DisplayMode:
        return self.navigator.display_mode

    @property
    def last_error(self) -> Optional[str]:
        return self.controller.last_error

    def occurrences_on_day(self, day: DayLike) -> List[Occurrence]:
        return self.controller.index.occurrences_on_day(day)

    def has_event(self, day: DayLike) -> bool:
        return self.controller.index.has_event(day)

    def day_accent(self, day: DayLike) -> DayAccent:
        return self.controller.index.day_accent(day)

    def days_in_current_month(self) -> List[date]:
        return self.navigator.days_in_current_month()

    def visible_days(self) -> List[date]:
        return self.navigator.visible_days()

    # navigation

    def next_month(self) -> None:
        self.navigator.next_month()

    def previous_month(self) -> None:
        self.navigator.previous_month()

    def next_week(self) -> None:
        self.navigator.next_week()

    def previous_week(self) -> None:
        self.navigator.previous_week()

    def show_month_view(self) -> None:
        self.navigator.show_month_view()

    def show_week_view(self) -> None:
        self.navigator.show_week_view()

    def select_day(self, day: Optional[date]) -> None:
        if day is None:
            self.navigator.clear_selection()
        else:
            self.navigator.select_day(day)

    # mutations

    async def start(self) -> None:
        await self.controller.refresh()

    async def refresh(self) -> None:
        await self.controller.refresh()

    async def create_event(
        self,
        *,
        title: str,
        description: str,
        start_date: datetime,
        end_date: datetime,
        event_type: str,
        recurrence: Union[str, Recurrence] = Recurrence.NONE,
        invited_friends: Iterable[str] = (),
    ) -> None:
        await self.controller.create_event(
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
            event_type=event_type,
            recurrence=recurrence,
            invited_friends=invited_friends,
        )

    async def update_event(self, target: EventTarget) -> None:
        await self.controller.update_event(target)

    async def delete_event(self, target: Union[str, Occurrence]) -> None:
        await self.controller.delete_event(target)

    async def delete_events_by_type(self, event_type: str) -> None:
        await self.controller.delete_events_by_type(event_type)
