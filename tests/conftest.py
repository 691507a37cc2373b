from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import pytest

from plotline_calendar.config import (
    AppSettings,
    BackendSettings,
    CalendarSettings,
    LoggingSettings,
    RecurrenceSettings,
    SessionSettings,
)
from plotline_calendar.data import BackendTransportError
from plotline_calendar.domain import Event

UTC = timezone.utc


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=UTC)


def make_event(
    event_id: str = "1",
    *,
    start: Optional[datetime] = None,
    duration: timedelta = timedelta(hours=1),
    end: Optional[datetime] = None,
    title: str = "Event",
    event_type: str = "other",
    recurrence: str = "none",
) -> Event:
    start = start or at(2025, 3, 3, 9)
    return Event(
        id=event_id,
        title=title,
        description="",
        start_date=start,
        end_date=end if end is not None else start + duration,
        event_type=event_type,
        recurrence=recurrence,
    )


class FakeCollaborator:
    """In-memory stand-in for the backend calendar endpoints."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self.remote: Dict[str, Event] = {event.id: event for event in events}
        self.calls: List[Tuple[str, str]] = []
        self.failing: Set[str] = set()

    def _record(self, operation: str, argument: str) -> None:
        self.calls.append((operation, argument))
        if operation in self.failing:
            raise BackendTransportError(f"{operation} is offline")

    @property
    def operations(self) -> List[str]:
        return [operation for operation, _ in self.calls]

    async def list_events(self, username: str) -> List[Event]:
        self._record("list", username)
        return list(self.remote.values())

    async def create_event(self, event: Event, username: str) -> Event:
        self._record("create", event.id)
        saved = replace(event, title=event.title.strip())
        self.remote[saved.id] = saved
        return saved

    async def update_event(self, event: Event, username: str) -> Event:
        self._record("update", event.id)
        self.remote[event.id] = event
        return event

    async def delete_event(self, event_id: str, username: str) -> None:
        self._record("delete", event_id)
        self.remote.pop(event_id, None)

    async def delete_events_by_type(self, event_type: str, username: str) -> None:
        self._record("delete_by_type", event_type)
        self.remote = {key: event for key, event in self.remote.items() if event.event_type != event_type}


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        backend=BackendSettings(base_url="http://backend.test", timeout_seconds=5.0),
        recurrence=RecurrenceSettings(horizon_months=6),
        calendar=CalendarSettings(timezone="UTC", week_start="sunday"),
        session=SessionSettings(username="alex"),
        logging=LoggingSettings(level="DEBUG", directory=tmp_path),
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: at(2025, 3, 3, 9)
