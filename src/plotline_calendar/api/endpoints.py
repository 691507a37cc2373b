from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..domain import DisplayMode
from .registry import register_api
from .serializers import serialize_occurrence
from .state import api_state

NAVIGATION_STEPS = ("next_month", "previous_month", "next_week", "previous_week")


def _parse_datetime(timestamp: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO timestamp: {timestamp}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _day_summary(day: date) -> Dict[str, Any]:
    calendar = api_state.calendar
    return {
        "day": day.isoformat(),
        "has_event": calendar.has_event(day),
        "accent": calendar.day_accent(day).value,
        "occurrences": [serialize_occurrence(item) for item in calendar.occurrences_on_day(day)],
    }


@register_api(
    "calendar_state",
    description="Return the focused date, display mode and the visible days with their occurrences.",
    category="calendar",
    tags=("read", "navigation"),
)
def calendar_state() -> Dict[str, Any]:
    calendar = api_state.calendar
    navigator = calendar.navigator
    return {
        "focused_date": calendar.focused_date.isoformat(),
        "display_mode": calendar.display_mode.value,
        "selected_day": navigator.selected_day.isoformat() if navigator.selected_day else None,
        "title": navigator.month_title() if calendar.display_mode is DisplayMode.MONTH else navigator.week_title(),
        "leading_blank_days": navigator.leading_blank_days(),
        "days": [_day_summary(day) for day in calendar.visible_days()],
        "last_error": calendar.last_error,
    }


@register_api(
    "occurrences_on_day",
    description="Return the ordered occurrences overlapping a specific day.",
    category="calendar",
    tags=("read",),
)
def occurrences_on_day(day: str) -> Dict[str, Any]:
    target = _parse_date(day)
    occurrences = api_state.calendar.occurrences_on_day(target)
    return {"day": target.isoformat(), "occurrences": [serialize_occurrence(item) for item in occurrences]}


@register_api(
    "has_event",
    description="Report whether any occurrence touches the given calendar day.",
    category="calendar",
    tags=("read",),
)
def has_event(day: str) -> Dict[str, Any]:
    target = _parse_date(day)
    return {"day": target.isoformat(), "has_event": api_state.calendar.has_event(target)}


@register_api(
    "navigate",
    description="Move the focused date by one month or one week in either direction.",
    category="navigation",
    tags=("navigation",),
)
def navigate(step: str) -> Dict[str, Any]:
    if step not in NAVIGATION_STEPS:
        raise ValueError(f"step must be one of {', '.join(NAVIGATION_STEPS)}")
    getattr(api_state.calendar, step)()
    return {"focused_date": api_state.calendar.focused_date.isoformat()}


@register_api(
    "set_display_mode",
    description="Switch between month and week display without moving the focused date.",
    category="navigation",
    tags=("navigation",),
)
def set_display_mode(mode: str) -> Dict[str, Any]:
    display_mode = DisplayMode(mode)
    if display_mode is DisplayMode.MONTH:
        api_state.calendar.show_month_view()
    else:
        api_state.calendar.show_week_view()
    return {"display_mode": api_state.calendar.display_mode.value}


@register_api(
    "select_day",
    description="Select a day (or clear the selection when no day is given).",
    category="navigation",
    tags=("navigation",),
)
def select_day(day: Optional[str] = None) -> Dict[str, Any]:
    api_state.calendar.select_day(_parse_date(day) if day else None)
    selected = api_state.calendar.navigator.default_event_date()
    return {"default_event_date": selected.isoformat()}


@register_api(
    "refresh_events",
    description="Re-fetch master events from the backend and re-expand recurrences.",
    category="sync",
    tags=("sync",),
)
async def refresh_events() -> Dict[str, Any]:
    await api_state.calendar.refresh()
    return _sync_result()


@register_api(
    "create_event",
    description="Create an event on the backend and refresh the calendar.",
    category="sync",
    tags=("write",),
)
async def create_event(
    *,
    title: str,
    start_date: str,
    end_date: str,
    description: str = "",
    event_type: str = "",
    recurrence: str = "none",
    invited_friends: Optional[List[str]] = None,
) -> Dict[str, Any]:
    await api_state.calendar.create_event(
        title=title,
        description=description,
        start_date=_parse_datetime(start_date),
        end_date=_parse_datetime(end_date),
        event_type=event_type,
        recurrence=recurrence,
        invited_friends=invited_friends or (),
    )
    return _sync_result()


@register_api(
    "update_event",
    description="Edit fields of a master event on the backend and refresh the calendar.",
    category="sync",
    tags=("write",),
)
async def update_event(
    *,
    event_id: str,
    title: Optional[str] = None,
    description: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    event_type: Optional[str] = None,
    recurrence: Optional[str] = None,
    invited_friends: Optional[List[str]] = None,
) -> Dict[str, Any]:
    master = api_state.context.store.get(event_id)
    if master is None:
        raise ValueError(f"Event '{event_id}' not found.")
    changes: Dict[str, Any] = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if start_date is not None:
        changes["start_date"] = _parse_datetime(start_date)
    if end_date is not None:
        changes["end_date"] = _parse_datetime(end_date)
    if event_type is not None:
        changes["event_type"] = event_type
    if recurrence is not None:
        changes["recurrence"] = recurrence
    if invited_friends is not None:
        changes["invited_friends"] = list(invited_friends)
    await api_state.calendar.update_event(replace(master, **changes))
    return _sync_result()


@register_api(
    "delete_event",
    description="Delete a master event (and with it every recurrence) from the backend.",
    category="sync",
    tags=("write",),
)
async def delete_event(event_id: str) -> Dict[str, Any]:
    await api_state.calendar.delete_event(event_id)
    return _sync_result()


@register_api(
    "delete_events_by_type",
    description="Delete every event of the given type, e.g. all rent reminders.",
    category="sync",
    tags=("write",),
)
async def delete_events_by_type(event_type: str) -> Dict[str, Any]:
    await api_state.calendar.delete_events_by_type(event_type)
    return _sync_result()


def _sync_result() -> Dict[str, Any]:
    return {
        "masters": len(api_state.context.store),
        "occurrences": len(api_state.calendar.controller.occurrences),
        "error": api_state.calendar.last_error,
    }
