"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    AppSettings,
    BackendSettings,
    CalendarSettings,
    LoggingSettings,
    RecurrenceSettings,
    SessionSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "BackendSettings",
    "CalendarSettings",
    "LoggingSettings",
    "RecurrenceSettings",
    "SessionSettings",
    "get_settings",
]
