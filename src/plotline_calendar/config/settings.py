from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "PlotLine Calendar"
APP_AUTHOR = "PlotLine"


@dataclass(frozen=True)
class BackendSettings:
    base_url: Optional[str]
    timeout_seconds: float

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


@dataclass(frozen=True)
class RecurrenceSettings:
    horizon_months: int


@dataclass(frozen=True)
class CalendarSettings:
    timezone: str
    week_start: str

    @property
    def first_weekday(self) -> int:
        """Python weekday number (Monday == 0) that opens a week row."""

        return 0 if self.week_start.lower() == "monday" else 6


@dataclass(frozen=True)
class SessionSettings:
    username: str


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    backend: BackendSettings
    recurrence: RecurrenceSettings
    calendar: CalendarSettings
    session: SessionSettings
    logging: LoggingSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    backend = BackendSettings(
        base_url=os.getenv("PLOTLINE_BACKEND_URL", "http://localhost:8080"),
        timeout_seconds=_float_from_env("PLOTLINE_BACKEND_TIMEOUT_SECONDS", 30.0),
    )

    recurrence = RecurrenceSettings(
        horizon_months=_int_from_env("PLOTLINE_HORIZON_MONTHS", 6),
    )

    calendar = CalendarSettings(
        timezone=os.getenv("PLOTLINE_TIMEZONE", "UTC"),
        week_start=os.getenv("PLOTLINE_WEEK_START", "sunday"),
    )

    session = SessionSettings(username=os.getenv("PLOTLINE_USERNAME", "Guest"))

    logging_settings = LoggingSettings(
        level=os.getenv("PLOTLINE_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("PLOTLINE_LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR)),
    )

    return AppSettings(
        backend=backend,
        recurrence=recurrence,
        calendar=calendar,
        session=session,
        logging=logging_settings,
    )
