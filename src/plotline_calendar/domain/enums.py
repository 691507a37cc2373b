from __future__ import annotations

from enum import Enum


class Recurrence(str, Enum):
    NONE = "none"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: object) -> "Recurrence":
        """Map a raw recurrence string to a rule; anything unrecognised is ``NONE``."""

        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class DisplayMode(str, Enum):
    MONTH = "month"
    WEEK = "week"


class DayAccent(str, Enum):
    NONE = "none"
    RENT = "rent"
    SUBSCRIPTION = "subscription"
    DEFAULT = "default"
