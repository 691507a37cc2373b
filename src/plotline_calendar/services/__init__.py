"""Application services orchestrating data access and the calendar engine."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext, Session
from .sync import SyncController

__all__ = ["CalendarService", "ServiceContext", "Session", "SyncController"]
