from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import AppSettings, get_settings
from ..data import BackendGateway, EventStore
from ..data.repositories import EventCollaborator, EventRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """The signed-in user the calendar acts on behalf of."""

    username: str


def resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return timezone.utc


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, session, gateway and store."""

    session: Session
    settings: AppSettings = field(default_factory=get_settings)
    gateway: Optional[BackendGateway] = None
    events: Optional[EventCollaborator] = None
    store: EventStore = field(default_factory=EventStore)
    tz: tzinfo = field(init=False)

    def __post_init__(self) -> None:
        if self.gateway is None:
            self.gateway = BackendGateway(self.settings.backend)
        if self.events is None:
            self.events = EventRepository(gateway=self.gateway)
        self.tz = resolve_timezone(self.settings.calendar.timezone)
