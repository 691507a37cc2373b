from __future__ import annotations

from dataclasses import dataclass, field

from ..config import get_settings
from ..services import CalendarService, ServiceContext, Session


def _default_context() -> ServiceContext:
    settings = get_settings()
    return ServiceContext(session=Session(username=settings.session.username), settings=settings)


@dataclass(slots=True)
class ApiState:
    context: ServiceContext = field(default_factory=_default_context)
    calendar: CalendarService = field(init=False)

    def __post_init__(self) -> None:
        self.calendar = CalendarService(self.context)


api_state = ApiState()
