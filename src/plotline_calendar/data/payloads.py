"""Wire payloads exchanged with the backend's ``/calendar`` endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain import Event


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EventPayload(_WireModel):
    id: str
    title: str = ""
    description: str = ""
    start_date: datetime
    end_date: datetime
    event_type: str = ""
    recurrence: str = "none"
    invited_friends: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            start_date=event.start_date,
            end_date=event.end_date,
            event_type=event.event_type,
            recurrence=event.recurrence,
            invited_friends=list(event.invited_friends),
        )

    def to_domain(self) -> Event:
        return Event(
            id=self.id,
            title=self.title,
            description=self.description,
            start_date=self.start_date,
            end_date=self.end_date,
            event_type=self.event_type,
            recurrence=self.recurrence,
            invited_friends=list(self.invited_friends),
        )


class EventRequest(EventPayload):
    """Body of ``create-event`` and ``update-event``."""

    username: str

    @classmethod
    def for_user(cls, event: Event, username: str) -> "EventRequest":
        return cls(username=username, **EventPayload.from_domain(event).model_dump())


class DeleteEventRequest(_WireModel):
    username: str
    event_id: str


class EventResponse(_WireModel):
    success: bool
    error: Optional[str] = None
    event: Optional[EventPayload] = None


class EventsResponse(_WireModel):
    success: bool
    error: Optional[str] = None
    events: Optional[List[EventPayload]] = None


class DeleteEventResponse(_WireModel):
    success: bool
    error: Optional[str] = None


__all__ = [
    "DeleteEventRequest",
    "DeleteEventResponse",
    "EventPayload",
    "EventRequest",
    "EventResponse",
    "EventsResponse",
]
