from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol, Type, TypeVar

import orjson
from pydantic import BaseModel, ValidationError

from ...domain import Event
from ..backend import BackendDecodeError, BackendGateway, BackendResponseError
from ..payloads import (
    DeleteEventRequest,
    DeleteEventResponse,
    EventRequest,
    EventResponse,
    EventsResponse,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class EventCollaborator(Protocol):
    """Remote operations the calendar engine relies on."""

    async def list_events(self, username: str) -> List[Event]: ...

    async def create_event(self, event: Event, username: str) -> Event: ...

    async def update_event(self, event: Event, username: str) -> Event: ...

    async def delete_event(self, event_id: str, username: str) -> None: ...

    async def delete_events_by_type(self, event_type: str, username: str) -> None: ...


def _decode(raw: bytes, model: Type[ModelT]) -> ModelT:
    try:
        return model.model_validate(orjson.loads(raw))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        raise BackendDecodeError(f"Could not decode {model.__name__}: {exc}") from exc


@dataclass(slots=True)
class EventRepository:
    """Calendar endpoints of the PlotLine backend."""

    gateway: BackendGateway
    prefix: str = "/calendar"

    async def list_events(self, username: str) -> List[Event]:
        raw = await self.gateway.request("GET", f"{self.prefix}/get-events", params={"username": username})
        envelope = _decode(raw, EventsResponse)
        if not envelope.success:
            raise BackendResponseError(envelope.error or "Unknown error")
        return [payload.to_domain() for payload in envelope.events or []]

    async def create_event(self, event: Event, username: str) -> Event:
        return await self._write("create-event", event, username)

    async def update_event(self, event: Event, username: str) -> Event:
        return await self._write("update-event", event, username)

    async def _write(self, endpoint: str, event: Event, username: str) -> Event:
        body = EventRequest.for_user(event, username).to_wire()
        raw = await self.gateway.request("POST", f"{self.prefix}/{endpoint}", payload=body)
        envelope = _decode(raw, EventResponse)
        if not envelope.success:
            raise BackendResponseError(envelope.error or "Unknown error")
        if envelope.event is None:
            raise BackendResponseError("No event returned from server.")
        return envelope.event.to_domain()

    async def delete_event(self, event_id: str, username: str) -> None:
        body = DeleteEventRequest(username=username, event_id=event_id).to_wire()
        raw = await self.gateway.request("POST", f"{self.prefix}/delete-event", payload=body)
        envelope = _decode(raw, DeleteEventResponse)
        if not envelope.success:
            raise BackendResponseError(envelope.error or "Unknown error")

    async def delete_events_by_type(self, event_type: str, username: str) -> None:
        # The backend answers with a plain-text confirmation; only the status matters.
        await self.gateway.request(
            "DELETE",
            f"{self.prefix}/delete-by-type",
            params={"username": username, "type": event_type},
        )
        logger.info("Deleted events of type %s from backend", event_type)
