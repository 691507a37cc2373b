"""Mutation round trips against the backend and re-derivation of local state.

Every command is fire-and-forget for its caller: backend failures are
logged and kept as a display message on ``last_error``, never raised.
Local masters change only after the backend confirms a mutation, and the
occurrence index is rebuilt from the store after every change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone, tzinfo
from typing import Callable, Iterable, Optional, Tuple, Union
from uuid import uuid4

from ..core import DEFAULT_HORIZON_MONTHS, DayIndex, expand
from ..data import BackendError, EventStore
from ..data.repositories import EventCollaborator
from ..domain import DerivedOccurrence, Event, MasterOccurrence, Occurrence, Recurrence
from .context import ServiceContext, Session

logger = logging.getLogger(__name__)

EventTarget = Union[Event, Occurrence]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SyncController:
    session: Session
    collaborator: EventCollaborator
    store: EventStore = field(default_factory=EventStore)
    tz: tzinfo = timezone.utc
    horizon_months: int = DEFAULT_HORIZON_MONTHS
    clock: Callable[[], datetime] = _utc_now
    index: DayIndex = field(init=False)
    last_error: Optional[str] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.rebuild()

    @classmethod
    def from_context(cls, context: ServiceContext, **overrides) -> "SyncController":
        assert context.events is not None
        options = {
            "store": context.store,
            "tz": context.tz,
            "horizon_months": context.settings.recurrence.horizon_months,
        }
        options.update(overrides)
        return cls(session=context.session, collaborator=context.events, **options)

    @property
    def occurrences(self) -> Tuple[Occurrence, ...]:
        return self.index.occurrences

    def rebuild(self) -> DayIndex:
        """Re-expand the current masters against a fresh horizon."""

        occurrences = expand(
            self.store.snapshot(),
            self.clock(),
            horizon_months=self.horizon_months,
            tz=self.tz,
        )
        self.index = DayIndex.build(occurrences, self.tz)
        return self.index

    def _report(self, action: str, exc: BackendError) -> None:
        logger.error("Error %s: %s", action, exc)
        self.last_error = str(exc) or exc.__class__.__name__

    async def refresh(self) -> None:
        self.last_error = None
        await self._fetch()

    async def _fetch(self) -> None:
        username = self.session.username
        try:
            fetched = await self.collaborator.list_events(username)
        except BackendError as exc:
            self._report("fetching events", exc)
            return
        self.store.replace_all(fetched)
        index = self.rebuild()
        logger.info(
            "Fetched %d event(s) for user: %s and there are %d including recurrences",
            len(fetched),
            username,
            len(index),
        )

    async def create_event(
        self,
        *,
        title: str,
        description: str,
        start_date: datetime,
        end_date: datetime,
        event_type: str,
        recurrence: Union[str, Recurrence] = Recurrence.NONE,
        invited_friends: Iterable[str] = (),
    ) -> None:
        draft = Event(
            id=str(uuid4()).upper(),
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
            event_type=event_type,
            recurrence=recurrence.value if isinstance(recurrence, Recurrence) else recurrence,
            invited_friends=list(invited_friends),
        )
        self.last_error = None
        try:
            saved = await self.collaborator.create_event(draft, self.session.username)
        except BackendError as exc:
            self._report("creating event", exc)
            return
        # Shown right away, then replaced by the re-fetch below.
        self.store.append(saved)
        self.rebuild()
        logger.info("Created new event: %s", saved.title)
        await self._fetch()

    def _master_for_update(self, target: EventTarget) -> Optional[Event]:
        if isinstance(target, Event):
            return target
        if isinstance(target, MasterOccurrence):
            return target.event
        master = self.store.get(target.master_id)
        if master is None:
            logger.warning("No master event %s for derived occurrence", target.master_id)
            return None
        # Field edits apply to the series; the master keeps its own dates.
        return replace(target.event, start_date=master.start_date, end_date=master.end_date)

    async def update_event(self, target: EventTarget) -> None:
        self.last_error = None
        event = self._master_for_update(target)
        if event is not None:
            try:
                updated = await self.collaborator.update_event(event, self.session.username)
            except BackendError as exc:
                self._report("updating event", exc)
            else:
                self.store.replace(updated, event.id)
                self.rebuild()
                logger.info("Updated event: %s", updated.title)
        await self._fetch()

    async def delete_event(self, target: Union[str, Occurrence]) -> None:
        if isinstance(target, DerivedOccurrence):
            event_id = target.master_id
        elif isinstance(target, MasterOccurrence):
            event_id = target.event.id
        else:
            event_id = target
        self.last_error = None
        try:
            await self.collaborator.delete_event(event_id, self.session.username)
        except BackendError as exc:
            self._report("deleting event", exc)
        else:
            self.store.remove(event_id)
            self.rebuild()
            logger.info("Deleted event with ID: %s", event_id)
        await self._fetch()

    async def delete_events_by_type(self, event_type: str) -> None:
        self.last_error = None
        try:
            await self.collaborator.delete_events_by_type(event_type, self.session.username)
        except BackendError as exc:
            self._report("deleting events by type", exc)
            return
        removed = self.store.remove_by_type(event_type)
        self.rebuild()
        logger.info("Deleted %d event(s) with type: %s", removed, event_type)


__all__ = ["EventTarget", "SyncController"]
