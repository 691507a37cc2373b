from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..domain import Event


class EventStore:
    """In-memory master events for the signed-in user.

    Every mutation builds a new tuple and swaps it in with a single
    assignment, so readers always see a whole snapshot.
    """

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self._events: Tuple[Event, ...] = tuple(events)
        self._version = 0

    def _swap(self, events: Iterable[Event]) -> None:
        self._events = tuple(events)
        self._version += 1

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> Tuple[Event, ...]:
        return self._events

    def __len__(self) -> int:
        return len(self._events)

    def get(self, event_id: str) -> Optional[Event]:
        return next((event for event in self._events if event.id == event_id), None)

    def replace_all(self, events: Iterable[Event]) -> None:
        self._swap(events)

    def append(self, event: Event) -> None:
        self._swap((*self._events, event))

    def replace(self, event: Event, event_id: Optional[str] = None) -> bool:
        """Swap in ``event`` for the first master with id ``event_id``.

        ``event_id`` defaults to the id of ``event`` itself.
        """

        target = event.id if event_id is None else event_id
        for index, existing in enumerate(self._events):
            if existing.id == target:
                self._swap((*self._events[:index], event, *self._events[index + 1 :]))
                return True
        return False

    def remove(self, event_id: str) -> int:
        return self._remove_where(lambda event: event.id == event_id)

    def remove_by_type(self, event_type: str) -> int:
        return self._remove_where(lambda event: event.event_type == event_type)

    def _remove_where(self, predicate) -> int:
        kept = tuple(event for event in self._events if not predicate(event))
        removed = len(self._events) - len(kept)
        if removed:
            self._swap(kept)
        return removed

    def clear(self) -> None:
        self._swap(())


__all__ = ["EventStore"]
