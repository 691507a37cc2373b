"""Tests for mutation orchestration and re-expansion."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from conftest import UTC, FakeCollaborator, at, make_event
from plotline_calendar.data import EventStore
from plotline_calendar.domain import DerivedOccurrence, MasterOccurrence, Recurrence
from plotline_calendar.services import ServiceContext, Session, SyncController

SESSION = Session(username="alex")


def _controller(collaborator: FakeCollaborator, fixed_clock, store: EventStore | None = None) -> SyncController:
    return SyncController(
        session=SESSION,
        collaborator=collaborator,
        store=store if store is not None else EventStore(),
        clock=fixed_clock,
    )


class TestRefresh:
    async def test_refresh_loads_masters_and_expands(self, fixed_clock):
        weekly = make_event("1", start=at(2025, 3, 3, 9), recurrence="weekly")
        collaborator = FakeCollaborator([weekly, make_event("2")])
        controller = _controller(collaborator, fixed_clock)

        await controller.refresh()

        assert collaborator.calls == [("list", "alex")]
        assert [event.id for event in controller.store.snapshot()] == ["1", "2"]
        assert len(controller.occurrences) == 2 + 26
        assert controller.last_error is None

    async def test_refresh_failure_keeps_last_known_state(self, fixed_clock):
        collaborator = FakeCollaborator([make_event("1")])
        controller = _controller(collaborator, fixed_clock)
        await controller.refresh()

        collaborator.remote.clear()
        collaborator.failing.add("list")
        await controller.refresh()

        assert [event.id for event in controller.store.snapshot()] == ["1"]
        assert len(controller.occurrences) == 1
        assert controller.last_error == "list is offline"

    async def test_expansion_follows_the_clock(self):
        moments = iter([at(2025, 3, 3, 9), at(2025, 4, 3, 9)])
        collaborator = FakeCollaborator([make_event("1", start=at(2025, 3, 3, 9), recurrence="weekly")])
        controller = SyncController(session=SESSION, collaborator=collaborator, clock=lambda: next(moments))

        await controller.refresh()

        assert len(controller.occurrences) > 1 + 26


class TestCreate:
    async def test_create_appends_then_refetches(self, fixed_clock, monkeypatch):
        collaborator = FakeCollaborator()
        controller = _controller(collaborator, fixed_clock)
        rebuilds: list[int] = []
        original = controller.rebuild

        def counting_rebuild():
            rebuilds.append(len(controller.store))
            return original()

        monkeypatch.setattr(controller, "rebuild", counting_rebuild)

        await controller.create_event(
            title=" Rent ",
            description="Monthly rent",
            start_date=at(2025, 3, 1),
            end_date=at(2025, 3, 1, 1),
            event_type="rent",
            recurrence=Recurrence.MONTHLY,
            invited_friends=["sam"],
        )

        assert collaborator.operations == ["create", "list"]
        assert rebuilds == [1, 1]
        [saved] = controller.store.snapshot()
        assert saved.title == "Rent"
        assert saved.recurrence == "monthly"
        assert saved.invited_friends == ["sam"]
        assert saved.id == saved.id.upper()
        assert len(saved.id) == 36
        assert controller.index.occurrences_on_day(date(2025, 4, 1))[0].master_id == saved.id

    async def test_create_failure_leaves_store_untouched(self, fixed_clock):
        collaborator = FakeCollaborator([make_event("1")])
        controller = _controller(collaborator, fixed_clock, EventStore([make_event("1")]))
        collaborator.failing.add("create")

        await controller.create_event(
            title="Gym",
            description="",
            start_date=at(2025, 3, 3, 9),
            end_date=at(2025, 3, 3, 10),
            event_type="goal-fit",
        )

        assert collaborator.operations == ["create"]
        assert [event.id for event in controller.store.snapshot()] == ["1"]
        assert controller.last_error == "create is offline"


class TestUpdate:
    async def test_update_replaces_master_and_refetches(self, fixed_clock):
        original = make_event("1", title="Gym")
        collaborator = FakeCollaborator([original])
        controller = _controller(collaborator, fixed_clock, EventStore([original]))

        await controller.update_event(make_event("1", title="Pool"))

        assert collaborator.operations == ["update", "list"]
        assert controller.store.get("1").title == "Pool"

    async def test_update_of_derived_occurrence_targets_master(self, fixed_clock):
        master = make_event("1", start=at(2025, 3, 3, 9), title="Gym", recurrence="weekly")
        collaborator = FakeCollaborator([master])
        controller = _controller(collaborator, fixed_clock, EventStore([master]))
        controller.rebuild()
        derived = controller.index.occurrences_on_day(date(2025, 3, 17))[0]
        assert isinstance(derived, DerivedOccurrence)
        derived.event.title = "Swim"

        await controller.update_event(derived)

        sent = collaborator.remote["1"]
        assert sent.title == "Swim"
        assert sent.start_date == at(2025, 3, 3, 9)
        assert sent.end_date == at(2025, 3, 3, 10)
        assert controller.store.get("1").start_date == at(2025, 3, 3, 9)

    async def test_update_failure_still_refetches(self, fixed_clock):
        original = make_event("1", title="Gym")
        collaborator = FakeCollaborator([original])
        controller = _controller(collaborator, fixed_clock, EventStore([original]))
        collaborator.failing.add("update")

        await controller.update_event(make_event("1", title="Pool"))

        assert collaborator.operations == ["update", "list"]
        assert controller.store.get("1").title == "Gym"
        assert controller.last_error == "update is offline"

    async def test_update_replaces_the_master_whose_id_was_sent(self, fixed_clock):
        original = make_event("abc-1", title="Gym")
        collaborator = FakeCollaborator([original])
        controller = _controller(collaborator, fixed_clock, EventStore([original, make_event("2")]))

        async def normalising_update(event, username):
            collaborator.calls.append(("update", event.id))
            return replace(event, id=event.id.upper())

        collaborator.update_event = normalising_update
        collaborator.failing.add("list")

        await controller.update_event(make_event("abc-1", title="Pool"))

        assert [event.id for event in controller.store.snapshot()] == ["ABC-1", "2"]
        assert controller.store.get("ABC-1").title == "Pool"

    async def test_update_of_orphaned_derived_occurrence_only_refetches(self, fixed_clock):
        master = make_event("1", recurrence="weekly")
        collaborator = FakeCollaborator()
        controller = _controller(collaborator, fixed_clock, EventStore([master]))
        orphan = DerivedOccurrence(event=master.shifted_to(at(2025, 3, 10, 9)), master_id="gone", sequence=1)

        await controller.update_event(orphan)

        assert collaborator.operations == ["list"]


class TestDelete:
    async def test_delete_removes_master_and_all_its_occurrences(self, fixed_clock):
        weekly = make_event("1", recurrence="weekly")
        other = make_event("2")
        collaborator = FakeCollaborator([weekly, other])
        controller = _controller(collaborator, fixed_clock)
        await controller.refresh()

        await controller.delete_event("1")

        assert collaborator.operations == ["list", "delete", "list"]
        assert [item.master_id for item in controller.occurrences] == ["2"]

    async def test_delete_of_derived_occurrence_uses_master_id(self, fixed_clock):
        weekly = make_event("1", recurrence="weekly")
        collaborator = FakeCollaborator([weekly])
        controller = _controller(collaborator, fixed_clock)
        await controller.refresh()
        derived = controller.occurrences[3]
        assert isinstance(derived, DerivedOccurrence)

        await controller.delete_event(derived)

        assert ("delete", "1") in collaborator.calls
        assert controller.occurrences == ()

    async def test_delete_of_master_occurrence(self, fixed_clock):
        event = make_event("1")
        collaborator = FakeCollaborator([event])
        controller = _controller(collaborator, fixed_clock)
        await controller.refresh()

        await controller.delete_event(MasterOccurrence(event))

        assert ("delete", "1") in collaborator.calls
        assert len(controller.store) == 0

    async def test_delete_failure_keeps_event_and_refetches(self, fixed_clock):
        event = make_event("1")
        collaborator = FakeCollaborator([event])
        controller = _controller(collaborator, fixed_clock, EventStore([event]))
        collaborator.failing.add("delete")

        await controller.delete_event("1")

        assert collaborator.operations == ["delete", "list"]
        assert controller.store.get("1") is not None
        assert controller.last_error == "delete is offline"


class TestDeleteByType:
    async def test_removes_only_exact_type_without_refetch(self, fixed_clock):
        events = [
            make_event("rent-1", event_type="rent", recurrence="monthly"),
            make_event("rental", event_type="rental"),
            make_event("rent-2", event_type="rent"),
            make_event("sub", event_type="subscription-rent"),
        ]
        collaborator = FakeCollaborator(events)
        controller = _controller(collaborator, fixed_clock, EventStore(events))
        controller.rebuild()

        await controller.delete_events_by_type("rent")

        assert collaborator.operations == ["delete_by_type"]
        assert [event.id for event in controller.store.snapshot()] == ["rental", "sub"]
        assert {item.master_id for item in controller.occurrences} == {"rental", "sub"}

    async def test_failure_keeps_local_masters(self, fixed_clock):
        events = [make_event("rent-1", event_type="rent")]
        collaborator = FakeCollaborator(events)
        controller = _controller(collaborator, fixed_clock, EventStore(events))
        collaborator.failing.add("delete_by_type")

        await controller.delete_events_by_type("rent")

        assert len(controller.store) == 1
        assert controller.last_error == "delete_by_type is offline"


async def test_from_context_uses_shared_store_and_settings(app_settings, fixed_clock):
    collaborator = FakeCollaborator([make_event("1", recurrence="monthly", start=at(2025, 3, 3, 9))])
    context = ServiceContext(session=SESSION, settings=app_settings, events=collaborator)

    controller = SyncController.from_context(context, clock=fixed_clock, horizon_months=2)
    await controller.refresh()

    assert controller.store is context.store
    assert controller.tz is context.tz
    assert len(controller.occurrences) == 2


async def test_weekly_event_visible_next_monday_after_refresh(fixed_clock):
    monday = at(2025, 3, 3, 9)
    collaborator = FakeCollaborator([make_event("1", start=monday, recurrence="weekly")])
    controller = _controller(collaborator, fixed_clock)

    await controller.refresh()
    [occurrence] = controller.index.occurrences_on_day(date(2025, 3, 10))

    assert occurrence.master_id == "1"
    assert occurrence.start_date == monday + timedelta(weeks=1)
    assert occurrence.end_date - occurrence.start_date == timedelta(hours=1)


async def test_expansion_uses_the_calendar_timezone(fixed_clock):
    new_york = ZoneInfo("America/New_York")
    monday = datetime(2025, 3, 3, 9, tzinfo=new_york)
    master = make_event("1", start=monday.astimezone(UTC), recurrence="weekly")
    controller = SyncController(
        session=SESSION,
        collaborator=FakeCollaborator([master]),
        store=EventStore([master]),
        tz=new_york,
        clock=fixed_clock,
    )

    [occurrence] = controller.index.occurrences_on_day(date(2025, 3, 10))

    assert occurrence.start_date.astimezone(new_york).hour == 9
