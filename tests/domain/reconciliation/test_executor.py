from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

from guestsync.domain.reconciliation import SyncAction, apply_plan, build_plan
from guestsync.domain.rendering import render_event
from guestsync.domain.types import ReservationStatus
from tests.helpers.reservations import FakeCalendar, event_record_for, make_source_record

if TYPE_CHECKING:
    from guestsync.domain.types import DownstreamRecord, SourceRecord


def _mixed_plan_inputs() -> tuple[list[SourceRecord], list[DownstreamRecord]]:
    created = [make_source_record("res-new-1"), make_source_record("res-new-2", first_name="Al")]
    changed = make_source_record("res-chg", first_name="Bo", nights=4)
    cancelled = make_source_record("res-del", first_name="Cy", status=ReservationStatus.CANCELLED)
    unchanged = make_source_record("res-same", first_name="Di")
    existing = [
        replace(event_record_for(changed), fingerprint="stale"),
        event_record_for(cancelled),
        event_record_for(unchanged),
    ]
    return [*created, changed, cancelled, unchanged], existing


def test_apply_plan_runs_batches_in_order() -> None:
    sources, existing = _mixed_plan_inputs()
    calendar = FakeCalendar(existing)
    plan = build_plan(sources, existing, render=render_event)

    report = asyncio.run(apply_plan(plan, calendar))

    phases = [operation for phase, operation, _ in calendar.log if phase == "start"]
    assert phases == ["insert", "insert", "update", "delete"]
    last_insert_end = max(
        index for index, item in enumerate(calendar.log) if item[:2] == ("end", "insert")
    )
    first_update_start = calendar.log.index(("start", "update", "evt-res-chg"))
    assert last_insert_end < first_update_start
    assert (report.created, report.updated, report.deleted, report.skipped) == (2, 1, 1, 1)
    assert report.succeeded == 4
    assert report.failures == []


def test_apply_plan_runs_batch_members_concurrently() -> None:
    calendar = FakeCalendar()
    sources = [make_source_record(f"res-{index}") for index in range(3)]
    plan = build_plan(sources, [], render=render_event)

    asyncio.run(apply_plan(plan, calendar))

    assert [phase for phase, _, _ in calendar.log[:3]] == ["start", "start", "start"]


def test_apply_plan_isolates_failures() -> None:
    sources, existing = _mixed_plan_inputs()
    calendar = FakeCalendar(existing, failing={"res-new-1", "evt-res-chg"})
    plan = build_plan(sources, existing, render=render_event)

    report = asyncio.run(apply_plan(plan, calendar))

    assert report.created == 1
    assert report.updated == 0
    assert report.deleted == 1
    assert {failure.entry.key for failure in report.failures} == {
        "reservation:res-new-1",
        "reservation:res-chg",
    }
    assert all(isinstance(failure.error, RuntimeError) for failure in report.failures)
    assert ("delete", "evt-res-del") in calendar.operations()


def test_apply_plan_skip_entries_touch_nothing() -> None:
    source = make_source_record()
    existing = [event_record_for(source)]
    calendar = FakeCalendar(existing)
    plan = build_plan([source], existing, render=render_event)

    report = asyncio.run(apply_plan(plan, calendar))

    assert plan.counts()[SyncAction.SKIP] == 1
    assert calendar.log == []
    assert report.skipped == 1
    assert report.succeeded == 0
