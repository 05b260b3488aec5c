from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

import pytest

from guestsync.domain.data_integration import (
    AccessSyncResult,
    fetch_all_reservations,
    sync_access_codes,
    sync_calendar_events,
)
from guestsync.domain.provisioning import PinProvisioner
from guestsync.domain.reconciliation import SyncAction
from guestsync.domain.types import ReservationStatus, SourceRecord
from tests.helpers.reservations import (
    FakeAccessProvider,
    FakeCalendar,
    FakeReservationSource,
    RecordingSleep,
    event_record_for,
    make_source_record,
    pin_record_for,
)

WINDOW_START = datetime(2025, 1, 1, tzinfo=UTC)


def test_fetch_all_reservations_walks_every_page() -> None:
    records = [make_source_record(f"res-{index}") for index in range(60)]
    source = FakeReservationSource(records)

    fetched = asyncio.run(fetch_all_reservations(source, page_size=25))

    assert fetched == records
    assert [call["offset"] for call in source.calls] == [0, 25, 50]
    assert all(call["limit"] == 25 for call in source.calls)


def test_fetch_all_reservations_stops_on_empty_page() -> None:
    records = [make_source_record(f"res-{index}") for index in range(30)]
    source = FakeReservationSource(records, total=100)

    fetched = asyncio.run(fetch_all_reservations(source, page_size=25))

    assert len(fetched) == 30
    assert len(source.calls) == 3


def test_fetch_all_reservations_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError, match="Page size"):
        asyncio.run(fetch_all_reservations(FakeReservationSource([]), page_size=0))


def test_sync_calendar_events_creates_skips_and_deletes() -> None:
    new = make_source_record("res-new")
    kept = make_source_record("res-kept", first_name="John", last_name="Roe")
    cancelled = make_source_record(
        "res-gone", first_name="Ann", last_name="Poe", status=ReservationStatus.CANCELLED
    )
    calendar = FakeCalendar([event_record_for(kept), event_record_for(cancelled)])

    result = asyncio.run(
        sync_calendar_events(
            source=FakeReservationSource([new, kept, cancelled]),
            calendar=calendar,
            window_start=WINDOW_START,
        )
    )

    assert result.fetched == 3
    assert result.existing == 2
    assert result.planned[SyncAction.CREATE] == 1
    assert result.planned[SyncAction.SKIP] == 1
    assert result.planned[SyncAction.DELETE] == 1
    assert calendar.operations() == [("insert", "res-new"), ("delete", "evt-res-gone")]
    assert sorted(record.reservation_id or "" for record in calendar.events.values()) == [
        "res-kept",
        "res-new",
    ]


def test_sync_calendar_events_is_idempotent() -> None:
    sources = [
        make_source_record("res-1"),
        make_source_record("res-2", first_name="John"),
        make_source_record("res-3", first_name="Ann", status=ReservationStatus.TENTATIVE),
    ]
    calendar = FakeCalendar()

    first = asyncio.run(
        sync_calendar_events(
            source=FakeReservationSource(sources), calendar=calendar, window_start=WINDOW_START
        )
    )
    operations_after_first = list(calendar.operations())
    second = asyncio.run(
        sync_calendar_events(
            source=FakeReservationSource(sources), calendar=calendar, window_start=WINDOW_START
        )
    )

    assert first.report.created == 2
    assert second.planned[SyncAction.SKIP] == 3
    assert second.report.succeeded == 0
    assert calendar.operations() == operations_after_first


def test_sync_calendar_events_updates_changed_reservation() -> None:
    before = make_source_record(nights=2)
    after = make_source_record(nights=3)
    calendar = FakeCalendar([event_record_for(before)])

    result = asyncio.run(
        sync_calendar_events(
            source=FakeReservationSource([after]), calendar=calendar, window_start=WINDOW_START
        )
    )

    assert result.report.updated == 1
    assert calendar.operations() == [("update", "evt-res-1")]
    assert calendar.events["evt-res-1"] == event_record_for(after)


def _access_run(
    sources: list[SourceRecord],
    provider: FakeAccessProvider,
    *,
    horizon: datetime = datetime(2025, 1, 10, tzinfo=UTC),
    listing_id: str | None = None,
) -> AccessSyncResult:
    provisioner = PinProvisioner(
        provider=provider,
        lock_id="lock-1",
        poll_interval=1.0,
        max_polls=5,
        sleep=RecordingSleep(),
    )
    return asyncio.run(
        sync_access_codes(
            source=FakeReservationSource(sources),
            access=provider,
            provisioner=provisioner,
            horizon=horizon,
            listing_id=listing_id,
        )
    )


def test_sync_access_codes_provisions_new_guests_only() -> None:
    known = make_source_record("res-1")
    arriving = make_source_record("res-2", first_name="John", last_name="Roe")
    provider = FakeAccessProvider([pin_record_for(known)])

    result = _access_run([known, arriving], provider)

    assert [created["first_name"] for created in provider.created] == ["John"]
    assert [item.user_id for item in result.provisioned] == ["user-1"]
    assert result.planned[SyncAction.SKIP] == 1
    assert result.failures == []


def test_sync_access_codes_ignores_reservations_beyond_horizon() -> None:
    later = make_source_record(check_in=datetime(2025, 2, 1, 16, tzinfo=UTC))
    provider = FakeAccessProvider()

    result = _access_run([later], provider)

    assert result.fetched == 0
    assert provider.created == []


def test_sync_access_codes_revokes_and_reissues() -> None:
    moved = make_source_record("res-1", nights=4)
    cancelled = make_source_record(
        "res-2", first_name="Ann", last_name="Poe", status=ReservationStatus.CANCELLED
    )
    provider = FakeAccessProvider(
        [
            pin_record_for(make_source_record("res-1", nights=2), "user-old"),
            pin_record_for(cancelled, "user-ann"),
        ]
    )

    result = _access_run([moved, cancelled], provider)

    assert provider.deleted == ["user-old", "user-ann"]
    assert result.revoked == 2
    assert [created["pin"] for created in provider.created] == ["0307"]


def test_sync_access_codes_continues_after_failure() -> None:
    failing = make_source_record("res-1")
    healthy = make_source_record("res-2", first_name="John", last_name="Roe")
    provider = FakeAccessProvider(failing_names={"Jane"})

    result = _access_run([failing, healthy], provider)

    assert len(result.failures) == 1
    assert result.failures[0].entry.key == "reservation:res-1"
    assert isinstance(result.first_error, RuntimeError)
    assert [item.user_id for item in result.provisioned] == ["user-1"]


def test_sync_access_codes_records_stuck_pins() -> None:
    provider = FakeAccessProvider(default_script=("creating",))

    result = _access_run([make_source_record()], provider)

    assert result.provisioned == []
    assert "still in the creating state" in str(result.first_error)


def test_sync_access_codes_skips_other_listings() -> None:
    own = make_source_record("res-1", listing_id="listing-1")
    neighbour = make_source_record(
        "res-2", first_name="John", last_name="Roe", listing_id="listing-2"
    )
    provider = FakeAccessProvider()

    result = _access_run([own, neighbour], provider, listing_id="listing-1")

    assert result.fetched == 1
    assert [created["first_name"] for created in provider.created] == ["Jane"]


def test_sync_access_codes_passes_filters_to_source() -> None:
    source = FakeReservationSource([make_source_record(listing_id="listing-1")])
    provider = FakeAccessProvider()
    filters = [{"field": "listingId", "operator": "$eq", "value": "listing-1"}]
    provisioner = PinProvisioner(
        provider=provider, lock_id="lock-1", poll_interval=1.0, sleep=RecordingSleep()
    )

    asyncio.run(
        sync_access_codes(
            source=source,
            access=provider,
            provisioner=provisioner,
            horizon=datetime(2025, 1, 10, tzinfo=UTC),
            listing_id="listing-1",
            filters=filters,
        )
    )

    assert source.calls[0]["filters"] == filters


def test_sync_access_codes_reports_unsettled_pins(caplog: pytest.LogCaptureFixture) -> None:
    guest = make_source_record()
    provider = FakeAccessProvider([pin_record_for(guest, "user-9", state="enabling")])

    with caplog.at_level(logging.WARNING):
        result = _access_run([guest], provider)

    assert result.planned[SyncAction.SKIP] == 1
    assert result.unsettled == ["user-9"]
    assert provider.created == []
    assert "user-9" in caplog.text
