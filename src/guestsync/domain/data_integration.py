"""Application services that reconcile reservations with downstream systems."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .provisioning import PinState
from .reconciliation import SyncAction, apply_plan, build_plan
from .rendering import render_event, render_pin

DEFAULT_PAGE_SIZE = 25

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from .ports import AccessProvider, CalendarProvider, ReservationSource
    from .provisioning import PinProvisioner, ProvisioningResult
    from .reconciliation import PlanEntry, SyncReport
    from .types import PinPayload, SourceRecord

log = getLogger(__name__)


async def fetch_all_reservations(
    source: ReservationSource,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    fields: Sequence[str] | None = None,
    filters: Sequence[Mapping[str, object]] | None = None,
) -> list[SourceRecord]:
    """Accumulate reservation pages until the reported total has been reached."""

    if page_size <= 0:
        raise ValueError("Page size must be positive")
    records: list[SourceRecord] = []
    while True:
        page = await source.list_reservations(
            offset=len(records),
            limit=page_size,
            fields=fields,
            filters=filters,
        )
        records.extend(page.results)
        if not page.results or len(records) >= page.total_count:
            break
    return records


@dataclass(slots=True)
class CalendarSyncResult:
    """Outcome of a calendar sync run."""

    fetched: int
    existing: int
    planned: dict[SyncAction, int]
    report: SyncReport


async def sync_calendar_events(
    *,
    source: ReservationSource,
    calendar: CalendarProvider,
    window_start: datetime,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_results: int = 250,
) -> CalendarSyncResult:
    """Mirror reservations as calendar events, creating, updating and deleting as needed."""

    reservations = await fetch_all_reservations(source, page_size=page_size)
    log.info("Found %d reservations", len(reservations))

    existing = await calendar.list_events(window_start=window_start, max_results=max_results)
    log.info("Found %d existing calendar events", len(existing))

    plan = build_plan(reservations, existing, render=render_event)
    planned = plan.counts()
    log.info(
        "Planned calendar changes: create=%s, update=%s, delete=%s, skip=%s",
        planned[SyncAction.CREATE],
        planned[SyncAction.UPDATE],
        planned[SyncAction.DELETE],
        planned[SyncAction.SKIP],
    )

    report = await apply_plan(plan, calendar)
    return CalendarSyncResult(
        fetched=len(reservations),
        existing=len(existing),
        planned=planned,
        report=report,
    )


@dataclass(slots=True)
class AccessFailure:
    entry: PlanEntry[PinPayload]
    error: Exception


@dataclass(slots=True)
class AccessSyncResult:
    """Outcome of an access-code sync run."""

    fetched: int
    existing: int
    planned: dict[SyncAction, int]
    provisioned: list[ProvisioningResult] = field(default_factory=list)
    revoked: int = 0
    unsettled: list[str] = field(default_factory=list)
    failures: list[AccessFailure] = field(default_factory=list)

    @property
    def first_error(self) -> Exception | None:
        return self.failures[0].error if self.failures else None


def _arriving_by(
    records: Sequence[SourceRecord],
    horizon: datetime,
    listing_id: str | None,
) -> list[SourceRecord]:
    return [
        record
        for record in records
        if record.check_in <= horizon and (listing_id is None or record.listing_id == listing_id)
    ]


async def _apply_access_entry(
    entry: PlanEntry[PinPayload],
    *,
    access: AccessProvider,
    provisioner: PinProvisioner,
    result: AccessSyncResult,
) -> None:
    if entry.action in (SyncAction.UPDATE, SyncAction.DELETE):
        if entry.existing is None:
            raise ValueError(f"{entry.action} entry {entry.key} has no existing pin")
        log.info("Revoking access code for user %s", entry.existing.remote_id)
        await access.submit_delete_command(
            lock_id=provisioner.lock_id,
            user_id=entry.existing.remote_id,
        )
        result.revoked += 1
    if entry.action in (SyncAction.CREATE, SyncAction.UPDATE):
        if entry.payload is None:
            raise ValueError(f"{entry.action} entry {entry.key} has no payload")
        log.info(
            "Creating guest access code for %s %s",
            entry.payload.first_name,
            entry.payload.last_name[:1],
        )
        result.provisioned.append(await provisioner.provision(entry.payload))


def _note_unsettled(entry: PlanEntry[PinPayload], result: AccessSyncResult) -> None:
    existing = entry.existing
    if entry.source is None or existing is None or existing.state in (None, PinState.LOADED):
        return
    log.warning(
        "Access code of user %s for %s is still %s",
        existing.remote_id,
        entry.key,
        existing.state,
    )
    result.unsettled.append(existing.remote_id)


async def sync_access_codes(
    *,
    source: ReservationSource,
    access: AccessProvider,
    provisioner: PinProvisioner,
    horizon: datetime,
    listing_id: str | None = None,
    filters: Sequence[Mapping[str, object]] | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AccessSyncResult:
    """Issue, reissue or revoke lock pins for reservations arriving before ``horizon``.

    Only reservations of ``listing_id`` are considered when it is given;
    ``filters`` is handed to the source so it can narrow the listing itself.
    Entries are processed strictly one at a time; a failed entry is recorded and
    the run moves on to the next one. Matched pins the lock never finished
    loading are reported in ``unsettled``.
    """

    reservations = _arriving_by(
        await fetch_all_reservations(source, page_size=page_size, filters=filters),
        horizon,
        listing_id,
    )
    log.info("Found %d upcoming guest reservations", len(reservations))

    listing = await access.list_pins(provisioner.lock_id)
    existing = list(listing.records())

    plan = build_plan(reservations, existing, render=render_pin)
    planned = plan.counts()
    result = AccessSyncResult(fetched=len(reservations), existing=len(existing), planned=planned)
    log.info(
        "%d guests require an access code which has yet to be created, %d need a new one, "
        "%d must be revoked",
        planned[SyncAction.CREATE],
        planned[SyncAction.UPDATE],
        planned[SyncAction.DELETE],
    )

    for entry in plan:
        if entry.action is SyncAction.SKIP:
            _note_unsettled(entry, result)
            continue
        try:
            await _apply_access_entry(
                entry, access=access, provisioner=provisioner, result=result
            )
        except Exception as exc:  # noqa: BLE001
            if not result.failures:
                log.error("Access code sync failed for %s: %s", entry.key, exc)
            else:
                log.warning("Access code sync failed for %s: %s", entry.key, exc)
            result.failures.append(AccessFailure(entry=entry, error=exc))

    log.info(
        "Finished access code sync: provisioned=%s, revoked=%s, unsettled=%s, failed=%s",
        len(result.provisioned),
        result.revoked,
        len(result.unsettled),
        len(result.failures),
    )
    return result
