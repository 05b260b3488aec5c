"""Reconciliation plan types and the planner that builds them.

The plan is the contract between:
- identity matching and fingerprint comparison (pure, read-only)
- the executors that mutate downstream systems

Planning performs no I/O; everything it needs is passed in.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from guestsync.domain.fingerprint import fingerprint
from guestsync.domain.matching import find_match, normalized_name
from guestsync.domain.types import ReservationStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from guestsync.domain.types import DownstreamPayload, DownstreamRecord, SourceRecord

log = getLogger(__name__)


class SyncAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    SKIP = "skip"


@dataclass(frozen=True, slots=True, kw_only=True)
class PlanEntry[P: DownstreamPayload]:
    """Decision for one identity key."""

    key: str
    action: SyncAction
    source: SourceRecord | None = None
    existing: DownstreamRecord | None = None
    payload: P | None = None
    reason: str | None = None


@dataclass(slots=True)
class ReconciliationPlan[P: DownstreamPayload]:
    """Aggregate plan for one sync run, in the order entries were decided."""

    entries: list[PlanEntry[P]] = field(default_factory=list)

    def __iter__(self) -> Iterator[PlanEntry[P]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def with_action(self, action: SyncAction) -> list[PlanEntry[P]]:
        return [entry for entry in self.entries if entry.action is action]

    def counts(self) -> dict[SyncAction, int]:
        counter = Counter(entry.action for entry in self.entries)
        return {action: counter.get(action, 0) for action in SyncAction}

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]


# sources colliding on one key resolve to the highest ranked status
_STATUS_RANK = {
    ReservationStatus.CANCELLED: 0,
    ReservationStatus.TENTATIVE: 1,
    ReservationStatus.CONFIRMED: 2,
}


def reservation_key(reservation_id: str) -> str:
    return f"reservation:{reservation_id}"


def guest_key(first_name: str | None, last_name: str | None) -> str:
    return f"guest:{normalized_name(first_name, last_name)}"


def _record_key(record: DownstreamRecord) -> str:
    if record.reservation_id is not None:
        return reservation_key(record.reservation_id)
    return guest_key(record.first_name, record.last_name)


def _entry_key(source: SourceRecord, match: DownstreamRecord | None) -> str:
    if match is None or match.reservation_id is not None:
        return reservation_key(source.reservation_id)
    return guest_key(source.first_name, source.last_name)


def _decide(
    status: ReservationStatus,
    match: DownstreamRecord | None,
    digest: str,
) -> tuple[SyncAction, str]:
    if match is None:
        if status is ReservationStatus.CONFIRMED:
            return SyncAction.CREATE, "new_confirmed"
        return SyncAction.SKIP, f"no_match_{status}"
    if status is ReservationStatus.CANCELLED:
        return SyncAction.DELETE, "cancelled"
    if status is ReservationStatus.TENTATIVE:
        return SyncAction.SKIP, "tentative"
    if match.fingerprint == digest:
        return SyncAction.SKIP, "unchanged"
    return SyncAction.UPDATE, "changed"


def build_plan[P: DownstreamPayload](
    sources: Iterable[SourceRecord],
    existing: Sequence[DownstreamRecord],
    *,
    render: Callable[[SourceRecord], P],
) -> ReconciliationPlan[P]:
    """Classify every source record and every unmatched downstream record.

    ``render`` turns a source record into the candidate downstream payload; the
    fingerprint of that payload is compared with the one stored on the match.
    Downstream records that no source record claims end up as SKIP entries.
    When several source records resolve to one key, a confirmed stay beats a
    tentative one, which beats a cancelled one; ties keep the first record.
    """

    plan: ReconciliationPlan[P] = ReconciliationPlan()
    positions: dict[str, int] = {}

    for source in sources:
        match = find_match(source, existing)
        key = _entry_key(source, match)
        position = positions.get(key)
        if position is not None:
            planned = plan.entries[position].source
            if planned is None or _STATUS_RANK[source.status] <= _STATUS_RANK[planned.status]:
                log.warning(
                    "Reservation %s resolves to already planned key %s; ignoring it",
                    source.reservation_id,
                    key,
                )
                continue
            log.warning(
                "Reservation %s (%s) supersedes %s (%s) for key %s",
                source.reservation_id,
                source.status,
                planned.reservation_id,
                planned.status,
                key,
            )
        payload = render(source)
        action, reason = _decide(source.status, match, fingerprint(payload))
        entry = PlanEntry(
            key=key,
            action=action,
            source=source,
            existing=match,
            payload=payload,
            reason=reason,
        )
        if position is None:
            positions[key] = len(plan.entries)
            plan.entries.append(entry)
        else:
            plan.entries[position] = entry

    planned_keys = set(positions)
    claimed = {id(entry.existing) for entry in plan.entries if entry.existing is not None}

    for record in existing:
        if id(record) in claimed:
            continue
        key = _record_key(record)
        if key in planned_keys:
            continue
        plan.entries.append(
            PlanEntry(key=key, action=SyncAction.SKIP, existing=record, reason="no_source")
        )
        planned_keys.add(key)

    return plan
