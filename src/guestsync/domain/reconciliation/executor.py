"""Apply a reconciliation plan to a calendar provider."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .plan import SyncAction

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from guestsync.domain.ports import CalendarProvider
    from guestsync.domain.types import EventPayload

    from .plan import PlanEntry, ReconciliationPlan

log = getLogger(__name__)

_BATCH_ORDER = (SyncAction.CREATE, SyncAction.UPDATE, SyncAction.DELETE)


@dataclass(slots=True)
class OperationFailure:
    entry: PlanEntry[EventPayload]
    error: Exception


@dataclass(slots=True)
class SyncReport:
    """Outcome of applying one plan."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    failures: list[OperationFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return self.created + self.updated + self.deleted

    def record_success(self, action: SyncAction) -> None:
        if action is SyncAction.CREATE:
            self.created += 1
        elif action is SyncAction.UPDATE:
            self.updated += 1
        elif action is SyncAction.DELETE:
            self.deleted += 1


def _operation(provider: CalendarProvider, entry: PlanEntry[EventPayload]) -> Awaitable[object]:
    if entry.action is SyncAction.CREATE:
        if entry.payload is None:
            raise ValueError(f"CREATE entry {entry.key} has no payload")
        return provider.insert_event(entry.payload)
    if entry.existing is None:
        raise ValueError(f"{entry.action} entry {entry.key} has no existing record")
    if entry.action is SyncAction.UPDATE:
        if entry.payload is None:
            raise ValueError(f"UPDATE entry {entry.key} has no payload")
        return provider.update_event(entry.existing.remote_id, entry.payload)
    return provider.delete_event(entry.existing.remote_id)


async def _run_batch(
    provider: CalendarProvider,
    entries: Sequence[PlanEntry[EventPayload]],
    report: SyncReport,
) -> None:
    if not entries:
        return
    action = entries[0].action

    async def run(entry: PlanEntry[EventPayload]) -> object:
        return await _operation(provider, entry)

    outcomes = await asyncio.gather(*(run(entry) for entry in entries), return_exceptions=True)
    for entry, outcome in zip(entries, outcomes, strict=True):
        if isinstance(outcome, Exception):
            log.error("Failed to %s %s: %s", entry.action, entry.key, outcome)
            report.failures.append(OperationFailure(entry=entry, error=outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            report.record_success(action)


async def apply_plan(
    plan: ReconciliationPlan[EventPayload],
    provider: CalendarProvider,
) -> SyncReport:
    """Apply ``plan`` in three concurrent batches: creates, then updates, then deletes.

    A batch only starts once every operation of the previous one has settled.
    Failures stay isolated to the entry that produced them and are collected in
    the report.
    """

    report = SyncReport(skipped=len(plan.with_action(SyncAction.SKIP)))
    for action in _BATCH_ORDER:
        batch = plan.with_action(action)
        if batch:
            log.info("Applying %d %s operation(s)", len(batch), action)
        await _run_batch(provider, batch, report)
    log.info(
        "Applied plan: created=%s, updated=%s, deleted=%s, skipped=%s, failed=%s",
        report.created,
        report.updated,
        report.deleted,
        report.skipped,
        len(report.failures),
    )
    return report
