"""Ports implemented by the vendor adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence
    from datetime import datetime

    from .types import DownstreamRecord, EventPayload, ReservationPage


@runtime_checkable
class ReservationSource(Protocol):
    """Paginated upstream reservation listing."""

    async def list_reservations(
        self,
        *,
        offset: int = 0,
        limit: int = 25,
        fields: Sequence[str] | None = None,
        filters: Sequence[Mapping[str, object]] | None = None,
    ) -> ReservationPage: ...


@runtime_checkable
class CalendarProvider(Protocol):
    """Calendar events created for reservations."""

    async def list_events(
        self,
        *,
        window_start: datetime,
        max_results: int,
    ) -> list[DownstreamRecord]: ...

    async def insert_event(self, payload: EventPayload) -> DownstreamRecord: ...

    async def update_event(self, remote_id: str, payload: EventPayload) -> DownstreamRecord: ...

    async def delete_event(self, remote_id: str) -> None: ...


@dataclass(frozen=True, slots=True)
class PinListing:
    """Snapshot of a lock's pins grouped by the bucket the vendor reported them in."""

    buckets: Mapping[str, Sequence[DownstreamRecord]] = field(default_factory=dict)

    def records(self) -> Iterator[DownstreamRecord]:
        for records in self.buckets.values():
            yield from records

    def owned_by(self, user_id: str) -> DownstreamRecord | None:
        return next((record for record in self.records() if record.remote_id == user_id), None)

    def describe(self) -> str:
        parts: list[str] = []
        for bucket, records in self.buckets.items():
            users = ", ".join(
                f"{record.remote_id}({record.first_name} {record.last_name}, {record.state})"
                for record in records
            )
            parts.append(f"{bucket}=[{users}]")
        return "; ".join(parts) or "<empty>"


@runtime_checkable
class AccessProvider(Protocol):
    """Lock vendor operations needed to issue and revoke temporary pins."""

    async def create_unverified_user(
        self,
        *,
        first_name: str,
        last_name: str,
        lock_id: str,
        pin: str,
    ) -> str: ...

    async def submit_load_command(
        self,
        *,
        lock_id: str,
        user_id: str,
        pin: str,
        start: datetime,
        end: datetime,
    ) -> None: ...

    async def submit_delete_command(self, *, lock_id: str, user_id: str) -> None: ...

    async def list_pins(self, lock_id: str) -> PinListing: ...


__all__ = ["AccessProvider", "CalendarProvider", "PinListing", "ReservationSource"]
