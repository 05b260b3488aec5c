"""Domain records shared by the reconciliation core and the adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import date, datetime


class ReservationStatus(StrEnum):
    """Three-way lifecycle classification of an upstream reservation."""

    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True, kw_only=True)
class Money:
    currency: str | None = None
    total_paid: Decimal | None = None
    host_payout: Decimal | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceRecord:
    """An upstream reservation, immutable for the duration of a run."""

    reservation_id: str
    guest_name: str
    first_name: str
    last_name: str
    check_in: datetime
    check_out: datetime
    check_in_local: date
    check_out_local: date
    status: ReservationStatus
    confirmation_code: str | None = None
    listing_id: str | None = None
    listing_name: str | None = None
    money: Money = field(default_factory=Money)

    @property
    def nights(self) -> int:
        return (self.check_out_local - self.check_in_local).days


@dataclass(frozen=True, slots=True, kw_only=True)
class DownstreamRecord:
    """A resource previously created in a target system.

    ``reservation_id`` is only set when the target keeps the upstream identifier;
    lock vendors only store guest names. ``state`` is the raw lifecycle value
    reported for access entries.
    """

    remote_id: str
    reservation_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    fingerprint: str | None = None
    state: str | None = None


class DownstreamPayload(Protocol):
    """Candidate downstream content rendered from a source record."""

    def canonical_fields(self) -> Mapping[str, object]: ...


@dataclass(frozen=True, slots=True, kw_only=True)
class EventPayload:
    """The fields of a calendar event derived from one reservation."""

    reservation_id: str
    first_name: str
    last_name: str
    summary: str
    location: str | None
    description: str
    start: datetime
    end: datetime

    def canonical_fields(self) -> Mapping[str, object]:
        return {
            "summary": self.summary,
            "location": self.location,
            "description": self.description,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class PinPayload:
    """A temporary access code for one guest stay."""

    first_name: str
    last_name: str
    pin: str
    access_start: datetime
    access_end: datetime

    def canonical_fields(self) -> Mapping[str, object]:
        return {
            "pin": self.pin,
            "access_start": self.access_start,
            "access_end": self.access_end,
        }


@dataclass(frozen=True, slots=True)
class ReservationPage:
    results: Sequence[SourceRecord]
    total_count: int
