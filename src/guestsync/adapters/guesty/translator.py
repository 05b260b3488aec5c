"""Translate Guesty reservation payloads into domain records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from guestsync.domain.types import Money, ReservationStatus, SourceRecord

from .schema import ReservationPayload

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

CONFIRMED_STATUSES = frozenset({"confirmed", "checked_in", "checked_out"})
CANCELLED_STATUSES = frozenset({"canceled", "cancelled", "declined", "expired", "closed"})


def normalize_status(value: str | None) -> ReservationStatus:
    """Fold Guesty's reservation vocabulary into the three-way classification.

    Anything not known to be confirmed or cancelled (inquiries, holds, unknown
    values) counts as tentative so that it never triggers a downstream change.
    """

    status = (value or "").strip().lower()
    if status in CONFIRMED_STATUSES:
        return ReservationStatus.CONFIRMED
    if status in CANCELLED_STATUSES:
        return ReservationStatus.CANCELLED
    return ReservationStatus.TENTATIVE


def _split_name(payload: ReservationPayload) -> tuple[str, str, str]:
    guest = payload.guest
    if guest.first_name or guest.last_name:
        first = guest.first_name or ""
        last = guest.last_name or ""
        full = guest.full_name or " ".join(part for part in (first, last) if part)
        return full, first, last
    full = guest.full_name or ""
    names = full.split()
    if not names:
        return full, "", ""
    return full, names[0], " ".join(names[1:])


def parse_reservation(payload: ReservationPayload | Mapping[str, object]) -> SourceRecord:
    reservation = (
        payload
        if isinstance(payload, ReservationPayload)
        else ReservationPayload.model_validate(payload)
    )
    full_name, first_name, last_name = _split_name(reservation)
    if not full_name:
        log.warning("Reservation %s has no guest name", reservation.id)

    money = reservation.money
    listing = reservation.listing
    return SourceRecord(
        reservation_id=reservation.id,
        guest_name=full_name,
        first_name=first_name,
        last_name=last_name,
        check_in=reservation.check_in,
        check_out=reservation.check_out,
        check_in_local=reservation.check_in_date_localized or reservation.check_in.date(),
        check_out_local=reservation.check_out_date_localized or reservation.check_out.date(),
        status=normalize_status(reservation.status),
        confirmation_code=reservation.confirmation_code,
        listing_id=reservation.listing_id,
        listing_name=(listing.nickname or listing.title) if listing else None,
        money=Money(
            currency=money.currency,
            total_paid=money.total_paid,
            host_payout=money.host_payout,
        )
        if money
        else Money(),
    )
