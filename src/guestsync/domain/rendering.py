"""Render source records into the payloads each downstream system stores."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import EventPayload, PinPayload

if TYPE_CHECKING:
    from decimal import Decimal

    from .types import SourceRecord


def _format_amount(amount: Decimal | None, currency: str | None) -> str | None:
    if amount is None:
        return None
    return f"{amount:.2f} {currency}" if currency else f"{amount:.2f}"


def render_event(source: SourceRecord) -> EventPayload:
    lines = [
        f"Guest: {source.guest_name}",
        f"Check-in: {source.check_in_local.isoformat()}",
        f"Check-out: {source.check_out_local.isoformat()}",
        f"Nights: {source.nights}",
    ]
    if source.confirmation_code:
        lines.append(f"Confirmation: {source.confirmation_code}")
    payout = _format_amount(source.money.host_payout, source.money.currency)
    if payout:
        lines.append(f"Host payout: {payout}")
    total = _format_amount(source.money.total_paid, source.money.currency)
    if total:
        lines.append(f"Total paid: {total}")

    return EventPayload(
        reservation_id=source.reservation_id,
        first_name=source.first_name,
        last_name=source.last_name,
        summary=f"{source.guest_name} ({source.nights} nights)",
        location=source.listing_name,
        description="\n".join(lines),
        start=source.check_in,
        end=source.check_out,
    )


def pin_code(source: SourceRecord) -> str:
    """Day of month of check-in followed by day of month of check-out, e.g. ``"0105"``."""

    return f"{source.check_in_local.day:02d}{source.check_out_local.day:02d}"


def render_pin(source: SourceRecord) -> PinPayload:
    return PinPayload(
        first_name=source.first_name,
        last_name=source.last_name,
        pin=pin_code(source),
        access_start=source.check_in,
        access_end=source.check_out,
    )
