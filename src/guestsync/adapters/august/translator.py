"""Translate August pin listings into domain records and commands."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from guestsync.domain.fingerprint import fingerprint
from guestsync.domain.ports import PinListing
from guestsync.domain.types import DownstreamRecord, PinPayload

from .schema import PinEntry

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)


def format_access_time(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""

    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_access_times(start: datetime, end: datetime) -> str:
    return f"DTSTART={format_access_time(start)};DTEND={format_access_time(end)}"


def parse_access_times(value: str | None) -> tuple[datetime, datetime] | None:
    if not value:
        return None
    parts: dict[str, str] = {}
    for item in value.split(";"):
        key, sep, raw = item.partition("=")
        if sep:
            parts[key.strip().upper()] = raw.strip()
    try:
        start = datetime.fromisoformat(parts["DTSTART"])
        end = datetime.fromisoformat(parts["DTEND"])
    except (KeyError, ValueError):
        log.debug("Unparseable accessTimes %r", value)
        return None
    if start.tzinfo is None or end.tzinfo is None:
        return None
    return start, end


def _entry_fingerprint(entry: PinEntry) -> str | None:
    window = parse_access_times(entry.access_times)
    if entry.pin is None or window is None:
        return None
    start, end = window
    return fingerprint(
        PinPayload(
            first_name=entry.first_name or "",
            last_name=entry.last_name or "",
            pin=entry.pin,
            access_start=start,
            access_end=end,
        )
    )


def entry_to_record(entry: PinEntry, *, bucket: str) -> DownstreamRecord:
    return DownstreamRecord(
        remote_id=entry.user_id,
        first_name=entry.first_name,
        last_name=entry.last_name,
        fingerprint=_entry_fingerprint(entry),
        state=entry.state or bucket,
    )


def parse_pin_listing(payload: Mapping[str, object]) -> PinListing:
    """Group pin entries by lifecycle bucket; non-list members are ignored."""

    buckets: dict[str, tuple[DownstreamRecord, ...]] = {}
    for bucket, items in payload.items():
        if not isinstance(items, list):
            continue
        records: list[DownstreamRecord] = []
        for item in items:
            try:
                entry = PinEntry.model_validate(item)
            except ValidationError:
                log.warning("Skipping malformed pin entry in %s bucket: %r", bucket, item)
                continue
            records.append(entry_to_record(entry, bucket=bucket))
        buckets[bucket] = tuple(records)
    return PinListing(buckets=buckets)
