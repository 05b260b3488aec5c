"""Correlate source records with previously created downstream records."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .types import DownstreamRecord, SourceRecord


def _normalize_part(value: str | None) -> str:
    return " ".join((value or "").split()).lower()


def normalized_name(first_name: str | None, last_name: str | None) -> str:
    """Concatenate trimmed, lower-cased first and last names.

    >>> normalized_name("  Jane ", "DOE")
    'janedoe'
    """

    return _normalize_part(first_name) + _normalize_part(last_name)


def find_match(
    source: SourceRecord,
    existing: Iterable[DownstreamRecord],
) -> DownstreamRecord | None:
    """Find the downstream record created for ``source``.

    An exact upstream identifier wins. Records that do not keep an identifier are
    compared by normalized guest name instead; with duplicate names the first one
    encountered is returned.
    """

    name_key = normalized_name(source.first_name, source.last_name)
    by_name: DownstreamRecord | None = None
    for record in existing:
        if record.reservation_id is not None:
            if record.reservation_id == source.reservation_id:
                return record
            continue
        if by_name is None and name_key and (
            normalized_name(record.first_name, record.last_name) == name_key
        ):
            by_name = record
    return by_name
