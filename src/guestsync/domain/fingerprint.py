"""Content fingerprints over rendered downstream payloads."""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import DownstreamPayload


def _encode(value: object) -> str:
    if isinstance(value, datetime):
        # same instant, same digest, whatever offset the vendor reported
        return value.astimezone(UTC).isoformat() if value.tzinfo else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Cannot fingerprint value of type {type(value).__name__}")


def canonical_json(payload: DownstreamPayload) -> str:
    return json.dumps(
        dict(payload.canonical_fields()),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=_encode,
    )


def fingerprint(payload: DownstreamPayload) -> str:
    """Return the SHA-256 hex digest of the payload's canonical serialization."""

    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()
