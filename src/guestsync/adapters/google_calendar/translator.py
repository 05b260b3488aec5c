"""Translate between calendar event resources and domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from guestsync.domain.fingerprint import fingerprint
from guestsync.domain.types import DownstreamRecord

if TYPE_CHECKING:
    from guestsync.domain.types import EventPayload

    from .schema import EventResource

MANAGED_BY_KEY = "managedBy"
MANAGED_BY_VALUE = "guestsync"
RESERVATION_ID_KEY = "reservationId"
FINGERPRINT_KEY = "fingerprint"
FIRST_NAME_KEY = "firstName"
LAST_NAME_KEY = "lastName"


def event_body(payload: EventPayload) -> dict[str, object]:
    """Request body for inserting or replacing the event rendered from ``payload``."""

    body: dict[str, object] = {
        "summary": payload.summary,
        "description": payload.description,
        "start": {"dateTime": payload.start.isoformat()},
        "end": {"dateTime": payload.end.isoformat()},
        "extendedProperties": {
            "private": {
                MANAGED_BY_KEY: MANAGED_BY_VALUE,
                RESERVATION_ID_KEY: payload.reservation_id,
                FINGERPRINT_KEY: fingerprint(payload),
                FIRST_NAME_KEY: payload.first_name,
                LAST_NAME_KEY: payload.last_name,
            }
        },
    }
    if payload.location:
        body["location"] = payload.location
    return body


def event_to_record(event: EventResource) -> DownstreamRecord:
    private = event.extended_properties.private
    return DownstreamRecord(
        remote_id=event.id,
        reservation_id=private.get(RESERVATION_ID_KEY),
        first_name=private.get(FIRST_NAME_KEY),
        last_name=private.get(LAST_NAME_KEY),
        fingerprint=private.get(FINGERPRINT_KEY),
    )
