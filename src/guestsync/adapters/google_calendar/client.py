"""HTTP client for the Google Calendar v3 events API."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from guestsync.adapters.credentials import ANONYMOUS, Credential

from .schema import EventResource, EventsResponse
from .translator import MANAGED_BY_KEY, MANAGED_BY_VALUE, event_body, event_to_record

if TYPE_CHECKING:
    from datetime import datetime

    from guestsync.adapters.http_resilience import ResilientClient
    from guestsync.config.google_calendar import GoogleCalendarConfig
    from guestsync.domain.types import DownstreamRecord, EventPayload

log = getLogger(__name__)

_MAX_PAGE_SIZE = 2500


class GoogleCalendarAPIError(RuntimeError):
    """Raised when the Calendar API answers with a payload we cannot use."""


@dataclass(frozen=True, slots=True)
class GoogleCalendarClient:
    """Calendar provider that only sees events it created itself."""

    config: GoogleCalendarConfig
    http: ResilientClient
    credential: Credential = ANONYMOUS

    def with_credential(self, credential: Credential) -> GoogleCalendarClient:
        return replace(self, credential=credential)

    def authenticate(self) -> Credential:
        return Credential(headers={"Authorization": f"Bearer {self.config.access_token}"})

    @property
    def _events_path(self) -> str:
        return f"calendars/{quote(self.config.calendar_id, safe='')}/events"

    async def list_events(
        self,
        *,
        window_start: datetime,
        max_results: int,
    ) -> list[DownstreamRecord]:
        records: list[DownstreamRecord] = []
        page_token: str | None = None
        while len(records) < max_results:
            params: dict[str, str | int] = {
                "timeMin": window_start.isoformat(),
                "maxResults": min(max_results - len(records), _MAX_PAGE_SIZE),
                "singleEvents": "true",
                "orderBy": "startTime",
                "privateExtendedProperty": f"{MANAGED_BY_KEY}={MANAGED_BY_VALUE}",
            }
            if page_token:
                params["pageToken"] = page_token
            response = await self.http.get(
                self._events_path,
                params=httpx.QueryParams(params),
                headers=dict(self.credential.headers),
            )
            page = EventsResponse.model_validate(self._json(response))
            records.extend(
                event_to_record(event) for event in page.items if event.status != "cancelled"
            )
            page_token = page.next_page_token
            if not page_token:
                break
        return records[:max_results]

    async def insert_event(self, payload: EventPayload) -> DownstreamRecord:
        response = await self.http.post(
            self._events_path,
            json=event_body(payload),
            headers=dict(self.credential.headers),
        )
        record = event_to_record(EventResource.model_validate(self._json(response)))
        log.debug("Inserted event %s for reservation %s", record.remote_id, payload.reservation_id)
        return record

    async def update_event(self, remote_id: str, payload: EventPayload) -> DownstreamRecord:
        response = await self.http.put(
            f"{self._events_path}/{quote(remote_id, safe='')}",
            json=event_body(payload),
            headers=dict(self.credential.headers),
        )
        return event_to_record(EventResource.model_validate(self._json(response)))

    async def delete_event(self, remote_id: str) -> None:
        await self.http.delete(
            f"{self._events_path}/{quote(remote_id, safe='')}",
            headers=dict(self.credential.headers),
        )
        log.debug("Deleted event %s", remote_id)

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, object]:
        payload = response.json()
        if not isinstance(payload, dict):
            raise GoogleCalendarAPIError("Unexpected Google Calendar response payload")
        return payload
