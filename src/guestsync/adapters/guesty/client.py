"""HTTP client for the Guesty reservation API."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from guestsync.adapters.credentials import ANONYMOUS, Credential
from guestsync.domain.types import ReservationPage

from .schema import AuthResponse, ReservationsResponse
from .translator import parse_reservation

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from guestsync.adapters.http_resilience import ResilientClient
    from guestsync.config.guesty import GuestyConfig

log = getLogger(__name__)

DEFAULT_RESERVATION_FIELDS = (
    "status",
    "checkIn",
    "checkOut",
    "checkInDateLocalized",
    "checkOutDateLocalized",
    "confirmationCode",
    "guest.fullName",
    "guest.firstName",
    "guest.lastName",
    "guest.phone",
    "listingId",
    "listing.nickname",
    "listing.title",
    "money.currency",
    "money.totalPaid",
    "money.hostPayout",
)


def default_reservation_filters() -> list[dict[str, object]]:
    """Reservations that have not checked out yet."""

    return [{"field": "checkOut", "operator": "$gt", "value": 0, "context": "now"}]


def listing_reservation_filters(listing_id: str) -> list[dict[str, object]]:
    """Reservations of one listing that have not checked out yet."""

    return [
        *default_reservation_filters(),
        {"field": "listingId", "operator": "$eq", "value": listing_id},
    ]


class GuestyAPIError(RuntimeError):
    """Raised when Guesty answers with a payload we cannot use."""


@dataclass(frozen=True, slots=True)
class GuestyClient:
    """Reservation source backed by Guesty.

    ``authenticate`` returns a fresh ``Credential``; bind it with
    ``with_credential`` before listing reservations.
    """

    config: GuestyConfig
    http: ResilientClient
    credential: Credential = ANONYMOUS

    def with_credential(self, credential: Credential) -> GuestyClient:
        return replace(self, credential=credential)

    async def authenticate(self) -> Credential:
        response = await self.http.post(
            "authenticate",
            json={
                "username": self.config.username,
                "password": self.config.password,
                "accountId": self.config.account_id,
                "apiKey": self.config.api_key,
            },
        )
        try:
            auth = AuthResponse.model_validate(response.json())
        except ValueError as exc:
            raise GuestyAPIError("Guesty authentication response has no token") from exc
        log.debug("Authenticated against Guesty")
        return Credential(headers={"authorization": f"Bearer {auth.token}"})

    async def list_reservations(
        self,
        *,
        offset: int = 0,
        limit: int = 25,
        fields: Sequence[str] | None = None,
        filters: Sequence[Mapping[str, object]] | None = None,
    ) -> ReservationPage:
        if self.credential.is_anonymous:
            raise GuestyAPIError("Guesty client is not authenticated")
        params = httpx.QueryParams(
            {
                "limit": limit,
                "skip": offset,
                "fields": " ".join(fields or DEFAULT_RESERVATION_FIELDS),
                "filters": json.dumps(
                    list(filters) if filters is not None else default_reservation_filters(),
                    separators=(",", ":"),
                ),
            }
        )
        response = await self.http.get(
            "reservations",
            params=params,
            headers=dict(self.credential.headers),
        )
        payload = response.json()
        if not isinstance(payload, dict) or "results" not in payload:
            raise GuestyAPIError("Unexpected Guesty reservations payload")

        page = ReservationsResponse.model_validate(payload)
        log.debug("Fetched %d reservations at offset %d", len(page.results), offset)
        return ReservationPage(
            results=[parse_reservation(item) for item in page.results],
            total_count=page.count,
        )
