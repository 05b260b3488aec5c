"""Public interface for the Guesty adapter."""

from __future__ import annotations

from .client import GuestyAPIError, GuestyClient, listing_reservation_filters
from .schema import ReservationPayload, ReservationsResponse
from .translator import normalize_status, parse_reservation

__all__ = [
    "GuestyAPIError",
    "GuestyClient",
    "ReservationPayload",
    "ReservationsResponse",
    "listing_reservation_filters",
    "normalize_status",
    "parse_reservation",
]
