"""Shared fixtures for Guesty adapter tests."""

from __future__ import annotations

from dataclasses import replace

import pytest

from guestsync.config import RetryPolicy
from guestsync.config.guesty import GuestyConfig, default_guesty_resilience

GuestyPayload = dict[str, object]


@pytest.fixture
def guesty_config() -> GuestyConfig:
    return GuestyConfig(
        username="owner@example.com",
        password="secret",
        account_id="acct-1",
        api_key="key-1",
        resilience=replace(
            default_guesty_resilience(), retry=RetryPolicy(total=0), ratelimit=None, cache=None
        ),
    )


@pytest.fixture
def reservation_payload() -> GuestyPayload:
    return {
        "_id": "r-100",
        "listingId": "listing-1",
        "status": "confirmed",
        "checkIn": "2025-01-03T16:00:00.000Z",
        "checkOut": "2025-01-05T11:00:00.000Z",
        "checkInDateLocalized": "2025-01-03",
        "checkOutDateLocalized": "2025-01-05",
        "confirmationCode": "HM-100",
        "guest": {"fullName": "Jane Doe", "firstName": "Jane", "lastName": "Doe"},
        "listing": {"nickname": "Loft", "title": "Harbour Loft"},
        "money": {"currency": "USD", "totalPaid": 420, "hostPayout": "380.50"},
    }
