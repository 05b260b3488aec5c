"""Shared fixtures for August adapter tests."""

from __future__ import annotations

import pytest

from guestsync.config import ResilienceConfig, RetryPolicy
from guestsync.config.august import AUGUST_BASE_URL, AugustConfig, august_default_headers


@pytest.fixture
def august_config() -> AugustConfig:
    return AugustConfig(
        install_id="install-1",
        password="hunter2",
        identifier="email:host@example.com",
        api_key="api-key",
        lock_id="lock-1",
        resilience=ResilienceConfig(
            name="august",
            base_url=AUGUST_BASE_URL,
            retry=RetryPolicy(total=0),
            default_headers=august_default_headers("api-key"),
        ),
    )


@pytest.fixture
def pin_listing_payload() -> dict[str, object]:
    return {
        "loaded": [
            {
                "userID": "u-1",
                "firstName": "Jane",
                "lastName": "Doe",
                "pin": "0305",
                "slot": 3,
                "accessType": "temporary",
                "accessTimes": "DTSTART=2025-01-03T16:00:00.000Z;DTEND=2025-01-05T11:00:00.000Z",
            }
        ],
        "created": [{"userID": 42, "firstName": "John", "lastName": "Roe", "state": "enabling"}],
        "disabled": [],
        "deleting": [{"firstName": "No", "lastName": "Id"}],
        "lockID": "lock-1",
    }
