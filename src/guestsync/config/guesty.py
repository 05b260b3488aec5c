"""Guesty configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env, require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

GUESTY_BASE_URL = "https://app.guesty.com/api/v2/"
GUESTY_TIMEOUT_SECONDS = 20.0

# Guesty's owner portal rejects requests without its browser-style headers.
GUESTY_DEFAULT_HEADERS = {
    "accept": "application/json, text/plain, */*",
    "accept-language": "en-US,en;q=0.9",
    "content-type": "application/json;charset=UTF-8",
    "Referer": "https://owneraccess.guestyowners.com/",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@dataclass(frozen=True, slots=True)
class GuestyConfig:
    """Holds Guesty API configuration values.

    ``listing_id`` names the property the lock belongs to; access codes are only
    issued for its reservations.
    """

    username: str
    password: str
    account_id: str
    api_key: str
    resilience: ResilienceConfig
    listing_id: str | None = None


def default_guesty_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="guesty",
        base_url=GUESTY_BASE_URL,
        timeout_seconds=GUESTY_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(),
        default_headers=GUESTY_DEFAULT_HEADERS,
    )


def get_guesty_config(*, resilience: ResilienceConfig | None = None) -> GuestyConfig:
    values = require_env_vars(
        ("GUESTY_USERNAME", "GUESTY_PASSWORD", "GUESTY_ACCOUNT", "GUESTY_API_KEY")
    )
    return GuestyConfig(
        username=values["GUESTY_USERNAME"],
        password=values["GUESTY_PASSWORD"],
        account_id=values["GUESTY_ACCOUNT"],
        api_key=values["GUESTY_API_KEY"],
        resilience=resilience or default_guesty_resilience(),
        listing_id=optional_env("GUESTY_LISTING"),
    )
