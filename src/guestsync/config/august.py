"""August lock configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

AUGUST_BASE_URL = "https://api-production.august.com/"


def august_default_headers(api_key: str) -> dict[str, str]:
    return {
        "x-august-api-key": api_key,
        "x-kease-api-key": api_key,
        "Content-Type": "application/json",
        "Accept-Version": "0.0.1",
        "User-Agent": "August/Luna-3.2.2",
    }


@dataclass(frozen=True, slots=True)
class AugustConfig:
    """Holds August API configuration values.

    ``identifier`` has the form ``<type>:<value>``, e.g. ``email:host@example.com``
    or ``phone:+15551234567``; the type selects the MFA validation channel.
    """

    install_id: str
    password: str
    identifier: str
    api_key: str
    lock_id: str
    resilience: ResilienceConfig

    @property
    def identifier_type(self) -> str:
        return self.identifier.split(":", 1)[0]

    @property
    def identifier_value(self) -> str:
        return self.identifier.split(":", 1)[1]


def get_august_config(*, resilience: ResilienceConfig | None = None) -> AugustConfig:
    values = require_env_vars(
        (
            "AUGUST_INSTALL_ID",
            "AUGUST_PASSWORD",
            "AUGUST_IDENTIFIER",
            "AUGUST_API_KEY",
            "AUGUST_LOCK",
        )
    )
    identifier = values["AUGUST_IDENTIFIER"]
    if ":" not in identifier:
        raise ConfigurationError(
            f"AUGUST_IDENTIFIER must look like 'email:<address>' or 'phone:<number>', got {identifier!r}"
        )
    api_key = values["AUGUST_API_KEY"]
    return AugustConfig(
        install_id=values["AUGUST_INSTALL_ID"],
        password=values["AUGUST_PASSWORD"],
        identifier=identifier,
        api_key=api_key,
        lock_id=values["AUGUST_LOCK"],
        resilience=resilience
        or ResilienceConfig(
            name="august",
            base_url=AUGUST_BASE_URL,
            ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
            default_headers=august_default_headers(api_key),
        ),
    )
