"""Google Calendar configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

GOOGLE_CALENDAR_BASE_URL = "https://www.googleapis.com/calendar/v3/"


@dataclass(frozen=True, slots=True)
class GoogleCalendarConfig:
    calendar_id: str
    access_token: str
    resilience: ResilienceConfig


def get_google_calendar_config(
    *, resilience: ResilienceConfig | None = None
) -> GoogleCalendarConfig:
    values = require_env_vars(("GOOGLE_CALENDAR_ID", "GOOGLE_CALENDAR_TOKEN"))
    return GoogleCalendarConfig(
        calendar_id=values["GOOGLE_CALENDAR_ID"],
        access_token=values["GOOGLE_CALENDAR_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="google-calendar",
            base_url=GOOGLE_CALENDAR_BASE_URL,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
