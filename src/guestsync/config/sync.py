"""Synchronization defaults for sync runs."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env, optional_int_env

DEFAULT_PAGE_SIZE = 25
DEFAULT_POLL_INTERVAL_SECONDS = 30.0
# one hour of polling at the default interval
DEFAULT_MAX_POLLS = 120
DEFAULT_LOOKAHEAD_DAYS = 7
DEFAULT_CALENDAR_MAX_RESULTS = 250


@dataclass(frozen=True, slots=True)
class SyncConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_polls: int | None = DEFAULT_MAX_POLLS
    lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS
    calendar_max_results: int = DEFAULT_CALENDAR_MAX_RESULTS


def get_sync_config() -> SyncConfig:
    page_size = optional_int_env("GUESTSYNC_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    lookahead = optional_int_env("GUESTSYNC_LOOKAHEAD_DAYS", DEFAULT_LOOKAHEAD_DAYS)
    return SyncConfig(
        page_size=page_size or DEFAULT_PAGE_SIZE,
        poll_interval_seconds=optional_float_env(
            "GUESTSYNC_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
        ),
        max_polls=optional_int_env("GUESTSYNC_MAX_POLLS", DEFAULT_MAX_POLLS),
        lookahead_days=DEFAULT_LOOKAHEAD_DAYS if lookahead is None else lookahead,
    )
