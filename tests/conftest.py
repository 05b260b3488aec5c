from __future__ import annotations

import pytest

SYNC_TUNING_ENV = (
    "GUESTSYNC_PAGE_SIZE",
    "GUESTSYNC_POLL_INTERVAL_SECONDS",
    "GUESTSYNC_MAX_POLLS",
    "GUESTSYNC_LOOKAHEAD_DAYS",
)


@pytest.fixture(autouse=True)
def _default_sync_tuning(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's run tuning out of the tests."""

    for name in SYNC_TUNING_ENV:
        monkeypatch.delenv(name, raising=False)
