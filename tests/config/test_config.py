from __future__ import annotations

import pytest

from guestsync.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_august_config,
    get_google_calendar_config,
    get_guesty_config,
    get_sync_config,
    require_env_var,
    require_env_vars,
)
from guestsync.config.env import optional_float_env, optional_int_env

GUESTY_ENV = {
    "GUESTY_USERNAME": "owner@example.com",
    "GUESTY_PASSWORD": "secret",
    "GUESTY_ACCOUNT": "acct-1",
    "GUESTY_API_KEY": "key-1",
}
AUGUST_ENV = {
    "AUGUST_INSTALL_ID": "install-1",
    "AUGUST_PASSWORD": "hunter2",
    "AUGUST_IDENTIFIER": "phone:+15551234567",
    "AUGUST_API_KEY": "api-key",
    "AUGUST_LOCK": "lock-1",
}


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.delenv("MISSING_A", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 7), ("", 7), ("12", 12), ("none", None), (" None ", None)],
)
def test_optional_int_env(
    monkeypatch: pytest.MonkeyPatch,
    raw: str | None,
    expected: int | None,
) -> None:
    if raw is None:
        monkeypatch.delenv("EXAMPLE_INT", raising=False)
    else:
        monkeypatch.setenv("EXAMPLE_INT", raw)

    assert optional_int_env("EXAMPLE_INT", 7) == expected


@pytest.mark.parametrize("raw", ["abc", "-1", "1.5"])
def test_optional_int_env_rejects_invalid(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("EXAMPLE_INT", raw)

    with pytest.raises(ConfigurationError, match="EXAMPLE_INT"):
        optional_int_env("EXAMPLE_INT", 7)


def test_optional_float_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_FLOAT", "2.5")

    assert optional_float_env("EXAMPLE_FLOAT", 30.0) == 2.5

    monkeypatch.setenv("EXAMPLE_FLOAT", "soon")
    with pytest.raises(ConfigurationError):
        optional_float_env("EXAMPLE_FLOAT", 30.0)


def test_get_sync_config_defaults() -> None:
    config = get_sync_config()

    assert config.page_size == 25
    assert config.poll_interval_seconds == 30.0
    assert config.max_polls == 120
    assert config.lookahead_days == 7


def test_get_sync_config_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GUESTSYNC_PAGE_SIZE", "50")
    monkeypatch.setenv("GUESTSYNC_POLL_INTERVAL_SECONDS", "5")
    monkeypatch.setenv("GUESTSYNC_MAX_POLLS", "none")
    monkeypatch.setenv("GUESTSYNC_LOOKAHEAD_DAYS", "0")

    config = get_sync_config()

    assert config.page_size == 50
    assert config.poll_interval_seconds == 5.0
    assert config.max_polls is None
    assert config.lookahead_days == 0


def test_get_guesty_config(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in GUESTY_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("GUESTY_LISTING", raising=False)

    config = get_guesty_config()

    assert config.account_id == "acct-1"
    assert config.resilience.name == "guesty"
    assert config.resilience.base_url == "https://app.guesty.com/api/v2/"
    assert config.resilience.cache is not None
    assert config.listing_id is None


def test_get_guesty_config_reads_listing(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in GUESTY_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("GUESTY_LISTING", " listing-1 ")

    assert get_guesty_config().listing_id == "listing-1"


def test_get_guesty_config_reports_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in GUESTY_ENV:
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(MissingConfigurationError, match="GUESTY_API_KEY"):
        get_guesty_config()


def test_get_august_config(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in AUGUST_ENV.items():
        monkeypatch.setenv(name, value)

    config = get_august_config()

    assert config.identifier_type == "phone"
    assert config.identifier_value == "+15551234567"
    assert config.lock_id == "lock-1"
    assert config.resilience.default_headers is not None
    assert config.resilience.default_headers["x-august-api-key"] == "api-key"


def test_get_august_config_rejects_bare_identifier(monkeypatch: pytest.MonkeyPatch) -> None:
    for name, value in AUGUST_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("AUGUST_IDENTIFIER", "host@example.com")

    with pytest.raises(ConfigurationError, match="AUGUST_IDENTIFIER"):
        get_august_config()


def test_get_google_calendar_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_CALENDAR_ID", "primary")
    monkeypatch.setenv("GOOGLE_CALENDAR_TOKEN", "ya29.token")

    config = get_google_calendar_config()

    assert config.calendar_id == "primary"
    assert config.resilience.base_url == "https://www.googleapis.com/calendar/v3/"
