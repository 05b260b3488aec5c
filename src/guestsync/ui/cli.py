from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import UTC, datetime
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from guestsync.app import create_guest_pins, sync_calendar, validate_august
from guestsync.config import configure_logging, get_sync_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from guestsync.config import SyncConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile Guesty reservations with Google Calendar and August locks"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calendar = subparsers.add_parser("calendar", help="Sync reservations to calendar events")
    calendar.add_argument(
        "--window-start",
        type=str,
        help="ISO-8601 timestamp (UTC) of the earliest event to reconcile (defaults to now)",
    )
    calendar.add_argument(
        "--page-size",
        type=int,
        help="Number of reservations to request per API call (defaults to config)",
    )

    pins = subparsers.add_parser("pins", help="Create guest access codes on the lock")
    pins.add_argument(
        "--lookahead-days",
        type=int,
        help="Only handle reservations checking in within this many days (defaults to config)",
    )
    pins.add_argument(
        "--max-polls",
        type=int,
        help="Give up on a pin after this many status polls (defaults to config)",
    )
    pins.add_argument(
        "--poll-interval",
        type=float,
        help="Seconds to wait between status polls (defaults to config)",
    )
    pins.add_argument(
        "--page-size",
        type=int,
        help="Number of reservations to request per API call (defaults to config)",
    )

    subparsers.add_parser(
        "august-validate",
        help="Validate the August install id and API key with an MFA code",
    )

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _non_negative(name: str, value: float | None) -> None:
    if value is not None and value < 0:
        raise ValueError(f"{name} must be non-negative")


def _sync_config(args: argparse.Namespace) -> SyncConfig:
    config = get_sync_config()
    page_size = getattr(args, "page_size", None)
    if page_size is not None:
        if page_size <= 0:
            raise ValueError("Page size must be positive")
        config = replace(config, page_size=page_size)
    if args.command != "pins":
        return config
    _non_negative("Lookahead days", args.lookahead_days)
    _non_negative("Max polls", args.max_polls)
    _non_negative("Poll interval", args.poll_interval)
    if args.lookahead_days is not None:
        config = replace(config, lookahead_days=args.lookahead_days)
    if args.max_polls is not None:
        config = replace(config, max_polls=args.max_polls)
    if args.poll_interval is not None:
        config = replace(config, poll_interval_seconds=args.poll_interval)
    return config


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    window_start: datetime | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        sync_config = _sync_config(parsed_args)
        if parsed_args.command == "calendar" and parsed_args.window_start:
            window_start = _parse_iso_datetime(parsed_args.window_start)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    failed = 0
    try:
        if parsed_args.command == "calendar":
            calendar_result = sync_calendar(sync_config=sync_config, window_start=window_start)
            failed = len(calendar_result.report.failures)
        elif parsed_args.command == "pins":
            access_result = create_guest_pins(sync_config=sync_config)
            failed = len(access_result.failures)
            log.info(
                "Access code sync finished: reservations=%s, provisioned=%s, revoked=%s, "
                "unsettled=%s",
                access_result.fetched,
                len(access_result.provisioned),
                access_result.revoked,
                len(access_result.unsettled),
            )
            if access_result.first_error is not None:
                log.error("First access code failure: %s", access_result.first_error)
        elif parsed_args.command == "august-validate":
            validate_august()
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    if failed:
        log.error("%d operation(s) failed", failed)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
