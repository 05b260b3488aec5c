"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from guestsync.adapters.august import AugustClient
from guestsync.adapters.google_calendar import GoogleCalendarClient
from guestsync.adapters.guesty import GuestyClient, listing_reservation_filters
from guestsync.adapters.http_resilience import ResilientClient
from guestsync.config import (
    MissingConfigurationError,
    get_august_config,
    get_google_calendar_config,
    get_guesty_config,
    get_sync_config,
)
from guestsync.domain.data_integration import sync_access_codes, sync_calendar_events
from guestsync.domain.provisioning import PinProvisioner

if TYPE_CHECKING:
    from guestsync.adapters.credentials import Credential
    from guestsync.config import (
        AugustConfig,
        GoogleCalendarConfig,
        GuestyConfig,
        ResilienceConfig,
        SyncConfig,
    )
    from guestsync.domain.data_integration import AccessSyncResult, CalendarSyncResult

ClientFactory = Callable[["ResilienceConfig"], ResilientClient]
Clock = Callable[[], datetime]


log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


async def _authenticated_guesty(config: GuestyConfig, http: ResilientClient) -> GuestyClient:
    guesty = GuestyClient(config=config, http=http)
    return guesty.with_credential(await guesty.authenticate())


def sync_calendar(
    *,
    guesty_config: GuestyConfig | None = None,
    calendar_config: GoogleCalendarConfig | None = None,
    sync_config: SyncConfig | None = None,
    window_start: datetime | None = None,
    client_factory: ClientFactory = ResilientClient,
    clock: Clock = _utcnow,
) -> CalendarSyncResult:
    """Mirror Guesty reservations into the configured Google calendar."""

    guesty_cfg = guesty_config or get_guesty_config()
    calendar_cfg = calendar_config or get_google_calendar_config()
    sync_cfg = sync_config or get_sync_config()
    start = window_start or clock()
    log.info("Starting calendar sync: window_start=%s, page_size=%s", start, sync_cfg.page_size)

    async def run() -> CalendarSyncResult:
        async with (
            client_factory(guesty_cfg.resilience) as guesty_http,
            client_factory(calendar_cfg.resilience) as calendar_http,
        ):
            guesty = await _authenticated_guesty(guesty_cfg, guesty_http)
            calendar = GoogleCalendarClient(config=calendar_cfg, http=calendar_http)
            calendar = calendar.with_credential(calendar.authenticate())
            return await sync_calendar_events(
                source=guesty,
                calendar=calendar,
                window_start=start,
                page_size=sync_cfg.page_size,
                max_results=sync_cfg.calendar_max_results,
            )

    result = asyncio.run(run())
    report = result.report
    log.info(
        f"Finished calendar sync: reservations={result.fetched}, events={result.existing}, "
        f"created={report.created}, updated={report.updated}, deleted={report.deleted}, "
        f"failed={len(report.failures)}"
    )
    return result


def create_guest_pins(
    *,
    guesty_config: GuestyConfig | None = None,
    august_config: AugustConfig | None = None,
    sync_config: SyncConfig | None = None,
    client_factory: ClientFactory = ResilientClient,
    clock: Clock = _utcnow,
) -> AccessSyncResult:
    """Issue lock pins for guests arriving within the lookahead window.

    Only reservations of the configured Guesty listing are considered. Each pin
    is only valid between the reservation's check-in and check-out.
    """

    guesty_cfg = guesty_config or get_guesty_config()
    listing_id = guesty_cfg.listing_id
    if listing_id is None:
        raise MissingConfigurationError("Missing configuration for: GUESTY_LISTING")
    august_cfg = august_config or get_august_config()
    sync_cfg = sync_config or get_sync_config()
    horizon = clock() + timedelta(days=sync_cfg.lookahead_days)
    log.info(
        "Starting access code sync: listing=%s, lock=%s, horizon=%s, max_polls=%s",
        listing_id,
        august_cfg.lock_id,
        horizon,
        sync_cfg.max_polls,
    )

    async def run() -> AccessSyncResult:
        async with (
            client_factory(guesty_cfg.resilience) as guesty_http,
            client_factory(august_cfg.resilience) as august_http,
        ):
            guesty = await _authenticated_guesty(guesty_cfg, guesty_http)
            august = AugustClient(config=august_cfg, http=august_http)
            august = august.with_credential(await august.session())
            provisioner = PinProvisioner(
                provider=august,
                lock_id=august_cfg.lock_id,
                poll_interval=sync_cfg.poll_interval_seconds,
                max_polls=sync_cfg.max_polls,
            )
            return await sync_access_codes(
                source=guesty,
                access=august,
                provisioner=provisioner,
                horizon=horizon,
                listing_id=listing_id,
                filters=listing_reservation_filters(listing_id),
                page_size=sync_cfg.page_size,
            )

    return asyncio.run(run())


def validate_august(
    *,
    prompt: Callable[[str], str] = input,
    august_config: AugustConfig | None = None,
    client_factory: ClientFactory = ResilientClient,
) -> Credential:
    """Run the two-step MFA validation for the configured install id and API key.

    Only needed once per install id / API key pair, or after August revokes it.
    """

    config = august_config or get_august_config()

    async def start() -> Credential:
        async with client_factory(config.resilience) as http:
            august = AugustClient(config=config, http=http)
            august = august.with_credential(await august.session())
            return await august.request_validation_code()

    async def finish(credential: Credential, code: str) -> Credential:
        async with client_factory(config.resilience) as http:
            august = AugustClient(config=config, http=http, credential=credential)
            return await august.validate(code)

    log.info(
        "Sending initial request which will send a validation code to %s", config.identifier
    )
    credential = asyncio.run(start())
    code = prompt("What is the MFA code returned? ").strip()
    validated = asyncio.run(finish(credential, code))
    log.info("August install id validated")
    return validated
