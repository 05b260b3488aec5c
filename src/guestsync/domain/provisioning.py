"""Issue temporary access codes against a lock that loads them asynchronously.

The vendor accepts a "load pin" command immediately but only pushes the code to
the physical lock later. Provisioning therefore polls the pin listing until the
entry owned by the new user reports ``loaded``, waiting on the in-progress states
and failing on anything else.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .errors import ProvisioningTimeoutError, UnexpectedPinStateError

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from .ports import AccessProvider, PinListing
    from .types import DownstreamRecord, PinPayload

log = getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_MAX_POLLS = 120


class PinState(StrEnum):
    REQUESTED = "requested"
    CREATING = "creating"
    CREATED = "created"
    ENABLING = "enabling"
    ENABLED = "enabled"
    LOADED = "loaded"
    DISABLING = "disabling"
    DISABLED = "disabled"
    DELETING = "deleting"
    UPDATING = "updating"
    MISSING = "missing"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> PinState:
        if value is None:
            return cls.MISSING
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Transition(StrEnum):
    POLL = "poll"
    SUCCESS = "success"
    FATAL = "fatal"


# States not listed here are fatal for a fresh load.
TRANSITIONS: dict[PinState, Transition] = {
    PinState.CREATING: Transition.POLL,
    PinState.CREATED: Transition.POLL,
    PinState.ENABLING: Transition.POLL,
    PinState.ENABLED: Transition.POLL,
    PinState.LOADED: Transition.SUCCESS,
}


def transition_for(state: PinState) -> Transition:
    return TRANSITIONS.get(state, Transition.FATAL)


class Sleep(Protocol):
    def __call__(self, delay: float, /) -> Awaitable[None]: ...


@dataclass(frozen=True, slots=True)
class ProvisioningResult:
    user_id: str
    record: DownstreamRecord
    polls: int


@dataclass(slots=True, kw_only=True)
class PinProvisioner:
    """Drive one access code from request to ``loaded``.

    ``max_polls`` bounds the number of wait-and-poll cycles; ``None`` polls until
    the lock reports a terminal state.
    """

    provider: AccessProvider
    lock_id: str
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_polls: int | None = DEFAULT_MAX_POLLS
    sleep: Sleep = asyncio.sleep

    async def provision(self, payload: PinPayload) -> ProvisioningResult:
        user_id = await self.provider.create_unverified_user(
            first_name=payload.first_name,
            last_name=payload.last_name,
            lock_id=self.lock_id,
            pin=payload.pin,
        )
        await self.provider.submit_load_command(
            lock_id=self.lock_id,
            user_id=user_id,
            pin=payload.pin,
            start=payload.access_start,
            end=payload.access_end,
        )
        return await self.wait_until_loaded(user_id)

    async def wait_until_loaded(self, user_id: str) -> ProvisioningResult:
        polls = 0
        while True:
            listing = await self.provider.list_pins(self.lock_id)
            record, raw_state = _locate(listing, user_id)
            state = PinState.parse(raw_state)
            transition = transition_for(state)

            if transition is Transition.SUCCESS and record is not None:
                log.info("User %s loaded after %d poll(s)", user_id, polls)
                return ProvisioningResult(user_id=user_id, record=record, polls=polls)
            if transition is not Transition.POLL:
                raise UnexpectedPinStateError(
                    user_id=user_id,
                    state=raw_state or PinState.MISSING,
                    snapshot=listing,
                )
            if self.max_polls is not None and polls >= self.max_polls:
                raise ProvisioningTimeoutError(user_id=user_id, state=state, polls=polls)

            log.debug("Waiting...user %s is still in the %s state.", user_id, state)
            await self.sleep(self.poll_interval)
            polls += 1


def _locate(listing: PinListing, user_id: str) -> tuple[DownstreamRecord | None, str | None]:
    record = listing.owned_by(user_id)
    if record is None:
        return None, None
    return record, record.state
