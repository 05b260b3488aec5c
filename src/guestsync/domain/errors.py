"""Domain error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import PinListing


class GuestSyncError(RuntimeError):
    """Base class for errors raised by the sync core."""


class ProvisioningError(GuestSyncError):
    """Raised when an access code could not be brought to the loaded state."""

    def __init__(self, message: str, *, user_id: str) -> None:
        super().__init__(message)
        self.user_id = user_id


class UnexpectedPinStateError(ProvisioningError):
    """The lock reported a state the provisioning protocol cannot continue from."""

    def __init__(self, *, user_id: str, state: str, snapshot: PinListing) -> None:
        super().__init__(
            f"User {user_id} is in the unexpected {state} state! "
            f"Pin listing: {snapshot.describe()}",
            user_id=user_id,
        )
        self.state = state
        self.snapshot = snapshot


class ProvisioningTimeoutError(ProvisioningError):
    """The pin was still propagating after the configured number of polls."""

    def __init__(self, *, user_id: str, state: str, polls: int) -> None:
        super().__init__(
            f"User {user_id} still in the {state} state after {polls} polls",
            user_id=user_id,
        )
        self.state = state
        self.polls = polls
