"""HTTP client for the August lock API."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from guestsync.adapters.credentials import ANONYMOUS, Credential

from .schema import SessionResponse, UnverifiedUserResponse
from .translator import format_access_times, parse_pin_listing

if TYPE_CHECKING:
    from datetime import datetime

    import httpx

    from guestsync.adapters.http_resilience import ResilientClient
    from guestsync.config.august import AugustConfig
    from guestsync.domain.ports import PinListing

log = getLogger(__name__)

ACCESS_TOKEN_HEADER = "x-august-access-token"


class AugustAPIError(RuntimeError):
    """Raised when August answers with a payload we cannot use."""


@dataclass(frozen=True, slots=True)
class AugustClient:
    """Access provider backed by an August smart lock.

    ``session`` (and the MFA ``validate`` step) return new credentials; the
    client never changes its own.
    """

    config: AugustConfig
    http: ResilientClient
    credential: Credential = ANONYMOUS

    def with_credential(self, credential: Credential) -> AugustClient:
        return replace(self, credential=credential)

    def _token_credential(self, response: httpx.Response) -> Credential | None:
        token = response.headers.get(ACCESS_TOKEN_HEADER)
        if not token:
            return None
        return self.credential.merged({ACCESS_TOKEN_HEADER: token})

    async def session(self) -> Credential:
        """Open a session for the pre-validated install id and API key."""

        response = await self.http.post(
            "session",
            json={
                "installId": self.config.install_id,
                "password": self.config.password,
                "identifier": self.config.identifier,
            },
        )
        credential = self._token_credential(response)
        if credential is None:
            raise AugustAPIError("August session response carried no access token")
        session = SessionResponse.model_validate(response.json())
        log.debug("Opened August session for user %s", session.user_id)
        return credential

    async def request_validation_code(self) -> Credential:
        """Ask August to send an MFA code to the configured identifier."""

        response = await self.http.post(
            f"validation/{self.config.identifier_type}",
            json={"value": self.config.identifier_value},
            headers=dict(self.credential.headers),
        )
        return self._token_credential(response) or self.credential

    async def validate(self, code: str) -> Credential:
        """Complete MFA validation of the install id with the received code."""

        response = await self.http.post(
            f"validate/{self.config.identifier_type}",
            json={"code": code, self.config.identifier_type: self.config.identifier_value},
            headers=dict(self.credential.headers),
        )
        return self._token_credential(response) or self.credential

    async def list_pins(self, lock_id: str) -> PinListing:
        response = await self.http.get(
            f"locks/{lock_id}/pins",
            headers=dict(self.credential.headers),
        )
        payload = response.json()
        if not isinstance(payload, dict):
            raise AugustAPIError("Unexpected August pin listing payload")
        return parse_pin_listing(payload)

    async def create_unverified_user(
        self,
        *,
        first_name: str,
        last_name: str,
        lock_id: str,
        pin: str,
    ) -> str:
        response = await self.http.post(
            "unverifiedusers",
            json={
                "firstName": first_name,
                "lastName": last_name,
                "lockID": lock_id,
                "pin": pin,
            },
            headers=dict(self.credential.headers),
        )
        try:
            user = UnverifiedUserResponse.model_validate(response.json())
        except ValueError as exc:
            raise AugustAPIError("August did not return an id for the new user") from exc
        return user.id

    async def submit_load_command(
        self,
        *,
        lock_id: str,
        user_id: str,
        pin: str,
        start: datetime,
        end: datetime,
    ) -> None:
        await self._submit_command(
            lock_id,
            {
                "action": "load",
                "pin": pin,
                "accessType": "temporary",
                "accessTimes": format_access_times(start, end),
                "augustUserID": user_id,
            },
        )

    async def submit_delete_command(self, *, lock_id: str, user_id: str) -> None:
        await self._submit_command(lock_id, {"action": "delete", "augustUserID": user_id})

    async def _submit_command(self, lock_id: str, command: dict[str, object]) -> None:
        await self.http.post(
            f"locks/{lock_id}/pins",
            json={"commands": [command]},
            headers=dict(self.credential.headers),
        )
