"""
mobile_authenticator.py — Confirmation coordinator.

Every operation follows the same path: server time from the shared clock ->
confirmation key for the "conf" tag -> one remote call. Invalid input and
remote failures come back as None/False with a log line; nothing here raises
for them.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Set

from authenticator.clock import ServerClock
from authenticator.confirmations import Confirmation, parse_confirmations
from authenticator.log_handler import log, log_invalid
from authenticator.service import ConfirmationService
from authenticator.signatures import generate_code, generate_confirmation_key

CONFIRMATION_TAG = "conf"
ACCOUNT_FILE = "authenticator.json"


@dataclass
class MobileAuthenticator:
    shared_secret: str = field(repr=False)
    identity_secret: str = field(repr=False)
    service: ConfirmationService
    clock: ServerClock
    device_id: Optional[str] = None
    name: str = "authenticator"

    @classmethod
    def from_mapping(cls, data: dict, service: ConfirmationService, clock: ServerClock, name: str = None):
        """
        Build an authenticator from stored account data.

        Expects the keys "shared_secret" and "identity_secret" (base64) and an
        optional "device_id".

        Raises:
            ValueError: a secret is missing or empty
        """
        for required in ("shared_secret", "identity_secret"):
            if not data.get(required):
                raise ValueError(f"Account data is missing {required}")

        return cls(
            shared_secret=data["shared_secret"],
            identity_secret=data["identity_secret"],
            device_id=data.get("device_id") or None,
            service=service,
            clock=clock,
            name=name or data.get("account_name") or "authenticator",
        )

    @property
    def has_device_id(self) -> bool:
        return bool(self.device_id)

    def correct_device_id(self, device_id: str) -> None:
        if not device_id:
            log_invalid("device_id", self.name)
            return

        self.device_id = device_id

    async def generate_token(self) -> Optional[str]:
        time = await self.clock.get_server_time(self.service)
        if not time:
            log_invalid("time", self.name)
            return None

        try:
            return generate_code(self.shared_secret, time)
        except ValueError as e:
            log.error("[%s] Cannot generate token: %s", self.name, e)
            return None

    async def get_confirmations(self) -> Optional[Set[Confirmation]]:
        signed = await self._sign()
        if signed is None:
            return None

        time, confirmation_hash = signed
        document = await self.service.fetch_confirmations(self.device_id, confirmation_hash, time)
        if document is None:
            return None

        return parse_confirmations(document)

    async def get_confirmation_details(self, confirmation: Confirmation) -> Optional[Any]:
        if confirmation is None:
            log_invalid("confirmation", self.name)
            return None

        signed = await self._sign()
        if signed is None:
            return None

        time, confirmation_hash = signed
        return await self.service.fetch_confirmation_details(self.device_id, confirmation_hash, time, confirmation.id)

    async def handle_confirmation(self, confirmation: Confirmation, accept: bool) -> bool:
        if confirmation is None:
            log_invalid("confirmation", self.name)
            return False

        signed = await self._sign()
        if signed is None:
            return False

        time, confirmation_hash = signed
        return bool(
            await self.service.handle_confirmation(
                self.device_id, confirmation_hash, time, confirmation.id, confirmation.key, accept
            )
        )

    async def handle_confirmations(self, confirmations: Iterable[Confirmation], accept: bool) -> bool:
        """Accept or deny several confirmations with one signature; True only if all succeeded."""
        confirmations = list(confirmations or ())
        if not confirmations or any(confirmation is None for confirmation in confirmations):
            log_invalid("confirmations", self.name)
            return False

        signed = await self._sign()
        if signed is None:
            return False

        time, confirmation_hash = signed
        results = await asyncio.gather(
            *(
                self.service.handle_confirmation(
                    self.device_id, confirmation_hash, time, confirmation.id, confirmation.key, accept
                )
                for confirmation in confirmations
            )
        )
        return all(results)

    async def _sign(self):
        # (time, confirmation key) for the next remote call, or None.
        time = await self.clock.get_server_time(self.service)
        if not time:
            log_invalid("time", self.name)
            return None

        try:
            confirmation_hash = generate_confirmation_key(self.identity_secret, time, CONFIRMATION_TAG)
        except ValueError as e:
            log.error("[%s] Cannot generate confirmation key: %s", self.name, e)
            return None

        if not confirmation_hash:
            log_invalid("confirmation_hash", self.name)
            return None

        return time, confirmation_hash


def load_account(path: str = ACCOUNT_FILE) -> dict:
    """
    Read stored account data (JSON) from `path`.

    Raises FileNotFoundError if the file does not exist and ValueError if it
    is not a JSON object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain an account object")
    return data
