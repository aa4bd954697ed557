"""Remote service consumed by the authenticator.

Transport, sessions and cookies belong to the implementation; the
authenticator only hands over pre-computed signatures and time values.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ConfirmationService(ABC):

    @abstractmethod
    async def fetch_server_time(self) -> int:
        """Server unix time in seconds, or 0 on failure."""

    @abstractmethod
    async def fetch_confirmations(self, device_id: str, confirmation_hash: str, time: int) -> Optional[Any]:
        """Parsed listing document (BeautifulSoup), or None on failure."""

    @abstractmethod
    async def fetch_confirmation_details(
        self, device_id: str, confirmation_hash: str, time: int, confirmation_id: int
    ) -> Optional[Any]:
        """Details of one confirmation, passed through to the caller untouched."""

    @abstractmethod
    async def handle_confirmation(
        self,
        device_id: str,
        confirmation_hash: str,
        time: int,
        confirmation_id: int,
        confirmation_key: int,
        accept: bool,
    ) -> bool:
        """Accept or deny one confirmation; True when the platform agreed."""
