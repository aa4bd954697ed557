"""
authenticator package
=====================

Software authenticator for the marketplace's mobile two-factor scheme:
5-character login codes, signed trade/market confirmations and server time
synchronisation.

──────────────────────────────────────────────
Core algorithms
──────────────────────────────────────────────
- Login code:
  HMAC-SHA1(key=shared_secret, msg=floor(time / 30) as 8-byte big-endian)
  -> dynamic truncation -> 5 characters from "23456789BCDFGHJKMNPQRTVWXY".

- Confirmation key:
  base64(HMAC-SHA1(key=identity_secret, msg=time as 8-byte big-endian + tag[:32])).

- Server time:
  local time + cached offset; the offset is fetched once per process under a lock.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from authenticator import MobileAuthenticator, ServerClock
>>> clock = ServerClock()
>>> auth = MobileAuthenticator.from_mapping(load_account("bot.json"), service, clock)
>>> code = await auth.generate_token()
>>> for confirmation in await auth.get_confirmations() or ():
...     await auth.handle_confirmation(confirmation, accept=True)
"""

from authenticator.clock import ServerClock
from authenticator.confirmations import Confirmation, parse_confirmations, parse_confirmations_html
from authenticator.mobile_authenticator import MobileAuthenticator, load_account
from authenticator.service import ConfirmationService
from authenticator.signatures import generate_code, generate_confirmation_key

__all__ = [
    "Confirmation",
    "ConfirmationService",
    "MobileAuthenticator",
    "ServerClock",
    "generate_code",
    "generate_confirmation_key",
    "load_account",
    "parse_confirmations",
    "parse_confirmations_html",
]
