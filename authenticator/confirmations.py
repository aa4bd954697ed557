"""
confirmations.py — Confirmation records and the listing parser.

The platform returns pending confirmations as an HTML page; every entry is a
`<div class="mobileconf_list_entry">` carrying `data-confid` and `data-key`
attributes. Parsing works on a BeautifulSoup tree so that callers holding raw
markup and callers holding an already-parsed document share one code path.
"""

from dataclasses import dataclass
from typing import Optional, Set

from bs4 import BeautifulSoup

from authenticator.log_handler import log

ENTRY_SELECTOR = "div.mobileconf_list_entry"
ID_ATTRIBUTE = "data-confid"
KEY_ATTRIBUTE = "data-key"

UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class Confirmation:
    """A pending action, identified by its (id, key) pair."""

    id: int
    key: int

    def __post_init__(self):
        if not 0 < self.id <= UINT32_MAX:
            raise ValueError(f"Confirmation id must be a positive 32-bit value, got {self.id}")
        if not 0 < self.key <= UINT64_MAX:
            raise ValueError(f"Confirmation key must be a positive 64-bit value, got {self.key}")

    def to_dict(self) -> dict:
        return {"id": self.id, "key": self.key}


def _parse_unsigned(value: Optional[str], maximum: int) -> Optional[int]:
    # Decimal digits only, like an unsigned TryParse; no signs, no hex.
    if not value:
        return None
    value = value.strip()
    if not value.isdigit() or not value.isascii():
        return None
    number = int(value)
    if number == 0 or number > maximum:
        return None
    return number


def parse_confirmations(document) -> Optional[Set[Confirmation]]:
    """
    Extract confirmations from a parsed listing page.

    Returns:
        None if the document is missing or holds no list entries at all,
        otherwise the set of well-formed entries (possibly empty when every
        entry was malformed).
    """
    if document is None:
        return None

    entries = document.select(ENTRY_SELECTOR)
    if not entries:
        return None

    result = set()
    for entry in entries:
        confirmation_id = _parse_unsigned(entry.get(ID_ATTRIBUTE), UINT32_MAX)
        if confirmation_id is None:
            log.warning("Skipping confirmation entry with invalid %s: %r", ID_ATTRIBUTE, entry.get(ID_ATTRIBUTE))
            continue

        confirmation_key = _parse_unsigned(entry.get(KEY_ATTRIBUTE), UINT64_MAX)
        if confirmation_key is None:
            log.warning("Skipping confirmation %d with invalid %s: %r", confirmation_id, KEY_ATTRIBUTE, entry.get(KEY_ATTRIBUTE))
            continue

        result.add(Confirmation(confirmation_id, confirmation_key))

    return result


def parse_confirmations_html(markup: str) -> Optional[Set[Confirmation]]:
    if not markup:
        return None
    return parse_confirmations(BeautifulSoup(markup, "html.parser"))
