import asyncio

import pytest
from bs4 import BeautifulSoup

from authenticator.clock import ServerClock
from authenticator.mobile_authenticator import MobileAuthenticator
from authenticator.service import ConfirmationService

SHARED_SECRET = "AAAAAAAAAAAAAAAA"
IDENTITY_SECRET = "AAAAAAAAAAAAAAAA"
LOCAL_TIME = 999999900
SERVER_TIME = 1000000000

LISTING_HTML = """
<html><body>
  <div id="mobileconf_list">
    <div class="mobileconf_list_entry" data-confid="123" data-key="456"></div>
    <div class="mobileconf_list_entry" data-confid="124" data-key="18446744073709551615"></div>
  </div>
</body></html>
"""


class StubService(ConfirmationService):
    """In-memory platform: records every call it receives."""

    def __init__(self, server_time=SERVER_TIME, listing=LISTING_HTML, details=None, result=True):
        self.server_time = server_time
        self.listing = listing
        self.details = details if details is not None else {"type": "trade", "html": "<div>offer</div>"}
        self.result = result
        self.time_queries = 0
        self.calls = []

    async def fetch_server_time(self):
        self.time_queries += 1
        await asyncio.sleep(0)
        return self.server_time

    async def fetch_confirmations(self, device_id, confirmation_hash, time):
        self.calls.append(("list", device_id, confirmation_hash, time))
        if self.listing is None:
            return None
        return parse_html(self.listing)

    async def fetch_confirmation_details(self, device_id, confirmation_hash, time, confirmation_id):
        self.calls.append(("details", device_id, confirmation_hash, time, confirmation_id))
        return self.details

    async def handle_confirmation(self, device_id, confirmation_hash, time, confirmation_id, confirmation_key, accept):
        self.calls.append(("handle", device_id, confirmation_hash, time, confirmation_id, confirmation_key, accept))
        return self.result


def parse_html(markup):
    return BeautifulSoup(markup, "html.parser")


@pytest.fixture
def service():
    return StubService()


@pytest.fixture
def clock():
    return ServerClock(time_func=lambda: LOCAL_TIME)


@pytest.fixture
def authenticator(service, clock):
    return MobileAuthenticator(
        shared_secret=SHARED_SECRET,
        identity_secret=IDENTITY_SECRET,
        device_id="android:0000",
        service=service,
        clock=clock,
        name="test-bot",
    )


@pytest.fixture
def listing_document():
    return parse_html(LISTING_HTML)
