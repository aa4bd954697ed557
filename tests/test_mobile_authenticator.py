import asyncio
import json

import pytest
from conftest import IDENTITY_SECRET, SERVER_TIME, SHARED_SECRET, StubService

from authenticator.clock import ServerClock
from authenticator.confirmations import Confirmation
from authenticator.mobile_authenticator import MobileAuthenticator, load_account

CONF_KEY = "8k3i7HtvxPAfSJnYZUQjsWN+Y64="


def test_generate_token(authenticator):
    assert asyncio.run(authenticator.generate_token()) == "2W3J6"


def test_generate_token_without_time(service):
    service.server_time = 0
    auth = MobileAuthenticator(SHARED_SECRET, IDENTITY_SECRET, service, ServerClock(time_func=lambda: 0))
    assert asyncio.run(auth.generate_token()) is None


def test_generate_token_with_bad_secret(service, clock):
    auth = MobileAuthenticator("%%%", IDENTITY_SECRET, service, clock)
    assert asyncio.run(auth.generate_token()) is None


def test_get_confirmations(authenticator, service):
    result = asyncio.run(authenticator.get_confirmations())
    assert Confirmation(123, 456) in result
    assert len(result) == 2
    assert service.calls == [("list", "android:0000", CONF_KEY, SERVER_TIME)]


def test_get_confirmations_remote_failure(authenticator, service):
    service.listing = None
    assert asyncio.run(authenticator.get_confirmations()) is None


def test_get_confirmations_unrecognised_page(authenticator, service):
    service.listing = "<html><body>Please log in</body></html>"
    assert asyncio.run(authenticator.get_confirmations()) is None


def test_get_confirmation_details(authenticator, service):
    details = asyncio.run(authenticator.get_confirmation_details(Confirmation(123, 456)))
    assert details is service.details
    assert service.calls == [("details", "android:0000", CONF_KEY, SERVER_TIME, 123)]


def test_get_confirmation_details_requires_confirmation(authenticator, service):
    assert asyncio.run(authenticator.get_confirmation_details(None)) is None
    assert service.calls == []


def test_handle_confirmation_passes_id_and_key(authenticator, service):
    assert asyncio.run(authenticator.handle_confirmation(Confirmation(123, 456), True)) is True
    assert service.calls == [("handle", "android:0000", CONF_KEY, SERVER_TIME, 123, 456, True)]


def test_handle_confirmation_deny_failure(authenticator, service):
    service.result = False
    assert asyncio.run(authenticator.handle_confirmation(Confirmation(1, 2), False)) is False
    assert service.calls[0][-1] is False


def test_handle_confirmation_requires_confirmation(authenticator, service):
    assert asyncio.run(authenticator.handle_confirmation(None, True)) is False
    assert service.calls == []


def test_no_remote_call_without_time(service):
    service.server_time = 0
    auth = MobileAuthenticator(SHARED_SECRET, IDENTITY_SECRET, service, ServerClock(time_func=lambda: 0))
    assert asyncio.run(auth.get_confirmations()) is None
    assert asyncio.run(auth.handle_confirmation(Confirmation(1, 2), True)) is False
    assert asyncio.run(auth.get_confirmation_details(Confirmation(1, 2))) is None
    assert service.calls == []


def test_no_remote_call_with_bad_identity_secret(service, clock):
    auth = MobileAuthenticator(SHARED_SECRET, "###", service, clock)
    assert asyncio.run(auth.get_confirmations()) is None
    assert service.calls == []


def test_handle_confirmations(authenticator, service):
    confirmations = {Confirmation(1, 2), Confirmation(3, 4)}
    assert asyncio.run(authenticator.handle_confirmations(confirmations, True)) is True
    assert sorted(call[4:6] for call in service.calls) == [(1, 2), (3, 4)]
    assert {call[3] for call in service.calls} == {SERVER_TIME}


def test_handle_confirmations_partial_failure(authenticator):
    class Picky(StubService):
        async def handle_confirmation(self, device_id, confirmation_hash, time, confirmation_id, confirmation_key, accept):
            return confirmation_id != 3

    authenticator.service = Picky()
    assert asyncio.run(authenticator.handle_confirmations([Confirmation(1, 2), Confirmation(3, 4)], True)) is False


def test_handle_confirmations_empty(authenticator, service):
    assert asyncio.run(authenticator.handle_confirmations([], True)) is False
    assert service.calls == []


def test_device_id_correction(service, clock):
    auth = MobileAuthenticator(SHARED_SECRET, IDENTITY_SECRET, service, clock)
    assert not auth.has_device_id

    auth.correct_device_id("")
    assert not auth.has_device_id

    auth.correct_device_id("android:1234")
    assert auth.has_device_id
    assert auth.device_id == "android:1234"


def test_repr_hides_secrets(authenticator):
    assert SHARED_SECRET not in repr(authenticator)


def test_from_mapping(service, clock):
    auth = MobileAuthenticator.from_mapping(
        {"shared_secret": SHARED_SECRET, "identity_secret": IDENTITY_SECRET, "device_id": "android:1"},
        service,
        clock,
    )
    assert auth.device_id == "android:1"
    assert asyncio.run(auth.generate_token()) == "2W3J6"


@pytest.mark.parametrize("missing", ["shared_secret", "identity_secret"])
def test_from_mapping_requires_secrets(service, clock, missing):
    data = {"shared_secret": SHARED_SECRET, "identity_secret": IDENTITY_SECRET}
    del data[missing]
    with pytest.raises(ValueError):
        MobileAuthenticator.from_mapping(data, service, clock)


def test_load_account(tmp_path):
    path = tmp_path / "bot.json"
    path.write_text(json.dumps({"shared_secret": SHARED_SECRET, "identity_secret": IDENTITY_SECRET}))
    assert load_account(str(path))["shared_secret"] == SHARED_SECRET

    path.write_text("[]")
    with pytest.raises(ValueError):
        load_account(str(path))
