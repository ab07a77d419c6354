"""Tests for demo authentication."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from flowguide.services.auth import DEFAULT_AUTH_STORAGE_KEY, DemoAuth, DemoAuthError
from flowguide.services.storage import DEFAULT_USER_ID, MemorySlot


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def auth(slot, network):
    return DemoAuth(slot, network, clock=lambda: NOW)


class TestDemoAuth:
    """Session lifecycle in the auth slot."""

    def test_sign_in_persists_session(self, auth, slot, sleep):
        session = asyncio.run(auth.sign_in("someone@example.com", "secret"))

        assert session.user.id == DEFAULT_USER_ID
        assert session.user.email == "someone@example.com"
        assert session.access_token.startswith("demo-access-")
        assert session.expires_at == "2025-03-01T13:00:00.000Z"
        assert DEFAULT_AUTH_STORAGE_KEY in slot.values
        assert auth.get_session() == session
        assert sleep.calls == [0.12]

    def test_sign_in_defaults_to_demo_email(self, auth):
        session = asyncio.run(auth.sign_in())
        assert session.user.email == "alex@flowguide.demo"

    def test_sign_out_clears_session(self, auth, slot):
        asyncio.run(auth.sign_in())
        asyncio.run(auth.sign_out())

        assert auth.get_session() is None
        assert auth.get_user() is None
        assert DEFAULT_AUTH_STORAGE_KEY not in slot.values

    @pytest.mark.parametrize("blob", [
        "{broken",
        json.dumps({
            "access_token": "a",
            "refresh_token": "r",
            "expires_at": "soon",
            "user": {"id": "demo-alex", "email": "alex@flowguide.demo", "name": "Alex Martinez"},
        }),
        json.dumps({"access_token": "a"}),
    ])
    def test_corrupt_session_reads_as_signed_out(self, network, blob):
        slot = MemorySlot({DEFAULT_AUTH_STORAGE_KEY: blob})
        auth = DemoAuth(slot, network)

        assert auth.get_session() is None
        assert auth.get_user() is None
        assert auth.describe()["signed_in"] is False

    def test_expired_session_reads_as_signed_out(self, slot, network):
        asyncio.run(DemoAuth(slot, network, clock=lambda: NOW).sign_in())
        later = DemoAuth(slot, network, clock=lambda: NOW + timedelta(hours=2))

        assert later.get_session() is None

    def test_oauth_is_rejected(self, auth):
        with pytest.raises(DemoAuthError, match="OAuth sign-in is disabled"):
            asyncio.run(auth.sign_in_with_oauth("google"))

    def test_listeners_receive_events(self, auth):
        events = []
        unsubscribe = auth.on_auth_state_change(lambda event, session: events.append(event))

        asyncio.run(auth.sign_in())
        unsubscribe()
        asyncio.run(auth.sign_out())

        assert events == ["INITIAL_SESSION", "SIGNED_IN"]

    def test_write_failure_is_not_raised(self, network):
        auth = DemoAuth(MemorySlot(fail_writes=True), network, clock=lambda: NOW)

        session = asyncio.run(auth.sign_in())

        assert session.user.id == DEFAULT_USER_ID
        assert auth.get_session() is None
