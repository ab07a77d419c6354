"""
Demo Authentication

Stands in for a hosted auth provider while the app runs in demo mode.
Any email signs in as the default demo user; the session is written to
its own durable key next to the table store so a restart keeps the user
signed in.

Sign-in and sign-out wait a short simulated latency but never fail.
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError, field_validator

from flowguide.audit import get_logger
from flowguide.services.network import NetworkSimulator
from flowguide.services.storage import (
    DEFAULT_USER_ID,
    KeyValueSlot,
    StorageWriteError,
    get_demo_user,
    to_iso,
)


DEFAULT_AUTH_STORAGE_KEY = "flowguide-demo-auth"
SESSION_LIFETIME = timedelta(hours=1)

SIGN_IN_LATENCY_MS = (120, 280)
SIGN_OUT_LATENCY_MS = (80, 180)

logger = get_logger(__name__)

AuthListener = Callable[[str, Optional["DemoSession"]], None]


def _parse_expiry(value: str) -> datetime:
    """Aware expiry moment. Raises ValueError for anything but ISO-8601."""
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class DemoAuthError(Exception):
    """Operation not available in the demo environment."""
    pass


class DemoUser(BaseModel):
    id: str
    email: str
    name: str
    role: str = "authenticated"
    provider: str = "demo"


class DemoSession(BaseModel):
    """A one-hour demo session."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(default=int(SESSION_LIFETIME.total_seconds()))
    expires_at: str
    user: DemoUser

    @field_validator("expires_at")
    @classmethod
    def check_expires_at(cls, value: str) -> str:
        _parse_expiry(value)
        return value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= _parse_expiry(self.expires_at)


class DemoAuth:
    """
    Session handling for the demo environment.

    Args:
        slot: Durable medium holding the session
        network: Supplies the simulated latency
        storage_key: Key the session is stored under
        clock: Returns the current UTC datetime
    """

    def __init__(
        self,
        slot: KeyValueSlot,
        network: NetworkSimulator,
        storage_key: str = DEFAULT_AUTH_STORAGE_KEY,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._slot = slot
        self._network = network
        self._storage_key = storage_key
        self._clock = clock
        self._listeners: list[AuthListener] = []

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _read_session(self) -> Optional[DemoSession]:
        raw = self._slot.read(self._storage_key)
        if not raw:
            return None
        try:
            return DemoSession.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError):
            logger.warning("auth_session_unreadable", storage_key=self._storage_key)
            return None

    def _write_session(self, session: Optional[DemoSession]) -> None:
        try:
            if session is None:
                self._slot.remove(self._storage_key)
            else:
                self._slot.write(self._storage_key, session.model_dump_json())
        except StorageWriteError as e:
            logger.warning(
                "auth_session_persist_failed",
                storage_key=self._storage_key,
                error=str(e),
            )

    def _emit(self, event: str, session: Optional[DemoSession]) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def _build_session(self, email: Optional[str]) -> DemoSession:
        now = self._clock()
        demo_user = get_demo_user(DEFAULT_USER_ID)
        return DemoSession(
            access_token=f"demo-access-{uuid4().hex}",
            refresh_token=f"demo-refresh-{uuid4().hex}",
            expires_at=to_iso(now + SESSION_LIFETIME),
            user=DemoUser(
                id=demo_user["id"],
                email=email or demo_user["email"],
                name=demo_user["name"],
            ),
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """
        Subscribe to sign-in/sign-out events.

        The listener is called immediately with ``INITIAL_SESSION``.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        listener("INITIAL_SESSION", self._read_session())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def sign_in(self, email: Optional[str] = None, password: str = "") -> DemoSession:
        """Sign in as the demo user. Any credentials are accepted."""
        await self._network.simulate_latency(*SIGN_IN_LATENCY_MS)
        session = self._build_session(email)
        self._write_session(session)
        logger.info("auth_signed_in", user_id=session.user.id)
        self._emit("SIGNED_IN", session)
        return session

    async def sign_up(self, email: Optional[str] = None, password: str = "") -> DemoSession:
        return await self.sign_in(email, password)

    async def sign_in_with_oauth(self, provider: str) -> DemoSession:
        """
        Raises:
            DemoAuthError: Always, OAuth is not wired up in demo mode
        """
        await self._network.simulate_latency(*SIGN_IN_LATENCY_MS)
        raise DemoAuthError("OAuth sign-in is disabled in the demo environment.")

    async def sign_out(self) -> None:
        await self._network.simulate_latency(*SIGN_OUT_LATENCY_MS)
        self._write_session(None)
        logger.info("auth_signed_out")
        self._emit("SIGNED_OUT", None)

    def get_session(self) -> Optional[DemoSession]:
        """Current session, or None when signed out, expired or unreadable."""
        session = self._read_session()
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def get_user(self) -> Optional[DemoUser]:
        session = self.get_session()
        return session.user if session else None

    def describe(self) -> dict[str, Any]:
        """Summary for the settings page."""
        session = self.get_session()
        return {
            "signed_in": session is not None,
            "user_id": session.user.id if session else None,
            "expires_at": session.expires_at if session else None,
        }
