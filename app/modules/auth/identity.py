"""
Identity provider client.

Supabase Auth owns sessions. This module turns the bearer token of a request
into an explicit session context the profile workflow can be handed, and
carries session-change notifications (sign-out) to whoever subscribed.
"""
import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import HTTPException

from app.modules.auth.service import AuthService, token_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Session:
    access_token: str
    user: AuthUser

    @property
    def key(self) -> str:
        return token_key(self.access_token)


SessionCallback = Callable[[Optional[Session]], None]


class SessionEvents:
    """Process-wide session change notifications, keyed by session key."""

    def __init__(self):
        self._listeners: List[Tuple[str, SessionCallback]] = []
        self._lock = threading.Lock()

    def subscribe(self, key: str, callback: SessionCallback) -> Callable[[], None]:
        entry = (key, callback)
        with self._lock:
            self._listeners.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def publish(self, key: str, session: Optional[Session]) -> None:
        with self._lock:
            listeners = [cb for k, cb in self._listeners if k == key]
        for callback in listeners:
            try:
                callback(session)
            except Exception:
                logger.exception("Session change listener failed")

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)


session_events = SessionEvents()


class IdentityClient:
    """Identity provider client bound to the access token of one session."""

    def __init__(
        self,
        auth_service: AuthService,
        access_token: Optional[str],
        events: SessionEvents = session_events,
    ):
        self.auth_service = auth_service
        self.access_token = access_token
        self.events = events

    async def get_current_user(self) -> Optional[AuthUser]:
        if not self.access_token:
            return None
        try:
            user_data: Dict = await asyncio.to_thread(
                self.auth_service.get_current_user, self.access_token
            )
        except HTTPException as e:
            logger.info("No user for session: %s", e.detail)
            return None
        return AuthUser(id=user_data["id"], email=user_data.get("email"))

    async def get_current_session(self) -> Optional[Session]:
        user = await self.get_current_user()
        if user is None:
            return None
        return Session(access_token=self.access_token, user=user)

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register callback for sign-in/sign-out of this session; returns the unsubscribe function."""
        if not self.access_token:
            return lambda: None
        return self.events.subscribe(token_key(self.access_token), callback)

    async def sign_out(self) -> bool:
        if not self.access_token:
            return False
        revoked = await asyncio.to_thread(self.auth_service.logout, self.access_token)
        self.events.publish(token_key(self.access_token), None)
        return revoked
