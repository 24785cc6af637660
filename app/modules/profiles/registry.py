import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from app.config import settings
from app.modules.auth.identity import IdentityClient, Session
from app.modules.profiles.workflow import ProfileWorkflow

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    workflow: ProfileWorkflow
    unsubscribe: Callable[[], None]
    last_used: float


class WorkflowRegistry:
    """
    One ProfileWorkflow per live session.

    A session's workflow is dropped when it signs out, or once it has gone
    idle_seconds without a request. Refreshed access tokens give new session
    keys, so the idle timeout is what reclaims workflows of abandoned tokens.
    """

    def __init__(self, idle_seconds: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.idle_seconds = idle_seconds if idle_seconds is not None else settings.workflow_idle_seconds
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get_or_create(
        self,
        session: Session,
        identity: IdentityClient,
        factory: Callable[[], ProfileWorkflow],
    ) -> ProfileWorkflow:
        with self._lock:
            now = self._clock()
            expired = self._pop_expired(now)
            entry = self._entries.get(session.key)
            if entry is None:
                unsubscribe = identity.on_session_change(
                    lambda new_session, key=session.key: self._on_session_change(key, new_session)
                )
                entry = _Entry(workflow=factory(), unsubscribe=unsubscribe, last_used=now)
                self._entries[session.key] = entry
            entry.last_used = now
            workflow = entry.workflow

        self._release(expired)
        return workflow

    def get(self, key: str) -> Optional[ProfileWorkflow]:
        with self._lock:
            entry = self._entries.get(key)
        return entry.workflow if entry else None

    def discard(self, key: str) -> None:
        with self._lock:
            entry = self._entries.pop(key, None)
        if entry is not None:
            entry.unsubscribe()
            logger.info("Dropped profile workflow for ended session")

    def prune(self) -> int:
        """Drop workflows idle for longer than idle_seconds; returns how many were dropped"""
        with self._lock:
            expired = self._pop_expired(self._clock())
        self._release(expired)
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            keys = list(self._entries)
        for key in keys:
            self.discard(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _pop_expired(self, now: float) -> List[_Entry]:
        stale = [key for key, entry in self._entries.items() if now - entry.last_used > self.idle_seconds]
        return [self._entries.pop(key) for key in stale]

    def _release(self, expired: List[_Entry]) -> None:
        for entry in expired:
            entry.unsubscribe()
        if expired:
            logger.info("Dropped %d idle profile workflow(s)", len(expired))

    def _on_session_change(self, key: str, session: Optional[Session]) -> None:
        if session is None:
            self.discard(key)


workflow_registry = WorkflowRegistry()


def get_workflow_registry() -> WorkflowRegistry:
    return workflow_registry
