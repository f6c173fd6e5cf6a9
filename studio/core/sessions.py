"""Server-side staff sessions with a rolling idle timeout.

A session is one JSON document stored in the cache backend under
``studio_session:<session id>``. Every qualifying interaction moves
``last_activity`` forward; a session untouched for the whole idle window is
removed on the next access.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Callable

from .cache import CacheBackend

logger = logging.getLogger(__name__)

SESSION_NAMESPACE = "studio_session"


class SessionExpired(Exception):
    """Raised when a session was idle for longer than the timeout."""


@dataclass
class StaffSession:
    session_id: str
    id: int
    username: str
    name: str
    role: str
    permissions: list[str] = field(default_factory=list)
    last_activity: float = 0.0


class SessionManager:
    def __init__(
        self,
        backend: CacheBackend,
        *,
        idle_timeout_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.idle_timeout_seconds = idle_timeout_seconds
        self.clock = clock

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_NAMESPACE}:{session_id}"

    def _storage_ttl(self) -> int:
        # Storage expiry is only garbage collection; the idle check below is authoritative.
        return self.idle_timeout_seconds * 2

    def _save(self, session: StaffSession) -> None:
        self.backend.set(self._key(session.session_id), json.dumps(asdict(session)), self._storage_ttl())

    def create(self, *, staff_id: int, username: str, name: str, role: str, permissions: list[str]) -> StaffSession:
        session = StaffSession(
            session_id=uuid.uuid4().hex,
            id=staff_id,
            username=username,
            name=name,
            role=role,
            permissions=list(permissions),
            last_activity=self.clock(),
        )
        self._save(session)
        return session

    def load(self, session_id: str) -> StaffSession | None:
        raw = self.backend.get(self._key(session_id))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return StaffSession(**json.loads(raw))
        except (ValueError, TypeError):
            logger.warning("Discarding unreadable session %s", session_id)
            self.clear(session_id)
            return None

    def is_idle(self, session: StaffSession) -> bool:
        return self.clock() - session.last_activity >= self.idle_timeout_seconds

    def touch(self, session_id: str) -> StaffSession | None:
        """Record an interaction. Returns None when no session exists."""

        session = self.load(session_id)
        if session is None:
            return None
        if self.is_idle(session):
            self.clear(session_id)
            logger.info("Session for %s expired after inactivity", session.username)
            raise SessionExpired(session_id)
        session.last_activity = self.clock()
        self._save(session)
        return session

    def expires_at(self, session: StaffSession) -> float:
        return session.last_activity + self.idle_timeout_seconds

    def clear(self, session_id: str) -> None:
        self.backend.delete(self._key(session_id))
