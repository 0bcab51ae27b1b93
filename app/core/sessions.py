import secrets
import threading
import time
from datetime import timedelta
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request


class SessionStore:
    """In-memory map of session token -> user id.

    One instance lives on ``app.state.sessions`` for the lifetime of the
    application. Entries expire after ``ttl``; expired entries are dropped
    when they are looked up and swept whenever a new session is created.
    """

    def __init__(self, ttl: timedelta = timedelta(days=30), clock: Callable[[], float] = time.monotonic):
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: Dict[str, Tuple[int, float]] = {}

    def create(self, user_id: int) -> str:
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._sessions[token] = (user_id, now + self._ttl)
        return token

    def resolve(self, token: str) -> Optional[int]:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[token]
                return None
            return user_id

    def revoke(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self, now: float) -> None:
        expired = [token for token, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for token in expired:
            del self._sessions[token]


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions
