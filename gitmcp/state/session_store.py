"""In-memory session store -- the sole owner of gateway session records."""

from __future__ import annotations

import enum
import secrets
import threading
import time
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from ..errors import InvalidSession


class SessionStatus(enum.Enum):
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Identity:
    """Verified principal plus the credential used on its behalf."""

    login: str
    id: int
    name: str | None
    token: str = field(repr=False)


@dataclass
class Session:
    id: str
    client: str = "Unknown"
    status: SessionStatus = SessionStatus.CONNECTED
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_active_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    identity: Identity | None = None

    @property
    def authenticated(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client": self.client,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "last_active_at": self.last_active_at.isoformat(),
            "user": self.identity.login if self.identity else None,
        }


def new_session_id() -> str:
    """``mcp-<epoch ms>-<128 random bits>``."""
    return f"mcp-{time.time_ns() // 1_000_000}-{secrets.token_hex(16)}"


class SessionStore:
    """Thread-safe map from session id to :class:`Session`.

    Callers only ever see snapshot copies: mutating a returned session has
    no effect on the store. The lock is held for dict operations only,
    never across I/O.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, client: str = "Unknown") -> Session:
        with self._lock:
            session_id = new_session_id()
            while session_id in self._sessions:
                session_id = new_session_id()
            session = Session(id=session_id, client=client or "Unknown")
            self._sessions[session_id] = session
            return replace(session)

    def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        return replace(session) if session else None

    def authenticate(self, session_id: str, identity: Identity) -> Session:
        """Attach *identity*, overwriting any previous one.

        Raises :class:`InvalidSession` if the session is gone, so a caller
        that verified a credential after a concurrent disconnect cannot
        bring the session back.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise InvalidSession()
            session.status = SessionStatus.AUTHENTICATED
            session.identity = identity
            session.last_active_at = datetime.now(UTC)
            return replace(session)

    def touch(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.last_active_at = datetime.now(UTC)
            return True

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def expire_idle(self, max_idle: timedelta, *, now: datetime | None = None) -> list[str]:
        """Drop sessions idle for longer than *max_idle*; return their ids."""
        cutoff = (now or datetime.now(UTC)) - max_idle
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.last_active_at < cutoff]
            for sid in expired:
                del self._sessions[sid]
        return expired

    def stats(self) -> dict[str, int]:
        with self._lock:
            authenticated = sum(1 for s in self._sessions.values() if s.authenticated)
            total = len(self._sessions)
        return {
            "total": total,
            "authenticated": authenticated,
            "connected": total - authenticated,
        }
