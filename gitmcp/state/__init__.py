"""Session state and access policies."""

from .access import AccessPolicy, FixedAccessPolicy, MappedAccessPolicy
from .session_store import Identity, Session, SessionStatus, SessionStore

__all__ = [
    "AccessPolicy",
    "FixedAccessPolicy",
    "Identity",
    "MappedAccessPolicy",
    "Session",
    "SessionStatus",
    "SessionStore",
]
