"""Access-level policies applied after a session authenticates."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .session_store import Identity


@runtime_checkable
class AccessPolicy(Protocol):
    def access_level(self, identity: Identity) -> str: ...


class FixedAccessPolicy:
    """Grant the same level to every verified identity."""

    def __init__(self, level: str = "admin") -> None:
        self._level = level

    def access_level(self, identity: Identity) -> str:
        return self._level


class MappedAccessPolicy:
    """Per-login overrides on top of a default level."""

    def __init__(self, levels: dict[str, str], default: str = "read") -> None:
        self._levels = {login.lower(): level for login, level in levels.items()}
        self._default = default

    def access_level(self, identity: Identity) -> str:
        return self._levels.get(identity.login.lower(), self._default)
