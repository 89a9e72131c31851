"""Per-command context and result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import NotAuthorized
from ..state.session_store import Session


@dataclass
class CommandContext:
    session: Session
    command: str
    params: Any

    @property
    def token(self) -> str:
        if self.session.identity is None:
            raise NotAuthorized()
        return self.session.identity.token


@dataclass
class CommandResult:
    message: str
    data: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": "success", "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out
