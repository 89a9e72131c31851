"""Gateway error taxonomy.

Every failure a client can observe is a :class:`GatewayError` subclass.
Route handlers render them into the standard error envelope using
``error_type`` and ``http_status``; nothing below the HTTP layer knows
about status codes beyond these two attributes.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    error_type: str = "GatewayError"
    http_status: int = 500
    default_message: str = "Gateway error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "error",
            "message": self.message,
            "error_type": self.error_type,
        }


class InvalidRequest(GatewayError):
    error_type = "InvalidRequest"
    http_status = 400
    default_message = "Malformed request body"


class InvalidSession(GatewayError):
    """Unknown or expired session id -- the client must reconnect."""

    error_type = "InvalidSession"
    http_status = 401
    default_message = "Invalid session ID"


class NotAuthorized(GatewayError):
    """Session exists but has not authenticated yet."""

    error_type = "NotAuthorized"
    http_status = 403
    default_message = "Session not authenticated"


class InvalidCredential(GatewayError):
    """Credential verification was rejected; the session is left untouched."""

    error_type = "InvalidCredential"
    http_status = 401
    default_message = "Authentication failed"


class UnknownCommand(GatewayError):
    error_type = "UnknownCommand"
    http_status = 400

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unknown command: {command}")


class InvalidParameters(GatewayError):
    error_type = "InvalidParameters"
    http_status = 400

    def __init__(self, command: str, problems: list[str]) -> None:
        self.command = command
        self.problems = problems
        super().__init__(f"Invalid parameters for {command}: {'; '.join(problems)}")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["problems"] = list(self.problems)
        return data


class ProviderError(GatewayError):
    """An external provider operation failed.

    ``message`` is the operation-level summary (``"Failed to create issue"``);
    ``detail`` keeps the provider's own message for diagnostics.
    """

    error_type = "ProviderError"
    http_status = 500
    default_message = "Provider operation failed"

    def __init__(self, message: str | None = None, detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.detail:
            data["error"] = self.detail
        return data
