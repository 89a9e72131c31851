"""Shared helpers for route handlers."""

from __future__ import annotations

from typing import Any

from aiohttp import web

from ...errors import GatewayError, InvalidRequest


def ok_response(message: str, **fields: Any) -> web.Response:
    """Return the standard success envelope."""
    return web.json_response({"status": "success", "message": message, **fields})


def error_response(exc: GatewayError) -> web.Response:
    """Render a :class:`GatewayError` as the standard error envelope."""
    return web.json_response(exc.to_dict(), status=exc.http_status)


async def read_body(req: web.Request) -> dict[str, Any]:
    """Parse a JSON object body; an empty body counts as ``{}``."""
    if not req.can_read_body:
        return {}
    try:
        body = await req.json()
    except ValueError as exc:
        raise InvalidRequest() from exc
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return body
