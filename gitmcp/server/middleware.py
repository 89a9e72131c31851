"""HTTP middleware -- error envelopes and quiet access logging."""

from __future__ import annotations

import logging

from aiohttp import web
from aiohttp.abc import AbstractAccessLogger

from ..errors import GatewayError
from .routes._helpers import error_response

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/health", "/status"})


class QuietAccessLogger(AbstractAccessLogger):
    """Demotes status-probe entries to DEBUG."""

    def log(self, request: web.BaseRequest, response: web.StreamResponse, time: float) -> None:
        level = logging.DEBUG if request.path in _QUIET_PATHS else logging.INFO
        self.logger.log(
            level,
            "%s %s %s %s %.3fs",
            request.remote,
            request.method,
            request.path,
            response.status,
            time,
        )


@web.middleware
async def error_middleware(request: web.Request, handler):  # type: ignore[type-arg]
    """Render gateway errors as the standard envelope.

    A failing request only ever affects its own response; unexpected
    exceptions become a 500 ``InternalError`` envelope.
    """
    try:
        return await handler(request)
    except GatewayError as exc:
        return error_response(exc)
    except web.HTTPException:
        raise
    except Exception:
        logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=True)
        return web.json_response(
            {"status": "error", "message": "Internal server error", "error_type": "InternalError"},
            status=500,
        )
