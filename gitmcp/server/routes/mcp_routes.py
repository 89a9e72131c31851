"""MCP protocol routes -- /mcp/connect, /mcp/authenticate, /mcp/command, /mcp/disconnect."""

from __future__ import annotations

import logging

from aiohttp import web

from ... import PROTOCOL_VERSION, SERVER_NAME
from ...commands import CommandDispatcher
from ...services.auth import SessionAuthenticator
from ...state.session_store import SessionStore
from ._helpers import ok_response, read_body

logger = logging.getLogger(__name__)


def _str(value: object) -> str:
    return value if isinstance(value, str) else ""


class McpRoutes:
    """Session lifecycle and command dispatch over JSON POST requests.

    Handlers raise :class:`~gitmcp.errors.GatewayError`; the error
    middleware renders the envelope.
    """

    def __init__(
        self,
        store: SessionStore,
        authenticator: SessionAuthenticator,
        dispatcher: CommandDispatcher,
    ) -> None:
        self._store = store
        self._authenticator = authenticator
        self._dispatcher = dispatcher

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_post("/mcp/connect", self._connect)
        router.add_post("/mcp/authenticate", self._authenticate)
        router.add_post("/mcp/command", self._command)
        router.add_post("/mcp/disconnect", self._disconnect)

    async def _connect(self, req: web.Request) -> web.Response:
        body = await read_body(req)
        client = _str(body.get("client")) or req.headers.get("User-Agent", "") or "Unknown"
        session = self._store.create(client)
        logger.info("MCP connection established: %s (client=%s)", session.id, client)
        return ok_response(
            "Connection established. Authentication required.",
            sessionId=session.id,
            server=SERVER_NAME,
            protocol=PROTOCOL_VERSION,
        )

    async def _authenticate(self, req: web.Request) -> web.Response:
        body = await read_body(req)
        result = await self._authenticator.authenticate(
            _str(body.get("sessionId")), _str(body.get("token")),
        )
        return ok_response(
            "Authentication successful",
            user=result.identity.login,
            accessLevel=result.access_level,
        )

    async def _command(self, req: web.Request) -> web.Response:
        body = await read_body(req)
        result = await self._dispatcher.dispatch(
            _str(body.get("sessionId")),
            body.get("command"),
            body.get("parameters"),
        )
        return web.json_response(result.to_dict())

    async def _disconnect(self, req: web.Request) -> web.Response:
        body = await read_body(req)
        session_id = _str(body.get("sessionId"))
        if session_id and self._store.remove(session_id):
            logger.info("MCP session disconnected: %s", session_id)
        return ok_response("Disconnected")
