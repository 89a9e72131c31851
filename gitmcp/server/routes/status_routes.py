"""Status probes -- /status and /health."""

from __future__ import annotations

from aiohttp import web

from ... import PROTOCOL_VERSION, SERVER_NAME, __version__
from ...state.session_store import SessionStore


class StatusRoutes:

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def register(self, router: web.UrlDispatcher) -> None:
        router.add_get("/status", self._status)
        router.add_get("/health", self._health)

    async def _status(self, _req: web.Request) -> web.Response:
        return web.json_response({
            "status": "online",
            "name": SERVER_NAME,
            "version": __version__,
            "protocol": PROTOCOL_VERSION,
        })

    async def _health(self, _req: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "sessions": self._store.stats()})
