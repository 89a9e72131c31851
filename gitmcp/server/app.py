"""Gateway server -- app factory and entry point."""

from __future__ import annotations

import argparse
import functools
import logging

from aiohttp import web

from .. import PROTOCOL_VERSION, SERVER_NAME
from ..commands import CommandDispatcher
from ..config import settings
from ..services.auth import SessionAuthenticator
from ..services.github import GitHubClient, ProviderClient
from ..state.access import AccessPolicy, FixedAccessPolicy
from ..state.session_store import SessionStore
from .lifecycle import on_cleanup, on_startup
from .middleware import QuietAccessLogger, error_middleware
from .routes import McpRoutes, StatusRoutes

logger = logging.getLogger(__name__)


class AppFactory:
    """Wires the session store, provider, dispatcher and routes.

    Collaborators can be injected for tests; anything left out is built
    from the current settings.
    """

    def __init__(
        self,
        *,
        store: SessionStore | None = None,
        provider: ProviderClient | None = None,
        policy: AccessPolicy | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._policy = policy

    def build(self) -> web.Application:
        cfg = settings.cfg
        store = self._store if self._store is not None else SessionStore()
        provider = self._provider if self._provider is not None else GitHubClient(
            base_url=cfg.github_api_url, timeout=cfg.provider_timeout,
        )
        policy = self._policy if self._policy is not None else FixedAccessPolicy(cfg.access_level)

        authenticator = SessionAuthenticator(
            store, provider, policy=policy, timeout=cfg.provider_timeout,
        )
        dispatcher = CommandDispatcher(store, provider, timeout=cfg.provider_timeout)

        app = web.Application(middlewares=[error_middleware])
        app["session_store"] = store
        app["provider"] = provider

        McpRoutes(store, authenticator, dispatcher).register(app.router)
        StatusRoutes(store).register(app.router)

        app.on_startup.append(functools.partial(
            on_startup,
            store=store,
            idle_minutes=cfg.session_idle_minutes,
            sweep_seconds=cfg.session_sweep_seconds,
        ))
        app.on_cleanup.append(functools.partial(on_cleanup, provider=provider))
        return app


async def create_app() -> web.Application:
    return AppFactory().build()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gitmcp-server", description=f"{SERVER_NAME} ({PROTOCOL_VERSION})")
    parser.add_argument("--host", default=None, help="Bind address (default: GITMCP_HOST or 0.0.0.0).")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT or 3000).")
    return parser


def main() -> None:
    args = _build_parser().parse_args()
    cfg = settings.cfg
    cfg.reload()

    logging.basicConfig(
        level=cfg.log_level_value,
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )

    host = args.host or cfg.host
    port = args.port or cfg.port
    logger.info("%s running on %s:%d", SERVER_NAME, host, port)
    logger.info("Protocol: %s", PROTOCOL_VERSION)
    if cfg.session_expiry_enabled:
        logger.info("Idle sessions expire after %d minute(s)", cfg.session_idle_minutes)

    web.run_app(create_app(), host=host, port=port, access_log_class=QuietAccessLogger, print=None)


if __name__ == "__main__":
    main()
