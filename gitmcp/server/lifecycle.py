"""Application lifecycle -- background session expiry and cleanup hooks."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import timedelta

from aiohttp import web

from ..services.github import GitHubClient
from ..state.session_store import SessionStore

logger = logging.getLogger(__name__)

REAPER_TASK_KEY = "session_reaper_task"


def sweep_idle_sessions(store: SessionStore, max_idle: timedelta) -> list[str]:
    expired = store.expire_idle(max_idle)
    for session_id in expired:
        logger.info("MCP session expired after inactivity: %s", session_id)
    return expired


async def session_reaper_loop(
    store: SessionStore,
    max_idle: timedelta,
    interval_seconds: float = 60,
) -> None:
    logger.info(
        "[reaper] loop started (max_idle=%ss, interval=%ss)",
        int(max_idle.total_seconds()), interval_seconds,
    )
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            expired = sweep_idle_sessions(store, max_idle)
            if expired:
                logger.info("[reaper] expired %d idle session(s)", len(expired))
        except Exception as exc:
            logger.error("[reaper] loop error: %s", exc, exc_info=True)


async def on_startup(
    app: web.Application,
    *,
    store: SessionStore,
    idle_minutes: int,
    sweep_seconds: float,
) -> None:
    """Start the idle-session reaper when expiry is enabled."""
    if idle_minutes <= 0:
        logger.info("[startup] session expiry disabled")
        return
    app[REAPER_TASK_KEY] = asyncio.create_task(
        session_reaper_loop(store, timedelta(minutes=idle_minutes), sweep_seconds),
    )


async def on_cleanup(app: web.Application, *, provider: object) -> None:
    """Cancel the reaper and close the provider's HTTP session."""
    task = app.get(REAPER_TASK_KEY)
    if task and not task.done():
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
    if isinstance(provider, GitHubClient):
        await provider.close()
