"""Tests for idle-session expiry and app lifecycle hooks."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from gitmcp.server.app import AppFactory
from gitmcp.server.lifecycle import (
    REAPER_TASK_KEY,
    on_cleanup,
    on_startup,
    session_reaper_loop,
    sweep_idle_sessions,
)
from gitmcp.services.github import GitHubClient
from gitmcp.state.session_store import SessionStore
from gitmcp.util.singletons import reset_all_singletons


def _age(store: SessionStore, session_id: str, minutes: int) -> None:
    # Backdate the live record; the store only hands out copies.
    store._sessions[session_id].last_active_at = datetime.now(UTC) - timedelta(minutes=minutes)


class TestSweep:
    def test_only_idle_sessions_removed(self, store: SessionStore, caplog) -> None:
        idle = store.create()
        active = store.create()
        _age(store, idle.id, 90)

        with caplog.at_level(logging.INFO, logger="gitmcp.server.lifecycle"):
            expired = sweep_idle_sessions(store, timedelta(minutes=60))

        assert expired == [idle.id]
        assert store.get(idle.id) is None
        assert store.get(active.id) is not None
        assert idle.id in caplog.text


class TestReaperLoop:
    @pytest.mark.asyncio
    async def test_loop_expires_and_cancels(self, store: SessionStore) -> None:
        session = store.create()
        _age(store, session.id, 5)
        task = asyncio.create_task(session_reaper_loop(store, timedelta(minutes=1), 0.01))
        for _ in range(100):
            if store.get(session.id) is None:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert store.get(session.id) is None

    @pytest.mark.asyncio
    async def test_loop_survives_errors(self, caplog) -> None:
        store = SessionStore()
        calls = 0

        def _flaky(_max_idle: timedelta) -> list[str]:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("sweep failed")
            return []

        store.expire_idle = _flaky  # type: ignore[method-assign]
        task = asyncio.create_task(session_reaper_loop(store, timedelta(minutes=1), 0.01))
        for _ in range(100):
            if calls >= 2:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert calls >= 2
        assert "sweep failed" in caplog.text


class TestHooks:
    @pytest.mark.asyncio
    async def test_startup_disabled(self, store: SessionStore) -> None:
        app = web.Application()
        await on_startup(app, store=store, idle_minutes=0, sweep_seconds=1)
        assert REAPER_TASK_KEY not in app

    @pytest.mark.asyncio
    async def test_startup_and_cleanup(self, store: SessionStore) -> None:
        app = web.Application()
        await on_startup(app, store=store, idle_minutes=5, sweep_seconds=60)
        task = app[REAPER_TASK_KEY]
        assert not task.done()

        provider = GitHubClient()
        provider.close = AsyncMock()  # type: ignore[method-assign]
        await on_cleanup(app, provider=provider)
        assert task.cancelled()
        provider.close.assert_awaited_once()

    def test_empty_injected_store_is_kept(self, provider: AsyncMock) -> None:
        store = SessionStore()
        assert len(store) == 0
        app = AppFactory(store=store, provider=provider).build()
        assert app["session_store"] is store
        assert app["provider"] is provider

    @pytest.mark.asyncio
    async def test_access_level_from_settings(
        self, env_path, store: SessionStore, provider: AsyncMock,
    ) -> None:
        env_path.write_text('SESSION_IDLE_MINUTES="0"\nACCESS_LEVEL="write"\n')
        reset_all_singletons()
        app = AppFactory(store=store, provider=provider).build()
        async with TestClient(TestServer(app)) as client:
            assert REAPER_TASK_KEY not in app
            resp = await client.post("/mcp/connect")
            session_id = (await resp.json())["sessionId"]
            resp = await client.post(
                "/mcp/authenticate", json={"sessionId": session_id, "token": "valid-credential"},
            )
            assert (await resp.json())["accessLevel"] == "write"
