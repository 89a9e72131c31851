"""Tests for the in-memory session store."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest

from gitmcp.errors import InvalidSession
from gitmcp.state.session_store import Identity, SessionStatus, SessionStore, new_session_id


class TestCreate:
    def test_new_session_is_connected_without_identity(self, store: SessionStore) -> None:
        session = store.create("pytest-client")
        fetched = store.get(session.id)
        assert fetched is not None
        assert fetched.status is SessionStatus.CONNECTED
        assert fetched.identity is None
        assert fetched.client == "pytest-client"

    def test_blank_client_defaults_to_unknown(self, store: SessionStore) -> None:
        assert store.create("").client == "Unknown"

    def test_ids_unique(self, store: SessionStore) -> None:
        ids = {store.create().id for _ in range(2000)}
        assert len(ids) == 2000
        assert len(store) == 2000

    def test_ids_unique_across_threads(self, store: SessionStore) -> None:
        ids: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            local = [store.create().id for _ in range(200)]
            with lock:
                ids.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(set(ids)) == 1600

    def test_id_format(self) -> None:
        prefix, millis, rand = new_session_id().split("-")
        assert prefix == "mcp"
        assert millis.isdigit()
        assert len(rand) == 32


class TestGet:
    def test_unknown_id(self, store: SessionStore) -> None:
        assert store.get("mcp-0-missing") is None

    def test_returns_snapshot(self, store: SessionStore, alice: Identity) -> None:
        session = store.create()
        snapshot = store.get(session.id)
        assert snapshot is not None
        snapshot.status = SessionStatus.AUTHENTICATED
        snapshot.identity = alice
        fresh = store.get(session.id)
        assert fresh is not None
        assert fresh.status is SessionStatus.CONNECTED
        assert fresh.identity is None


class TestAuthenticate:
    def test_attaches_identity(self, store: SessionStore, alice: Identity) -> None:
        session = store.create()
        updated = store.authenticate(session.id, alice)
        assert updated.status is SessionStatus.AUTHENTICATED
        assert updated.identity == alice
        assert store.get(session.id).identity == alice

    def test_unknown_id_raises_and_creates_nothing(self, store: SessionStore, alice: Identity) -> None:
        with pytest.raises(InvalidSession):
            store.authenticate("mcp-0-missing", alice)
        assert len(store) == 0
        assert store.get("mcp-0-missing") is None

    def test_reauthentication_overwrites(self, store: SessionStore, alice: Identity) -> None:
        bob = Identity(login="bob", id=2, name=None, token="bob-token")
        session = store.create()
        store.authenticate(session.id, alice)
        store.authenticate(session.id, bob)
        fetched = store.get(session.id)
        assert fetched.status is SessionStatus.AUTHENTICATED
        assert fetched.identity == bob

    def test_token_not_in_repr(self, alice: Identity) -> None:
        assert alice.token not in repr(alice)


class TestRemove:
    def test_remove_then_get(self, store: SessionStore) -> None:
        session = store.create()
        assert store.remove(session.id) is True
        assert store.get(session.id) is None

    def test_remove_absent_is_noop(self, store: SessionStore) -> None:
        session = store.create()
        store.remove(session.id)
        assert store.remove(session.id) is False
        assert store.remove("never-existed") is False

    def test_authenticate_after_remove_does_not_resurrect(
        self, store: SessionStore, alice: Identity,
    ) -> None:
        session = store.create()
        store.remove(session.id)
        with pytest.raises(InvalidSession):
            store.authenticate(session.id, alice)
        assert store.get(session.id) is None

    def test_touch_after_remove(self, store: SessionStore) -> None:
        session = store.create()
        store.remove(session.id)
        assert store.touch(session.id) is False
        assert store.get(session.id) is None


class TestExpiry:
    def test_expire_idle(self, store: SessionStore) -> None:
        old = store.create()
        fresh = store.create()
        later = datetime.now(UTC) + timedelta(minutes=30)
        store.touch(fresh.id)

        expired = store.expire_idle(timedelta(minutes=10), now=later)
        assert set(expired) == {old.id, fresh.id}
        assert len(store) == 0

    def test_recent_activity_survives(self, store: SessionStore) -> None:
        session = store.create()
        assert store.expire_idle(timedelta(minutes=10)) == []
        assert store.get(session.id) is not None

    def test_stats(self, store: SessionStore, alice: Identity) -> None:
        a = store.create()
        store.create()
        store.authenticate(a.id, alice)
        assert store.stats() == {"total": 2, "authenticated": 1, "connected": 1}
