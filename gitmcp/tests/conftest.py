"""Shared pytest fixtures for gitmcp tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from gitmcp.services.github import GitHubAPIError
from gitmcp.state.session_store import Identity, SessionStore

_SETTINGS_ENV = (
    "GITMCP_HOST",
    "PORT",
    "GITHUB_API_URL",
    "PROVIDER_TIMEOUT",
    "SESSION_IDLE_MINUTES",
    "SESSION_SWEEP_SECONDS",
    "ACCESS_LEVEL",
    "LOG_LEVEL",
)

VALID_TOKEN = "valid-credential"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _SETTINGS_ENV:
        monkeypatch.delenv(key, raising=False)
    env_path = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(env_path))
    return env_path


@pytest.fixture(autouse=True)
def _reset_singletons(_isolate_env: Path):
    from gitmcp.util.singletons import reset_all_singletons

    reset_all_singletons()
    yield
    reset_all_singletons()


@pytest.fixture()
def env_path(_isolate_env: Path) -> Path:
    return _isolate_env


@pytest.fixture()
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture()
def alice() -> Identity:
    return Identity(login="alice", id=1001, name="Alice Example", token=VALID_TOKEN)


@pytest.fixture()
def provider(alice: Identity) -> AsyncMock:
    """Provider stub: accepts only ``VALID_TOKEN``."""

    async def _verify(token: str) -> Identity:
        if token == VALID_TOKEN:
            return alice
        raise GitHubAPIError(401, "Bad credentials")

    mock = AsyncMock()
    mock.verify_token.side_effect = _verify
    mock.create_repository.return_value = {
        "name": "demo",
        "full_name": "alice/demo",
        "html_url": "https://host/alice/demo",
    }
    mock.push_files.return_value = None
    mock.create_issue.return_value = {"number": 7, "html_url": "https://host/alice/demo/issues/7"}
    mock.create_pull_request.return_value = {"number": 8, "html_url": "https://host/alice/demo/pull/8"}
    return mock
