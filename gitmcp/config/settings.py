"""Gateway settings -- reads from a ``.env`` file and the environment."""

from __future__ import annotations

import logging
import os

from ..util.env_file import EnvFile
from ..util.singletons import register_singleton

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _int(raw: str, default: int) -> int:
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


def _float(raw: str, default: float) -> float:
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


class Settings:

    def __init__(self) -> None:
        self.env = EnvFile(os.getenv("DOTENV_PATH") or ".env")
        self.reload()

    def reload(self) -> None:
        e = self._read

        self.host: str = e("GITMCP_HOST") or "0.0.0.0"
        self.port: int = _int(e("PORT"), 3000)

        self.github_api_url: str = (e("GITHUB_API_URL") or "https://api.github.com").rstrip("/")
        self.provider_timeout: float = _float(e("PROVIDER_TIMEOUT"), 30.0)

        self.session_idle_minutes: int = max(0, _int(e("SESSION_IDLE_MINUTES"), 60))
        self.session_sweep_seconds: int = max(1, _int(e("SESSION_SWEEP_SECONDS"), 60))

        self.access_level: str = e("ACCESS_LEVEL") or "admin"

        level = (e("LOG_LEVEL") or "INFO").upper()
        self.log_level: str = level if level in _LOG_LEVELS else "INFO"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    @property
    def session_expiry_enabled(self) -> bool:
        return self.session_idle_minutes > 0

    def _read(self, key: str) -> str:
        return self.env.read(key) or os.getenv(key, "")

    def write_env(self, **kwargs: str) -> None:
        self.env.write(**kwargs)
        self.reload()


cfg = Settings()


def _reset_cfg() -> None:
    global cfg
    cfg = Settings()


register_singleton(_reset_cfg)
