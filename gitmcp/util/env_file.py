"""Thread-safe ``.env`` file access for gateway settings."""

from __future__ import annotations

import threading
from pathlib import Path


def _parse_line(line: str) -> tuple[str, str] | None:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, _, value = line.partition("=")
    return key.strip(), value.strip().strip('"').strip("'")


class EnvFile:
    """``KEY=VALUE`` file that the settings layer reads before ``os.environ``.

    Lines may carry an ``export`` prefix and quoted values so that the same
    file can be sourced from a shell.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def read(self, key: str) -> str:
        return self.read_all().get(key, "")

    def read_all(self) -> dict[str, str]:
        if not self.path.is_file():
            return {}
        entries: dict[str, str] = {}
        for raw in self.path.read_text().splitlines():
            parsed = _parse_line(raw)
            if parsed:
                entries[parsed[0]] = parsed[1]
        return entries

    def write(self, **values: str) -> None:
        """Merge *values* into the file; an empty value drops the key."""
        with self._lock:
            merged = self.read_all()
            merged.update(values)
            body = "".join(f'{k}="{v}"\n' for k, v in sorted(merged.items()) if v)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(body)
