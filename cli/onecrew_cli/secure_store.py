from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

import tomli_w

from .config import config_path

SESSION_FILENAME = "session.toml"

log = logging.getLogger(__name__)


def session_path() -> Path:
    return Path(config_path()).expanduser().parent / SESSION_FILENAME


class FileSecureStore:
    """Owner-only TOML file holding the persisted session keys."""

    def __init__(self, path: Path | None = None):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or session_path()

    async def get_item(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._write(items)

    async def delete_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
        elif items:
            return
        if items:
            self._write(items)
        elif self.path.exists():
            self.path.unlink()

    def _load(self) -> dict[str, str]:
        path = self.path
        if not path.exists():
            return {}
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            # the next write replaces the unreadable file
            log.warning("Ignoring unreadable session file %s: %s", path, e)
            return {}
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, dict):
            return {}
        return {str(k): v for k, v in items.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(tomli_w.dumps({"items": items}).encode("utf-8"))
        os.chmod(path, 0o600)
