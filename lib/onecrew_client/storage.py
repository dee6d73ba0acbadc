from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Protocol

log = logging.getLogger(__name__)

TOKEN_KEY = "onecrew_auth_token"
USER_KEY = "onecrew_user_data"


class SecureStore(Protocol):
    """Durable key-value store the session is mirrored into."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def delete_item(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    async def delete_item(self, key: str) -> None:
        self.items.pop(key, None)


@asynccontextmanager
async def soft_storage(action: str) -> AsyncIterator[None]:
    """Run a storage operation whose failure must not reach the caller."""
    try:
        yield
    except Exception as exc:
        log.warning("Failed to %s: %s", action, exc)
