from __future__ import annotations

import asyncio
import json

from onecrew_cli import config
from onecrew_cli.auth_state import resolve_auth_context
from onecrew_cli.secure_store import FileSecureStore
from onecrew_client.storage import TOKEN_KEY, USER_KEY


def test_no_stored_session_is_no_token(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    monkeypatch.delenv(config.ENV_BASE_URL, raising=False)

    assert resolve_auth_context().state == "no_token"


def test_stored_session_is_authed(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    monkeypatch.delenv(config.ENV_BASE_URL, raising=False)

    async def _seed():
        store = FileSecureStore()
        await store.set_item(TOKEN_KEY, "abc")
        await store.set_item(USER_KEY, json.dumps({"id": "1", "name": "Mona"}))

    asyncio.run(_seed())
    ctx = resolve_auth_context()

    assert ctx.state == "authed"
    assert ctx.user == {"id": "1", "name": "Mona"}


def test_blank_base_url_is_no_base_url(monkeypatch) -> None:
    cfg = config.default_config()
    cfg.base_url = ""
    monkeypatch.setattr("onecrew_cli.auth_state.load_config", lambda: cfg)
    monkeypatch.delenv(config.ENV_BASE_URL, raising=False)

    assert resolve_auth_context().state == "no_base_url"
