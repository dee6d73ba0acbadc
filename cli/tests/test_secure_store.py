from __future__ import annotations

import asyncio

import httpx

from onecrew_cli import config
from onecrew_cli.secure_store import FileSecureStore, session_path
from onecrew_client import ClientConfig, OneCrewApi


def test_items_persist_across_instances(tmp_path) -> None:
    path = tmp_path / "session.toml"

    asyncio.run(FileSecureStore(path).set_item("onecrew_auth_token", "abc"))

    assert asyncio.run(FileSecureStore(path).get_item("onecrew_auth_token")) == "abc"
    assert path.stat().st_mode & 0o777 == 0o600


def test_missing_key_and_missing_file_read_as_none(tmp_path) -> None:
    store = FileSecureStore(tmp_path / "session.toml")
    assert asyncio.run(store.get_item("onecrew_auth_token")) is None


def test_deleting_last_key_removes_file(tmp_path) -> None:
    path = tmp_path / "session.toml"
    store = FileSecureStore(path)

    async def _main():
        await store.set_item("a", "1")
        await store.set_item("b", "2")
        await store.delete_item("a")
        assert path.exists()
        await store.delete_item("b")
        await store.delete_item("b")

    asyncio.run(_main())

    assert not path.exists()


def test_default_path_lives_next_to_config(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path))
    assert session_path() == tmp_path / "session.toml"
    assert FileSecureStore().path == tmp_path / "session.toml"


def test_corrupt_file_reads_as_empty_and_is_replaced_on_write(tmp_path) -> None:
    path = tmp_path / "session.toml"
    path.write_text("this is = = not toml", encoding="utf-8")
    store = FileSecureStore(path)

    assert asyncio.run(store.get_item("onecrew_auth_token")) is None

    asyncio.run(store.set_item("onecrew_auth_token", "abc"))

    assert asyncio.run(FileSecureStore(path).get_item("onecrew_auth_token")) == "abc"


def test_deleting_from_corrupt_file_removes_it(tmp_path) -> None:
    path = tmp_path / "session.toml"
    path.write_text("this is = = not toml", encoding="utf-8")

    asyncio.run(FileSecureStore(path).delete_item("onecrew_auth_token"))

    assert not path.exists()


def test_login_recovers_from_corrupt_session_file(tmp_path) -> None:
    path = tmp_path / "session.toml"
    path.write_text("this is = = not toml", encoding="utf-8")
    auth_ok = {"success": True, "data": {"token": "abc", "user": {"id": "1"}}}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=auth_ok)

    async def _main():
        api = OneCrewApi(
            ClientConfig(base_url="http://api.test", max_retries=0),
            storage=FileSecureStore(path),
            transport=httpx.MockTransport(handler),
        )
        async with api:
            await api.initialize()
            await api.auth.login({"email": "m@example.com", "password": "secret"})
            return api.auth.is_authenticated()

    assert asyncio.run(_main()) is True
    assert asyncio.run(FileSecureStore(path).get_item("onecrew_auth_token")) == "abc"
