from __future__ import annotations

import httpx
import pytest
import typer

from onecrew_cli import config, http
from onecrew_cli.commands import auth_cmd
from onecrew_client import ClientConfig, MemoryStore, OneCrewApi
from onecrew_client.storage import TOKEN_KEY

AUTH_OK = {"success": True, "data": {"token": "abc", "user": {"id": "1", "name": "Mona"}}}


def _install_backend(monkeypatch, routes: dict) -> tuple[MemoryStore, list[str], list[str]]:
    store = MemoryStore()
    paths: list[str] = []
    errors: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        status, body = routes.get(request.url.path, (404, {"success": False, "error": "Not found"}))
        return httpx.Response(status, json=body)

    def _make_api(cfg, *, base_url_override=None, storage=None):
        return OneCrewApi(
            ClientConfig(base_url="http://api.test", max_retries=0),
            storage=store,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(http, "make_api", _make_api)
    monkeypatch.setattr(auth_cmd, "load_config", config.default_config)
    monkeypatch.setattr(http.console, "err", lambda msg: errors.append(str(msg)))
    monkeypatch.setattr(auth_cmd.console, "err", lambda msg: errors.append(str(msg)))
    monkeypatch.setattr(auth_cmd.console, "ok", lambda *_args, **_kwargs: None)
    return store, paths, errors


def test_login_whoami_logout_flow(monkeypatch) -> None:
    store, paths, _ = _install_backend(
        monkeypatch,
        {
            "/api/auth/signin": (200, AUTH_OK),
            "/api/auth/signout": (200, {"success": True}),
        },
    )
    printed: list[str] = []
    monkeypatch.setattr(auth_cmd.console.console, "print", lambda msg, *a, **k: printed.append(str(msg)))

    auth_cmd.login(email="mona@example.com", password="secret", base_url=None)
    assert store.items[TOKEN_KEY] == "abc"

    auth_cmd.whoami_impl(json_out=False)
    assert "  name: Mona" in printed

    auth_cmd.logout()
    assert store.items == {}
    assert paths == ["/api/auth/signin", "/api/auth/signout"]


def test_whoami_requires_login(monkeypatch) -> None:
    _, _, errors = _install_backend(monkeypatch, {})

    with pytest.raises(typer.Exit) as exc:
        auth_cmd.whoami_impl(json_out=False)

    assert exc.value.exit_code == 2
    assert errors == ["Not logged in. Run: onecrew auth login"]


def test_login_failure_exits_with_message(monkeypatch) -> None:
    store, _, errors = _install_backend(
        monkeypatch,
        {"/api/auth/signin": (200, {"success": False, "error": "Invalid credentials"})},
    )

    with pytest.raises(typer.Exit) as exc:
        auth_cmd.login(email="mona@example.com", password="nope", base_url=None)

    assert exc.value.exit_code == 2
    assert errors == ["Login failed: Invalid credentials"]
    assert store.items == {}


def test_signup_rejects_unknown_category(monkeypatch) -> None:
    _, paths, errors = _install_backend(monkeypatch, {})

    with pytest.raises(typer.Exit):
        auth_cmd.signup(
            name="Mona",
            email="mona@example.com",
            password="secret",
            category="studio",
            role=None,
            base_url=None,
        )

    assert paths == []
    assert errors and errors[0].startswith("Unknown category: studio")
