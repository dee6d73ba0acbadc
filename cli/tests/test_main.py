from __future__ import annotations

from typer.testing import CliRunner

from onecrew_cli import main
from onecrew_cli.auth_state import AuthContext


def test_authenticated_app_exposes_resource_commands(monkeypatch) -> None:
    monkeypatch.setattr(main, "resolve_auth_context", lambda: AuthContext(state="authed", user={"id": "1"}))
    app = main._build_app()
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "whoami" in result.output
    assert "projects" in result.output


def test_limited_app_hides_resource_commands(monkeypatch) -> None:
    monkeypatch.setattr(main, "resolve_auth_context", lambda: AuthContext(state="no_token"))
    app = main._build_app()
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "auth" in result.output
    assert "projects" not in result.output
