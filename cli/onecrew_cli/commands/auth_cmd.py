from __future__ import annotations

import typer

from .. import console
from ..config import load_config
from ..http import call_api, run_api

app = typer.Typer(help="Auth commands.")

CATEGORIES = ("crew", "talent", "company")


def _display_name(user: dict | None) -> str:
    if not isinstance(user, dict):
        return "-"
    return str(user.get("name") or user.get("email") or user.get("id") or "-")


@app.command("login")
def login(
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Account password."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    cfg = load_config()
    data = call_api(
        cfg,
        lambda api: api.auth.login({"email": email, "password": password}),
        failure="Login failed",
        base_url_override=base_url,
    )
    console.ok(f"Logged in as {_display_name(data.get('user'))}.")


@app.command("signup")
def signup(
    name: str = typer.Option(..., "--name", prompt=True, help="Display name."),
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
    password: str = typer.Option(
        ...,
        "--password",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Account password.",
    ),
    category: str = typer.Option("crew", "--category", help="crew, talent or company."),
    role: str | None = typer.Option(None, "--role", help="Primary role, e.g. director or actor."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
):
    category = category.strip().lower()
    if category not in CATEGORIES:
        console.err(f"Unknown category: {category}. Use one of: {', '.join(CATEGORIES)}.")
        raise typer.Exit(code=2)
    payload: dict[str, str] = {"name": name, "email": email, "password": password, "category": category}
    if role:
        payload["primary_role"] = role
    cfg = load_config()
    data = call_api(cfg, lambda api: api.auth.signup(payload), failure="Signup failed", base_url_override=base_url)
    console.ok(f"Account created. Logged in as {_display_name(data.get('user'))}.")


@app.command("logout", help="Sign out and clear the stored session.")
def logout():
    cfg = load_config()
    run_api(cfg, lambda api: api.auth.logout())
    console.ok("Logged out.")


@app.command("refresh", help="Exchange the current token for a fresh one.")
def refresh():
    cfg = load_config()
    call_api(cfg, lambda api: api.auth.refresh_token(), failure="Token refresh failed")
    console.ok("Token refreshed.")


def whoami_impl(
    json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()

    async def _current_user(api):
        return api.auth.get_current_user() if api.auth.is_authenticated() else None

    user = run_api(cfg, _current_user)
    if user is None:
        console.err("Not logged in. Run: onecrew auth login")
        raise typer.Exit(code=2)
    if json_out:
        console.print_json(user)
        return
    console.ok("Current user:")
    for key in ("id", "name", "email", "category", "primary_role", "profile_completeness"):
        console.console.print(f"  {key}: {user.get(key) if user.get(key) is not None else '-'}")


app.command("whoami")(whoami_impl)


@app.command("change-password")
def change_password(
    current_password: str = typer.Option(..., "--current", prompt="Current password", hide_input=True),
    new_password: str = typer.Option(
        ...,
        "--new",
        prompt="New password",
        hide_input=True,
        confirmation_prompt=True,
    ),
):
    cfg = load_config()
    call_api(
        cfg,
        lambda api: api.auth.change_password(current_password, new_password),
        failure="Password change failed",
    )
    console.ok("Password changed.")


@app.command("forgot-password")
def forgot_password(
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.auth.request_password_reset(email), failure="Password reset request failed")
    console.ok("If the account exists, a reset link has been sent.")


@app.command("reset-password")
def reset_password(
    token: str = typer.Option(..., "--token", prompt="Reset token", help="Token from the reset email."),
    new_password: str = typer.Option(
        ...,
        "--new",
        prompt="New password",
        hide_input=True,
        confirmation_prompt=True,
    ),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.auth.reset_password(token, new_password), failure="Password reset failed")
    console.ok("Password reset. You can log in now.")
