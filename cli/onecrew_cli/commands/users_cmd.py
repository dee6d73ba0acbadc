from __future__ import annotations

import typer
from onecrew_client.envelope import paginated

from .. import console
from ..config import load_config
from ..formatting import format_pagination, items_table
from ..http import call_api, envelope_data

app = typer.Typer(help="Users commands.")

USER_COLUMNS = ["id", "name", "category", "primary_role", "location_text"]


@app.command("list")
def list_users(
        page: int | None = typer.Option(None, "--page", min=1, help="Page number."),
        limit: int | None = typer.Option(None, "--limit", min=1, help="Page size."),
        search: str | None = typer.Option(None, "--search", help="Free-text search."),
        category: str | None = typer.Option(None, "--category", help="crew, talent or company."),
        role: str | None = typer.Option(None, "--role", help="Primary role filter."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_users(page=page, limit=limit, search=search, category=category, role=role),
        failure="Failed to list users",
        base_url_override=base_url,
    )
    if json_out:
        console.print_json(envelope)
        return

    items, pagination = paginated(envelope)
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)
    console.console.print(items_table("Users", items, USER_COLUMNS))


@app.command("show")
def show_user(
        user_id: str = typer.Argument(..., help="User ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_user_by_id(user_id),
        failure="Failed to fetch user",
        base_url_override=base_url,
    )
    if json_out:
        console.print_json(envelope)
        return

    user = envelope_data(envelope) or {}
    console.ok("User:")
    for key in ("id", "name", "category", "primary_role", "specialty", "location_text", "bio"):
        value = user.get(key)
        console.console.print(f"  {key}: {value if value is not None else '-'}")


@app.command("update", help="Update your own profile.")
def update_profile(
        name: str | None = typer.Option(None, "--name"),
        bio: str | None = typer.Option(None, "--bio"),
        specialty: str | None = typer.Option(None, "--specialty"),
        location: str | None = typer.Option(None, "--location"),
        phone: str | None = typer.Option(None, "--phone"),
):
    updates = {
        key: value
        for key, value in {
            "name": name,
            "bio": bio,
            "specialty": specialty,
            "location_text": location,
            "phone": phone,
        }.items()
        if value is not None
    }
    if not updates:
        console.err("Nothing to update. Pass at least one field option.")
        raise typer.Exit(code=2)
    cfg = load_config()
    call_api(cfg, lambda api: api.auth.update_profile(updates), failure="Profile update failed")
    console.ok("Profile updated.")


@app.command("delete-account", help="Delete your own account.")
def delete_account(
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
):
    if not yes and not typer.confirm("Delete your account permanently?", default=False):
        raise typer.Exit(code=0)
    cfg = load_config()

    async def _delete(api):
        result = await api.delete_user()
        await api.auth.logout()
        return result

    call_api(cfg, _delete, failure="Failed to delete account")
    console.ok("Account deleted.")
