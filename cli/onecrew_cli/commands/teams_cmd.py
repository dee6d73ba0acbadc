from __future__ import annotations

import typer
from onecrew_client.envelope import paginated

from .. import console
from ..config import load_config
from ..formatting import format_pagination, items_table
from ..http import call_api, envelope_data

app = typer.Typer(help="Teams commands.")


@app.command("list")
def list_teams(
        page: int | None = typer.Option(None, "--page", min=1, help="Page number."),
        limit: int | None = typer.Option(None, "--limit", min=1, help="Page size."),
        search: str | None = typer.Option(None, "--search", help="Free-text search."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_teams(page=page, limit=limit, search=search),
        failure="Failed to list teams",
    )
    if json_out:
        console.print_json(envelope)
        return

    items, pagination = paginated(envelope)
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)
    console.console.print(items_table("Teams", items, ["id", "name", "description", "created_at"]))


@app.command("show")
def show_team(
        team_id: str = typer.Argument(..., help="Team ID."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.get_team_by_id(team_id), failure="Failed to fetch team")
    if json_out:
        console.print_json(envelope)
        return

    team = envelope_data(envelope) or {}
    console.ok(f"Team {team.get('name') or team_id}:")
    members = team.get("users") or []
    rows = []
    for member in members:
        user = member.get("users") or {}
        rows.append(
            {
                "user_id": member.get("user_id"),
                "name": user.get("name"),
                "role": member.get("role"),
                "joined_at": member.get("joined_at"),
            }
        )
    console.console.print(items_table("Members", rows, ["user_id", "name", "role", "joined_at"]))


@app.command("create")
def create_team(
        name: str = typer.Option(..., "--name", prompt=True),
        description: str | None = typer.Option(None, "--description"),
):
    body = {"name": name}
    if description:
        body["description"] = description
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.create_team(body), failure="Failed to create team")
    team = envelope_data(envelope) or {}
    console.ok(f"Team created: {team.get('id', '-')}")


@app.command("join")
def join_team(
        team_id: str = typer.Argument(..., help="Team ID."),
        role: str | None = typer.Option(None, "--role", help="Role in the team."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.join_team(team_id, role), failure="Failed to join team")
    console.ok(f"Joined team {team_id}.")


@app.command("leave")
def leave_team(
        team_id: str = typer.Argument(..., help="Team ID."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.leave_team(team_id), failure="Failed to leave team")
    console.ok(f"Left team {team_id}.")
