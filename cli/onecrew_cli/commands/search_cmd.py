from __future__ import annotations

import typer
from rich.markup import escape
from onecrew_client.envelope import paginated

from .. import console
from ..config import load_config
from ..formatting import format_pagination, items_table
from ..http import call_api, envelope_data

app = typer.Typer(help="Search people, projects and teams.")


def _print_page(title: str, envelope, columns: list[str], json_out: bool) -> None:
    if json_out:
        console.print_json(envelope)
        return
    items, pagination = paginated(envelope)
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)
    console.console.print(items_table(title, items, columns))


@app.command("users")
def search_users(
        q: str | None = typer.Argument(None, help="Search text."),
        category: str | None = typer.Option(None, "--category"),
        role: str | None = typer.Option(None, "--role"),
        location: str | None = typer.Option(None, "--location"),
        skills: list[str] | None = typer.Option(None, "--skill", help="Repeatable."),
        languages: list[str] | None = typer.Option(None, "--language", help="Repeatable."),
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.search_users(
            q=q,
            category=category,
            role=role,
            location=location,
            skills=skills or None,
            languages=languages or None,
            page=page,
            limit=limit,
        ),
        failure="Search failed",
    )
    _print_page("Users", envelope, ["id", "name", "category", "primary_role", "location_text"], json_out)


@app.command("projects")
def search_projects(
        q: str | None = typer.Argument(None, help="Search text."),
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.search_projects(q=q, page=page, limit=limit),
        failure="Search failed",
    )
    _print_page("Projects", envelope, ["id", "title", "status", "type"], json_out)


@app.command("teams")
def search_teams(
        q: str | None = typer.Argument(None, help="Search text."),
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.search_teams(q=q, page=page, limit=limit),
        failure="Search failed",
    )
    _print_page("Teams", envelope, ["id", "name", "description"], json_out)


@app.command("global")
def global_search(
        q: str = typer.Argument(..., help="Search text."),
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.global_search(q, page=page, limit=limit), failure="Search failed")
    if json_out:
        console.print_json(envelope)
        return
    data = envelope_data(envelope) or {}
    console.console.print(items_table("Users", data.get("users") or [], ["id", "name", "category"]))
    console.console.print(items_table("Projects", data.get("projects") or [], ["id", "title", "status"]))
    console.console.print(items_table("Teams", data.get("teams") or [], ["id", "name"]))


@app.command("suggest")
def suggest(
        q: str = typer.Argument(..., help="Prefix to complete."),
):
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.get_search_suggestions(q), failure="Suggestions failed")
    for item in envelope_data(envelope) or []:
        kind = escape(str(item.get("type", "-")))
        console.console.print(f"[dim]{kind}[/] {escape(str(item.get('text', '')))}")
