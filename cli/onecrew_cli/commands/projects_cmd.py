from __future__ import annotations

import typer
from onecrew_client.envelope import paginated

from .. import console
from ..config import load_config
from ..formatting import format_list_timestamp, format_pagination, items_table
from ..http import call_api, envelope_data

app = typer.Typer(help="Projects commands.")

PROJECT_COLUMNS = ["id", "title", "status", "type", "progress", "start_date"]


@app.command("list")
def list_projects(
        page: int | None = typer.Option(None, "--page", min=1, help="Page number."),
        limit: int | None = typer.Option(None, "--limit", min=1, help="Page size."),
        search: str | None = typer.Option(None, "--search", help="Free-text search."),
        status: str | None = typer.Option(None, "--status", help="draft, active, completed, cancelled, on_hold."),
        project_type: str | None = typer.Option(None, "--type", help="Project type filter."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override base URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_projects(page=page, limit=limit, search=search, status=status, type=project_type),
        failure="Failed to list projects",
        base_url_override=base_url,
    )
    if json_out:
        console.print_json(envelope)
        return

    items, pagination = paginated(envelope)
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)
    console.console.print(items_table("Projects", items, PROJECT_COLUMNS))


@app.command("show")
def show_project(
        project_id: str = typer.Argument(..., help="Project ID."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.get_project_by_id(project_id), failure="Failed to fetch project")
    if json_out:
        console.print_json(envelope)
        return

    project = envelope_data(envelope) or {}
    console.ok("Project:")
    for key in ("id", "title", "status", "type", "progress", "location", "budget", "start_date", "end_date"):
        value = project.get(key)
        console.console.print(f"  {key}: {value if value is not None else '-'}")
    console.console.print(f"  updated_at: {format_list_timestamp(project.get('updated_at'))}")


@app.command("create")
def create_project(
        title: str = typer.Option(..., "--title", prompt=True),
        description: str | None = typer.Option(None, "--description"),
        project_type: str | None = typer.Option(None, "--type"),
        location: str | None = typer.Option(None, "--location"),
        start_date: str | None = typer.Option(None, "--start-date", help="YYYY-MM-DD"),
        end_date: str | None = typer.Option(None, "--end-date", help="YYYY-MM-DD"),
        budget: float | None = typer.Option(None, "--budget"),
        one_day_shoot: bool = typer.Option(False, "--one-day-shoot"),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = {
        key: value
        for key, value in {
            "title": title,
            "description": description,
            "type": project_type,
            "location": location,
            "start_date": start_date,
            "end_date": end_date,
            "budget": budget,
        }.items()
        if value is not None
    }
    body["one_day_shoot"] = one_day_shoot
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.create_project(body), failure="Failed to create project")
    if json_out:
        console.print_json(envelope)
        return
    project = envelope_data(envelope) or {}
    console.ok(f"Project created: {project.get('id', '-')}")


@app.command("delete")
def delete_project(
        project_id: str = typer.Argument(..., help="Project ID."),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
):
    if not yes and not typer.confirm(f"Delete project {project_id}?", default=False):
        raise typer.Exit(code=0)
    cfg = load_config()
    call_api(cfg, lambda api: api.delete_project(project_id), failure="Failed to delete project")
    console.ok(f"Project {project_id} deleted.")


@app.command("join")
def join_project(
        project_id: str = typer.Argument(..., help="Project ID."),
        role: str | None = typer.Option(None, "--role", help="Role on the project."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.join_project(project_id, role), failure="Failed to join project")
    console.ok(f"Joined project {project_id}.")


@app.command("leave")
def leave_project(
        project_id: str = typer.Argument(..., help="Project ID."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.leave_project(project_id), failure="Failed to leave project")
    console.ok(f"Left project {project_id}.")
