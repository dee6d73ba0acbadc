from __future__ import annotations

import typer
from rich.markup import escape
from onecrew_client.envelope import paginated

from .. import console
from ..config import load_config
from ..formatting import format_list_timestamp, format_pagination, items_table
from ..http import call_api, envelope_data

app = typer.Typer(help="Conversations and messages.")


@app.command("conversations")
def list_conversations(
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        search: str | None = typer.Option(None, "--search"),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_conversations(page=page, limit=limit, search=search),
        failure="Failed to list conversations",
    )
    if json_out:
        console.print_json(envelope)
        return
    items, pagination = paginated(envelope)
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)
    console.console.print(items_table("Conversations", items, ["id", "name", "is_group", "updated_at"]))


@app.command("start")
def start_conversation(
        participants: list[str] = typer.Argument(..., help="Participant user IDs."),
        name: str | None = typer.Option(None, "--name", help="Group name."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.create_conversation(participants, name),
        failure="Failed to start conversation",
    )
    conversation = envelope_data(envelope) or {}
    console.ok(f"Conversation created: {conversation.get('id', '-')}")


@app.command("history")
def history(
        conversation_id: str = typer.Argument(..., help="Conversation ID."),
        page: int | None = typer.Option(None, "--page", min=1),
        limit: int | None = typer.Option(None, "--limit", min=1),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(
        cfg,
        lambda api: api.get_messages(conversation_id, page=page, limit=limit),
        failure="Failed to fetch messages",
    )
    if json_out:
        console.print_json(envelope)
        return
    items, pagination = paginated(envelope)
    for message in items:
        sender = (message.get("users") or {}).get("name") or message.get("sender_id") or "-"
        sent_at = format_list_timestamp(message.get("sent_at"))
        content = escape(str(message.get("content", "")))
        console.console.print(f"[dim]{sent_at}[/] [bold]{escape(str(sender))}[/]: {content}")
    summary = format_pagination(pagination)
    if summary:
        console.info(summary)


@app.command("send")
def send(
        conversation_id: str = typer.Argument(..., help="Conversation ID."),
        content: str = typer.Argument(..., help="Message text."),
):
    cfg = load_config()
    call_api(cfg, lambda api: api.send_message(conversation_id, content), failure="Failed to send message")
    console.ok("Message sent.")
