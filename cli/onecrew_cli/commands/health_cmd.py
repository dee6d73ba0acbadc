from __future__ import annotations

import typer

from .. import console
from ..config import load_config, resolve_base_url
from ..http import call_api, envelope_data


def health(
        json_output: bool = typer.Option(False, "--json", help="Output JSON only."),
):
    cfg = load_config()
    if not resolve_base_url(cfg):
        console.err("Base URL is not configured. Run `onecrew settings init` first.")
        raise typer.Exit(code=2)

    envelope = call_api(cfg, lambda api: api.health_check(), failure="Health check failed")
    if json_output:
        console.print_json(envelope)
        return
    data = envelope_data(envelope) or envelope
    status = data.get("status") if isinstance(data, dict) else None
    if status:
        console.ok(f"API status: {status} at {data.get('timestamp', '-')}")
    else:
        console.warn("API answered without a status field.")
