from __future__ import annotations

from pathlib import Path

import typer

from .. import console
from ..config import load_config
from ..http import call_api, envelope_data


def upload(
        path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    envelope = call_api(cfg, lambda api: api.upload_file(path), failure="Upload failed")
    if json_out:
        console.print_json(envelope)
        return
    data = envelope_data(envelope) or {}
    console.ok(f"Uploaded {data.get('filename') or path.name}: {data.get('url', '-')}")
