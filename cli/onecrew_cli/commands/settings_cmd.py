from __future__ import annotations

import os

import typer

from .. import console
from ..config import config_path, default_config, load_config, normalize_base_url, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/onecrew/config.toml).")


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        base_url: str = typer.Option(
            ...,
            "--base-url",
            prompt="API base URL",
            help="API base URL like https://api.onecrew.app",
        ),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.base_url = normalize_base_url(base_url, warn=True)
    if not cfg.base_url:
        console.err("Base URL cannot be empty.")
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config()
    console.console.print(f"base_url={cfg.base_url} timeout_s={cfg.timeout_s} max_retries={cfg.max_retries}")


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (base_url, timeout_s, max_retries)."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k in {"base_url", "timeout_s", "max_retries"}:
        console.console.print(str(getattr(cfg, k)))
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        base_url: str | None = typer.Option(None, "--base-url", help="Set API base URL."),
        timeout_s: float | None = typer.Option(None, "--timeout", min=0.1, help="Per-request timeout in seconds."),
        max_retries: int | None = typer.Option(None, "--max-retries", min=0, help="Retries for timeouts and 5xx."),
):
    cfg = load_config()
    if base_url is not None:
        cfg.base_url = normalize_base_url(base_url, warn=True)
    if timeout_s is not None:
        cfg.timeout_s = timeout_s
    if max_retries is not None:
        cfg.max_retries = max_retries
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
