from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from importlib import metadata
from typing import Any, TypeVar

import typer
from onecrew_client import OneCrewApi, OneCrewError
from onecrew_client.config_types import ClientConfig
from onecrew_client.storage import SecureStore

from . import console
from .config import AppConfig, normalize_base_url, resolve_base_url
from .secure_store import FileSecureStore

T = TypeVar("T")


def cli_version() -> str:
    try:
        return metadata.version("onecrew-cli")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def make_api(
    cfg: AppConfig,
    *,
    base_url_override: str | None = None,
    storage: SecureStore | None = None,
) -> OneCrewApi:
    base_url = normalize_base_url(base_url_override or resolve_base_url(cfg), warn=True)
    return OneCrewApi(
        ClientConfig(
            base_url=base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            user_agent=f"onecrew-cli/{cli_version()}",
        ),
        storage=storage if storage is not None else FileSecureStore(),
    )


def run_api(
    cfg: AppConfig,
    action: Callable[[OneCrewApi], Awaitable[T]],
    *,
    base_url_override: str | None = None,
) -> T:
    """Restore the persisted session, run one action and close the client."""

    async def _run() -> T:
        api = make_api(cfg, base_url_override=base_url_override)
        try:
            await api.initialize()
            return await action(api)
        finally:
            await api.aclose()

    return asyncio.run(_run())


def call_api(
    cfg: AppConfig,
    action: Callable[[OneCrewApi], Awaitable[T]],
    *,
    failure: str,
    base_url_override: str | None = None,
) -> T:
    """Like :func:`run_api` but reports client and storage errors and exits with code 2."""
    try:
        return run_api(cfg, action, base_url_override=base_url_override)
    except OneCrewError as e:
        message = getattr(e, "message", None) or str(e)
        console.err(f"{failure}: {message}")
        raise typer.Exit(code=2)
    except OSError as e:
        console.err(f"{failure}: could not access session storage ({e})")
        raise typer.Exit(code=2)


def envelope_data(envelope: Any) -> Any:
    if isinstance(envelope, dict):
        return envelope.get("data")
    return None
