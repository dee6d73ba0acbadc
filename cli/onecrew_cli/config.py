from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from onecrew_client.config_types import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT_S

from . import console

APP_NAME = "onecrew"
CONFIG_FILENAME = "config.toml"
BASE_URL_DEFAULT = "http://127.0.0.1:3000"
ENV_BASE_URL = "ONECREW_BASE_URL"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AppConfig:
    base_url: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        base_url=BASE_URL_DEFAULT,
        timeout_s=DEFAULT_TIMEOUT_S,
        max_retries=DEFAULT_MAX_RETRIES,
    )


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"base_url missing scheme, assuming {normalized}")
    _WARNED_BASE_URL_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "base_url": cfg.base_url,
        "timeout_s": float(cfg.timeout_s),
        "max_retries": int(cfg.max_retries),
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    base_url = normalize_base_url(str(data.get("base_url") or ""), warn=True)
    if base_url:
        cfg.base_url = base_url
    try:
        timeout_s = float(data.get("timeout_s", cfg.timeout_s))
        if timeout_s > 0:
            cfg.timeout_s = timeout_s
    except (TypeError, ValueError):
        pass
    try:
        max_retries = int(data.get("max_retries", cfg.max_retries))
        if max_retries >= 0:
            cfg.max_retries = max_retries
    except (TypeError, ValueError):
        pass
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def resolve_base_url(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_BASE_URL, "").strip()
    if env_value:
        return normalize_base_url(env_value)
    return (cfg.base_url or "").strip().rstrip("/")


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
