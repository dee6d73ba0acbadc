from __future__ import annotations

from dataclasses import dataclass

from .config import load_config, resolve_base_url
from .http import run_api


@dataclass
class AuthContext:
    state: str
    user: dict | None = None


def resolve_auth_context() -> AuthContext:
    """Read the persisted session without touching the network."""
    cfg = load_config()
    if not resolve_base_url(cfg):
        return AuthContext(state="no_base_url")

    async def _current_user(api):
        return api.auth.get_current_user() if api.auth.is_authenticated() else None

    user = run_api(cfg, _current_user)
    if user is None:
        return AuthContext(state="no_token")
    return AuthContext(state="authed", user=user)
