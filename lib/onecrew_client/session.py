from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Mapping

from .config_types import RequestSpec
from .envelope import ensure_success, unwrap
from .errors import (
    ApiError,
    AuthError,
    AuthNetworkError,
    EnvelopeError,
    ErrorKind,
    ForbiddenError,
    SessionExpiredError,
)
from .storage import TOKEN_KEY, USER_KEY, SecureStore, soft_storage
from .transport import ApiClient

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    token: str
    user: dict[str, Any]
    persisted_at: datetime


def classify_auth_error(exc: Exception) -> Exception:
    """Map a failure to the auth taxonomy by status code and kind.

    Anything that is not an auth concern is returned unchanged.
    """
    if isinstance(exc, AuthError) or not isinstance(exc, ApiError):
        return exc
    if exc.status_code == 401:
        return SessionExpiredError()
    if exc.status_code == 403:
        return ForbiddenError()
    if exc.kind is ErrorKind.NETWORK:
        return AuthNetworkError()
    return exc


class SessionManager:
    """Owns the bearer token and user record across process restarts.

    The in-memory session, the pipeline's ``Authorization`` header and the
    two storage keys are only changed together, under one lock.
    """

    def __init__(self, api: ApiClient, storage: SecureStore):
        self._api = api
        self._storage = storage
        self._session: Session | None = None
        self._lock = asyncio.Lock()

    # --- read model ---
    @property
    def session(self) -> Session | None:
        return self._session

    def get_current_user(self) -> dict[str, Any] | None:
        return self._session.user if self._session else None

    def get_auth_token(self) -> str | None:
        return self._session.token if self._session else None

    def is_authenticated(self) -> bool:
        return bool(self._session and self._session.token and self._session.user is not None)

    # --- lifecycle ---
    async def initialize(self) -> None:
        async with self._lock:
            token: str | None = None
            user: dict[str, Any] | None = None
            async with soft_storage("restore session from storage"):
                token, user_json = await asyncio.gather(
                    self._storage.get_item(TOKEN_KEY),
                    self._storage.get_item(USER_KEY),
                )
                if token and user_json:
                    user = json.loads(user_json)
            if token and isinstance(user, dict):
                current = self._session
                if current is None or current.token != token or current.user != user:
                    self._session = Session(token=token, user=user, persisted_at=datetime.now(timezone.utc))
                self._api.set_auth_token(token)
                log.info("Session restored from storage")

    async def login(self, credentials: Mapping[str, Any]) -> dict[str, Any]:
        return await self._authenticate("/api/auth/signin", dict(credentials), "Login failed")

    async def signup(self, user_data: Mapping[str, Any]) -> dict[str, Any]:
        return await self._authenticate("/api/auth/signup", dict(user_data), "Signup failed")

    async def refresh_token(self) -> dict[str, Any]:
        return await self._authenticate("/api/auth/refresh", None, "Token refresh failed", clear_on_failure=True)

    async def logout(self) -> None:
        async with self._lock:
            if self.is_authenticated():
                try:
                    await self._api.post("/api/auth/signout")
                except Exception as exc:
                    log.warning("Sign-out request failed: %s", exc)
            else:
                log.debug("Not authenticated, skipping sign-out request")
            await self._clear_session()
            log.info("Logged out")

    async def update_profile(self, updates: Mapping[str, Any]) -> dict[str, Any]:
        async with self._lock:
            try:
                envelope = await self._api.put("/api/users/profile", dict(updates))
                data = unwrap(envelope, "Profile update failed")
                user = data.get("user") if isinstance(data, dict) else None
                if not isinstance(user, dict):
                    raise EnvelopeError("Profile update failed", details=envelope)
                if self._session is not None:
                    self._session = replace(self._session, user=user)
                    async with soft_storage("save user data"):
                        await self._storage.set_item(USER_KEY, json.dumps(user))
                return user
            except Exception as exc:
                error = await self._auth_error(exc)
                if error is exc:
                    raise
                raise error from exc

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self._call(
            "PUT",
            "/api/users/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
            "Password change failed",
        )

    async def request_password_reset(self, email: str) -> None:
        await self._call("POST", "/api/auth/forgot-password", {"email": email}, "Password reset request failed")

    async def reset_password(self, token: str, new_password: str) -> None:
        await self._call(
            "POST",
            "/api/auth/reset-password",
            {"token": token, "newPassword": new_password},
            "Password reset failed",
        )

    # --- internals ---
    async def _authenticate(
            self,
            path: str,
            body: dict[str, Any] | None,
            fallback: str,
            *,
            clear_on_failure: bool = False,
    ) -> dict[str, Any]:
        async with self._lock:
            try:
                envelope = await self._api.post(path, body)
                data = unwrap(envelope, fallback)
                await self._activate(data, fallback)
                return data
            except Exception as exc:
                if clear_on_failure:
                    await self._clear_session()
                error = await self._auth_error(exc)
                if error is exc:
                    raise
                raise error from exc

    async def _call(self, method: str, path: str, body: dict[str, Any], fallback: str) -> None:
        try:
            envelope = await self._api.execute(RequestSpec(method, path, body=body))
            ensure_success(envelope, fallback)
        except Exception as exc:
            async with self._lock:
                error = await self._auth_error(exc)
            if error is exc:
                raise
            raise error from exc

    async def _activate(self, data: Any, fallback: str) -> None:
        token = data.get("token") if isinstance(data, dict) else None
        user = data.get("user") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token or not isinstance(user, dict):
            raise EnvelopeError(f"{fallback}: response carried no token", details=data)

        self._session = Session(token=token, user=user, persisted_at=datetime.now(timezone.utc))
        self._api.set_auth_token(token)
        try:
            await asyncio.gather(
                self._storage.set_item(TOKEN_KEY, token),
                self._storage.set_item(USER_KEY, json.dumps(user)),
            )
        except Exception:
            # a session that cannot be persisted is not kept half-alive
            await self._clear_session()
            raise
        log.info("Session started for user %s", user.get("id"))

    async def _clear_session(self) -> None:
        self._session = None
        self._api.remove_auth_token()
        async with soft_storage("clear session from storage"):
            await asyncio.gather(
                self._storage.delete_item(TOKEN_KEY),
                self._storage.delete_item(USER_KEY),
            )

    async def _auth_error(self, exc: Exception) -> Exception:
        """Classify ``exc``; the caller must hold the session lock."""
        error = classify_auth_error(exc)
        if isinstance(error, SessionExpiredError):
            log.info("Session expired, clearing credentials")
            await self._clear_session()
        return error
