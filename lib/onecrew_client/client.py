from __future__ import annotations

import mimetypes
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx

from .config_types import ClientConfig
from .envelope import with_query
from .session import SessionManager
from .storage import MemoryStore, SecureStore
from .transport import ApiClient

UploadSource = str | os.PathLike | tuple[str, bytes, str]


class OneCrewApi:
    """Resource methods for the OneCrew backend.

    Every method composes a path and payload and hands it to the request
    pipeline; the response envelope is returned unchanged.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            storage: SecureStore | None = None,
            transport: httpx.AsyncBaseTransport | None = None,
            sleep: Callable[[float], Awaitable[Any]] | None = None,
    ):
        self._t = ApiClient(cfg, transport=transport, sleep=sleep)
        self.auth = SessionManager(self._t, storage if storage is not None else MemoryStore())

    async def initialize(self) -> None:
        await self.auth.initialize()

    async def aclose(self) -> None:
        await self._t.aclose()

    async def __aenter__(self) -> "OneCrewApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # --- users ---
    async def get_users(
            self,
            *,
            page: int | None = None,
            limit: int | None = None,
            search: str | None = None,
            category: str | None = None,
            role: str | None = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "search": search, "category": category, "role": role}
        return await self._t.get(with_query("/api/users", params))

    async def get_user_by_id(self, user_id: str) -> dict[str, Any]:
        return await self._t.post("/api/users/get-by-id", {"id": user_id})

    async def update_user_profile(self, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._t.put("/api/users/profile", updates)

    async def delete_user(self) -> dict[str, Any]:
        return await self._t.delete("/api/users/profile")

    # --- projects ---
    async def get_projects(
            self,
            *,
            page: int | None = None,
            limit: int | None = None,
            search: str | None = None,
            status: str | None = None,
            type: str | None = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "search": search, "status": status, "type": type}
        return await self._t.get(with_query("/api/projects", params))

    async def get_project_by_id(self, project_id: str) -> dict[str, Any]:
        return await self._t.get(f"/api/projects/{project_id}")

    async def create_project(self, project: dict[str, Any]) -> dict[str, Any]:
        return await self._t.post("/api/projects", project)

    async def update_project(self, project_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._t.put(f"/api/projects/{project_id}", updates)

    async def delete_project(self, project_id: str) -> dict[str, Any]:
        return await self._t.delete(f"/api/projects/{project_id}")

    async def join_project(self, project_id: str, role: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if role:
            body["role"] = role
        return await self._t.post(f"/api/projects/{project_id}/join", body)

    async def leave_project(self, project_id: str) -> dict[str, Any]:
        return await self._t.post(f"/api/projects/{project_id}/leave")

    # --- teams ---
    async def get_teams(
            self,
            *,
            page: int | None = None,
            limit: int | None = None,
            search: str | None = None,
    ) -> dict[str, Any]:
        return await self._t.get(with_query("/api/teams", {"page": page, "limit": limit, "search": search}))

    async def get_team_by_id(self, team_id: str) -> dict[str, Any]:
        return await self._t.get(f"/api/teams/{team_id}")

    async def create_team(self, team: dict[str, Any]) -> dict[str, Any]:
        return await self._t.post("/api/teams", team)

    async def update_team(self, team_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        return await self._t.put(f"/api/teams/{team_id}", updates)

    async def delete_team(self, team_id: str) -> dict[str, Any]:
        return await self._t.delete(f"/api/teams/{team_id}")

    async def join_team(self, team_id: str, role: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"team_id": team_id}
        if role:
            body["role"] = role
        return await self._t.post("/api/teams/join", body)

    async def leave_team(self, team_id: str) -> dict[str, Any]:
        return await self._t.post(f"/api/teams/{team_id}/leave")

    # --- communication ---
    async def get_conversations(
            self,
            *,
            page: int | None = None,
            limit: int | None = None,
            search: str | None = None,
    ) -> dict[str, Any]:
        params = {"page": page, "limit": limit, "search": search}
        return await self._t.get(with_query("/api/communication/conversations", params))

    async def get_conversation_by_id(self, conversation_id: str) -> dict[str, Any]:
        return await self._t.get(f"/api/communication/conversations/{conversation_id}")

    async def create_conversation(self, participant_ids: list[str], name: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {"participant_ids": list(participant_ids)}
        if name:
            body["name"] = name
        return await self._t.post("/api/communication/conversations", body)

    async def get_messages(
            self,
            conversation_id: str,
            *,
            page: int | None = None,
            limit: int | None = None,
    ) -> dict[str, Any]:
        path = f"/api/communication/conversations/{conversation_id}/messages"
        return await self._t.get(with_query(path, {"page": page, "limit": limit}))

    async def send_message(self, conversation_id: str, content: str, type: str = "text") -> dict[str, Any]:
        return await self._t.post(
            f"/api/communication/conversations/{conversation_id}/messages",
            {"content": content, "type": type},
        )

    # --- search ---
    async def search_users(self, **params: Any) -> dict[str, Any]:
        return await self._t.get(with_query("/api/search/users", params))

    async def search_projects(self, **params: Any) -> dict[str, Any]:
        return await self._t.get(with_query("/api/search/projects", params))

    async def search_teams(self, **params: Any) -> dict[str, Any]:
        return await self._t.get(with_query("/api/search/teams", params))

    async def global_search(self, q: str, *, page: int | None = None, limit: int | None = None) -> dict[str, Any]:
        return await self._t.get(with_query("/api/search/global", {"q": q, "page": page, "limit": limit}))

    async def get_search_suggestions(self, q: str) -> dict[str, Any]:
        return await self._t.get(with_query("/api/search/suggestions", {"q": q}))

    # --- uploads ---
    async def upload_file(self, source: UploadSource) -> dict[str, Any]:
        """Upload a file as the ``file`` part of a multipart request.

        ``source`` is a filesystem path or a ``(name, content, content_type)``
        tuple for in-memory data.
        """
        if isinstance(source, tuple):
            name, content, content_type = source
        else:
            path = Path(source)
            name = path.name
            content = path.read_bytes()
            content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        return await self._t.post("/api/upload", files={"file": (name, content, content_type)})

    async def health_check(self) -> dict[str, Any]:
        return await self._t.get("/health")
