from __future__ import annotations

import asyncio
import json

import httpx

from onecrew_client import ClientConfig, MemoryStore, OneCrewApi


class _Recorder:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, json={"success": True, "data": []})


def _call(action):
    recorder = _Recorder()

    async def _main():
        api = OneCrewApi(
            ClientConfig(base_url="http://api.test"),
            storage=MemoryStore(),
            transport=httpx.MockTransport(recorder),
        )
        async with api:
            return await action(api)

    result = asyncio.run(_main())
    return result, recorder.requests


def test_get_users_without_params_uses_bare_path() -> None:
    result, requests = _call(lambda api: api.get_users())
    assert result == {"success": True, "data": []}
    assert requests[0].url.path == "/api/users"
    assert requests[0].url.query == b""


def test_get_projects_builds_query() -> None:
    _, requests = _call(lambda api: api.get_projects(page=2, status="active", type="film"))
    params = requests[0].url.params
    assert requests[0].url.path == "/api/projects"
    assert params["page"] == "2"
    assert params["status"] == "active"
    assert params["type"] == "film"
    assert "search" not in params


def test_get_user_by_id_posts_id() -> None:
    _, requests = _call(lambda api: api.get_user_by_id("u1"))
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/users/get-by-id"
    assert json.loads(requests[0].content) == {"id": "u1"}


def test_search_users_repeats_list_params() -> None:
    _, requests = _call(lambda api: api.search_users(q="gaffer", skills=["lighting", "rigging"], page=None))
    params = requests[0].url.params
    assert requests[0].url.path == "/api/search/users"
    assert params["q"] == "gaffer"
    assert params.get_list("skills") == ["lighting", "rigging"]
    assert "page" not in params


def test_search_suggestions_encode_query() -> None:
    _, requests = _call(lambda api: api.get_search_suggestions("sound eng"))
    assert requests[0].url.params["q"] == "sound eng"


def test_team_and_project_membership_paths() -> None:
    async def _actions(api):
        await api.join_team("t1", "editor")
        await api.leave_team("t1")
        await api.join_project("p1")
        await api.delete_project("p1")

    _, requests = _call(_actions)
    assert [(r.method, r.url.path) for r in requests] == [
        ("POST", "/api/teams/join"),
        ("POST", "/api/teams/t1/leave"),
        ("POST", "/api/projects/p1/join"),
        ("DELETE", "/api/projects/p1"),
    ]
    assert json.loads(requests[0].content) == {"team_id": "t1", "role": "editor"}
    assert requests[1].content == b""


def test_messaging_paths() -> None:
    async def _actions(api):
        await api.create_conversation(["u1", "u2"], name="Crew")
        await api.get_messages("c1", limit=50)
        await api.send_message("c1", "Call time is 6am")

    _, requests = _call(_actions)
    assert json.loads(requests[0].content) == {"participant_ids": ["u1", "u2"], "name": "Crew"}
    assert requests[1].url.path == "/api/communication/conversations/c1/messages"
    assert requests[1].url.params["limit"] == "50"
    assert json.loads(requests[2].content) == {"content": "Call time is 6am", "type": "text"}


def test_upload_file_from_path_is_multipart(tmp_path) -> None:
    headshot = tmp_path / "headshot.png"
    headshot.write_bytes(b"\x89PNG fake")

    _, requests = _call(lambda api: api.upload_file(headshot))

    request = requests[0]
    assert request.url.path == "/api/upload"
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert b'name="file"; filename="headshot.png"' in request.content
    assert b"Content-Type: image/png" in request.content


def test_upload_file_from_memory() -> None:
    _, requests = _call(lambda api: api.upload_file(("notes.txt", b"call sheet", "text/plain")))
    assert b"call sheet" in requests[0].content


def test_health_check() -> None:
    _, requests = _call(lambda api: api.health_check())
    assert (requests[0].method, requests[0].url.path) == ("GET", "/health")


def test_optional_fields_are_omitted_when_unset() -> None:
    async def _actions(api):
        await api.join_project("p1")
        await api.create_conversation(["u1"])

    _, requests = _call(_actions)
    assert json.loads(requests[0].content) == {}
    assert json.loads(requests[1].content) == {"participant_ids": ["u1"]}


def test_update_and_lookup_paths() -> None:
    async def _actions(api):
        await api.update_user_profile({"bio": "Gaffer"})
        await api.update_project("p1", {"status": "wrapped"})
        await api.update_team("t1", {"name": "Grip"})
        await api.delete_team("t1")
        await api.get_conversation_by_id("c1")

    _, requests = _call(_actions)
    assert [(r.method, r.url.path) for r in requests] == [
        ("PUT", "/api/users/profile"),
        ("PUT", "/api/projects/p1"),
        ("PUT", "/api/teams/t1"),
        ("DELETE", "/api/teams/t1"),
        ("GET", "/api/communication/conversations/c1"),
    ]
    assert json.loads(requests[0].content) == {"bio": "Gaffer"}
    assert json.loads(requests[1].content) == {"status": "wrapped"}
    assert json.loads(requests[2].content) == {"name": "Grip"}
