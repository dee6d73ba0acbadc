from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from .config_types import ClientConfig, RequestSpec
from .errors import ApiError, GenericError, HttpError, NetworkError, RequestTimeoutError

log = logging.getLogger(__name__)

CONTENT_TYPE = "Content-Type"
AUTHORIZATION = "Authorization"


class ApiClient:
    """Request pipeline shared by every resource call.

    Composes the URL, merges headers, bounds each attempt with a timeout,
    retries timeouts and 5xx responses with exponential backoff and turns
    every failure into an :class:`ApiError`.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            transport: httpx.AsyncBaseTransport | None = None,
            sleep: Callable[[float], Awaitable[Any]] | None = None,
    ):
        self._cfg = cfg
        headers = {CONTENT_TYPE: "application/json"}
        if cfg.user_agent:
            headers["User-Agent"] = cfg.user_agent
        self._headers = headers
        self._sleep = sleep or asyncio.sleep
        self._client = httpx.AsyncClient(transport=transport, follow_redirects=True)

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._headers)

    def set_auth_token(self, token: str) -> None:
        self._headers[AUTHORIZATION] = f"Bearer {token}"

    def remove_auth_token(self) -> None:
        self._headers.pop(AUTHORIZATION, None)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def execute(self, spec: RequestSpec) -> Any:
        url = f"{self._cfg.base_url}{spec.path}"
        timeout_s = spec.timeout_s if spec.timeout_s is not None else self._cfg.timeout_s
        retries = spec.max_retries if spec.max_retries is not None else self._cfg.max_retries
        retries = max(0, int(retries))

        for attempt in range(retries + 1):
            log.debug("%s %s (attempt %d/%d)", spec.method, url, attempt + 1, retries + 1)
            try:
                return await self._attempt(spec, url, timeout_s)
            except ApiError as exc:
                error = exc
            except Exception as exc:
                error = _classify(exc)

            if attempt < retries and error.retryable:
                delay = 2 ** attempt
                log.info("%s %s failed (%s), retrying in %ss", spec.method, spec.path, error.message, delay)
                await self._sleep(delay)
                continue
            raise error

        # unreachable: the last attempt either returns or raises
        raise GenericError()

    async def _attempt(self, spec: RequestSpec, url: str, timeout_s: float) -> Any:
        request = self._build_request(spec, url, timeout_s)
        try:
            response = await asyncio.wait_for(self._client.send(request), timeout=timeout_s)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError() from e
        except httpx.TransportError as e:
            raise NetworkError() from e

        if not response.is_success:
            data = _json_or_empty(response)
            msg = str(data.get("error") or data.get("message") or f"HTTP {response.status_code}")
            code = data.get("code")
            log.warning("%s %s failed with %s", spec.method, spec.path, response.status_code)
            raise HttpError(
                msg,
                response.status_code,
                str(code) if code is not None else None,
                data or (response.text[:1000] or None),
            )

        return _decode_success(response)

    def _build_request(self, spec: RequestSpec, url: str, timeout_s: float) -> httpx.Request:
        # header names are case-insensitive, a per-call key replaces any default spelling
        headers = httpx.Headers(self._headers)
        headers.update(spec.headers)
        kwargs: dict[str, Any] = {}
        if spec.files is not None:
            # httpx writes its own multipart content-type including the boundary
            headers.pop(CONTENT_TYPE, None)
            kwargs["files"] = spec.files
            if spec.body is not None:
                kwargs["data"] = spec.body
        elif spec.body is not None:
            kwargs["json"] = spec.body
        return self._client.build_request(
            spec.method,
            url,
            headers=headers,
            timeout=timeout_s,
            **kwargs,
        )

    # --- convenience wrappers ---
    async def get(self, path: str, **options: Any) -> Any:
        return await self.execute(RequestSpec("GET", path, **options))

    async def post(self, path: str, body: Any | None = None, **options: Any) -> Any:
        return await self.execute(RequestSpec("POST", path, body=body, **options))

    async def put(self, path: str, body: Any | None = None, **options: Any) -> Any:
        return await self.execute(RequestSpec("PUT", path, body=body, **options))

    async def patch(self, path: str, body: Any | None = None, **options: Any) -> Any:
        return await self.execute(RequestSpec("PATCH", path, body=body, **options))

    async def delete(self, path: str, **options: Any) -> Any:
        return await self.execute(RequestSpec("DELETE", path, **options))


def _classify(exc: BaseException) -> ApiError:
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)):
        return RequestTimeoutError()
    if isinstance(exc, httpx.TransportError):
        return NetworkError()
    return GenericError(str(exc) or "Unknown error occurred")


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _decode_success(response: httpx.Response) -> Any:
    if not response.content:
        return {"success": True}
    try:
        return response.json()
    except ValueError:
        return {"success": True, "data": response.text}
