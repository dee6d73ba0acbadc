from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_MAX_RETRIES = 3


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES
    user_agent: str | None = "onecrew-client/0.1.0"

    def __post_init__(self) -> None:
        base_url = (self.base_url or "").strip()
        if base_url.endswith("/"):
            base_url = base_url[:-1]
        object.__setattr__(self, "base_url", base_url)


@dataclass(frozen=True)
class RequestSpec:
    method: str
    path: str
    body: Any | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout_s: float | None = None
    max_retries: int | None = None
    # multipart parts in httpx ``files=`` form; ``body`` then becomes the form fields
    files: dict[str, Any] | None = None
