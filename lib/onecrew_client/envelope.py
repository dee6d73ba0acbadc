from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

from .errors import EnvelopeError


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pagination":
        return cls(
            page=int(data.get("page") or 0),
            limit=int(data.get("limit") or 0),
            total=int(data.get("total") or 0),
            total_pages=int(data.get("totalPages") or data.get("total_pages") or 0),
        )


def is_success(envelope: Any) -> bool:
    return isinstance(envelope, dict) and bool(envelope.get("success"))


def ensure_success(envelope: Any, fallback: str) -> None:
    if not is_success(envelope):
        raise EnvelopeError(_envelope_message(envelope, fallback), code=_envelope_code(envelope), details=envelope)


def unwrap(envelope: Any, fallback: str) -> Any:
    """Return ``data`` of a successful envelope or raise :class:`EnvelopeError`."""
    if is_success(envelope) and envelope.get("data") is not None:
        return envelope["data"]
    raise EnvelopeError(_envelope_message(envelope, fallback), code=_envelope_code(envelope), details=envelope)


def paginated(envelope: Any) -> tuple[list[Any], Pagination | None]:
    if not isinstance(envelope, dict):
        return [], None
    items = envelope.get("data")
    if not isinstance(items, list):
        items = []
    raw = envelope.get("pagination")
    pagination = Pagination.from_dict(raw) if isinstance(raw, dict) else None
    return items, pagination


def build_query(params: Mapping[str, Any] | None) -> str:
    """Encode query params, dropping ``None`` and repeating keys for lists."""
    pairs: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))
    return urlencode(pairs)


def with_query(path: str, params: Mapping[str, Any] | None) -> str:
    query = build_query(params)
    return path + (f"?{query}" if query else "")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _envelope_message(envelope: Any, fallback: str) -> str:
    if isinstance(envelope, dict):
        return str(envelope.get("error") or fallback)
    return fallback


def _envelope_code(envelope: Any) -> str | None:
    if isinstance(envelope, dict) and envelope.get("code") is not None:
        return str(envelope["code"])
    return None
