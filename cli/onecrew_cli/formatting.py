from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from rich.table import Table

from onecrew_client.envelope import Pagination


def format_list_timestamp(value: datetime | str | None) -> str:
    if value is None:
        return "-"
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return text
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    ms = dt.microsecond // 1000
    if ms:
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ms:03d}Z"
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_pagination(pagination: Pagination | None) -> str | None:
    if pagination is None:
        return None
    return f"page {pagination.page}/{pagination.total_pages} total={pagination.total} limit={pagination.limit}"


def items_table(title: str, items: Iterable[dict[str, Any]], columns: list[str]) -> Table:
    table = Table(title=title)
    for i, column in enumerate(columns):
        table.add_column(column, style="bold" if i == 0 else None)
    for item in items:
        row = []
        for column in columns:
            value = item.get(column) if isinstance(item, dict) else None
            if column.endswith("_at"):
                row.append(format_list_timestamp(value))
            else:
                row.append("-" if value is None or value == "" else str(value))
        table.add_row(*row)
    return table
