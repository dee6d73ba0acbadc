from rich.console import Console

from onecrew_cli.formatting import format_list_timestamp, format_pagination, items_table
from onecrew_client.envelope import Pagination


def test_format_list_timestamp_truncates_microseconds() -> None:
    ts = "2026-01-04T23:04:51.290171Z"
    assert format_list_timestamp(ts) == "2026-01-04T23:04:51.290Z"


def test_format_list_timestamp_normalizes_utc_offset() -> None:
    ts = "2026-01-04T23:04:51.290171+00:00"
    assert format_list_timestamp(ts) == "2026-01-04T23:04:51.290Z"


def test_format_pagination() -> None:
    assert format_pagination(None) is None
    assert format_pagination(Pagination(page=2, limit=10, total=35, total_pages=4)) == "page 2/4 total=35 limit=10"


def test_items_table_fills_missing_values() -> None:
    table = items_table(
        "Teams",
        [{"id": "t1", "name": "Grip", "created_at": "2026-01-04T23:04:51Z"}, {"id": "t2"}],
        ["id", "name", "created_at"],
    )
    console = Console(width=120, record=True)
    console.print(table)
    output = console.export_text()

    assert table.row_count == 2
    assert "2026-01-04T23:04:51Z" in output
    assert "-" in output
