"""Table rendering for scan results."""
from __future__ import annotations

from collections.abc import Hashable, Iterable
from datetime import datetime

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from npma.services.aggregation import GroupedReport, human_bytes
from npma.services.logparser.schemas import LogEntry, format_timestamp

console = Console(highlight=False)

ENTRY_COLUMNS = [
    "#",
    "Time",
    "Agent",
    "Client IP",
    "Status",
    "Method",
    "Schema",
    "Length",
    "Request",
    "Referrer",
]


def display_value(value: Hashable) -> str:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)


def _new_table(columns: list[str]) -> Table:
    table = Table(box=box.HORIZONTALS, header_style="bold")
    for column in columns:
        table.add_column(column)
    return table


def print_entries(entries: Iterable[LogEntry], out: Console | None = None) -> None:
    """Print entries as a table followed by the row count.

    Nothing is printed when there are no entries.
    """
    out = out or console
    table = _new_table(ENTRY_COLUMNS)
    for entry in entries:
        table.add_row(
            str(entry.line),
            format_timestamp(entry.timestamp),
            escape(entry.agent),
            escape(entry.clientip),
            str(entry.status),
            escape(entry.method),
            escape(entry.schema),
            str(entry.length),
            escape(entry.request),
            escape(entry.referrer),
        )
    total = table.row_count
    if total > 0:
        out.print(table)
        out.print(f"Total items: {total}")


def print_grouped(report: GroupedReport, out: Console | None = None) -> None:
    """Print grouped counts with their share of all grouped entries."""
    out = out or console
    table = _new_table([report.parameter.display_name, "Count", "%"])
    for row in report.rows:
        table.add_row(
            escape(display_value(row.parameter)),
            str(row.count),
            f"{row.percent:.2f}",
        )
    total = table.row_count
    if total > 0:
        out.print(table)
        out.print(f"Total items: {total}")


def print_traffic(total_bytes: int, out: Console | None = None) -> None:
    out = out or console
    out.print(f"Total traffic: {escape(human_bytes(total_bytes))}")
