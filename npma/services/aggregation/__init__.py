"""Grouping and traffic aggregation over parsed entries."""
from .service import (
    GroupedReport,
    GroupedRow,
    build_report,
    calculate_percent,
    group,
    human_bytes,
    rank_and_limit,
    total_traffic,
)

__all__ = [
    "GroupedReport",
    "GroupedRow",
    "build_report",
    "calculate_percent",
    "group",
    "human_bytes",
    "rank_and_limit",
    "total_traffic",
]
