"""Aggregation of parsed entries into grouped frequency reports.

This module handles:
- Grouping entries by a projection and counting group sizes
- Ranking groups by count and truncating to the top N
- Percentages relative to the full, untruncated population
- Total traffic over all entries
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from npma.services.logparser.schemas import GroupedParameter, LogEntry, LogParameter

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)

BYTE_UNITS = ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]


def calculate_percent(value: int, total: int) -> float:
    """Return ``value`` as a percentage of ``total``, or 0.0 when total is 0."""
    if total == 0:
        return 0.0
    return (value / total) * 100.0


def group(
    entries: Iterable[LogEntry], project: Callable[[LogEntry], K]
) -> list[GroupedParameter[K]]:
    """Count entries per key returned by ``project``.

    Groups come back in the order their key was first seen.
    """
    counts: Counter[K] = Counter(project(entry) for entry in entries)
    return [GroupedParameter(parameter=key, count=count) for key, count in counts.items()]


def rank_and_limit(
    groups: Iterable[GroupedParameter[K]], limit: int | None = None
) -> list[GroupedParameter[K]]:
    """Sort groups by descending count and keep the first ``limit``.

    The sort is stable, so groups with equal counts keep their first-seen order.
    """
    ranked = sorted(groups, key=lambda g: g.count, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


@dataclass
class GroupedRow:
    """One rendered line of a grouped report."""

    parameter: Hashable
    count: int
    percent: float


@dataclass
class GroupedReport:
    """Ranked groups for one parameter.

    ``total`` is the number of grouped entries before any truncation, so
    percentages always refer to the whole population.
    """

    parameter: LogParameter
    total: int
    limit: int | None = None
    rows: list[GroupedRow] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def build_report(
    entries: Sequence[LogEntry],
    parameter: LogParameter,
    limit: int | None = None,
) -> GroupedReport:
    """Group ``entries`` by ``parameter`` and rank the result.

    Args:
        entries: Entries to summarise.
        parameter: Field to group by.
        limit: Keep only the highest-count groups. None keeps all.
    """
    groups = group(entries, lambda e: e.group_key(parameter))
    total = sum(g.count for g in groups)
    ranked = rank_and_limit(groups, limit)
    logger.debug(
        "Grouped %d entries by %s into %d groups (showing %d)",
        total,
        parameter.token,
        len(groups),
        len(ranked),
    )
    return GroupedReport(
        parameter=parameter,
        total=total,
        limit=limit,
        rows=[
            GroupedRow(g.parameter, g.count, calculate_percent(g.count, total))
            for g in ranked
        ],
    )


def total_traffic(entries: Iterable[LogEntry]) -> int:
    """Sum of ``length`` over all entries, in bytes."""
    return sum(e.length for e in entries)


def human_bytes(num_bytes: int) -> str:
    """Format a byte count with binary units, e.g. ``1.50 KiB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = float(num_bytes)
    for unit in BYTE_UNITS:
        value /= 1024
        if value < 1024:
            return f"{value:.2f} {unit}"
    return f"{value:.2f} {BYTE_UNITS[-1]}"
