import pytest

from npma.services.aggregation import (
    build_report,
    calculate_percent,
    group,
    human_bytes,
    rank_and_limit,
    total_traffic,
)
from npma.services.logparser import GroupedParameter, LogEntry, LogParameter, LogParser


@pytest.mark.parametrize(
    "value, total, expected",
    [
        (1, 100, 1.0),
        (0, 100, 0.0),
        (100, 100, 100.0),
        (50, 100, 50.0),
        (20, 100, 20.0),
        (5, 0, 0.0),
        (0, 0, 0.0),
    ],
)
def test_calculate_percent(value: int, total: int, expected: float) -> None:
    """Percent of total, guarded against a zero total."""
    assert calculate_percent(value, total) == expected


@pytest.fixture
def abc_entries() -> list[LogEntry]:
    return [
        LogEntry(line=0, method="A"),
        LogEntry(line=1, method="A"),
        LogEntry(line=2, method="B"),
    ]


def test_group_counts(abc_entries: list[LogEntry]) -> None:
    """Entries are counted per projected key in first-seen order."""
    groups = group(abc_entries, lambda e: e.method)
    assert groups == [GroupedParameter("A", 2), GroupedParameter("B", 1)]


def test_group_empty() -> None:
    """Nothing to group gives no groups."""
    assert group([], lambda e: e.method) == []


def test_rank_and_limit_sorts_descending() -> None:
    """Highest counts come first; ties keep first-seen order."""
    groups = [
        GroupedParameter("x", 1),
        GroupedParameter("y", 3),
        GroupedParameter("z", 1),
        GroupedParameter("w", 2),
    ]
    ranked = rank_and_limit(groups)
    assert [g.parameter for g in ranked] == ["y", "w", "x", "z"]
    assert [g.parameter for g in rank_and_limit(groups, 2)] == ["y", "w"]


def test_rank_and_limit_larger_than_groups() -> None:
    """A limit above the group count keeps everything."""
    groups = [GroupedParameter("x", 1)]
    assert rank_and_limit(groups, 10) == groups


def test_report_percentages(abc_entries: list[LogEntry]) -> None:
    """Percentages are relative to all grouped entries."""
    report = build_report(abc_entries, LogParameter.METHOD)
    assert report.total == 3
    assert [(r.parameter, r.count) for r in report.rows] == [("A", 2), ("B", 1)]
    assert [f"{r.percent:.2f}" for r in report.rows] == ["66.67", "33.33"]


def test_report_limit_keeps_full_total(abc_entries: list[LogEntry]) -> None:
    """Truncating to the top group does not change its percentage."""
    report = build_report(abc_entries, LogParameter.METHOD, limit=1)
    assert len(report) == 1
    assert report.total == 3
    assert report.rows[0].parameter == "A"
    assert f"{report.rows[0].percent:.2f}" == "66.67"


def test_report_by_status_and_date(sample_lines: list[str]) -> None:
    """Grouping uses typed keys for status and day strings for date."""
    entries = LogParser().convert_lines(sample_lines)

    by_status = build_report(entries, LogParameter.STATUS)
    assert [(r.parameter, r.count) for r in by_status.rows] == [(200, 2), (302, 1), (404, 1)]

    by_date = build_report(entries, LogParameter.DATE)
    assert [(r.parameter, r.count) for r in by_date.rows] == [("2023-10-10", 2), ("2023-10-11", 2)]
    assert [r.percent for r in by_date.rows] == [50.0, 50.0]


def test_report_empty() -> None:
    """An empty input gives an empty report with a zero total."""
    report = build_report([], LogParameter.CLIENT_IP, limit=5)
    assert report.total == 0
    assert report.rows == []


def test_total_traffic(sample_lines: list[str]) -> None:
    """Traffic is the sum of all lengths."""
    entries = LogParser().convert_lines(sample_lines)
    assert total_traffic(entries) == 3584
    assert total_traffic([]) == 0


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.00 KiB"),
        (1536, "1.50 KiB"),
        (3584, "3.50 KiB"),
        (5 * 1024 ** 2, "5.00 MiB"),
        (3 * 1024 ** 4, "3.00 TiB"),
    ],
)
def test_human_bytes(num_bytes: int, expected: str) -> None:
    """Byte counts use binary units with two decimals."""
    assert human_bytes(num_bytes) == expected
