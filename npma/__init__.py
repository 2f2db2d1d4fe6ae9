"""Nginx proxy manager access log analyzer."""

from npma.errors import LogSourceError, NpmaError
from npma.services.aggregation import build_report, calculate_percent
from npma.services.filter import Criteria
from npma.services.logparser import GroupedParameter, LogEntry, LogParameter, LogParser

__all__ = [
    "Criteria",
    "GroupedParameter",
    "LogEntry",
    "LogParameter",
    "LogParser",
    "LogSourceError",
    "NpmaError",
    "build_report",
    "calculate_percent",
]
