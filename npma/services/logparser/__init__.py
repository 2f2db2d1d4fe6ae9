"""Log parser module - record segmentation and field extraction, no I/O."""
from .logparser import LogParser
from .schemas import GroupedParameter, LogEntry, LogParameter

__all__ = ["LogParser", "LogEntry", "LogParameter", "GroupedParameter"]
