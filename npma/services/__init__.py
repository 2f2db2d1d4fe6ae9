"""Services layer - parsing, filtering, aggregation and line sources."""
from .logparser import LogParser
from .filter import Criteria

__all__ = ["LogParser", "Criteria"]
