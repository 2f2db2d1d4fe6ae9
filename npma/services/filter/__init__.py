"""Filter criteria for parsed log entries."""
from .criteria import Criteria

__all__ = ["Criteria"]
