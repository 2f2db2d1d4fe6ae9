"""Exception definitions."""
from __future__ import annotations


class NpmaError(RuntimeError):
    """Base class for errors surfaced to the command line."""


class LogSourceError(NpmaError):
    """Exception when the log input cannot be opened."""
