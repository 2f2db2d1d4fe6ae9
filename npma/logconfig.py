"""Logging setup for the command line."""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from npma.config.settings import LogSettings


def configure_logging(settings: LogSettings) -> None:
    """Route log records to stderr through a rich handler."""
    handler = RichHandler(
        console=Console(stderr=True),
        level=settings.level,
        show_level=True,
        show_path=False,
        show_time=False,
        rich_tracebacks=settings.rich_tracebacks,
    )
    logging.basicConfig(
        level=settings.level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
