"""Line sources feeding the log parser.

Lines are delivered in source order with the trailing newline removed.
Empty lines never reach the parser.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from pathlib import Path
from typing import Any

import aiofiles

from npma.errors import LogSourceError

logger = logging.getLogger(__name__)

# Approximate number of characters fetched per worker-thread read
READ_HINT = 64 * 1024


def not_empty(line: str) -> bool:
    return line != ""


async def _aiter(lines: Iterable[str] | AsyncIterable[str]) -> AsyncIterator[str]:
    if isinstance(lines, AsyncIterable):
        async for line in lines:
            yield line
    else:
        for line in lines:
            yield line


async def read_strings_from(
    lines: Iterable[str] | AsyncIterable[str],
    predicate: Callable[[str], bool] = not_empty,
) -> AsyncIterator[str]:
    """Strip line endings and yield the lines accepted by ``predicate``."""
    async for raw in _aiter(lines):
        line = raw.rstrip("\r\n")
        if predicate(line):
            yield line


async def read_batches(file: Any, hint: int = READ_HINT) -> AsyncIterator[str]:
    """Yield lines of ``file`` fetched ``hint`` characters at a time."""
    while True:
        batch = await file.readlines(hint)
        if not batch:
            return
        for line in batch:
            yield line


async def _read_and_close(file: Any, path: str, hint: int) -> AsyncIterator[str]:
    count = 0
    try:
        async for line in read_strings_from(read_batches(file, hint)):
            count += 1
            yield line
    finally:
        await file.close()
        logger.debug("Read %d lines from %s", count, path)


async def read_strings_from_file(
    path: Path | str, encoding: str = "utf-8", hint: int = READ_HINT
) -> AsyncIterator[str]:
    """Open ``path`` and return an async iterator over its non-empty lines.

    Raises:
        LogSourceError: If the file cannot be opened. Raised here, before
            any line is read.
    """
    try:
        file = await aiofiles.open(path, "r", encoding=encoding, errors="replace")
    except (OSError, LookupError) as e:
        raise LogSourceError(f"Log file '{path}' cannot be opened") from e
    logger.debug("Opened log file %s", path)
    return _read_and_close(file, str(path), hint)


def read_strings_from_stdin(
    stream: Iterable[str] | AsyncIterable[str] | None = None,
) -> AsyncIterator[str]:
    """Return an async iterator over the non-empty lines of standard input."""
    return read_strings_from(aiofiles.stdin if stream is None else stream)
