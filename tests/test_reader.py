from pathlib import Path

import pytest

from npma.errors import LogSourceError
from npma.services.reader import (
    read_strings_from,
    read_strings_from_file,
    read_strings_from_stdin,
)


async def collect(lines) -> list[str]:
    return [line async for line in lines]


@pytest.mark.asyncio
async def test_read_strings_from_all_not_empty() -> None:
    """Line endings are stripped for both \\n and \\r\\n."""
    result = await collect(read_strings_from(["a\n", "b\r\n", "c"], lambda _: True))
    assert result == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_read_strings_from_keeps_empty_with_permissive_predicate() -> None:
    """The predicate decides which lines survive."""
    result = await collect(read_strings_from(["a\n", "\n", "b"], lambda _: True))
    assert result == ["a", "", "b"]


@pytest.mark.asyncio
async def test_read_strings_from_drops_empty_by_default() -> None:
    """Empty lines are removed, including Windows line endings."""
    result = await collect(read_strings_from(["a\r\n", "\r\n", "b"]))
    assert result == ["a", "b"]


@pytest.mark.asyncio
async def test_read_strings_from_file(tmp_path: Path) -> None:
    """Non-empty lines of a file come back in order."""
    log_file = tmp_path / "proxy.log"
    log_file.write_bytes(b"a\n\nb\r\nc")
    lines = await read_strings_from_file(log_file)
    assert await collect(lines) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_read_strings_from_file_invalid_utf8(tmp_path: Path) -> None:
    """Undecodable bytes are replaced instead of aborting the read."""
    log_file = tmp_path / "proxy.log"
    log_file.write_bytes(b"method: G\xffT\nstatus: 200\n")
    lines = await collect(await read_strings_from_file(log_file))
    assert lines[0] == "method: G\ufffdT"
    assert lines[1] == "status: 200"


@pytest.mark.asyncio
async def test_read_strings_from_missing_file(tmp_path: Path) -> None:
    """Opening a missing file fails before any line is read."""
    missing = tmp_path / "nope.log"
    with pytest.raises(LogSourceError, match="nope.log' cannot be opened") as exc_info:
        await read_strings_from_file(missing)
    assert isinstance(exc_info.value.__cause__, FileNotFoundError)


@pytest.mark.asyncio
async def test_read_strings_from_directory(tmp_path: Path) -> None:
    """A directory is not a readable log file."""
    with pytest.raises(LogSourceError):
        await read_strings_from_file(tmp_path)


@pytest.mark.asyncio
async def test_read_strings_from_stdin_stream() -> None:
    """Standard input is filtered the same way as files."""
    result = await collect(read_strings_from_stdin(iter(["x\n", "\n", "y\n"])))
    assert result == ["x", "y"]


@pytest.mark.asyncio
async def test_read_strings_from_file_unknown_encoding(tmp_path: Path) -> None:
    """An unknown encoding is reported like any other open failure."""
    log_file = tmp_path / "proxy.log"
    log_file.write_text("method: GET\n", encoding="utf-8")
    with pytest.raises(LogSourceError, match="cannot be opened") as exc_info:
        await read_strings_from_file(log_file, encoding="bogus-enc")
    assert isinstance(exc_info.value.__cause__, LookupError)


@pytest.mark.asyncio
async def test_read_strings_from_file_in_small_batches(tmp_path: Path) -> None:
    """Lines keep their order when the file is read over many batches."""
    log_file = tmp_path / "proxy.log"
    expected = [f"request: /item/{n}" for n in range(500)]
    log_file.write_text("\n\n".join(expected) + "\n", encoding="utf-8")
    lines = await collect(await read_strings_from_file(log_file, hint=16))
    assert lines == expected
