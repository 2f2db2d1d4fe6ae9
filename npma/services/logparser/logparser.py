from collections.abc import AsyncIterable, Iterable
import logging

from npma.services.filter import Criteria

from .constants import SENTINEL, VALUE_SEPARATOR
from .schemas import LogEntry, LogParameter


logger = logging.getLogger(__name__)


class LogParser:
    """Rebuilds access-log entries from multi-line ``key: value`` records.

    Records are separated by a line containing the sentinel marker. The
    marker line itself is dropped, as is any line that ends with the
    separator (a key with no value). A trailing record without a closing
    marker still produces an entry.
    """

    def __init__(self, sentinel: str = SENTINEL) -> None:
        """Create a parser.

        Args:
            sentinel (str, optional): Substring that terminates a record.
                Defaults to ``pattern: NGINXPROXYACCESS``.
        """
        self.sentinel = sentinel

        # Statistics
        self.records: int = 0
        self.skipped_lines: int = 0
        self.filtered_entries: int = 0

        self._content: list[str] = []

        logger.debug("Record sentinel: %s", self.sentinel)

    def records_count(self) -> int:
        """Return the number of records seen so far."""
        return self.records

    def skipped_lines_count(self) -> int:
        """Return the number of lines dropped as empty assignments."""
        return self.skipped_lines

    def filtered_entries_count(self) -> int:
        """Return the number of entries rejected by the filter."""
        return self.filtered_entries

    def reset(self) -> None:
        self.records = 0
        self.skipped_lines = 0
        self.filtered_entries = 0
        self._content = []

    def feed(self, line: str) -> LogEntry | None:
        """Consume one line and return an entry when it closes a record."""
        if self.sentinel in line:
            entry = LogEntry.from_lines(self._content, self.records)
            self._content = []
            self.records += 1
            return entry
        if line.endswith(VALUE_SEPARATOR):
            self.skipped_lines += 1
            return None
        self._content.append(line)
        return None

    def finish(self) -> LogEntry | None:
        """Flush a trailing record that had no closing sentinel."""
        entry = LogEntry.from_lines(self._content, self.records)
        self._content = []
        return entry

    def _accept(
        self,
        result: list[LogEntry],
        entry: LogEntry | None,
        criteria: Criteria,
        parameter: LogParameter | None,
    ) -> None:
        if entry is None:
            return
        if criteria.allow_entry(entry, parameter):
            result.append(entry)
        else:
            self.filtered_entries += 1

    def convert_lines(
        self,
        lines: Iterable[str],
        criteria: Criteria | None = None,
        parameter: LogParameter | None = None,
    ) -> list[LogEntry]:
        """Parse an in-memory sequence of lines.

        Args:
            lines: Non-empty input lines in source order.
            criteria: Filter applied to each entry. Defaults to allow-all.
            parameter: Field the filter is evaluated against. When None every
                entry is kept.

        Returns:
            Entries that passed the filter, in input order.
        """
        criteria = criteria or Criteria.empty()
        self.reset()
        result: list[LogEntry] = []
        for line in lines:
            self._accept(result, self.feed(line), criteria, parameter)
        self._accept(result, self.finish(), criteria, parameter)
        self._log_summary(result)
        return result

    async def convert(
        self,
        lines: AsyncIterable[str],
        criteria: Criteria | None = None,
        parameter: LogParameter | None = None,
    ) -> list[LogEntry]:
        """Async counterpart of :meth:`convert_lines` for streamed input."""
        criteria = criteria or Criteria.empty()
        self.reset()
        result: list[LogEntry] = []
        async for line in lines:
            self._accept(result, self.feed(line), criteria, parameter)
        self._accept(result, self.finish(), criteria, parameter)
        self._log_summary(result)
        return result

    def _log_summary(self, result: list[LogEntry]) -> None:
        logger.debug(
            "Parsed %d entries (records=%d, skipped_lines=%d, filtered=%d)",
            len(result),
            self.records,
            self.skipped_lines,
            self.filtered_entries,
        )
