"""Include/exclude regex filtering applied to a single entry field."""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from npma.services.logparser.schemas import LogEntry, LogParameter

logger = logging.getLogger(__name__)


def compile_pattern(pattern: str | None, side: str) -> re.Pattern[str] | None:
    """Compile ``pattern`` or return None when it is absent or invalid."""
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning("Ignoring invalid %s pattern '%s': %s", side, pattern, e)
        return None


class Criteria:
    """Compiled include/exclude pair.

    Construction never fails: a missing or invalid pattern disables its side
    of the filter. A value is allowed when it matches the include pattern (if
    any) and does not match the exclude pattern (if any), so exclude wins
    when both match.
    """

    def __init__(
        self,
        include_pattern: str | None = None,
        exclude_pattern: str | None = None,
    ) -> None:
        self.include_regex = compile_pattern(include_pattern, "include")
        self.exclude_regex = compile_pattern(exclude_pattern, "exclude")

    @classmethod
    def empty(cls) -> "Criteria":
        return cls()

    def allow(self, value: str) -> bool:
        if self.include_regex is not None and not self.include_regex.search(value):
            return False
        if self.exclude_regex is not None and self.exclude_regex.search(value):
            return False
        return True

    def allow_entry(self, entry: "LogEntry", parameter: "LogParameter | None") -> bool:
        """Evaluate the filter against the field of ``entry`` picked by ``parameter``.

        Without a parameter every entry is allowed.
        """
        if parameter is None:
            return True
        return self.allow(entry.value_of(parameter))

    def __repr__(self) -> str:
        include = self.include_regex.pattern if self.include_regex else None
        exclude = self.exclude_regex.pattern if self.exclude_regex else None
        return f"Criteria(include={include!r}, exclude={exclude!r})"
