"""Schemas for parsed log data - pure data, no I/O."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from collections.abc import Hashable
from typing import Generic, TypeVar

from .constants import (
    EPOCH,
    MAX_LENGTH,
    MAX_STATUS,
    RECOGNIZED_KEYS,
    TIMESTAMP_FORMAT,
    TRIM_VALUE_CHARS,
    VALUE_SEPARATOR,
)

logger = logging.getLogger(__name__)

_UNSIGNED = re.compile(r"\+?[0-9]+")

T = TypeVar("T", bound=Hashable)


class LogParameter(str, Enum):
    """Entry field targeted by filtering or grouping.

    The value of each member is the token accepted on the command line.
    """

    TIME = "time"
    DATE = "date"
    AGENT = "agent"
    CLIENT_IP = "client"
    STATUS = "status"
    METHOD = "method"
    SCHEMA = "schema"
    REQUEST = "req"
    REFERRER = "ref"

    @property
    def token(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Column header used when rendering this parameter."""
        match self:
            case LogParameter.TIME:
                return "Time"
            case LogParameter.DATE:
                return "Date"
            case LogParameter.AGENT:
                return "Agent"
            case LogParameter.CLIENT_IP:
                return "Client IP"
            case LogParameter.STATUS:
                return "Status"
            case LogParameter.METHOD:
                return "Method"
            case LogParameter.SCHEMA:
                return "Schema"
            case LogParameter.REQUEST:
                return "Request"
            case LogParameter.REFERRER:
                return "Referrer"

    @classmethod
    def from_token(cls, token: str) -> "LogParameter":
        """Look up a parameter by its command line token.

        Raises:
            ValueError: If the token is unknown.
        """
        return cls(token)

    @classmethod
    def tokens(cls) -> list[str]:
        return [p.value for p in cls]

    def __str__(self) -> str:
        return self.value


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS +HH:MM``."""
    offset = ts.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{ts:%Y-%m-%d %H:%M:%S} {sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_date(ts: datetime) -> str:
    return f"{ts.year}-{ts.month:02d}-{ts.day:02d}"


def split_fields(content: list[str]) -> dict[str, str]:
    """Build a key/value map from ``key: value`` lines.

    Only the first separator splits a line, so values keep embedded colons.
    Lines without a separator are ignored; a repeated key keeps the last value.
    """
    fields: dict[str, str] = {}
    for line in content:
        key, sep, value = line.partition(VALUE_SEPARATOR)
        if not sep:
            continue
        fields[key.strip()] = value.strip(TRIM_VALUE_CHARS)
    return fields


def parse_timestamp(value: str) -> datetime:
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        logger.debug("Unparseable timestamp '%s', using epoch", value)
        return EPOCH


def parse_unsigned(value: str, maximum: int, name: str) -> int:
    """Parse an unsigned integer, defaulting to 0 when invalid or out of range."""
    if _UNSIGNED.fullmatch(value):
        number = int(value)
        if number <= maximum:
            return number
    if value:
        logger.debug("Unparseable %s '%s', using 0", name, value)
    return 0


@dataclass(frozen=True)
class LogEntry:
    """One access event reconstructed from a record."""

    line: int
    agent: str = ""
    clientip: str = ""
    method: str = ""
    request: str = ""
    referrer: str = ""
    schema: str = ""
    length: int = 0
    status: int = 0
    timestamp: datetime = field(default=EPOCH)

    @classmethod
    def from_lines(cls, content: list[str], line: int) -> LogEntry | None:
        """Build an entry from the raw lines of one record.

        Args:
            content: ``key: value`` lines accumulated for the record.
            line: Ordinal of the record in the input.

        Returns:
            The entry, or None when ``content`` is empty. Missing or
            malformed fields fall back to their defaults.
        """
        if not content:
            return None

        fields = split_fields(content)
        unknown = fields.keys() - RECOGNIZED_KEYS
        if unknown:
            logger.debug("Record %d: ignoring keys %s", line, sorted(unknown))

        return cls(
            line=line,
            agent=fields.get("agent", "").strip('"'),
            clientip=fields.get("clientip", ""),
            method=fields.get("method", ""),
            request=fields.get("request", ""),
            referrer=fields.get("referrer", ""),
            schema=fields.get("schema", ""),
            length=parse_unsigned(fields.get("length", ""), MAX_LENGTH, "length"),
            status=parse_unsigned(fields.get("status", ""), MAX_STATUS, "status"),
            timestamp=parse_timestamp(fields.get("timestamp", "")),
        )

    def value_of(self, parameter: LogParameter) -> str:
        """String form of the field selected by ``parameter``."""
        match parameter:
            case LogParameter.TIME:
                return format_timestamp(self.timestamp)
            case LogParameter.DATE:
                return format_date(self.timestamp)
            case LogParameter.AGENT:
                return self.agent
            case LogParameter.CLIENT_IP:
                return self.clientip
            case LogParameter.STATUS:
                return str(self.status)
            case LogParameter.METHOD:
                return self.method
            case LogParameter.SCHEMA:
                return self.schema
            case LogParameter.REQUEST:
                return self.request
            case LogParameter.REFERRER:
                return self.referrer

    def group_key(self, parameter: LogParameter) -> Hashable:
        """Typed projection used as a grouping key.

        Time groups by the full timestamp and Status by the numeric code;
        every other parameter groups by its string form.
        """
        match parameter:
            case LogParameter.TIME:
                return self.timestamp
            case LogParameter.STATUS:
                return self.status
            case _:
                return self.value_of(parameter)


@dataclass
class GroupedParameter(Generic[T]):
    """A grouping key and the number of entries sharing it."""

    parameter: T
    count: int
