"""Constants describing the nginx proxy manager access-log record layout."""
from datetime import datetime, timezone

# A line containing this marker closes the current record
SENTINEL = "pattern: NGINXPROXYACCESS"

VALUE_SEPARATOR = ":"
TRIM_VALUE_CHARS = VALUE_SEPARATOR + " \t\r\n\f\v"

TIMESTAMP_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

# Value used when a timestamp cannot be parsed
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RECOGNIZED_KEYS = frozenset(
    {
        "request",
        "timestamp",
        "agent",
        "clientip",
        "method",
        "schema",
        "length",
        "status",
        "referrer",
    }
)

MAX_STATUS = 0xFFFF
MAX_LENGTH = 0xFFFF_FFFF_FFFF_FFFF
