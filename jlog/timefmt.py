"""Timestamp formatting for the worklog `started` field.

Jira rejects anything but `YYYY-MM-DDTHH:MM:SS.mmm±HHMM`: exactly three
fractional digits and a signed four-digit offset without a colon.
"""

import re
from datetime import datetime

INPUT_PATTERNS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
OUTPUT_PATTERN = "%Y-%m-%dT%H:%M:%S.{millis}%z"

_OFFSET_RE = re.compile(r"^[+-]\d{4}$")
# strptime's %z also accepts "Z" and "+HH:MM:SS"; only numeric offsets are allowed here.
_NUMERIC_OFFSET_RE = re.compile(r"[+-]\d{2}:?\d{2}$")


class ParseError(ValueError):
    """Raised when a start time does not match the expected timestamp shape."""


def is_valid_offset(offset):
    return isinstance(offset, str) and bool(_OFFSET_RE.match(offset))


def validate_date(value):
    """Return True if value is a real calendar date in YYYY-MM-DD form."""
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return len(value) == 10


def validate_time(value):
    """Return True if value is a wall-clock time in HH:MM form."""
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        return False
    return len(value) == 5


def normalize(date_str, time_str, utc_offset):
    """Build a timestamp from local date, time and a fixed offset.

    Purely textual: seconds and milliseconds are always zero and the offset
    is used as given.

        >>> normalize("2024-02-01", "16:00", "-0500")
        '2024-02-01T16:00:00.000-0500'
    """
    return f"{date_str}T{time_str}:00.000{utc_offset}"


def reparse(value, input_patterns=INPUT_PATTERNS, output_pattern=OUTPUT_PATTERN):
    """Parse an already formatted timestamp and re-emit it in canonical form.

    Fractional seconds are optional on input; an explicit numeric offset is
    required. Raises ParseError with the parser's message on mismatch.
    """
    value = value.strip()
    if not _NUMERIC_OFFSET_RE.search(value):
        raise ParseError(f"time data {value!r} has no numeric UTC offset (e.g. +0000)")

    parsed = None
    error = None
    for pattern in input_patterns:
        try:
            parsed = datetime.strptime(value, pattern)
            break
        except ValueError as e:
            error = e
    if parsed is None:
        raise ParseError(str(error))

    millis = f"{parsed.microsecond // 1000:03d}"
    return parsed.strftime(output_pattern.format(millis=millis))
