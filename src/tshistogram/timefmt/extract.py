"""Split a line into a leading timestamp and a trailing series label."""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from tshistogram.errors import NoTimestampFound, ParseFailure
from tshistogram.timefmt.resolver import resolve


def extract_leading_instant(
    line: str,
    tag: str,
    *,
    tz: Optional[tzinfo] = None,
    year: Optional[int] = None,
) -> tuple[datetime, str]:
    """Find the shortest run of leading fields that resolves to an instant.

    Fields are whitespace-separated. Prefixes of 1, 2, 3, ... fields are
    rejoined with single spaces and resolved in turn; the first success wins
    and the remaining fields, rejoined the same way, become the label.

    Example:
        >>> extract_leading_instant("Jan  2 15:04:05 web-1", "stamp")[1]
        'web-1'

    Raises:
        NoTimestampFound: If no prefix resolves
    """
    fields = line.split()
    for n in range(1, len(fields) + 1):
        prefix = " ".join(fields[:n])
        try:
            instant = resolve(tag, prefix, tz=tz, year=year)
        except ParseFailure:
            continue
        return instant, " ".join(fields[n:])
    raise NoTimestampFound(f"no timestamp in line: {line!r}")
