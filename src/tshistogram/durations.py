"""Duration strings for bucket widths.

Accepts compound durations ("300ms", "1.5h", "2h45m") including day and week
units ("1d", "2w"). A bare "0" is allowed; whether a duration is usable as a
bucket width is decided by the caller.
"""
from __future__ import annotations

import re
from datetime import timedelta

# Unit -> microseconds
_UNIT_MICROS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
    "d": 86_400_000_000,
    "w": 604_800_000_000,
}

_TERM = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h|d|w)"
_TERM_RE = re.compile(_TERM)
_DURATION_RE = re.compile(rf"([-+]?)((?:{_TERM})+)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration string into a timedelta.

    Args:
        text: Duration such as "5m", "1h30m", "0.5s", "-2h" or "0"

    Returns:
        The parsed duration (may be zero or negative)

    Raises:
        ValueError: If the string is not a valid duration
    """
    s = text.strip()
    if s in ("0", "+0", "-0"):
        return timedelta(0)

    m = _DURATION_RE.fullmatch(s)
    if not m:
        raise ValueError(f"invalid duration {text!r}")

    micros = 0.0
    for value, unit in _TERM_RE.findall(m.group(2)):
        micros += float(value) * _UNIT_MICROS[unit]

    result = timedelta(microseconds=round(micros))
    return -result if m.group(1) == "-" else result
