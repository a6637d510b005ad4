"""Named timestamp layouts and epoch scales.

Each layout is a strptime pattern selected by a lowercase tag such as
``rfc3339`` or ``stampmilli``. Fractional seconds are handled outside the
pattern (see ``Layout.fraction``): any layout with a seconds field accepts an
optional fraction, and nanosecond digits do not fit ``%f``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Layout:
    """A named layout from the catalog.

    Attributes:
        name: Lowercase tag used to select the layout.
        title: Display name used in help output.
        reference: The reference instant 2006-01-02 15:04:05 -0700 in this layout.
        pattern: strptime pattern, without any fractional-second directive.
        fraction: 0 when a fraction after the seconds field is optional and of
            any length; N > 0 when exactly N fractional digits are required.
        iso: Render with ``isoformat`` instead of strftime (RFC 3339 family).
    """

    name: str
    title: str
    reference: str
    pattern: str
    fraction: int = 0
    iso: bool = False

    @property
    def has_seconds(self) -> bool:
        return "%S" in self.pattern

    def format(self, dt: datetime) -> str:
        """Render ``dt`` in this layout."""
        if self.iso:
            text = dt.isoformat(timespec="auto" if self.name == "rfc3339nano" else "seconds")
            if dt.utcoffset() is not None and not dt.utcoffset():
                text = text[:-6] + "Z"
            return text
        text = dt.strftime(self.pattern)
        if self.fraction:
            digits = f"{dt.microsecond:06d}".ljust(self.fraction, "0")[: self.fraction]
            # Stamp layouts end with the seconds field.
            text = f"{text}.{digits}"
        return text


_CATALOG = (
    Layout("ansic", "ANSIC", "Mon Jan _2 15:04:05 2006", "%a %b %d %H:%M:%S %Y"),
    Layout("unixdate", "UnixDate", "Mon Jan _2 15:04:05 MST 2006", "%a %b %d %H:%M:%S %Z %Y"),
    Layout("rubydate", "RubyDate", "Mon Jan 02 15:04:05 -0700 2006", "%a %b %d %H:%M:%S %z %Y"),
    Layout("rfc822", "RFC822", "02 Jan 06 15:04 MST", "%d %b %y %H:%M %Z"),
    Layout("rfc822z", "RFC822Z", "02 Jan 06 15:04 -0700", "%d %b %y %H:%M %z"),
    Layout("rfc850", "RFC850", "Monday, 02-Jan-06 15:04:05 MST", "%A, %d-%b-%y %H:%M:%S %Z"),
    Layout("rfc1123", "RFC1123", "Mon, 02 Jan 2006 15:04:05 MST", "%a, %d %b %Y %H:%M:%S %Z"),
    Layout("rfc1123z", "RFC1123Z", "Mon, 02 Jan 2006 15:04:05 -0700", "%a, %d %b %Y %H:%M:%S %z"),
    Layout("rfc3339", "RFC3339", "2006-01-02T15:04:05Z07:00", "%Y-%m-%dT%H:%M:%S%z", iso=True),
    Layout("rfc3339nano", "RFC3339Nano", "2006-01-02T15:04:05.999999999Z07:00", "%Y-%m-%dT%H:%M:%S%z", iso=True),
    Layout("kitchen", "Kitchen", "3:04PM", "%I:%M%p"),
    Layout("stamp", "Stamp", "Jan _2 15:04:05", "%b %d %H:%M:%S"),
    Layout("stampmilli", "StampMilli", "Jan _2 15:04:05.000", "%b %d %H:%M:%S", fraction=3),
    Layout("stampmicro", "StampMicro", "Jan _2 15:04:05.000000", "%b %d %H:%M:%S", fraction=6),
    Layout("stampnano", "StampNano", "Jan _2 15:04:05.000000000", "%b %d %H:%M:%S", fraction=9),
    Layout("datetime", "DateTime", "2006-01-02 15:04:05", "%Y-%m-%d %H:%M:%S"),
    Layout("dateonly", "DateOnly", "2006-01-02", "%Y-%m-%d"),
    Layout("timeonly", "TimeOnly", "15:04:05", "%H:%M:%S"),
)

LAYOUTS: Mapping[str, Layout] = MappingProxyType({layout.name: layout for layout in _CATALOG})

# Epoch tag -> microseconds per unit
EPOCH_SCALES: Mapping[str, int] = MappingProxyType({
    "unix": 1_000_000,
    "unix-milli": 1_000,
    "unix-micro": 1,
})

EPOCH_REFERENCES: Mapping[str, tuple[str, str]] = MappingProxyType({
    "unix": ("Unix", "1136239445"),
    "unix-milli": ("Unix-Milli", "1136239445000"),
    "unix-micro": ("Unix-Micro", "1136239445000000"),
})

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Tags that select format guessing
AUTO_TAGS = frozenset({"", "guess"})


def layout_help() -> str:
    """Return the format table shown at the end of ``--help``."""
    rows = [(layout.title, f'"{layout.reference}"') for layout in _CATALOG]
    rows.extend((title, f'"{example}"') for title, example in EPOCH_REFERENCES.values())
    rows.append(("Guess", "(guess an appropriate format)"))
    width = max(len(title) for title, _ in rows)
    lines = ["Format Examples:"]
    lines.extend(f"    {title:<{width}} {example}" for title, example in rows)
    lines.append("")
    lines.append("    Any other value is used verbatim as a strptime pattern, e.g. '%Y/%m/%d %H:%M'.")
    return "\n".join(lines)
