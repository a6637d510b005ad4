"""Resolve a (format tag, token) pair into an aware datetime.

A tag is one of:
- empty or "guess": hand the token to the guess engine
- an epoch scale ("unix", "unix-milli", "unix-micro")
- a catalog layout name ("rfc3339", "stamp", ...), case-insensitive
- anything else: a strptime pattern applied verbatim

Resolution is pure. The time zone used for zone-less tokens and the year
used for year-less patterns are explicit arguments.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from tshistogram.errors import LayoutMismatch, MalformedEpoch
from tshistogram.timefmt.layouts import AUTO_TAGS, EPOCH_SCALES, LAYOUTS, UNIX_EPOCH, Layout

# Year used for year-less patterns when the caller gives none (strptime's own default)
DEFAULT_YEAR = 1900

# Fraction immediately after a seconds field, e.g. "15:04:05.123456789"
_FRACTION_RE = re.compile(r"(?<=:\d\d)[.,](\d+)")

# Zone abbreviation such as MST or CEST (all caps, standalone)
_ZONE_ABBREV_RE = re.compile(r"(?<![A-Za-z])[A-Z]{3,5}(?![A-Za-z])")

_DIRECTIVE_RE = re.compile(r"%(.)")


def resolve(
    tag: str,
    token: str,
    *,
    tz: Optional[tzinfo] = None,
    year: Optional[int] = None,
) -> datetime:
    """Resolve ``token`` using the rule selected by ``tag``.

    Args:
        tag: Format tag (empty for guessing)
        token: The text to parse
        tz: Zone for tokens that carry no offset (default UTC)
        year: Year for patterns without a year directive

    Returns:
        Timezone-aware datetime

    Raises:
        MalformedEpoch: Epoch tag with a non-numeric or out-of-range token
        LayoutMismatch: Token does not conform to the layout or pattern
        UnknownFormat: Guessing found no matching rule or candidate
    """
    key = tag.lower()
    if key in AUTO_TAGS:
        from tshistogram.timefmt.guess import guess

        return guess(token, tz=tz, year=year)

    scale = EPOCH_SCALES.get(key)
    if scale is not None:
        return parse_epoch(token, scale)

    layout = LAYOUTS.get(key)
    if layout is not None:
        return parse_layout(layout, token, tz=tz, year=year)

    return parse_pattern(tag, token, tz=tz, year=year)


def parse_epoch(token: str, scale: int) -> datetime:
    """Parse a (possibly fractional) epoch value counted in ``scale`` microseconds."""
    try:
        value = float(token)
    except ValueError:
        raise MalformedEpoch(f"failed to parse epoch time: {token}") from None
    if not math.isfinite(value):
        raise MalformedEpoch(f"failed to parse epoch time: {token}")

    try:
        return UNIX_EPOCH + timedelta(microseconds=int(value * scale))
    except OverflowError:
        raise MalformedEpoch(f"epoch time out of range: {token}") from None


def parse_layout(
    layout: Layout,
    token: str,
    *,
    tz: Optional[tzinfo] = None,
    year: Optional[int] = None,
) -> datetime:
    """Parse ``token`` against a catalog layout."""
    micros = 0
    if layout.has_seconds:
        m = _FRACTION_RE.search(token)
        if m:
            digits = m.group(1)
            if layout.fraction and len(digits) != layout.fraction:
                raise LayoutMismatch(f"{token!r} does not match {layout.title}")
            token = token[: m.start()] + token[m.end():]
            micros = int(digits[:6].ljust(6, "0"))
        elif layout.fraction:
            raise LayoutMismatch(f"{token!r} does not match {layout.title}")

    try:
        dt = _strptime(token, layout.pattern, tz, year)
    except LayoutMismatch:
        raise LayoutMismatch(f"{token!r} does not match {layout.title}") from None
    return dt.replace(microsecond=micros)


def parse_pattern(
    pattern: str,
    token: str,
    *,
    tz: Optional[tzinfo] = None,
    year: Optional[int] = None,
) -> datetime:
    """Parse ``token`` against a literal strptime pattern."""
    return _strptime(token, pattern, tz, year)


def has_year(pattern: str) -> bool:
    """Check whether a strptime pattern carries a year directive."""
    return any(d in "Yy" for d in _DIRECTIVE_RE.findall(pattern))


def _strptime(token: str, pattern: str, tz: Optional[tzinfo], year: Optional[int]) -> datetime:
    if "%Z" in pattern:
        # Abbreviations carry no offset; they resolve with a zero offset.
        m = _ZONE_ABBREV_RE.search(token)
        if m is None:
            raise LayoutMismatch(f"no zone abbreviation in {token!r}")
        token = token[: m.start()] + "+0000" + token[m.end():]
        pattern = pattern.replace("%Z", "%z")

    if not has_year(pattern):
        token = f"{token}|{year or DEFAULT_YEAR}"
        pattern = f"{pattern}|%Y"

    try:
        dt = datetime.strptime(token, pattern)
    except ValueError as e:
        raise LayoutMismatch(str(e)) from None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz or timezone.utc)
    return dt
