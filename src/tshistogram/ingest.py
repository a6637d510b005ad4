"""Feed input lines through timestamp extraction into bins."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, Iterable, Optional

from tshistogram.errors import ParseFailure
from tshistogram.histogram.bins import Bins
from tshistogram.timefmt.extract import extract_leading_instant

SkipHandler = Callable[[str, ParseFailure], None]


@dataclass
class IngestStats:
    """Line counts for one pass."""

    parsed: int = 0
    skipped: int = 0


def ingest(
    lines: Iterable[str],
    bins: Bins,
    *,
    fmt: str,
    tz: Optional[tzinfo] = None,
    year: Optional[int] = None,
    on_skip: Optional[SkipHandler] = None,
) -> IngestStats:
    """Parse each line and count it in ``bins``.

    Lines are trimmed first. Lines without a resolvable leading timestamp
    (including blank lines) are skipped and passed to ``on_skip``.
    """
    stats = IngestStats()
    for raw in lines:
        line = raw.strip()
        try:
            instant, label = extract_leading_instant(line, fmt, tz=tz, year=year)
        except ParseFailure as e:
            stats.skipped += 1
            if on_skip is not None:
                on_skip(line, e)
            continue
        bins.add(instant, label)
        stats.parsed += 1
    return stats
