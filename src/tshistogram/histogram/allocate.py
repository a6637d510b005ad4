"""Split a bucket's bar length across its series.

Uses largest-remainder (Hare-Niemeyer) apportionment: every series gets the
floor of its proportional share, then the leftover units go to the series
with the largest fractional remainders. Fractions are compared at two
decimal places, with ties going to the series that comes first in the
declared order, so equal inputs always produce equal bars.
"""
from __future__ import annotations

from typing import Mapping, Sequence


def bucket_length(total: int, max_total: int, bar_length: int) -> int:
    """Bar length for a bucket, proportional to the largest bucket."""
    if max_total <= 0:
        return 0
    return bar_length * total // max_total


def allocate(counts: Mapping[str, int], length: int, order: Sequence[str]) -> dict[str, int]:
    """Apportion ``length`` units across the series in ``order``.

    Args:
        counts: Count per series label for one bucket
        length: Total units to hand out
        order: Declared series order (used for tie-breaking and the result keys)

    Returns:
        Units per series, in ``order``, summing to ``length`` whenever the
        bucket has any counts (all zero otherwise)
    """
    result = {label: 0 for label in order}
    live = [label for label in order if counts.get(label, 0) > 0]
    total = sum(counts.get(label, 0) for label in live)
    if total == 0 or length <= 0:
        return result

    fractions: dict[str, int] = {}
    assigned = 0
    for label in live:
        val = counts[label] * length * 100 // total
        result[label] = val // 100
        fractions[label] = val % 100
        assigned += val // 100

    remaining = length - assigned
    # sorted() is stable, so equal fractions keep declared order.
    ranked = sorted(live, key=lambda label: -fractions[label])
    i = 0
    while remaining > 0:
        result[ranked[i % len(ranked)]] += 1
        remaining -= 1
        i += 1
    return result
