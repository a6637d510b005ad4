"""Series ordering and collapsing of long series tails into "(Other)"."""
from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

OTHER_LABEL = "(Other)"


def series_order(labels: Iterable[str]) -> list[str]:
    """Display order: lexicographic, with the synthetic "(Other)" label last."""
    distinct = set(labels)
    order = sorted(distinct - {OTHER_LABEL})
    if OTHER_LABEL in distinct:
        order.append(OTHER_LABEL)
    return order


def collapse_series(totals: Mapping[str, int], cap: int) -> dict[str, str]:
    """Map each label to the label it is displayed under.

    When there are more than ``cap`` labels, the ``cap - 1`` largest (ties
    broken lexicographically) keep their name and the rest map to "(Other)".
    At or below the cap every label maps to itself.
    """
    if cap < 1:
        raise ValueError(f"series cap must be at least 1, got {cap}")
    if len(totals) <= cap:
        return {label: label for label in totals}

    ranked = sorted(totals, key=lambda label: (-totals[label], label))
    kept = set(ranked[: cap - 1])
    return {label: label if label in kept else OTHER_LABEL for label in totals}


def merge_counts(counts: Mapping[str, int], mapping: Mapping[str, str]) -> Counter[str]:
    """Re-aggregate ``counts`` under the display labels of ``mapping``."""
    merged: Counter[str] = Counter()
    for label, n in counts.items():
        merged[mapping.get(label, label)] += n
    return merged
