"""Turn finalized bins into rows of allocated bar segments."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from tshistogram.histogram.allocate import allocate, bucket_length
from tshistogram.histogram.bins import Bins
from tshistogram.histogram.series import collapse_series, merge_counts, series_order


@dataclass(frozen=True)
class Row:
    """One bucket as it will be drawn.

    Attributes:
        start: Bucket start instant (UTC).
        total: Count in the bucket.
        segments: (label, length) per series in declared series order.
    """

    start: datetime
    total: int
    segments: tuple[tuple[str, int], ...] = ()

    @property
    def length(self) -> int:
        return sum(n for _, n in self.segments)


@dataclass(frozen=True)
class ChartData:
    """Everything the renderer needs."""

    total: int
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    series: tuple[str, ...] = ()
    rows: tuple[Row, ...] = field(default_factory=tuple)

    @property
    def show_legend(self) -> bool:
        """False when there is no data or the only series is the unlabeled one."""
        return bool(self.series) and self.series != ("",)


def build_chart(
    bins: Bins,
    *,
    bar_length: int,
    max_series: int,
    time_from: Optional[datetime] = None,
    time_to: Optional[datetime] = None,
) -> ChartData:
    """Collapse series, scale bars and allocate segments for every bucket.

    ``time_from``/``time_to`` replace the observed range; buckets outside the
    range are dropped and empty buckets are filled in.
    """
    bins.freeze()
    if bins.base is None and time_from is None and time_to is None:
        return ChartData(total=0)

    if time_from is not None or time_to is not None:
        start = time_from or bins.min_time
        end = time_to or bins.max_time
        if start is None or end is None:
            return ChartData(total=0)
        buckets = bins.window(start, end)
    else:
        start, end = bins.min_time, bins.max_time
        buckets = list(bins)

    totals: Counter[str] = Counter()
    for _, bucket in buckets:
        totals.update(bucket)

    mapping = collapse_series(totals, max_series)
    merged = [(t, merge_counts(bucket, mapping)) for t, bucket in buckets]
    order = series_order(mapping.values())

    total = sum(totals.values())
    if total == 0:
        return ChartData(total=0, start=start, end=end)

    max_total = max(sum(bucket.values()) for _, bucket in merged)
    rows = []
    for t, bucket in merged:
        n = sum(bucket.values())
        lengths = allocate(bucket, bucket_length(n, max_total, bar_length), order)
        rows.append(Row(start=t, total=n, segments=tuple(lengths.items())))

    return ChartData(
        total=total,
        start=start,
        end=end,
        series=tuple(order),
        rows=tuple(rows),
    )
