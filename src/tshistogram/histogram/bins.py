"""Fixed-width time buckets that grow in either direction.

Bucket ``i`` covers ``[base + i*width, base + (i+1)*width)``. The first
insertion fixes ``base`` at the instant truncated to ``width``; later
insertions before ``base`` prepend empty buckets and move ``base`` back by
whole widths, so existing counts never move relative to their bucket.
"""
from __future__ import annotations

from collections import Counter, deque
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

# Truncation origin; widths that divide a day align to UTC midnight.
TRUNCATE_ORIGIN = datetime(1, 1, 1, tzinfo=timezone.utc)


def truncate(t: datetime, width: timedelta) -> datetime:
    """Round ``t`` down to a multiple of ``width`` since the origin, in UTC."""
    t = t.astimezone(timezone.utc)
    return t - (t - TRUNCATE_ORIGIN) % width


class Bins:
    """Per-series counts in a dense, bidirectionally growable bucket sequence."""

    def __init__(self, width: timedelta) -> None:
        if width <= timedelta(0):
            raise ValueError(f"bucket width must be positive, got {width}")
        self.width = width
        self.base: Optional[datetime] = None
        self.min_time: Optional[datetime] = None
        self.max_time: Optional[datetime] = None
        self._buckets: deque[Counter[str]] = deque()
        self._count = 0
        self._frozen = False

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[tuple[datetime, Counter[str]]]:
        for i, bucket in enumerate(self._buckets):
            yield self.bucket_start(i), bucket

    def __getitem__(self, index: int) -> Counter[str]:
        return self._buckets[index]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, t: datetime, label: str = "") -> None:
        """Count one occurrence of ``label`` at instant ``t``."""
        if self._frozen:
            raise RuntimeError("cannot add to finalized bins")

        t = t.astimezone(timezone.utc)
        if self.base is None:
            self.base = truncate(t, self.width)
            self._buckets.append(Counter())

        idx = (t - self.base) // self.width
        if idx < 0:
            self._buckets.extendleft(Counter() for _ in range(-idx))
            self.base += idx * self.width
            idx = 0
        elif idx >= len(self._buckets):
            self._buckets.extend(Counter() for _ in range(idx - len(self._buckets) + 1))

        self._buckets[idx][label] += 1
        self._count += 1

        if self.min_time is None or t < self.min_time:
            self.min_time = t
        if self.max_time is None or t > self.max_time:
            self.max_time = t

    def freeze(self) -> None:
        """Finalize: no further insertions are accepted."""
        self._frozen = True

    def bucket_start(self, index: int) -> datetime:
        if self.base is None:
            raise IndexError("bins are empty")
        return self.base + index * self.width

    def bucket_at(self, t: datetime) -> Counter[str]:
        """Return the bucket containing ``t`` (an empty one if out of range)."""
        if self.base is None:
            return Counter()
        idx = (t.astimezone(timezone.utc) - self.base) // self.width
        if 0 <= idx < len(self._buckets):
            return self._buckets[idx]
        return Counter()

    def window(self, start: datetime, end: datetime) -> list[tuple[datetime, Counter[str]]]:
        """Buckets from the one holding ``start`` through the one holding ``end``."""
        rows = []
        t = truncate(start, self.width)
        last = truncate(end, self.width)
        while t <= last:
            rows.append((t, self.bucket_at(t)))
            t += self.width
        return rows

    def total(self) -> int:
        return self._count

    def max_total(self) -> int:
        return max((sum(b.values()) for b in self._buckets), default=0)

    def series_totals(self) -> Counter[str]:
        totals: Counter[str] = Counter()
        for bucket in self._buckets:
            totals.update(bucket)
        return totals

    def series(self) -> list[str]:
        """Distinct labels, sorted."""
        return sorted(self.series_totals())
