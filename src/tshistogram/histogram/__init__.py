"""Time bucketing, series collapsing and bar allocation."""
from tshistogram.histogram.allocate import allocate, bucket_length
from tshistogram.histogram.bins import Bins, truncate
from tshistogram.histogram.chart import ChartData, Row, build_chart
from tshistogram.histogram.series import OTHER_LABEL, collapse_series, merge_counts, series_order

__all__ = [
    "Bins",
    "ChartData",
    "OTHER_LABEL",
    "Row",
    "allocate",
    "build_chart",
    "bucket_length",
    "collapse_series",
    "merge_counts",
    "series_order",
    "truncate",
]
