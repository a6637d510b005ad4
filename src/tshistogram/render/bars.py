"""Draw a chart as aligned text rows.

Output shape::

    Total = 3
    Range = 2026-01-01T09:00:00Z ~ 2026-01-01T09:04:30Z

      |  A
      #  B

    [ 2026-01-01T09:00:00Z ]      3  ||||||||||||||||||||||||||||||||||||||||####################

With a single series every bar uses "|" and no legend is printed.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

from tshistogram.config import ColorMode
from tshistogram.histogram.chart import ChartData
from tshistogram.timefmt.layouts import LAYOUTS

GLYPHS = ("|", "#", "*", "+", "=", "%", "@", "~", "x", "o")
COLORS = (
    "green",
    "yellow",
    "cyan",
    "magenta",
    "blue",
    "red",
    "bright_green",
    "bright_yellow",
    "bright_cyan",
    "bright_magenta",
)
UNLABELED = "(no label)"
COUNT_WIDTH = 6


@dataclass(frozen=True)
class SeriesStyle:
    """How one series is drawn."""

    glyph: str
    color: Optional[str] = None


def use_color(mode: ColorMode, series_count: int, is_terminal: bool) -> bool:
    """Decide coloring once the series are known."""
    if mode is ColorMode.ALWAYS:
        return True
    if mode is ColorMode.NEVER:
        return False
    return series_count > 1 and is_terminal


def series_styles(series: tuple[str, ...], colorize: bool) -> dict[str, SeriesStyle]:
    """Assign a glyph (and color when enabled) to each series in order."""
    multi = len(series) > 1
    return {
        label: SeriesStyle(
            glyph=GLYPHS[i % len(GLYPHS)] if multi else "|",
            color=COLORS[i % len(COLORS)] if colorize else None,
        )
        for i, label in enumerate(series)
    }


def make_console(file: Optional[TextIO] = None, colorize: bool = False) -> Console:
    if colorize:
        return Console(file=file, force_terminal=True, highlight=False)
    return Console(file=file, color_system=None, highlight=False)


def format_time(t: datetime, tz: tzinfo = timezone.utc) -> str:
    return LAYOUTS["rfc3339"].format(t.astimezone(tz))


def render_chart(
    chart: ChartData,
    console: Console,
    *,
    tz: tzinfo = timezone.utc,
    colorize: bool = False,
) -> None:
    """Print the chart: totals, range, legend and one row per bucket."""
    console.print(Text(f"Total = {chart.total}"), soft_wrap=True)
    if chart.total == 0:
        return

    if chart.start is not None and chart.end is not None:
        console.print(
            Text(f"Range = {format_time(chart.start, tz)} ~ {format_time(chart.end, tz)}"),
            soft_wrap=True,
        )
    console.print()

    styles = series_styles(chart.series, colorize)
    if chart.show_legend:
        for label in chart.series:
            style = styles[label]
            line = Text("  ")
            line.append(style.glyph, style=style.color or "")
            line.append("  ")
            line.append(label or UNLABELED, style=style.color or "")
            console.print(line, soft_wrap=True)
        console.print()

    times = [format_time(row.start, tz) for row in chart.rows]
    time_width = max(len(t) for t in times)
    count_width = max(COUNT_WIDTH, max(len(str(row.total)) for row in chart.rows))

    for t, row in zip(times, chart.rows):
        line = Text(f"[ {t:>{time_width}} ] {row.total:>{count_width}}  ")
        for label, n in row.segments:
            if n:
                style = styles[label]
                line.append(style.glyph * n, style=style.color or "")
        console.print(line, soft_wrap=True)
