"""Text rendering of histogram charts."""
from tshistogram.render.bars import make_console, render_chart, series_styles, use_color

__all__ = [
    "make_console",
    "render_chart",
    "series_styles",
    "use_color",
]
