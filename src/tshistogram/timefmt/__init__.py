"""Timestamp layouts, format resolution and guessing."""
from tshistogram.timefmt.extract import extract_leading_instant
from tshistogram.timefmt.guess import GUESS_RULES, GuessRule, guess
from tshistogram.timefmt.layouts import EPOCH_SCALES, LAYOUTS, Layout
from tshistogram.timefmt.resolver import resolve

__all__ = [
    "EPOCH_SCALES",
    "GUESS_RULES",
    "GuessRule",
    "LAYOUTS",
    "Layout",
    "extract_leading_instant",
    "guess",
    "resolve",
]
