"""Best-effort timestamp format guessing.

Rules are tried in declaration order and only the first rule whose regex
matches is consulted. Its candidate tags are tried in order and the first
successful parse wins. Purely numeric tokens are treated as epoch values
before anything else; rules that key on a leading weekday or month name come
before the looser "contains letters or an offset" rule.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from tshistogram.errors import ParseFailure, UnknownFormat
from tshistogram.timefmt.resolver import resolve


@dataclass(frozen=True)
class GuessRule:
    """A regex and the tags to try when it matches."""

    pattern: re.Pattern[str]
    tags: tuple[str, ...]

    def matches(self, token: str) -> bool:
        return self.pattern.search(token) is not None


GUESS_RULES: tuple[GuessRule, ...] = (
    GuessRule(
        re.compile(r"^\d{10,19}(?:\.\d+)?$"),
        ("unix", "unix-milli", "unix-micro"),
    ),
    GuessRule(
        re.compile(r"^\d{4}"),
        ("rfc3339", "rfc3339nano", "datetime", "dateonly"),
    ),
    GuessRule(
        re.compile(r"^[A-Za-z]{3},?\s"),
        (
            "ansic", "unixdate", "rubydate", "rfc822", "rfc822z", "rfc850",
            "rfc1123", "rfc1123z", "stamp", "stampmilli", "stampmicro", "stampnano",
        ),
    ),
    GuessRule(
        re.compile(r"[A-Za-z]{3,4}|[+-]\d{4}"),
        (
            "unixdate", "rubydate", "rfc822", "rfc822z", "rfc850",
            "rfc1123", "rfc1123z", "rfc3339", "rfc3339nano",
        ),
    ),
    GuessRule(
        re.compile(r"\d{2}:\d{2}:\d{2}"),
        ("datetime", "timeonly", "ansic", "unixdate", "rubydate", "rfc850", "rfc1123", "rfc1123z"),
    ),
    GuessRule(
        re.compile(r"\d{1,2}:\d{2}(AM|PM)"),
        ("kitchen",),
    ),
)


def match_rule(token: str) -> Optional[GuessRule]:
    """Return the first rule whose regex matches ``token``."""
    for rule in GUESS_RULES:
        if rule.matches(token):
            return rule
    return None


def guess(token: str, *, tz: Optional[tzinfo] = None, year: Optional[int] = None) -> datetime:
    """Resolve ``token`` by guessing its format.

    Raises:
        UnknownFormat: No rule matches, or every candidate of the matching
            rule fails to parse.
    """
    rule = match_rule(token)
    if rule is None:
        raise UnknownFormat(f"Unknown format: {token}")

    for tag in rule.tags:
        try:
            return resolve(tag, token, tz=tz, year=year)
        except ParseFailure:
            continue
    raise UnknownFormat(f"Unknown format: {token}")
