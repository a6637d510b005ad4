"""Tests for format guessing and leading-timestamp extraction."""
from __future__ import annotations

import importlib
import re
from datetime import datetime, timezone

import pytest

from tshistogram.errors import NoTimestampFound, UnknownFormat
from tshistogram.timefmt.extract import extract_leading_instant
from tshistogram.timefmt.guess import GUESS_RULES, GuessRule, guess, match_rule
from tshistogram.timefmt.resolver import resolve

guess_module = importlib.import_module("tshistogram.timefmt.guess")

# Layout -> a token in that layout
SAMPLES = {
    "ansic": "Mon Jan  2 15:04:05 2006",
    "unixdate": "Mon Jan  2 15:04:05 MST 2006",
    "rubydate": "Mon Jan 02 15:04:05 -0700 2006",
    "rfc822": "02 Jan 06 15:04 MST",
    "rfc822z": "02 Jan 06 15:04 -0700",
    "rfc850": "Monday, 02-Jan-06 15:04:05 MST",
    "rfc1123": "Mon, 02 Jan 2006 15:04:05 MST",
    "rfc1123z": "Mon, 02 Jan 2006 15:04:05 -0700",
    "rfc3339": "2006-01-02T15:04:05Z",
    "rfc3339nano": "2006-01-02T15:04:05.999999999+07:00",
    "kitchen": "3:04PM",
    "stamp": "Jan  2 15:04:05",
    "stampmilli": "Jan  2 15:04:05.000",
    "stampmicro": "Jan  2 15:04:05.000000",
    "stampnano": "Jan  2 15:04:05.000000000",
    "datetime": "2006-01-02 15:04:05",
    "dateonly": "2006-01-02",
    "timeonly": "15:04:05",
    "unix": "1136239445",
    "unix-milli": "1136239445000",
    "unix-micro": "1136239445000000",
}


class TestGuess:
    """Tests for guess."""

    @pytest.mark.parametrize("tag", sorted(SAMPLES))
    def test_guess_agrees_with_explicit_tag(self, tag: str) -> None:
        token = SAMPLES[tag]
        assert guess(token, year=2026) == resolve(tag, token, year=2026)

    def test_guess_tags(self) -> None:
        """Empty and "guess" tags both select guessing."""
        expected = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert resolve("", "2006-01-02 15:04:05") == expected
        assert resolve("guess", "2006-01-02 15:04:05") == expected
        assert resolve("GUESS", "2006-01-02 15:04:05") == expected

    def test_epoch_sizes(self) -> None:
        """Longer digit runs fall through to finer epoch scales."""
        assert guess("1136239445").year == 2006
        assert guess("1136239445000").year == 2006
        assert guess("1136239445000000").year == 2006

    def test_unknown_format(self) -> None:
        with pytest.raises(UnknownFormat):
            guess("not-a-date")

    def test_no_rule_matches(self) -> None:
        assert match_rule("...") is None
        with pytest.raises(UnknownFormat):
            guess("...")

    def test_only_first_matching_rule_is_tried(self, monkeypatch: pytest.MonkeyPatch) -> None:
        rules = (
            GuessRule(re.compile(r"\d"), ("dateonly",)),
            GuessRule(re.compile(r":"), ("timeonly",)),
        )
        monkeypatch.setattr(guess_module, "GUESS_RULES", rules)
        assert match_rule("15:04:05") is rules[0]
        with pytest.raises(UnknownFormat):
            guess("15:04:05")

    def test_weekday_rule_precedes_generic_rule(self) -> None:
        """Tokens led by a month or weekday name reach the stamp and ANSI C layouts."""
        weekday = GUESS_RULES[2]
        assert match_rule("Jan  2 15:04:05") is weekday
        assert match_rule("Mon Jan  2 15:04:05 2006") is weekday


class TestExtractLeadingInstant:
    """Tests for extract_leading_instant."""

    def test_label_after_timestamp(self) -> None:
        instant, label = extract_leading_instant("09:00:00 A", "timeonly", year=2026)
        assert instant == datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)
        assert label == "A"

    def test_multi_field_timestamp(self) -> None:
        instant, label = extract_leading_instant("Jan  2 15:04:05 web-1   GET /", "stamp", year=2026)
        assert instant == datetime(2026, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert label == "web-1 GET /"

    def test_no_label(self) -> None:
        instant, label = extract_leading_instant("2006-01-02T15:04:05Z", "")
        assert instant.year == 2006
        assert label == ""

    def test_guessed_with_label(self) -> None:
        instant, label = extract_leading_instant("1136239445 worker", "guess")
        assert instant == datetime(2006, 1, 2, 22, 4, 5, tzinfo=timezone.utc)
        assert label == "worker"

    def test_shortest_prefix_wins(self) -> None:
        """A date alone already parses, so the time becomes part of the label."""
        _, label = extract_leading_instant("2006-01-02 15:04:05 A", "guess")
        assert label == "15:04:05 A"

    def test_explicit_layout_consumes_more_fields(self) -> None:
        _, label = extract_leading_instant("2006-01-02 15:04:05 A", "datetime")
        assert label == "A"

    @pytest.mark.parametrize("line", ["", "   ", "hello world", "GET /index.html 200"])
    def test_no_timestamp(self, line: str) -> None:
        with pytest.raises(NoTimestampFound):
            extract_leading_instant(line, "guess")
