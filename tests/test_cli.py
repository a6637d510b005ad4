"""Tests for the tshistogram command line."""
from __future__ import annotations

import io
import os
import subprocess
import sys
from datetime import datetime
from pathlib import Path

import pytest

from tshistogram.cli import build_parser, main


def _run(*args: str, stdin: str = "") -> subprocess.CompletedProcess:
    env = {
        k: v
        for k, v in os.environ.items()
        if not k.startswith("TSHIST_") and k not in ("FORCE_COLOR", "TTY_COMPATIBLE")
    }
    return subprocess.run(
        [sys.executable, "-m", "tshistogram", *args],
        cwd=str(Path(__file__).parent.parent / "src"),
        input=stdin,
        capture_output=True,
        text=True,
        env=env,
    )


class TestParser:
    """Tests for argument parsing."""

    def test_defaults_are_unset(self) -> None:
        """Unset options stay None so config precedence can fill them in."""
        args = build_parser().parse_args([])
        assert args.files == []
        assert args.format is None
        assert args.interval is None
        assert args.timezone is None
        assert args.bar_length is None

    def test_aliases(self) -> None:
        args = build_parser().parse_args(["--gap", "1h", "--loc", "UTC", "--barlength", "20"])
        assert args.interval == "1h"
        assert args.timezone == "UTC"
        assert args.bar_length == "20"

    def test_help_lists_formats(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "Format Examples:" in out
        assert "RFC3339" in out
        assert "--interval" in out


class TestMain:
    """Tests for main() run in-process."""

    def test_labeled_series(
        self, labeled_log: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        code = main(["-f", "timeonly", "-i", "5m", str(labeled_log)])
        assert code == 0

        year = datetime.now().year
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Total = 3"
        assert "  |  A" in lines
        assert "  #  B" in lines
        assert lines[-1] == f"[ {year}-01-01T09:00:00Z ]      3  " + "|" * 40 + "#" * 20

    def test_empty_input(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        assert main([]) == 0
        assert capsys.readouterr().out == "Total = 0\n"

    def test_unparseable_lines_are_skipped(
        self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO("not a timestamp\n2006-01-02T15:04:05Z\n\n"))
        assert main([]) == 0
        captured = capsys.readouterr()
        assert captured.out.startswith("Total = 1\n")
        assert captured.err == ""

    def test_debug_reports_skips(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO("oops\n2006-01-02T15:04:05Z\n"))
        assert main(["--debug"]) == 0
        err = capsys.readouterr().err
        assert "Effective configuration:" in err
        assert "skipped: 'oops'" in err
        assert "Parsed 1 lines, skipped 1" in err

    def test_invalid_interval(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO("2006-01-02T15:04:05Z\n"))
        assert main(["-i", "0s"]) == 1
        captured = capsys.readouterr()
        assert "TSH-E002" in captured.err
        assert "Next step:" in captured.err
        assert captured.out == ""

    def test_missing_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        assert main([str(tmp_path / "missing.log")]) == 1
        assert "TSH-E301" in capsys.readouterr().err

    def test_no_input(self, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", None)
        assert main([]) == 1
        assert "TSH-E100" in capsys.readouterr().err

    def test_config_file(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = tmp_path / "tshist.yaml"
        config.write_text("format: timeonly\nbar_length: 10\n", encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", io.StringIO("09:00:00\n09:01:00\n"))
        assert main(["--config", str(config)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Total = 2\n")
        assert out.rstrip("\n").endswith("2  " + "|" * 10)

    def test_range(self, labeled_log: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        code = main(["-f", "timeonly", "--from", "08:50:00", "--to", "09:10:00", str(labeled_log)])
        assert code == 0
        rows = [line for line in capsys.readouterr().out.splitlines() if line.startswith("[ ")]
        assert len(rows) == 5


class TestSubprocess:
    """Tests running python -m tshistogram."""

    def test_piped_input(self) -> None:
        result = _run("-f", "unix", "-i", "1h", stdin="1136239445 a\n1136239446 a\n1136246645 b\n")
        assert result.returncode == 0, f"CLI failed: {result.stderr}"
        lines = result.stdout.splitlines()
        assert lines[0] == "Total = 3"
        assert lines[1] == "Range = 2006-01-02T22:04:05Z ~ 2006-01-03T00:04:05Z"
        assert "[ 2006-01-02T22:00:00Z ]" in result.stdout
        assert "[ 2006-01-03T00:00:00Z ]" in result.stdout

    def test_empty_input(self) -> None:
        result = _run()
        assert result.returncode == 0
        assert result.stdout == "Total = 0\n"

    def test_version(self) -> None:
        result = _run("--version")
        assert result.returncode == 0
        assert result.stdout.startswith("tshistogram ")

    def test_config_error(self) -> None:
        result = _run("--tz", "Not/AZone", stdin="1136239445\n")
        assert result.returncode == 1
        assert "TSH-E003" in result.stderr
