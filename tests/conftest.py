"""tshistogram test configuration and fixtures."""
from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from tshistogram.config import ENV_VARS, CONFIG_ENV_VAR  # noqa: E402


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TSHIST_* and terminal-forcing variables out of tests."""
    for var in (*ENV_VARS.values(), CONFIG_ENV_VAR, "FORCE_COLOR", "TTY_COMPATIBLE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def src_dir() -> Path:
    """Return the src directory path."""
    return SRC_DIR


@pytest.fixture
def utc_noon() -> datetime:
    """A fixed instant a little after noon UTC."""
    return datetime(2026, 1, 1, 12, 2, tzinfo=timezone.utc)


@pytest.fixture
def labeled_log(tmp_path: Path) -> Path:
    """A small log with two series in one five-minute bucket."""
    path = tmp_path / "labeled.log"
    path.write_text("09:00:00 A\n09:04:00 A\n09:04:30 B\n", encoding="utf-8")
    return path
