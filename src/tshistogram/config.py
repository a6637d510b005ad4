"""tshistogram configuration management.

Handles:
- Option precedence: CLI > environment (TSHIST_*) > config file > defaults
- YAML config files validated against config.schema.json
- Validation of every option before any input is read
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from jsonschema import Draft202012Validator

from tshistogram.durations import parse_duration
from tshistogram.errors import ConfigError, ErrorCode, ParseFailure
from tshistogram.timefmt.resolver import resolve


class ColorMode(str, Enum):
    """When to draw series in color."""

    NEVER = "never"
    ALWAYS = "always"
    AUTO = "auto"


DEFAULTS: dict[str, Any] = {
    "format": "guess",
    "interval": "5m",
    "timezone": "UTC",
    "bar_length": 60,
    "color": ColorMode.AUTO.value,
    "time_from": None,
    "time_to": None,
    "max_series": 8,
}

# Option -> environment variable
ENV_VARS: dict[str, str] = {
    "format": "TSHIST_FORMAT",
    "interval": "TSHIST_INTERVAL",
    "timezone": "TSHIST_TZ",
    "bar_length": "TSHIST_BAR_LENGTH",
    "color": "TSHIST_COLOR",
    "time_from": "TSHIST_FROM",
    "time_to": "TSHIST_TO",
    "max_series": "TSHIST_MAX_SERIES",
}

CONFIG_ENV_VAR = "TSHIST_CONFIG"

SCHEMA_PATH = Path(__file__).parent / "schemas" / "config.schema.json"


@dataclass
class Config:
    """Validated runtime configuration for one run."""

    format: str = "guess"
    interval: timedelta = timedelta(minutes=5)
    tz: tzinfo = timezone.utc
    tz_name: str = "UTC"
    bar_length: int = 60
    color: ColorMode = ColorMode.AUTO
    time_from: Optional[datetime] = None
    time_to: Optional[datetime] = None
    max_series: int = 8
    year: int = field(default_factory=lambda: datetime.now().year)
    config_path: Optional[Path] = None

    @property
    def has_range(self) -> bool:
        return self.time_from is not None or self.time_to is not None


def load_config_file(path: Path) -> dict[str, Any]:
    """Load and validate a YAML config file.

    Raises:
        ConfigError: If the file is missing, unreadable, not a mapping or
            fails schema validation
    """
    if not path.exists():
        raise ConfigError(ErrorCode.E008, str(path))

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(ErrorCode.E009, f"{path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(ErrorCode.E009, f"{path}: invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            ErrorCode.E009,
            f"{path}: expected a mapping, got {type(data).__name__}",
        )

    # Unquoted YAML dates and timestamps come back as date objects.
    data = {
        key: value.isoformat(" ") if isinstance(value, datetime)
        else value.isoformat() if isinstance(value, date)
        else value
        for key, value in data.items()
    }

    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    errors = [
        f"{error.json_path}: {error.message}"
        for error in Draft202012Validator(schema).iter_errors(data)
    ]
    if errors:
        raise ConfigError(ErrorCode.E009, f"{path}: " + "; ".join(errors[:5]))
    return data


def parse_interval(value: Any) -> timedelta:
    """Parse a bucket width; it must be a positive duration."""
    try:
        width = parse_duration(str(value))
    except (ValueError, OverflowError):
        raise ConfigError(ErrorCode.E001, str(value)) from None
    if width <= timedelta(0):
        raise ConfigError(ErrorCode.E002, str(value))
    return width


def parse_timezone(name: Any) -> tzinfo:
    """Look up an IANA time zone by name."""
    name = str(name)
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ConfigError(ErrorCode.E003, name) from None


def parse_color(value: Any) -> ColorMode:
    try:
        return ColorMode(str(value).lower())
    except ValueError:
        raise ConfigError(ErrorCode.E004, str(value)) from None


def parse_positive_int(value: Any, code: ErrorCode) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigError(code, str(value)) from None
    if n < 1:
        raise ConfigError(code, f"{value} (must be at least 1)")
    return n


def parse_bound(value: Any, fmt: str, tz: tzinfo, year: int, option: str) -> datetime:
    """Parse --from/--to with the same format rules as the input."""
    try:
        return resolve(fmt, str(value).strip(), tz=tz, year=year)
    except ParseFailure as e:
        raise ConfigError(ErrorCode.E007, f"{option} {value!r}: {e}") from None


def load_config(
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_file: str | Path | None = None,
    year: int | None = None,
) -> Config:
    """Load configuration with precedence: CLI > environment > config file > defaults.

    Args:
        cli_overrides: Option values given on the command line (None = unset)
        environ: Environment to read TSHIST_* variables from (default: os.environ)
        config_file: Path to a YAML config file (default: $TSHIST_CONFIG)
        year: Year for timestamps without one (default: current year)

    Returns:
        Validated Config

    Raises:
        ConfigError: On the first invalid option
    """
    cli_overrides = cli_overrides or {}
    environ = os.environ if environ is None else environ

    # Step 1: defaults
    values: dict[str, Any] = dict(DEFAULTS)

    # Step 2: config file
    config_path: Path | None = None
    if config_file is None:
        config_file = environ.get(CONFIG_ENV_VAR) or None
    if config_file:
        config_path = Path(config_file)
        values.update(load_config_file(config_path))

    # Step 3: environment (empty values are ignored)
    for option, var in ENV_VARS.items():
        if environ.get(var):
            values[option] = environ[var]

    # Step 4: CLI
    for option, value in cli_overrides.items():
        if value is not None:
            values[option] = value

    # Step 5: validate
    year = year or datetime.now().year
    fmt = str(values["format"])
    interval = parse_interval(values["interval"])
    tz = parse_timezone(values["timezone"])
    bar_length = parse_positive_int(values["bar_length"], ErrorCode.E005)
    color = parse_color(values["color"])
    max_series = parse_positive_int(values["max_series"], ErrorCode.E006)

    time_from = time_to = None
    if values["time_from"]:
        time_from = parse_bound(values["time_from"], fmt, tz, year, "--from")
    if values["time_to"]:
        time_to = parse_bound(values["time_to"], fmt, tz, year, "--to")
    if time_from is not None and time_to is not None and time_from > time_to:
        raise ConfigError(ErrorCode.E007, "--from is after --to")

    return Config(
        format=fmt,
        interval=interval,
        tz=tz,
        tz_name=str(values["timezone"]),
        bar_length=bar_length,
        color=color,
        time_from=time_from,
        time_to=time_to,
        max_series=max_series,
        year=year,
        config_path=config_path,
    )
