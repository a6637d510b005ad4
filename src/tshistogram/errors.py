"""tshistogram error code registry.

Provides structured error codes with helpful messages and next steps.
Each error has:
- Code: TSH-EXXX format
- Message: Human-readable description
- Next step: Actionable command or instruction

Per-line parse failures are ordinary exceptions (``ParseFailure`` and its
subclasses); they never reach the registry because unparseable lines are
skipped, not reported.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import sys


class ErrorCode(Enum):
    """tshistogram error codes."""

    # Configuration errors (E001-E099)
    E001 = "E001"  # Invalid duration
    E002 = "E002"  # Non-positive interval
    E003 = "E003"  # Unknown time zone
    E004 = "E004"  # Invalid color mode
    E005 = "E005"  # Invalid bar length
    E006 = "E006"  # Invalid series cap
    E007 = "E007"  # Invalid display range
    E008 = "E008"  # Config file not found
    E009 = "E009"  # Config file invalid

    # Runtime errors (E100-E199)
    E100 = "E100"  # No input specified
    E101 = "E101"  # Interrupted

    # File/IO errors (E300-E399)
    E301 = "E301"  # Input file not found
    E302 = "E302"  # Cannot read input


@dataclass
class TSHError:
    """Structured error with code, message, and next step."""

    code: ErrorCode
    message: str
    next_step: str
    details: Optional[str] = None

    def __str__(self) -> str:
        lines = [
            f"TSH-{self.code.value}: {self.message}",
        ]
        if self.details:
            lines.append(f"  Details: {self.details}")
        lines.append(f"  Next step: {self.next_step}")
        return "\n".join(lines)

    def print(self, file=None) -> None:
        """Print the error to stderr (or specified file)."""
        print(str(self), file=file or sys.stderr)


# (message_template, next_step)
ERROR_TEMPLATES: dict[ErrorCode, tuple[str, str]] = {
    ErrorCode.E001: (
        "Invalid duration: {details}",
        "Use a duration such as 30s, 5m, 1h30m or 1d"
    ),
    ErrorCode.E002: (
        "Interval must be positive: {details}",
        "Pass a positive --interval, e.g. --interval 5m"
    ),
    ErrorCode.E003: (
        "Unknown time zone: {details}",
        "Use an IANA zone name such as UTC or Europe/Berlin"
    ),
    ErrorCode.E004: (
        "Invalid color mode: {details}",
        "Use --color never, --color always or --color auto"
    ),
    ErrorCode.E005: (
        "Invalid bar length: {details}",
        "Pass a positive integer, e.g. --bar-length 60"
    ),
    ErrorCode.E006: (
        "Invalid series cap: {details}",
        "Pass a positive integer, e.g. --max-series 8"
    ),
    ErrorCode.E007: (
        "Invalid display range: {details}",
        "Check --from/--to against --format (and that --from <= --to)"
    ),
    ErrorCode.E008: (
        "Config file not found: {details}",
        "Check the --config path or unset TSHIST_CONFIG"
    ),
    ErrorCode.E009: (
        "Config file is invalid: {details}",
        "Fix the YAML; allowed keys are listed in config.schema.json"
    ),
    ErrorCode.E100: (
        "No input specified",
        "Pass one or more files or pipe data on stdin"
    ),
    ErrorCode.E101: (
        "Interrupted by user",
        "Re-run the command"
    ),
    ErrorCode.E301: (
        "Input file not found: {details}",
        "Check the file path"
    ),
    ErrorCode.E302: (
        "Cannot read input: {details}",
        "Check file permissions and path"
    ),
}


class TSHException(Exception):
    """A fatal error carrying a registry code."""

    def __init__(self, code: ErrorCode, details: Optional[str] = None) -> None:
        self.code = code
        self.details = details
        super().__init__(make_error(code, details).message)


class ConfigError(TSHException):
    """Invalid configuration, raised before any input is read."""


class InputError(TSHException):
    """An input source could not be opened or read."""


class ParseFailure(ValueError):
    """A token did not resolve to an instant."""


class MalformedEpoch(ParseFailure):
    """An epoch-scaled token was not a usable number."""


class LayoutMismatch(ParseFailure):
    """A token did not conform to the requested layout."""


class UnknownFormat(ParseFailure):
    """No guess rule produced a successful parse."""


class NoTimestampFound(ParseFailure):
    """No leading prefix of a line resolved to an instant."""


def make_error(code: ErrorCode, details: Optional[str] = None) -> TSHError:
    """Create a TSHError from a code with optional details.

    Args:
        code: The error code
        details: Optional details to include in the message

    Returns:
        TSHError instance ready to print
    """
    template = ERROR_TEMPLATES.get(code, ("Unknown error", "Re-run with --verbose"))
    message_template, next_step = template

    if details and "{details}" in message_template:
        message = message_template.format(details=details)
    elif details:
        message = f"{message_template}: {details}"
    else:
        message = message_template.replace(": {details}", "")

    return TSHError(
        code=code,
        message=message,
        next_step=next_step,
        details=details if "{details}" not in message_template else None,
    )


# Verbose mode flag (set by CLI)
_verbose_mode: bool = False


def set_verbose(verbose: bool) -> None:
    """Set verbose mode for error output."""
    global _verbose_mode
    _verbose_mode = verbose


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose_mode


def handle_exception(exc: Exception, code: ErrorCode, details: Optional[str] = None) -> None:
    """Handle an exception with proper error formatting.

    Prints the formatted error message; in verbose mode the full
    traceback of ``exc`` follows.
    """
    import traceback

    err = make_error(code, details)
    err.print()

    if _verbose_mode:
        print("\n--- Full Traceback ---", file=sys.stderr)
        traceback.print_exc()
