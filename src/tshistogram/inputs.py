"""Compose input files and standard input into one stream of lines."""
from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional, Sequence, TextIO

from tshistogram.errors import ErrorCode, InputError


def stdin_is_interactive(stdin: Optional[TextIO]) -> bool:
    if stdin is None:
        return False
    try:
        return stdin.isatty()
    except (AttributeError, ValueError):
        return False


def should_read_stdin(paths: Sequence[str | Path], stdin: Optional[TextIO]) -> bool:
    """Standard input is read when no files are given or when it is piped."""
    if stdin is None:
        return False
    return not paths or not stdin_is_interactive(stdin)


def iter_lines(paths: Sequence[str | Path], stdin: Optional[TextIO] = None) -> Iterator[str]:
    """Yield lines from each file in order, then from standard input.

    Files are opened only when reached. Undecodable bytes are replaced so a
    stray binary line cannot abort the run.

    Raises:
        InputError: If no source is available, or a source cannot be opened or read
    """
    read_stdin = should_read_stdin(paths, stdin)
    if not paths and not read_stdin:
        raise InputError(ErrorCode.E100)

    for p in paths:
        path = Path(p)
        try:
            with path.open("r", encoding="utf-8", errors="replace") as f:
                yield from f
        except FileNotFoundError:
            raise InputError(ErrorCode.E301, str(path)) from None
        except OSError as e:
            raise InputError(ErrorCode.E302, f"{path}: {e}") from e

    if read_stdin:
        try:
            yield from stdin
        except OSError as e:
            raise InputError(ErrorCode.E302, f"<stdin>: {e}") from e
