from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence, TextIO

from tshistogram import __version__
from tshistogram.config import Config, load_config
from tshistogram.errors import (
    ErrorCode,
    ParseFailure,
    TSHException,
    handle_exception,
    is_verbose,
    make_error,
    set_verbose,
)
from tshistogram.histogram.bins import Bins
from tshistogram.histogram.chart import build_chart
from tshistogram.ingest import ingest
from tshistogram.inputs import iter_lines
from tshistogram.render.bars import make_console, render_chart, use_color
from tshistogram.timefmt.layouts import layout_help

# Skipped lines echoed with --debug
MAX_DEBUG_SKIPS = 20


def _stdin() -> Optional[TextIO]:
    """Standard input with undecodable bytes replaced."""
    stdin = sys.stdin
    if stdin is None:
        return None
    reconfigure = getattr(stdin, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="replace")
    return stdin


def _print_config(config: Config) -> None:
    print("Effective configuration:", file=sys.stderr)
    print(f"  format:     {config.format}", file=sys.stderr)
    print(f"  interval:   {config.interval}", file=sys.stderr)
    print(f"  timezone:   {config.tz_name}", file=sys.stderr)
    print(f"  bar length: {config.bar_length}", file=sys.stderr)
    print(f"  color:      {config.color.value}", file=sys.stderr)
    print(f"  max series: {config.max_series}", file=sys.stderr)
    if config.has_range:
        print(f"  range:      {config.time_from} ~ {config.time_to}", file=sys.stderr)
    if config.config_path:
        print(f"  config:     {config.config_path}", file=sys.stderr)


def _cmd_histogram(args: argparse.Namespace) -> int:
    config = load_config(
        cli_overrides={
            "format": args.format,
            "interval": args.interval,
            "timezone": args.timezone,
            "bar_length": args.bar_length,
            "color": args.color,
            "time_from": args.time_from,
            "time_to": args.time_to,
            "max_series": args.max_series,
        },
        config_file=args.config,
    )
    debug = getattr(args, "debug", False)
    if debug:
        _print_config(config)

    shown = 0

    def _report_skip(line: str, exc: ParseFailure) -> None:
        nonlocal shown
        if shown < MAX_DEBUG_SKIPS:
            print(f"  skipped: {line[:80]!r} ({type(exc).__name__})", file=sys.stderr)
        shown += 1

    bins = Bins(config.interval)
    stats = ingest(
        iter_lines(args.files, _stdin()),
        bins,
        fmt=config.format,
        tz=config.tz,
        year=config.year,
        on_skip=_report_skip if debug else None,
    )
    if debug:
        print(f"Parsed {stats.parsed} lines, skipped {stats.skipped}", file=sys.stderr)

    chart = build_chart(
        bins,
        bar_length=config.bar_length,
        max_series=config.max_series,
        time_from=config.time_from,
        time_to=config.time_to,
    )

    colorize = use_color(config.color, len(chart.series), make_console().is_terminal)
    render_chart(chart, make_console(colorize=colorize), tz=config.tz, colorize=colorize)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tshistogram",
        description="Count timestamped lines per time bucket and draw a histogram.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=layout_help(),
    )
    p.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Input files (standard input is read when none are given or when it is piped)",
    )
    p.add_argument(
        "-f",
        "--format",
        help="Format for parsing the input time (default: guess)",
    )
    p.add_argument(
        "-i",
        "--interval",
        "--gap",
        dest="interval",
        help="Time duration to aggregate, e.g. 30s, 5m, 1h (default: 5m)",
    )
    p.add_argument(
        "-z",
        "--tz",
        "--loc",
        dest="timezone",
        help="Time zone for display and zone-less timestamps (default: UTC)",
    )
    p.add_argument(
        "-l",
        "--bar-length",
        "--barlength",
        dest="bar_length",
        help="Bar length of the largest bucket (default: 60)",
    )
    p.add_argument(
        "-c",
        "--color",
        help="Color series: never, always or auto (default: auto)",
    )
    p.add_argument(
        "--from",
        dest="time_from",
        help="Start of the displayed range, in the input format",
    )
    p.add_argument(
        "--to",
        dest="time_to",
        help="End of the displayed range, in the input format",
    )
    p.add_argument(
        "-s",
        "--max-series",
        dest="max_series",
        help="Merge series beyond this count into (Other) (default: 8)",
    )
    p.add_argument(
        "--config",
        help="YAML config file (default: $TSHIST_CONFIG)",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Show configuration and skipped lines on stderr",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show full tracebacks on errors",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.set_defaults(func=_cmd_histogram)
    return p


def main(argv: Sequence[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    # Set verbose mode for error handling
    set_verbose(args.verbose)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        make_error(ErrorCode.E101).print()
        return 130
    except TSHException as e:
        handle_exception(e, e.code, e.details)
        return 1
    except Exception as e:
        # Generic exception handler
        if is_verbose():
            import traceback
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
            print("Run with --verbose for full traceback", file=sys.stderr)
        return 1
