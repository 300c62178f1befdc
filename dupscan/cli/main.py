from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from ..config import Settings, load_settings, parse_log_level, parse_root_list
from ..scanner.errors import ConfigurationError, ScanError
from ..scanner.models import ScanResult
from ..scanner.session import ScanSession
from .display import export_json, format_report, render_summary
from .progress import RichProgressObserver

EXIT_OK = 0
EXIT_SCAN_ERROR = 1
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dupscan",
        description="Find files with identical content across one or more directories.",
    )
    parser.add_argument(
        "roots",
        nargs="*",
        help="Root directories. One argument may hold several roots joined by the separator "
        "(default '||'). Falls back to DUPSCAN_ROOTS when omitted.",
    )
    parser.add_argument("--separator", help="Separator between roots in a single argument.")
    parser.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="NAME",
        help="Directory name to skip wherever it appears (repeatable).",
    )
    parser.add_argument(
        "--cache-paths",
        action="store_true",
        default=None,
        help="Keep the enumerated path list from the first pass instead of walking twice.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail if the tree changes between the two passes.",
    )
    parser.add_argument("--chunk-size", type=int, help="Read size in bytes used for hashing.")
    parser.add_argument("--json", action="store_true", help="Emit the result as JSON.")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    parser.add_argument("--log-level", help="Logging level (default: WARNING).")
    return parser


def resolve_settings(args: argparse.Namespace, settings: Settings) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    if args.separator is not None:
        settings.separator = args.separator
    if args.roots:
        roots: List[str] = []
        for raw in args.roots:
            roots.extend(parse_root_list(raw, settings.separator))
        settings.roots = roots
    else:
        settings.roots = settings.env_roots()
    if not settings.roots:
        raise ConfigurationError("No root directories supplied.", "NO_ROOTS")
    if args.exclude:
        settings.excluded_dirs = list(args.exclude)
    if args.cache_paths:
        settings.cache_paths = True
    if args.strict:
        settings.strict = True
    if args.chunk_size is not None:
        if args.chunk_size <= 0:
            raise ConfigurationError("--chunk-size must be positive.", "INVALID_SETTING")
        settings.chunk_size = args.chunk_size
    if args.log_level:
        settings.log_level = parse_log_level(args.log_level)
    return settings


def _render_summary_table(console: Console, result: ScanResult, elapsed: float) -> None:
    summary = result.summary
    table = Table(title="Summary", box=box.ROUNDED)
    table.add_column("Metric", style="cyan", justify="right")
    table.add_column("Value", style="white")
    table.add_row("Roots scanned", str(summary.get("roots", 0)))
    table.add_row("Files digested", str(summary.get("files_scanned", 0)))
    table.add_row("Duplicate groups", str(summary.get("duplicate_groups", 0)))
    table.add_row("Duplicate files", str(summary.get("duplicate_files", 0)))
    if summary.get("files_skipped"):
        table.add_row("Unreadable files skipped", str(summary["files_skipped"]))
    if summary.get("walk_errors"):
        table.add_row("Directories skipped", str(summary["walk_errors"]))
    table.add_row("Elapsed", f"{elapsed:.2f}s")
    console.print(table)


def _fail(code: str, message: str, status: int) -> int:
    payload = {"error": code, "message": message}
    print(json.dumps(payload), file=sys.stderr)
    return status


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = resolve_settings(args, load_settings())
    except ConfigurationError as exc:
        return _fail(exc.code, str(exc), EXIT_CONFIG_ERROR)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    started = time.perf_counter()
    try:
        session = ScanSession(settings.roots, settings.to_preferences())
        if args.no_progress or args.json:
            result = session.run()
        else:
            with RichProgressObserver() as observer:
                session.observer = observer
                result = session.run()
    except ConfigurationError as exc:
        return _fail(exc.code, str(exc), EXIT_CONFIG_ERROR)
    except ScanError as exc:
        logger.error("Scan aborted: %s", exc)
        return _fail(exc.code, str(exc), EXIT_SCAN_ERROR)
    elapsed = time.perf_counter() - started

    if args.json:
        payload = export_json(result)
        payload["elapsed_seconds"] = round(elapsed, 3)
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    print(format_report(result.groups))
    if args.no_progress:
        for line in render_summary(result):
            print(line)
        print(f"Elapsed: {elapsed:.2f}s")
    else:
        _render_summary_table(Console(), result, elapsed)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
