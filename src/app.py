"""Application entry point for sigscope."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console
from rich.table import Table
from rich.text import Text

import settings
from adapters.memory_kv import InMemoryKeyValueStore
from adapters.sqlite_kv import SQLiteKeyValueStore
from core.models import DisplayRecord
from core.ports import KeyValuePort
from core.processor import ScanProcessor
from core.view import ASCENDING, DESCENDING, SORT_KEYS, SortConfig, project

NAME = "SIGSCOPE"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/sigscope.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_kv(in_memory: bool) -> KeyValuePort:
    if in_memory:
        return InMemoryKeyValueStore()
    storage = SQLiteKeyValueStore(settings.DB_PATH)
    storage.init_db()
    return storage


def _build_processor(in_memory: bool = False) -> ScanProcessor:
    kv = _build_kv(in_memory)
    logging.getLogger(__name__).info(
        "Known signatures expire after %s days (db: %s)",
        settings.SCAN_CONFIG.expiration_days,
        "memory" if in_memory else settings.DB_PATH,
    )
    return ScanProcessor(kv, settings.SCAN_CONFIG)


def render_table(records: list[DisplayRecord]) -> Table:
    """Build a rich table for the CLI listing."""

    table = Table(show_lines=False)
    table.add_column("ID", style="bold")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Signal", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Flags")

    for record in records:
        status = Text("Known", style="dim") if record.is_known else Text("New", style="bold green")
        flags = []
        if record.is_favourited:
            flags.append("*")
        if record.is_ignored:
            flags.append("ignored")
        row_style = "dim strike" if record.is_ignored else None
        table.add_row(
            record.identifier,
            status,
            record.effective_category,
            record.name,
            record.signal,
            record.distance,
            " ".join(flags),
            style=row_style,
        )
    return table


def _scan(args: argparse.Namespace) -> int:
    if args.file and args.file != "-":
        with open(args.file, "r", encoding="utf-8") as handle:
            text = handle.read()
    else:
        text = sys.stdin.read()

    processor = _build_processor(args.memory)
    batch = processor.submit(text)
    sort = SortConfig(key=args.sort, direction=DESCENDING if args.desc else ASCENDING)
    visible = project(batch, sort, args.unknown_only or processor.view.unknown_only)

    console = Console()
    if visible:
        console.print(render_table(visible))
    elif batch:
        console.print("No new signatures.")
    else:
        console.print("No signatures to display.")
    return 0


def _toggle(args: argparse.Namespace) -> int:
    processor = _build_processor(args.memory)
    if args.command == "favourite":
        state = processor.toggle_favourite(args.identifier)
        print(f"{args.identifier}: {'favourited' if state else 'not favourited'}")
    else:
        state = processor.toggle_ignore(args.identifier)
        print(f"{args.identifier}: {'ignored' if state else 'not ignored'}")
    return 0


def _forget(args: argparse.Namespace) -> int:
    processor = _build_processor(args.memory)
    if not processor.remove_globally(args.identifier):
        print(f"{args.identifier} is not a known signature", file=sys.stderr)
        return 1
    print(f"{args.identifier} forgotten")
    return 0


def _reset(args: argparse.Namespace) -> int:
    processor = _build_processor(args.memory)
    processor.reset()
    print("All known signatures and flags deleted")
    return 0


def _ui(args: argparse.Namespace) -> int:
    _print_banner()
    from frontend.app import ScannerApp

    ScannerApp(_build_processor(args.memory)).run()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="sigscope")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Keep state in memory only (nothing is written to the database)",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("ui", help="Launch the scanner TUI (default)")

    scan = subparsers.add_parser("scan", help="Check a scan snapshot against known signatures")
    scan.add_argument("file", nargs="?", help="Snapshot file (default: stdin)")
    scan.add_argument("--unknown-only", action="store_true", help="Hide known signatures")
    scan.add_argument("--sort", choices=sorted(SORT_KEYS), help="Sort column")
    scan.add_argument("--desc", action="store_true", help="Sort descending")

    for command, help_text in (
        ("favourite", "Toggle the favourite flag of a signature"),
        ("ignore", "Toggle the ignore flag of a signature"),
        ("forget", "Remove a signature from the store and all flag sets"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("identifier")

    subparsers.add_parser("reset", help="Delete all known signatures and flags")

    args = parser.parse_args(argv)
    _configure_logging()

    if args.command == "scan":
        return _scan(args)
    if args.command in {"favourite", "ignore"}:
        return _toggle(args)
    if args.command == "forget":
        return _forget(args)
    if args.command == "reset":
        return _reset(args)
    return _ui(args)


if __name__ == "__main__":
    sys.exit(main())
