"""CLI entry point for proctop."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from proctop.config import Settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proctop",
        description="Browse and terminate processes from the terminal.",
    )
    parser.add_argument(
        "--refresh-ms",
        type=int,
        default=None,
        metavar="MS",
        help="Milliseconds between process list refreshes (100-60000, default 3000)",
    )
    parser.add_argument(
        "--poll-ms",
        type=int,
        default=None,
        metavar="MS",
        help="Milliseconds between input polls (default 100)",
    )
    parser.add_argument(
        "--proc-root",
        type=Path,
        default=None,
        metavar="PATH",
        help="Directory holding per-process status files (default /proc)",
    )
    parser.add_argument(
        "--meminfo",
        type=Path,
        default=None,
        metavar="PATH",
        help="Memory info file (default /proc/meminfo)",
    )
    parser.add_argument(
        "--no-kill",
        action="store_true",
        default=False,
        help="Disable process termination",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write diagnostic log records to FILE",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        metavar="LEVEL",
        help="Log level for --log-file (default WARNING)",
    )
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """Turn parsed arguments into validated settings."""
    overrides: dict[str, object] = {"enable_kill": not args.no_kill}
    if args.refresh_ms is not None:
        overrides["refresh_interval_ms"] = args.refresh_ms
    if args.poll_ms is not None:
        overrides["input_poll_ms"] = args.poll_ms
    if args.proc_root is not None:
        overrides["proc_root"] = args.proc_root
        if args.meminfo is None:
            overrides["meminfo_path"] = args.proc_root / "meminfo"
    if args.meminfo is not None:
        overrides["meminfo_path"] = args.meminfo
    if args.log_file is not None:
        overrides["log_file"] = args.log_file
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def configure_logging(settings: Settings) -> None:
    """Send log records to the log file; the TUI owns the terminal."""
    if settings.log_file is None:
        logging.getLogger("proctop").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=str(settings.log_file),
        level=settings.numeric_log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for the proctop CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ValidationError as exc:
        print(f"Error: invalid options\n{exc}", file=sys.stderr)
        raise SystemExit(2) from None

    configure_logging(settings)
    logger.info("Starting proctop with %s", settings)

    from proctop.app import ProctopApp

    app = ProctopApp(settings=settings)
    app.run()
