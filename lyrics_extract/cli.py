from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from . import __version__
from .commands import extract as cmd_extract
from .commands import listing as cmd_listing
from .config import Settings, load_settings
from .models import LyricsExtractError

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"
LOG_LEVEL_ENV = "LYRICS_EXTRACT_LOG"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

logger = logging.getLogger(__name__)


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if str(root) not in ("", ".")]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def resolve_log_level(verbose: bool, settings: Settings) -> int:
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV) or settings.log_level
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    level: int,
    display_roots: list[Path],
    warnings_log: Optional[Path] = None,
) -> WarningBufferHandler:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    stream_handler = logging.StreamHandler(sys.stderr)
    if sys.stderr.isatty():
        stream_handler.setFormatter(ColorFormatter(LOG_FORMAT, display_roots))
    else:
        stream_handler.setFormatter(ShortPathFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(stream_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(warn_buffer)

    if warnings_log is not None:
        file_handler = logging.FileHandler(warnings_log, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(ShortPathFormatter(LOG_FORMAT, display_roots))
        root_logger.addHandler(file_handler)

    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lyrics-extract",
        description="Extract lyrics embedded in MP3 files and concatenate them into a text file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-i", "--input", type=Path, help="Directory containing MP3 files or path to a single MP3 file"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file path (default: output.txt)"
    )
    parser.add_argument("-r", "--recursive", action="store_true", help="Recursively search directories")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "-n", "--include-names", action="store_true", help="Include file names in output"
    )
    parser.add_argument(
        "-s", "--separator", action="store_true", help="Add separator between lyrics"
    )
    parser.add_argument(
        "--separator-text",
        default=None,
        help="Separator text, used with --separator (default: ---)",
    )
    parser.add_argument("--config", type=Path, help="Path to lyrics-extract.yaml")
    parser.add_argument(
        "--warnings-log", type=Path, help="Also write warnings and errors to this file"
    )

    subparsers = parser.add_subparsers(dest="command")
    list_parser = subparsers.add_parser(
        "list", help="List all MP3 files found but don't extract lyrics"
    )
    list_parser.add_argument(
        "-i", "--input", type=Path, required=True, help="Directory containing MP3 files"
    )
    list_parser.add_argument(
        "-r", "--recursive", action="store_true", help="Recursively search directories"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None and args.input is None:
        parser.error("the following arguments are required: -i/--input")

    # Listing only runs discovery; the config file is not consulted.
    settings = Settings()
    if args.command is None:
        try:
            settings = load_settings(args.config)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            parser.error(f"invalid configuration: {exc}")
    settings = settings.with_overrides(
        recursive=args.recursive,
        output=args.output,
        include_names=args.include_names,
        separator=args.separator,
        separator_text=args.separator_text,
    )

    input_path: Path = args.input
    display_root = input_path if input_path.is_dir() else input_path.parent
    warn_buffer = configure_logging(
        resolve_log_level(args.verbose, settings),
        [display_root],
        warnings_log=args.warnings_log,
    )

    try:
        match args.command:
            case "list":
                cmd_listing.run(input_path, recursive=settings.scan.recursive)
            case None:
                cmd_extract.run(settings, input_path)
            case _:
                parser.error("Unknown command")
    except LyricsExtractError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
    finally:
        if warn_buffer.records and args.command is None:
            print("\nWarnings/Errors summary:", file=sys.stderr)
            for line in warn_buffer.records:
                print(f" - {line}", file=sys.stderr)
            if args.warnings_log:
                print(f"\nFull warning log: {args.warnings_log}", file=sys.stderr)


if __name__ == "__main__":
    main()
