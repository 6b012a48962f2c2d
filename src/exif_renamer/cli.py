"""CLI argument parsing, validation, and main entry point."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from exif_renamer import __version__
from exif_renamer.config import DEFAULT_WORKERS, RenamerConfig
from exif_renamer.errors import DirectoryError
from exif_renamer.logging_setup import LOGGER_NAME, setup_logging
from exif_renamer.models import RunSummary
from exif_renamer.pipeline import Pipeline

logger = logging.getLogger(LOGGER_NAME)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exif-renamer",
        description=(
            "Rename JPEG photos to YYYY-MM-DD_HH-MM-SS.jpg from their EXIF "
            "DateTimeOriginal and move them into an output directory."
        ),
    )
    parser.add_argument(
        "-i", "--in-dir",
        type=Path,
        required=True,
        help="Input directory, scanned recursively for .jpg/.jpeg files.",
    )
    parser.add_argument(
        "-o", "--out-dir",
        type=Path,
        required=True,
        help="Output directory (created if absent).",
    )
    parser.add_argument(
        "-f", "--full-scan",
        action="store_true",
        help="Read the entire file to find EXIF data. Slower but more reliable.",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Number of parallel workers (default: {DEFAULT_WORKERS}).",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Show what would be renamed without moving anything.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG-level) console output.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Also write a timestamped log file to this directory.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def validate_directories(in_dir: Path, out_dir: Path, create: bool = True) -> None:
    """Check the input directory is readable and prepare the output directory.

    Same or nested input/output directories are rejected: the output would
    otherwise be rescanned as input.
    """
    if not in_dir.is_dir():
        raise DirectoryError(
            f"Input directory does not exist or is not a directory: {in_dir}"
        )
    try:
        with os.scandir(in_dir):
            pass
    except OSError as e:
        raise DirectoryError(f"Cannot read input directory {in_dir}: {e.strerror}")

    in_resolved = in_dir.resolve()
    out_resolved = out_dir.resolve()
    if out_resolved == in_resolved:
        raise DirectoryError("Input and output directories must differ.")
    if in_resolved in out_resolved.parents:
        raise DirectoryError(
            "Output directory cannot be a subdirectory of the input directory."
        )
    if out_resolved in in_resolved.parents:
        raise DirectoryError(
            "Input directory cannot be a subdirectory of the output directory."
        )

    if out_dir.exists() and not out_dir.is_dir():
        raise DirectoryError(f"Output path is not a directory: {out_dir}")
    if create:
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"Cannot create output directory {out_dir}: {e.strerror}")


def _check_exiftool() -> None:
    """Verify exiftool is installed and on PATH."""
    try:
        subprocess.run(
            ["exiftool", "-ver"],
            capture_output=True,
            check=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError):
        print("Error: exiftool is not installed or not in PATH.", file=sys.stderr)
        print("Install it with: sudo apt install libimage-exiftool-perl", file=sys.stderr)
        raise SystemExit(1)


def _log_summary(summary: RunSummary) -> None:
    if summary.failures:
        logger.info("-" * 60)
        logger.info("Errors:")
        for failure in summary.failures:
            logger.info(f"  {failure}")

    logger.info("=" * 60)
    logger.info("Summary:")
    logger.info(f"  Scanned:     {summary.files_scanned}")
    logger.info(f"  Moved:       {summary.files_moved}")
    logger.info(f"  No date:     {summary.files_skipped}")
    logger.info(f"  Failed:      {summary.files_failed}")
    if summary.dry_run:
        logger.info("  (DRY-RUN -- no files were changed)")
    logger.info("=" * 60)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    _check_exiftool()

    try:
        validate_directories(args.in_dir, args.out_dir, create=not args.dry_run)
    except DirectoryError as e:
        raise SystemExit(f"Error: {e}")

    config = RenamerConfig(
        in_dir=args.in_dir.resolve(),
        out_dir=args.out_dir.resolve(),
        full_scan=args.full_scan,
        workers=max(1, args.jobs),
        dry_run=args.dry_run,
        verbose=args.verbose,
        log_dir=args.log_dir,
    )

    logger.info("=" * 60)
    logger.info(f"exif-renamer v{__version__}")
    logger.info(f"  Input:     {config.in_dir}")
    logger.info(f"  Output:    {config.out_dir}")
    logger.info(f"  Full scan: {config.full_scan}")
    logger.info(f"  Workers:   {config.workers}")
    logger.info(f"  Dry-run:   {config.dry_run}")
    logger.info("=" * 60)

    console_level = logging.DEBUG if args.verbose else logging.INFO
    with logging_redirect_tqdm(loggers=[logger]), tqdm(
        total=0, unit="file", desc="Renaming", disable=None,
    ) as bar:
        # The redirect swaps in its own console handler, which starts at NOTSET.
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        pipeline = Pipeline(
            config,
            on_task_done=lambda task: bar.update(1),
            on_start=lambda total: bar.reset(total=total),
        )
        summary = pipeline.run()

    _log_summary(summary)
