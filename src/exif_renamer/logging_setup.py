"""Logging configuration for exif-renamer."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "exif_renamer"


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> Optional[Path]:
    """Configure the exif_renamer logger with a console handler.

    When log_dir is given a timestamped file handler is added as well
    (e.g. 'exif-renamer_20260216_143022.log'); its path is returned.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)-7s] %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(console)

    if log_dir is None:
        return None

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"exif-renamer_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
    ))
    root.addHandler(fh)
    return log_file
