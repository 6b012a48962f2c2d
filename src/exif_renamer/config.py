"""Configuration constants and runtime config dataclass."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional

JPEG_EXTENSIONS: FrozenSet[str] = frozenset({".jpg", ".jpeg"})

OUTPUT_EXTENSION: str = ".jpg"

EXIF_DATE_FIELD: str = "DateTimeOriginal"
EXIF_DATE_FORMAT: str = "%Y:%m:%d %H:%M:%S"

BOUNDED_READ_SIZE: int = 64 * 1024  # bytes
EXIFTOOL_TIMEOUT: int = 30  # seconds, per file

DEFAULT_WORKERS: int = os.cpu_count() or 4


@dataclass(frozen=True)
class RenamerConfig:
    """Immutable runtime configuration assembled from CLI args."""

    in_dir: Path
    out_dir: Path
    full_scan: bool = False
    workers: int = DEFAULT_WORKERS
    dry_run: bool = False
    verbose: bool = False
    log_dir: Optional[Path] = None
