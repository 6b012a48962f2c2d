"""Recursive JPEG discovery in the input directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from exif_renamer.config import JPEG_EXTENSIONS, RenamerConfig
from exif_renamer.models import PhotoTask

logger = logging.getLogger(__name__)


def is_jpeg(path: Path) -> bool:
    return path.suffix.lower() in JPEG_EXTENSIONS


class Scanner:
    def __init__(self, config: RenamerConfig) -> None:
        self.config = config

    def scan(self) -> list[PhotoTask]:
        """Walk the input directory and return one PhotoTask per JPEG, sorted by path."""
        out_dir = self.config.out_dir.resolve()
        found: list[Path] = []

        for root, dirs, files in os.walk(self.config.in_dir, onerror=self._on_walk_error):
            root_path = Path(root)
            dirs[:] = sorted(
                d for d in dirs if (root_path / d).resolve() != out_dir
            )

            for filename in files:
                file_path = root_path / filename
                if not is_jpeg(file_path):
                    continue
                if not file_path.is_file():
                    logger.debug(f"Not a regular file: {file_path}")
                    continue
                found.append(file_path)

        found.sort()
        return [PhotoTask(source_path=p) for p in found]

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")
