"""Destination name resolution: timestamp -> unique filename in the output directory."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable

from exif_renamer.config import OUTPUT_EXTENSION

logger = logging.getLogger(__name__)

MAX_SUFFIX = 100000


class ClaimedNames:
    """Set of destination basenames taken during a run, safe to share between workers."""

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[str] = set(names)
        self._lock = threading.Lock()

    @classmethod
    def from_directory(cls, directory: Path) -> "ClaimedNames":
        """Seed with the names already present in directory."""
        if not directory.is_dir():
            return cls()
        return cls(entry.name for entry in directory.iterdir())

    def claim_first_free(self, candidates: Iterable[str], directory: Path) -> str:
        """Claim and return the first candidate that is neither claimed nor on disk.

        The whole scan runs under the lock, so two workers can never come
        away with the same name.
        """
        with self._lock:
            for name in candidates:
                if name in self._names or (directory / name).exists():
                    continue
                self._names.add(name)
                return name
        raise RuntimeError(f"No free name left in {directory}")

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._names

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)


def format_base_name(timestamp: datetime) -> str:
    """2023-01-01 10:00:00 -> '2023-01-01_10-00-00'."""
    return (
        f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d}_"
        f"{timestamp.hour:02d}-{timestamp.minute:02d}-{timestamp.second:02d}"
    )


def candidate_names(timestamp: datetime):
    """Yield '<base>.jpg', '<base>_1.jpg', '<base>_2.jpg', ..."""
    base = format_base_name(timestamp)
    yield f"{base}{OUTPUT_EXTENSION}"
    for counter in range(1, MAX_SUFFIX):
        yield f"{base}_{counter}{OUTPUT_EXTENSION}"


def resolve_destination(
    timestamp: datetime, out_dir: Path, claimed: ClaimedNames,
) -> Path:
    """Pick and claim a unique destination path for a photo taken at timestamp."""
    name = claimed.claim_first_free(candidate_names(timestamp), out_dir)
    logger.debug(f"Claimed {name}")
    return out_dir / name
