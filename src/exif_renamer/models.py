"""Core data types used throughout the exif-renamer pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional


class Outcome(enum.Enum):
    """What happened to a file."""

    PENDING = "pending"
    MOVED = "moved"
    SKIPPED_NO_METADATA = "skipped_no_metadata"
    FAILED = "failed"


@dataclass
class PhotoTask:
    """One discovered JPEG, filled in as it passes each pipeline stage."""

    source_path: Path
    timestamp: Optional[datetime] = None
    destination: Optional[Path] = None
    outcome: Outcome = Outcome.PENDING
    error: str = ""


@dataclass
class RunSummary:
    """Summary counters for a completed run."""

    files_scanned: int = 0
    files_moved: int = 0
    files_skipped: int = 0  # no usable DateTimeOriginal
    files_failed: int = 0
    dry_run: bool = False
    failures: list[str] = field(default_factory=list)

    def add(self, task: PhotoTask) -> None:
        if task.outcome == Outcome.MOVED:
            self.files_moved += 1
        elif task.outcome == Outcome.SKIPPED_NO_METADATA:
            self.files_skipped += 1
        elif task.outcome == Outcome.FAILED:
            self.files_failed += 1
            self.failures.append(f"{task.source_path}: {task.error}")
