"""Pipeline orchestrator: scan -> (read -> resolve -> move) per file on a worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

from exif_renamer.config import RenamerConfig
from exif_renamer.errors import (
    CaptureTimeNotFoundError,
    CaptureTimeParseError,
    MetadataError,
)
from exif_renamer.metadata import read_capture_time
from exif_renamer.models import Outcome, PhotoTask, RunSummary
from exif_renamer.mover import move_file
from exif_renamer.resolver import ClaimedNames, resolve_destination
from exif_renamer.scanner import Scanner

logger = logging.getLogger(__name__)


class Pipeline:
    """Drives every discovered JPEG through read -> resolve -> move.

    Progress is reported through two optional callbacks, both invoked on the
    submitting thread: on_start(total) once the task list is known, and
    on_task_done(task) once per finished task.
    """

    def __init__(
        self,
        config: RenamerConfig,
        on_task_done: Optional[Callable[[PhotoTask], None]] = None,
        on_start: Optional[Callable[[int], None]] = None,
    ) -> None:
        self.config = config
        self.on_task_done = on_task_done
        self.on_start = on_start
        self.scanner = Scanner(config)
        self.claimed = ClaimedNames.from_directory(config.out_dir)

    def run(self) -> RunSummary:
        tasks = self.scanner.scan()
        logger.info(f"Found {len(tasks)} JPEG files in {self.config.in_dir}")
        return self.process(tasks)

    def process(self, tasks: list[PhotoTask]) -> RunSummary:
        summary = RunSummary(files_scanned=len(tasks), dry_run=self.config.dry_run)
        if self.on_start is not None:
            self.on_start(len(tasks))
        if not tasks:
            logger.info("No files to process.")
            return summary

        with ThreadPoolExecutor(max_workers=max(1, self.config.workers)) as executor:
            futures = {executor.submit(self.process_one, task): task for task in tasks}
            for future in as_completed(futures):
                task = futures[future]
                try:
                    future.result()
                except Exception as e:
                    logger.error(f"Error processing {task.source_path}: {e}")
                    task.outcome = Outcome.FAILED
                    task.error = str(e)
                summary.add(task)
                if self.on_task_done is not None:
                    self.on_task_done(task)

        return summary

    def process_one(self, task: PhotoTask) -> PhotoTask:
        """Run one file through the whole pipeline; failures end up on the task."""
        try:
            task.timestamp = read_capture_time(task.source_path, self.config.full_scan)
        except (CaptureTimeNotFoundError, CaptureTimeParseError) as e:
            logger.info(f"SKIP: {task.source_path} ({e})")
            task.outcome = Outcome.SKIPPED_NO_METADATA
            task.error = str(e)
            return task
        except (MetadataError, OSError) as e:
            logger.warning(f"Cannot read {task.source_path}: {e}")
            task.outcome = Outcome.FAILED
            task.error = str(e)
            return task

        task.destination = resolve_destination(
            task.timestamp, self.config.out_dir, self.claimed,
        )

        prefix = "[DRY-RUN] " if self.config.dry_run else ""
        logger.debug(f"{prefix}MOVE: {task.source_path} -> {task.destination}")
        if not self.config.dry_run:
            try:
                move_file(task.source_path, task.destination)
            except OSError as e:
                logger.warning(f"Failed to move {task.source_path}: {e}")
                task.outcome = Outcome.FAILED
                task.error = str(e)
                return task

        task.outcome = Outcome.MOVED
        return task
