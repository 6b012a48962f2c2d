"""EXIF capture time extraction via exiftool subprocess."""

from __future__ import annotations

import json
import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Optional

from exif_renamer.config import (
    BOUNDED_READ_SIZE,
    EXIF_DATE_FIELD,
    EXIF_DATE_FORMAT,
    EXIFTOOL_TIMEOUT,
)
from exif_renamer.errors import (
    CaptureTimeNotFoundError,
    CaptureTimeParseError,
    MetadataError,
)

logger = logging.getLogger(__name__)


def parse_capture_time(value: Optional[str]) -> datetime:
    """Parse 'YYYY:MM:DD HH:MM:SS' into a datetime.

    Raises CaptureTimeNotFoundError for a missing value and
    CaptureTimeParseError for anything that is not a real calendar date/time
    (including the '0000:00:00 00:00:00' placeholder some cameras write).
    """
    if value is None or not str(value).strip():
        raise CaptureTimeNotFoundError(f"No {EXIF_DATE_FIELD} tag")
    text = str(value).strip()
    try:
        return datetime.strptime(text, EXIF_DATE_FORMAT)
    except ValueError as e:
        raise CaptureTimeParseError(
            f"Malformed {EXIF_DATE_FIELD} value {text!r}"
        ) from e


def read_capture_time(path: Path, full_scan: bool = False) -> datetime:
    """Return the DateTimeOriginal of a JPEG file.

    Only the first BOUNDED_READ_SIZE bytes are examined unless full_scan is
    set, in which case the whole file is. OSError from reading the file
    propagates unchanged.
    """
    with open(path, "rb") as fh:
        data = fh.read() if full_scan else fh.read(BOUNDED_READ_SIZE)

    value = _extract_date_field(data, path)
    return parse_capture_time(value)


def _extract_date_field(data: bytes, path: Path) -> Optional[str]:
    """Pipe image bytes through exiftool, return the raw tag text or None."""
    cmd = [
        "exiftool",
        "-json",
        f"-EXIF:{EXIF_DATE_FIELD}",
        "-",
    ]
    try:
        proc = subprocess.run(
            cmd,
            input=data,
            capture_output=True,
            timeout=EXIFTOOL_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise MetadataError(f"exiftool timed out on {path}") from e

    stdout = proc.stdout.decode("utf-8", errors="replace").strip()
    if not stdout:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise MetadataError(
            f"exiftool failed on {path} (exit {proc.returncode}): {stderr[:200]}"
        )

    try:
        items = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise MetadataError(f"exiftool JSON parse error on {path}: {e}") from e

    if not items:
        return None

    item = items[0]
    if "Error" in item:
        logger.debug(f"exiftool: {path}: {item['Error']}")
    value = item.get(EXIF_DATE_FIELD)
    if value is None:
        raise CaptureTimeNotFoundError(
            f"No {EXIF_DATE_FIELD} tag in {path}"
            + ("" if "Error" not in item else f" ({item['Error']})")
        )
    return str(value)
