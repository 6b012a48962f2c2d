"""Exception hierarchy for exif-renamer."""

from __future__ import annotations


class RenamerError(Exception):
    """Base exception for exif-renamer."""


class DirectoryError(RenamerError):
    """Raised when the input or output directory is unusable."""


class MetadataError(RenamerError):
    """Raised when a capture time cannot be obtained from a file."""


class CaptureTimeNotFoundError(MetadataError):
    """No EXIF block, or no DateTimeOriginal tag in it."""


class CaptureTimeParseError(MetadataError):
    """DateTimeOriginal is present but is not a valid date/time."""
