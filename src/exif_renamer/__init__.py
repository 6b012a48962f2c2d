"""Rename JPEG photos by their EXIF capture time."""

__version__ = "0.1.0"
