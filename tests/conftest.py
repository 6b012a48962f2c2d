"""Shared test fixtures."""

import struct
import subprocess
from pathlib import Path

import pytest

from exif_renamer.config import RenamerConfig


def _has_exiftool() -> bool:
    try:
        subprocess.run(["exiftool", "-ver"], capture_output=True, check=True)
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False


requires_exiftool = pytest.mark.skipif(
    not _has_exiftool(), reason="exiftool not installed"
)


def _segment(marker: int, payload: bytes) -> bytes:
    return struct.pack(">BBH", 0xFF, marker, len(payload) + 2) + payload


def _exif_app1(date_str: str) -> bytes:
    """APP1 segment holding a big-endian TIFF with IFD0 -> ExifIFD -> DateTimeOriginal."""
    value = date_str.encode("ascii") + b"\x00"
    exif_ifd_offset = 8 + 2 + 12 + 4
    value_offset = exif_ifd_offset + 2 + 12 + 4
    tiff = b"MM\x00\x2a" + struct.pack(">I", 8)
    # IFD0: one entry, ExifIFDPointer (0x8769, LONG)
    tiff += struct.pack(">H", 1)
    tiff += struct.pack(">HHII", 0x8769, 4, 1, exif_ifd_offset)
    tiff += struct.pack(">I", 0)
    # Exif IFD: one entry, DateTimeOriginal (0x9003, ASCII)
    tiff += struct.pack(">H", 1)
    tiff += struct.pack(">HHII", 0x9003, 2, len(value), value_offset)
    tiff += struct.pack(">I", 0)
    tiff += value
    return _segment(0xE1, b"Exif\x00\x00" + tiff)


def build_jpeg(date_str=None, padding: int = 0) -> bytes:
    """Assemble a minimal JPEG.

    padding bytes of COM segments are placed before the EXIF segment, which
    pushes the EXIF block past a bounded read window.
    """
    data = b"\xff\xd8"
    while padding > 0:
        chunk = min(padding, 60000)
        data += _segment(0xFE, b"\x00" * chunk)
        padding -= chunk
    if date_str is not None:
        data += _exif_app1(date_str)
    data += _segment(0xE0, b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00")
    return data + b"\xff\xd9"


@pytest.fixture
def make_jpeg():
    """Factory fixture writing a JPEG with an optional DateTimeOriginal."""

    def _make(path: Path, date_str=None, padding: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(build_jpeg(date_str, padding))
        return path

    return _make


@pytest.fixture
def in_dir(tmp_path: Path) -> Path:
    d = tmp_path / "in"
    d.mkdir()
    return d


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def make_config(in_dir, out_dir):
    """Factory fixture for creating RenamerConfig with overrides."""

    def _make(**overrides):
        defaults = dict(
            in_dir=in_dir,
            out_dir=out_dir,
            full_scan=False,
            workers=4,
            dry_run=False,
            verbose=False,
            log_dir=None,
        )
        defaults.update(overrides)
        return RenamerConfig(**defaults)

    return _make
