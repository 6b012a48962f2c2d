"""File relocation with rename semantics and a safe cross-device fallback."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

# Filesystems that cannot hard-link (FAT, some network mounts) answer with these.
NO_LINK_ERRNOS = frozenset({
    errno.EPERM,
    errno.ENOTSUP,
    errno.EOPNOTSUPP,
    errno.EMLINK,
})


def move_file(source: Path, destination: Path) -> None:
    """Move source to destination, never overwriting an existing file.

    Raises FileExistsError if destination is already taken, and OSError for
    any other failure. The source is only removed once the destination holds
    the complete file.
    """
    if destination.exists():
        raise FileExistsError(
            errno.EEXIST, "Destination already exists", str(destination),
        )

    try:
        os.link(source, destination)
    except FileExistsError:
        raise
    except OSError as e:
        if e.errno == errno.EXDEV:
            logger.debug(f"Cross-device move, copying: {source} -> {destination}")
            _copy_then_delete(source, destination)
            return
        if e.errno in NO_LINK_ERRNOS:
            logger.debug(f"Hard links unsupported, renaming: {source} -> {destination}")
            _rename_no_clobber(source, destination)
            return
        raise

    try:
        os.unlink(source)
    except OSError as e:
        _discard_partial(destination)
        raise OSError(
            e.errno,
            f"Could not remove source after linking to {destination}: {e.strerror}",
            str(source),
        ) from e


def _rename_no_clobber(source: Path, destination: Path) -> None:
    # Without hard links the exists/rename pair is the best available.
    if destination.exists():
        raise FileExistsError(
            errno.EEXIST, "Destination already exists", str(destination),
        )
    os.rename(source, destination)


def _copy_then_delete(source: Path, destination: Path) -> None:
    with open(source, "rb") as src_fh:
        dest_fh = open(destination, "xb")
        try:
            with dest_fh:
                shutil.copyfileobj(src_fh, dest_fh)
            shutil.copystat(source, destination)
        except OSError:
            _discard_partial(destination)
            raise

    try:
        os.unlink(source)
    except OSError as e:
        raise OSError(
            e.errno,
            f"Copied to {destination} but could not remove source: {e.strerror}",
            str(source),
        ) from e


def _discard_partial(path: Path) -> None:
    """Remove a file this module created, keeping the original error as the one reported."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove partial copy {path}: {e}")
