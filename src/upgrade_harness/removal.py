"""Removal of files that may still be held open by a running process.

The old binary being replaced is often the one currently executing. Where
the OS refuses to delete it, the file is moved into the temporary
directory instead, which frees the original path just the same.
"""

from __future__ import annotations

import os
import shutil
import tempfile
import time
from pathlib import Path

from upgrade_harness.config import RELOCATED_TIMESTAMP_FORMAT
from upgrade_harness.errors import RemovalError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.plugins import relocate_path

logger = get_logger(__name__)


def relocation_target(path: Path, temp_dir: Path | None = None) -> Path:
    """Timestamped destination in the temp directory for ``path``.

    The second-resolution timestamp keeps repeated upgrades of the same
    file name apart.
    """
    stamp = time.strftime(RELOCATED_TIMESTAMP_FORMAT)
    base = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
    return base / f"{stamp} {path.name}"


def _delete(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        os.remove(path)


def force_remove(path: Path, temp_dir: Path | None = None) -> Path | None:
    """Make sure nothing is left at ``path``.

    Deletes the path, or moves it into ``temp_dir`` (default: the system
    temporary directory) when deletion fails.

    Args:
        path: File or directory to get rid of
        temp_dir: Where locked paths are moved to

    Returns:
        The relocated location if the fallback was used, otherwise None

    Raises:
        RemovalError: If the path could be neither deleted nor moved
    """
    path = Path(path)
    if not os.path.lexists(path):
        return None

    try:
        _delete(path)
        return None
    except OSError as delete_error:
        logger.debug(f"Could not delete {path} ({delete_error}), moving it aside")
        destination = relocation_target(path, temp_dir)
        try:
            moved_to = relocate_path(path, destination)
        except OSError as move_error:
            raise RemovalError(f"cannot remove or relocate {path}: {move_error}") from move_error
        if moved_to is None:
            raise RemovalError(f"cannot remove {path}: {delete_error}") from delete_error

    logger.debug(f"Moved {path} to {moved_to}")
    return moved_to
