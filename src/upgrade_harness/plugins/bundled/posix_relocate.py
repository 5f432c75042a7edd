"""Relocation for platforms without mandatory file locking.

Unlinking an open file works here, so this path only runs when deletion
failed for another reason (permissions on the parent, a busy mount).
"""

import shutil
from pathlib import Path

from upgrade_harness import hookimpl


@hookimpl
def relocate_path(source: Path, destination: Path) -> Path:
    # shutil.move falls back to copy + delete across filesystems
    return Path(shutil.move(source, destination))
