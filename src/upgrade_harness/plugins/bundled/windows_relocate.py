"""Relocation for Windows, where a running executable can't be deleted.

A running image can still be renamed, so MoveFileEx clears the original
path while the process keeps its handle.
"""

import ctypes
from pathlib import Path

from upgrade_harness import hookimpl

MOVEFILE_COPY_ALLOWED = 0x2


@hookimpl
def relocate_path(source: Path, destination: Path) -> Path:
    kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
    if not kernel32.MoveFileExW(str(source), str(destination), MOVEFILE_COPY_ALLOWED):
        raise ctypes.WinError(ctypes.get_last_error())  # type: ignore[attr-defined]
    return destination
