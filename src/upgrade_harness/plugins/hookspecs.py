"""Hook specifications for upgrade-harness plugins.

The only extension point is how a path that refuses to be deleted gets
moved out of the way. Bundled plugins cover Windows and POSIX; a
third-party plugin can take over by registering under the
``upgrade_harness`` entry point group and returning a destination first.

Example plugin implementation:

    from upgrade_harness import hookimpl

    @hookimpl
    def relocate_path(source, destination):
        my_move(source, destination)
        return destination
"""

from pathlib import Path

import pluggy

hookspec = pluggy.HookspecMarker("upgrade_harness")


class RemovalSpec:
    """Hook specifications for relocating paths that can't be deleted."""

    @hookspec(firstresult=True)
    def relocate_path(self, source: Path, destination: Path) -> Path | None:  # type: ignore[empty-body]
        """Move ``source`` to ``destination``, crossing filesystems if needed.

        Args:
            source: Path that could not be deleted (often a running binary)
            destination: Timestamped path inside the temporary directory

        Returns:
            The path the source now lives at, or None to let another plugin try

        Raises:
            OSError: If the move failed; the error reaches the caller unchanged
        """
        ...
