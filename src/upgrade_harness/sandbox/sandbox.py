import tempfile
from pathlib import Path

from upgrade_harness.config import SANDBOX_PREFIX
from upgrade_harness.errors import RemovalError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.models.settings import HarnessSettings
from upgrade_harness.removal import force_remove

logger = get_logger(__name__)


class Sandbox:
    """Disposable node home for one validation run.

    Creates a fresh, uniquely named directory under the staging root and
    removes it again on exit, whether or not the run succeeded. A
    directory is never handed out twice.

    Usage:
        with Sandbox(settings) as sandbox:
            run_command(sandbox.home, binary, "init")
    """

    def __init__(self, settings: HarnessSettings | None = None):
        self.settings = settings or HarnessSettings()

        self._home: Path | None = None
        self.kept: bool = False

    @property
    def home(self) -> Path:
        """The sandbox directory (available after entering context)."""
        if self._home is None:
            raise RuntimeError("Sandbox not initialized. Use as context manager.")
        return self._home

    def __enter__(self) -> "Sandbox":
        """Create the sandbox directory."""
        staging_root = self.settings.resolve_staging_root()
        staging_root.mkdir(mode=0o755, parents=True, exist_ok=True)

        self._home = Path(tempfile.mkdtemp(prefix=SANDBOX_PREFIX, dir=staging_root))
        logger.debug(f"Created sandbox {self._home}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ARG002
        """Remove the sandbox directory; removal problems are only logged."""
        if self._home is None:
            return

        if exc_type is not None and self.settings.keep_on_failure:
            self.kept = True
            logger.warning(f"Keeping sandbox of failed run at {self._home}")
            return

        try:
            force_remove(self._home)
        except RemovalError as e:
            logger.error(f"error cleaning up staging directory: {e}")
