"""upgrade-harness: prove a freshly downloaded node binary works before installing it."""

import pluggy

from upgrade_harness.config import __version__
from upgrade_harness.models import CandidateBinary, HarnessSettings
from upgrade_harness.removal import force_remove
from upgrade_harness.validator import UpgradeValidator, validate_binary
from upgrade_harness.versions import precedes

# Convenience export for plugins: from upgrade_harness import hookimpl
hookimpl = pluggy.HookimplMarker("upgrade_harness")

__all__ = [
    "__version__",
    "hookimpl",
    "CandidateBinary",
    "HarnessSettings",
    "UpgradeValidator",
    "force_remove",
    "precedes",
    "validate_binary",
]
