from upgrade_harness.models.candidate import CandidateBinary
from upgrade_harness.models.result import (
    CommandResult,
    ValidationResult,
    ValidationStatus,
    ValidationStep,
)
from upgrade_harness.models.settings import HarnessSettings, load_settings

__all__ = [
    "CandidateBinary",
    "CommandResult",
    "HarnessSettings",
    "ValidationResult",
    "ValidationStatus",
    "ValidationStep",
    "load_settings",
]
