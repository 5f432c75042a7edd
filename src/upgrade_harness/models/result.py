"""Validation result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from upgrade_harness.models.candidate import CandidateBinary


class ValidationStep(Enum):
    """Steps of an upgrade check, in execution order."""

    ENSURE_EXECUTABLE = "ensure executable"
    CREATE_STAGING = "create staging area"
    INIT = "init"
    CHECK_VERSION = "check version"
    TWEAK_CONFIG = "tweak config"
    START_DAEMON = "start daemon"
    ADD_CAT = "add/cat round trip"
    REFS_LOCAL = "refs local listing"


class ValidationStatus(Enum):
    """How a successful validation run ended."""

    PASSED = "passed"
    PASSED_WITHOUT_DAEMON = "passed-without-daemon"
    """Candidate predates port-zero support, so daemon checks were skipped"""


@dataclass
class CommandResult:
    """Outcome of one one-shot invocation of the candidate."""

    args: list[str]
    exit_code: int
    output: str
    """Combined stdout and stderr"""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass
class ValidationResult:
    """Result of a validation run that did not fail."""

    candidate: CandidateBinary
    status: ValidationStatus
    duration_seconds: float = 0.0
    steps: list[ValidationStep] = field(default_factory=list)
    """Steps completed, in order"""

    @property
    def daemon_checked(self) -> bool:
        return self.status is ValidationStatus.PASSED
