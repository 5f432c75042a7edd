"""Exception hierarchy for upgrade-harness.

Every failure a validation run can produce derives from HarnessError, so
callers only need one except clause to turn a run into an exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from upgrade_harness.models.result import ValidationStep


class HarnessError(Exception):
    """Base class for upgrade-harness errors."""


class SettingsError(HarnessError):
    """Settings file could not be read or contains unknown keys."""


class RemovalError(HarnessError):
    """A path could neither be deleted nor moved out of the way."""


class ConfigError(HarnessError):
    """The candidate's config document is unreadable or missing required fields."""


class CommandError(HarnessError):
    """A one-shot invocation of the candidate failed."""

    def __init__(self, message: str, output: str = "", exit_code: int | None = None):
        super().__init__(f"{message}: {output}" if output else message)
        self.output = output
        self.exit_code = exit_code


class DaemonError(HarnessError):
    """The candidate daemon failed to start, come online, or stop."""


class SmokeTestError(HarnessError):
    """A functional check against the candidate produced the wrong result."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class ValidationError(HarnessError):
    """A validation run failed; ``step`` names where."""

    def __init__(self, step: ValidationStep, message: str, output: str = ""):
        super().__init__(f"{step.value}: {message}")
        self.step = step
        self.output = output
