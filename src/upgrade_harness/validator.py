"""End-to-end check of a candidate binary before it replaces the installed one.

Order of a run:

    ensure executable -> create sandbox -> init -> check version
    -> (releases before v0.3.8 stop here)
    -> tweak config -> start daemon -> add/cat -> refs local
    -> stop daemon -> remove sandbox

The daemon and the sandbox are context managers nested in that order, so
on any exit the daemon is killed and reaped before its directory goes.
"""

from __future__ import annotations

import contextlib
import os
import time
from collections.abc import Iterator

from upgrade_harness.errors import HarnessError, ValidationError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.models.candidate import CandidateBinary
from upgrade_harness.models.result import ValidationResult, ValidationStatus, ValidationStep
from upgrade_harness.models.settings import HarnessSettings
from upgrade_harness.process.daemon import start_daemon
from upgrade_harness.sandbox import Sandbox, tweak_config
from upgrade_harness.smoke import (
    check_add_cat,
    check_init,
    check_refs_local,
    check_version,
    daemon_checks_supported,
)

logger = get_logger(__name__)

DAEMON_CHECKS = (
    (ValidationStep.ADD_CAT, check_add_cat),
    (ValidationStep.REFS_LOCAL, check_refs_local),
)
"""Checks run against the live daemon, in order"""


class UpgradeValidator:
    """Validates candidate binaries with one set of settings.

    Usage:
        validator = UpgradeValidator(settings)
        result = validator.validate(CandidateBinary(path, "v0.5.0"))
    """

    def __init__(self, settings: HarnessSettings | None = None):
        self.settings = settings or HarnessSettings()
        self._completed: list[ValidationStep] = []

    @contextlib.contextmanager
    def _step(self, step: ValidationStep) -> Iterator[None]:
        """Turn any failure inside the block into a ValidationError for ``step``."""
        try:
            yield
        except ValidationError:
            raise
        except (HarnessError, OSError) as e:
            output = getattr(e, "output", "")
            raise ValidationError(step, str(e), output) from e
        self._completed.append(step)

    def validate(self, candidate: CandidateBinary) -> ValidationResult:
        """Run every check against ``candidate``.

        Returns:
            ValidationResult; PASSED_WITHOUT_DAEMON for releases too old
            to run sandboxed

        Raises:
            ValidationError: On the first failing step. Cleanup has already
                run by the time it propagates.
        """
        self._completed = []
        start_time = time.time()
        binary = candidate.path

        with self._step(ValidationStep.ENSURE_EXECUTABLE):
            os.chmod(binary, 0o755)

        with contextlib.ExitStack() as stack:
            with self._step(ValidationStep.CREATE_STAGING):
                sandbox = stack.enter_context(Sandbox(self.settings))
            home = sandbox.home

            with self._step(ValidationStep.INIT):
                check_init(home, binary, self.settings)

            with self._step(ValidationStep.CHECK_VERSION):
                check_version(home, candidate, self.settings)

            if not daemon_checks_supported(candidate):
                logger.info(
                    "== skipping tests with daemon, versions before 0.3.8 do not support port zero =="
                )
                return self._result(candidate, ValidationStatus.PASSED_WITHOUT_DAEMON, start_time)

            logger.debug("Tweaking test config to avoid external interference")
            with self._step(ValidationStep.TWEAK_CONFIG):
                tweak_config(home)

            logger.debug("Starting up daemon")
            with self._step(ValidationStep.START_DAEMON):
                stack.enter_context(start_daemon(home, binary, self.settings))

            for step, check in DAEMON_CHECKS:
                with self._step(step):
                    check(home, binary, self.settings)

        logger.info("success!")
        return self._result(candidate, ValidationStatus.PASSED, start_time)

    def _result(
        self, candidate: CandidateBinary, status: ValidationStatus, start_time: float
    ) -> ValidationResult:
        return ValidationResult(
            candidate=candidate,
            status=status,
            duration_seconds=time.time() - start_time,
            steps=list(self._completed),
        )


def validate_binary(
    candidate: CandidateBinary, settings: HarnessSettings | None = None
) -> ValidationResult:
    """Validate ``candidate`` with a one-off UpgradeValidator."""
    return UpgradeValidator(settings).validate(candidate)


__all__ = ["DAEMON_CHECKS", "UpgradeValidator", "validate_binary"]
