"""Functional checks run against a candidate binary.

The one-shot checks (init, version) need no daemon. The daemon checks
(add/cat, refs local) expect a daemon from ``start_daemon`` to be running
in the same home. Every check raises SmokeTestError carrying the process
output on failure; nothing is retried.
"""

from pathlib import Path

from upgrade_harness.config import (
    PORT_ZERO_MIN_VERSION,
    SMOKE_PAYLOAD,
    SMOKE_PAYLOAD_CID,
    VERSION_OUTPUT_PREFIX,
)
from upgrade_harness.errors import CommandError, SmokeTestError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.models.candidate import CandidateBinary
from upgrade_harness.models.settings import HarnessSettings
from upgrade_harness.process.commands import execute, run_command
from upgrade_harness.versions import precedes

logger = get_logger(__name__)


def check_init(home: Path, binary: Path, settings: HarnessSettings | None = None) -> None:
    """Initialize a node in ``home`` with the candidate."""
    logger.debug(f"Running init in '{home}' with new binary")
    try:
        run_command(home, binary, "init", settings=settings)
    except CommandError as e:
        raise SmokeTestError(f"error initializing with new binary: {e}", e.output) from e


def expected_version_output(candidate: CandidateBinary) -> str:
    return f"{VERSION_OUTPUT_PREFIX} {candidate.bare_version}"


def check_version(
    home: Path, candidate: CandidateBinary, settings: HarnessSettings | None = None
) -> None:
    """The candidate must report exactly the version it was fetched as."""
    logger.debug("Checking new binary outputs correct version")
    try:
        reported = run_command(home, candidate.path, "version", settings=settings)
    except CommandError as e:
        raise SmokeTestError(f"error running version: {e}", e.output) from e

    expected = expected_version_output(candidate)
    if reported.strip() != expected:
        raise SmokeTestError(f"version didnt match: expected {expected!r}, got {reported!r}", reported)


def daemon_checks_supported(candidate: CandidateBinary) -> bool:
    """Releases before v0.3.8 can't bind port zero, so can't run sandboxed."""
    return not precedes(candidate.version, PORT_ZERO_MIN_VERSION)


def check_add_cat(home: Path, binary: Path, settings: HarnessSettings | None = None) -> None:
    """Add the fixture payload, then read it back by its content identifier."""
    logger.debug("Checking that we can add and cat a file")

    added = execute(home, binary, "add", "-q", input=SMOKE_PAYLOAD, settings=settings)
    if not added.success:
        logger.error(f"add failed with status {added.exit_code}")
        logger.error(added.output)
        raise SmokeTestError(f"add exited with status {added.exit_code}", added.output)

    cid = added.output.strip("\n \t")
    try:
        read_back = run_command(home, binary, "cat", cid, settings=settings)
    except CommandError as e:
        raise SmokeTestError(f"error reading back {cid}: {e}", e.output) from e

    if read_back != SMOKE_PAYLOAD:
        raise SmokeTestError(f"add/cat check failed: {cid} read back as {read_back!r}", read_back)


def check_refs_local(home: Path, binary: Path, settings: HarnessSettings | None = None) -> None:
    """The block added by check_add_cat must be listed by ``refs local``."""
    logger.debug("Checking that file shows up in refs local")

    refs = execute(home, binary, "refs", "local", settings=settings)
    if not refs.success:
        logger.error(f"refs local failed with status {refs.exit_code}")
        logger.error(refs.output)
        raise SmokeTestError(f"refs local exited with status {refs.exit_code}", refs.output)

    if SMOKE_PAYLOAD_CID not in refs.output.split("\n"):
        raise SmokeTestError(f"expected to see {SMOKE_PAYLOAD_CID} in the local refs!", refs.output)

