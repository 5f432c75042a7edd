"""One-shot invocations of the candidate binary."""

import subprocess
from pathlib import Path

from upgrade_harness.errors import CommandError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.models.result import CommandResult
from upgrade_harness.models.settings import HarnessSettings

logger = get_logger(__name__)


def sandboxed_env(home: Path, settings: HarnessSettings) -> dict[str, str]:
    """Environment for the candidate: only the variable naming its home.

    Nothing is inherited, so a production node's settings can't leak into
    the run.
    """
    return {settings.home_env_var: str(home)}


def execute(
    home: Path,
    binary: Path,
    *args: str,
    input: str | None = None,
    settings: HarnessSettings | None = None,
) -> CommandResult:
    """Run ``binary args...`` to completion with stdout and stderr combined.

    Raises:
        CommandError: If the process could not be spawned or timed out
    """
    settings = settings or HarnessSettings()
    argv = [str(binary), *args]
    logger.debug(f"Running {' '.join(argv)}")

    try:
        proc = subprocess.run(
            argv,
            env=sandboxed_env(home, settings),
            input=input,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=settings.command_timeout,
        )
    except subprocess.TimeoutExpired as e:
        output = e.output if isinstance(e.output, str) else ""
        raise CommandError(f"{' '.join(args)} timed out after {e.timeout} seconds", output) from e
    except OSError as e:
        raise CommandError(f"failed to run {binary}: {e}") from e

    return CommandResult(args=list(args), exit_code=proc.returncode, output=proc.stdout or "")


def run_command(
    home: Path,
    binary: Path,
    *args: str,
    input: str | None = None,
    settings: HarnessSettings | None = None,
) -> str:
    """Run a one-shot command and return its output minus one trailing newline.

    Raises:
        CommandError: On spawn failure or a non-zero exit, with the output attached
    """
    result = execute(home, binary, *args, input=input, settings=settings)
    if not result.success:
        raise CommandError(
            f"'{' '.join(args)}' exited with status {result.exit_code}",
            result.output,
            exit_code=result.exit_code,
        )

    return result.output.removesuffix("\n")
