"""Command-line interface for upgrade-harness."""

from pathlib import Path

import click

from upgrade_harness.config import DEFAULT_SETTINGS_FILE, __version__
from upgrade_harness.console import error, step_failed, success
from upgrade_harness.errors import HarnessError, RemovalError, ValidationError
from upgrade_harness.logging_config import get_logger, setup_logging
from upgrade_harness.models import CandidateBinary, HarnessSettings, ValidationStatus, load_settings
from upgrade_harness.removal import force_remove
from upgrade_harness.validator import UpgradeValidator

logger = get_logger(__name__)


def resolve_settings(
    config_path: Path | None,
    staging_root: Path | None = None,
    keep_on_failure: bool = False,
) -> HarnessSettings:
    """Load settings from ``config_path`` (or ./upgrade-harness.toml) and apply CLI overrides.

    Raises:
        SettingsError: If the settings file is invalid
    """
    if config_path is None and DEFAULT_SETTINGS_FILE.exists():
        config_path = DEFAULT_SETTINGS_FILE

    settings = load_settings(config_path)
    if staging_root is not None:
        settings.staging_root = staging_root
    if keep_on_failure:
        settings.keep_on_failure = True
    return settings


@click.group()
@click.version_option(__version__, prog_name="upgrade-harness")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output (DEBUG level)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Show only warnings and errors",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Explicit log level (overrides -v/-q)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help="Also write a full DEBUG log to this file",
)
def cli(verbose, quiet, log_level, log_file):
    """Check that a downloaded node binary works before it replaces the installed one."""
    if sum([verbose, quiet, log_level is not None]) > 1:
        raise click.UsageError("--verbose, --quiet, and --log-level are mutually exclusive")

    setup_logging(verbose=verbose, quiet=quiet, log_level=log_level, log_file=log_file)


@cli.command(name="check")
@click.argument(
    "binary",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
)
@click.argument("version")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help=f"Settings file (default: ./{DEFAULT_SETTINGS_FILE} if present)",
)
@click.option(
    "--staging-root",
    type=click.Path(file_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help="Directory to create the test sandbox in",
)
@click.option(
    "--keep-on-failure",
    is_flag=True,
    help="Leave the sandbox in place when a check fails",
)
def check(binary, version, config_path, staging_root, keep_on_failure):
    """Validate BINARY, which should report VERSION (e.g. v0.5.0).

    Example:
        upgrade-harness check ./ipfs-new v0.5.0
    """
    try:
        settings = resolve_settings(config_path, staging_root, keep_on_failure)
    except HarnessError as e:
        raise click.ClickException(str(e)) from e

    candidate = CandidateBinary(path=binary, version=version)
    try:
        result = UpgradeValidator(settings).validate(candidate)
    except ValidationError as e:
        step_failed(e.step.value, e.output)
        error(str(e))
        logger.debug("Traceback:", exc_info=True)
        raise SystemExit(1) from e

    if result.status is ValidationStatus.PASSED_WITHOUT_DAEMON:
        success(f"{binary} {version} passed (daemon checks skipped for this release)")
    else:
        success(f"{binary} {version} passed in {result.duration_seconds:.1f}s")


@cli.command(name="remove")
@click.argument("path", type=click.Path(path_type=Path))  # type: ignore[type-var]
@click.option(
    "--temp-dir",
    type=click.Path(file_okay=False, path_type=Path),  # type: ignore[type-var]
    default=None,
    help="Where to move PATH if it is in use (default: system temp dir)",
)
def remove(path, temp_dir):
    """Remove PATH, moving it aside if a running process holds it."""
    try:
        moved_to = force_remove(path, temp_dir)
    except RemovalError as e:
        raise click.ClickException(str(e)) from e

    if moved_to is not None:
        success(f"{path} is in use, moved to {moved_to}")
    else:
        success(f"Removed {path}")


@cli.command(name="init-config")
@click.argument(
    "path",
    type=click.Path(dir_okay=False, path_type=Path),  # type: ignore[type-var]
    default=DEFAULT_SETTINGS_FILE,
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(path, force):
    """Write a settings file with the default values to PATH."""
    if path.exists() and not force:
        raise click.ClickException(f"{path} already exists (use --force to overwrite)")

    path.write_text(HarnessSettings().to_toml(), encoding="utf-8")
    success(f"Wrote {path}")


def main():
    """Entry point for upgrade-harness command."""
    cli()


if __name__ == "__main__":
    main()
