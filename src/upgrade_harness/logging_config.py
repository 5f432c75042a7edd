"""Logging configuration for upgrade-harness."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from upgrade_harness.console import err_console

LOGGER_NAME = "upgrade_harness"

FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_level(verbose: bool, quiet: bool, log_level: str | None) -> int:
    # explicit > verbose > quiet > INFO
    if log_level:
        return getattr(logging, log_level.upper())
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_level: str | None = None,
    log_file: Path | None = None,
) -> None:
    """Configure logging for upgrade-harness.

    Console output goes through Rich on stderr. When ``log_file`` is given,
    every record (DEBUG and up) is also appended there, so a failed upgrade
    check leaves a full trace behind even when the console was quiet.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Show only WARNING and above
        log_level: Explicit log level (overrides verbose/quiet)
        log_file: Optional file receiving the full DEBUG log
    """
    level = _resolve_level(verbose, quiet, log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    console_handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the upgrade_harness namespace.

    Args:
        name: Module name (typically __name__)
    """
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"

    return logging.getLogger(name)
