"""Tests for logging configuration."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from upgrade_harness.logging_config import LOGGER_NAME, get_logger, setup_logging


class TestLoggingConfiguration:
    def test_default_log_level(self):
        setup_logging()
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.INFO

    def test_verbose_flag(self):
        setup_logging(verbose=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.DEBUG

    def test_quiet_flag(self):
        setup_logging(quiet=True)
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_log_level_overrides_verbose(self):
        setup_logging(verbose=True, log_level="warning")
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_uses_rich_handler_without_propagation(self):
        setup_logging()
        logger = logging.getLogger(LOGGER_NAME)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_log_file_receives_debug_while_console_stays_quiet(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "harness.log"
        setup_logging(quiet=True, log_file=log_file)

        get_logger("validator").debug("waiting on daemon to come online")
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()

        console_handler, file_handler = logging.getLogger(LOGGER_NAME).handlers
        assert console_handler.level == logging.WARNING
        assert file_handler.level == logging.DEBUG
        assert "waiting on daemon to come online" in log_file.read_text()
        file_handler.close()

    def test_get_logger_with_module_name(self):
        assert get_logger("smoke").name == f"{LOGGER_NAME}.smoke"

    def test_get_logger_preserves_full_name(self):
        assert get_logger("upgrade_harness.smoke").name == "upgrade_harness.smoke"
