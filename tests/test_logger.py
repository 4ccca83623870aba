"""
zkLink SDK Logging Tests

Run with:
    pytest tests/test_logger.py -v
"""

import logging
import logging.handlers

import pytest

from zklink_sdk.config import LoggingConfig
from zklink_sdk.logger import (
    SDK_LOGGER_NAME,
    LogManager,
    TerminalSafeFormatter,
    apply_logging_config,
    get_logger,
)


@pytest.fixture
def restore_logging():
    yield
    LogManager().configure(log_level="INFO", file_output=False, force=True)


class TestLogManager:

    def test_singleton(self):
        assert LogManager() is LogManager()

    def test_get_logger_returns_named_logger(self):
        logger = get_logger("zklink_sdk.tests")
        assert logger.name == "zklink_sdk.tests"
        assert logger.getEffectiveLevel() == logging.getLogger(SDK_LOGGER_NAME).level

    def test_only_sdk_hierarchy_configured(self):
        get_logger("zklink_sdk.tests")
        assert logging.getLogger(SDK_LOGGER_NAME).handlers

    def test_configure_without_force_keeps_handlers(self, restore_logging):
        get_logger("zklink_sdk.tests")
        before = list(logging.getLogger(SDK_LOGGER_NAME).handlers)
        LogManager().configure(log_level="DEBUG")
        assert logging.getLogger(SDK_LOGGER_NAME).handlers == before

    def test_unknown_level_falls_back_to_info(self, restore_logging):
        LogManager().configure(log_level="LOUD", file_output=False, force=True)
        assert logging.getLogger(SDK_LOGGER_NAME).level == logging.INFO

    def test_root_logger_untouched(self, restore_logging):
        root_handlers = list(logging.getLogger().handlers)
        LogManager().configure(log_level="DEBUG", file_output=False, force=True)
        assert logging.getLogger().handlers == root_handlers


class TestApplyLoggingConfig:

    def test_level_applied(self, restore_logging):
        apply_logging_config(LoggingConfig(level="DEBUG"))
        assert logging.getLogger(SDK_LOGGER_NAME).level == logging.DEBUG

    def test_file_output(self, tmp_path, restore_logging):
        log_file = tmp_path / "sdk.log"
        apply_logging_config(LoggingConfig(level="INFO", file=str(log_file)))
        handlers = logging.getLogger(SDK_LOGGER_NAME).handlers
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)
        get_logger("zklink_sdk.tests").info("hello file")
        for h in handlers:
            h.flush()
        assert "hello file" in log_file.read_text()


class TestTerminalSafeFormatter:

    def test_strips_ansi(self):
        assert TerminalSafeFormatter.sanitize("\x1b[31mred\x1b[0m") == "red"

    def test_strips_control_chars(self):
        assert TerminalSafeFormatter.sanitize("a\rb\x07c\n") == "abc\n"

    def test_empty(self):
        assert TerminalSafeFormatter.sanitize("") == ""
