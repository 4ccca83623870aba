"""
zkLink SDK Logging

Loggers for the SDK modules. Everything hangs off the ``zklink_sdk``
logger, which gets a rich console handler on stderr and, when enabled, a
rotating log file. The host application's root logger is never touched.

Defaults come from the ``LOG_*`` environment values in ``constants``;
``apply_logging_config`` swaps in a loaded ``[logging]`` section.

Usage:
    >>> from zklink_sdk.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("signed tx %s", tx_hash)
"""

import logging
import logging.handlers
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_HIGHLIGHTING,
    LOG_DATE_FORMAT,
    LOG_FILE_OUTPUT,
    LOG_FORMAT,
    LOG_LEVEL,
    LOG_MAX_FILE_SIZE,
)


SDK_LOGGER_NAME = "zklink_sdk"
DEFAULT_LOG_FILE = Path.cwd() / "logs" / "zklink_sdk.log"

SDK_THEME = Theme(
    {
        "zklink.hex":            "cyan",
        "zklink.level_critical": "bold red reverse",
        "zklink.level_debug":    "bold dim",
        "zklink.level_error":    "bold red",
        "zklink.level_info":     "bold green",
        "zklink.level_warning":  "bold yellow",
        "zklink.logger_name":    "magenta",
        "zklink.tx_type":        "bold magenta",
        "zklink.timestamp":      "bold cyan",
    }
)


class TerminalSafeFormatter(logging.Formatter):
    """
    Formatter that drops terminal escapes from the rendered record.

    Addresses, hex strings and error text can come straight from callers, so
    ANSI sequences, carriage returns and other control bytes are removed.
    Tabs and newlines survive.
    """

    _escape_re = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b[@-Z\\-_]")
    _control_re = re.compile(r"[\x00-\x08\x0B-\x1F\x7F]")

    @classmethod
    def sanitize(cls, text: str) -> str:
        if not text:
            return text
        return cls._control_re.sub("", cls._escape_re.sub("", text))

    def format(self, record: logging.LogRecord) -> str:
        return self.sanitize(super().format(record))


class ZkLinkLogHighlighter(RegexHighlighter):
    """Colors hashes, transaction kinds and level names on the console."""

    base_style = "zklink."
    highlights = [
        r"(?P<hex>\b0x[0-9a-fA-F]{8,}\b)",
        r"(?P<level_critical>\bCRITICAL\b)",
        r"(?P<level_debug>\bDEBUG\b)",
        r"(?P<level_error>\bERROR\b)",
        r"(?P<level_info>\bINFO\b)",
        r"(?P<level_warning>\bWARNING\b)",
        r"\-\s+\w+\s+-\s+(?P<logger_name>[\w.]+)(?=\s-\s)",
        r"(?P<tx_type>\b(Order|OrderMatching|ChangePubKey|Deposit|Transfer)\b)",
        r"(?P<timestamp>^(.*?)UTC)",
    ]


def _make_formatter() -> TerminalSafeFormatter:
    fmt = str(LOG_FORMAT) or LOG_FORMAT.default()
    datefmt = str(LOG_DATE_FORMAT) or LOG_DATE_FORMAT.default()
    # Timestamps are UTC whatever the host timezone
    formatter = TerminalSafeFormatter(fmt=fmt, datefmt=datefmt + " UTC")
    formatter.converter = time.gmtime
    return formatter


def _console_handler(highlight: bool) -> logging.Handler:
    if not highlight:
        return logging.StreamHandler(sys.stderr)
    return RichHandler(
        console=Console(theme=SDK_THEME, highlight=False, stderr=True),
        highlighter=ZkLinkLogHighlighter(),
        keywords=[],
        rich_tracebacks=True,
        show_path=False,
        show_time=False,
        show_level=False,
        markup=False,
    )


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=str(path),
        maxBytes=LOG_MAX_FILE_SIZE,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


class LogManager:
    """
    Process-wide owner of the ``zklink_sdk`` handlers.

    A single instance exists; the first ``get_logger`` call installs the
    default handlers and later calls reuse them until ``configure`` is
    called again with ``force``.
    """

    _instance: Optional["LogManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "LogManager":
        # Double-checked so concurrent first imports share one instance
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._configured = False
                    cls._instance = instance
        return cls._instance

    def configure(
        self,
        log_level: Optional[str] = None,
        log_file: Optional[Path] = None,
        console_output: bool = True,
        file_output: Optional[bool] = None,
        force: bool = False,
    ) -> None:
        """
        Install handlers on the ``zklink_sdk`` logger.

        Args:
            log_level: Level name; unknown names fall back to INFO.
            log_file: Rotating log file path, ``logs/zklink_sdk.log`` by default.
            console_output: Attach the stderr handler.
            file_output: Attach the file handler; defaults to ``LOG_FILE_OUTPUT``.
            force: Replace handlers installed by an earlier call.
        """
        with self._lock:
            if self._configured and not force:
                return

            level = getattr(logging, str(log_level or LOG_LEVEL).upper(), logging.INFO)
            if not isinstance(level, int):
                level = logging.INFO
            if file_output is None:
                file_output = bool(LOG_FILE_OUTPUT)

            handlers = []
            if console_output:
                handlers.append(_console_handler(bool(LOG_CONSOLE_HIGHLIGHTING)))
            if file_output:
                handlers.append(_file_handler(log_file or DEFAULT_LOG_FILE))

            formatter = _make_formatter()
            sdk_logger = logging.getLogger(SDK_LOGGER_NAME)
            sdk_logger.setLevel(level)
            for old in sdk_logger.handlers[:]:
                sdk_logger.removeHandler(old)
                old.close()
            for handler in handlers:
                handler.setLevel(level)
                handler.setFormatter(formatter)
                sdk_logger.addHandler(handler)

            self._configured = True

    def get_logger(self, name: str) -> logging.Logger:
        if not self._configured:
            self.configure()
        return logging.getLogger(name)


_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """Logger for an SDK module, installing the default handlers on first use."""
    return _manager.get_logger(name)


def apply_logging_config(config) -> None:
    """
    Reconfigure the SDK logger from a ``[logging]`` configuration section.

    A non-empty ``config.file`` enables rotating file output to that path.
    """
    _manager.configure(
        log_level=config.level,
        log_file=Path(config.file) if config.file else None,
        file_output=bool(config.file),
        force=True,
    )
