"""Logging configuration for the opencode-synced CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the command line entry point.

Environment variables:
    OPENCODE_SYNCED_LOG_LEVEL: DEBUG, INFO, WARNING or ERROR
    OPENCODE_SYNCED_LOG_FILE: true/1 to also log to <config dir>/logs/
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from opencode_synced.paths import get_opencode_config_dir

LOGGER_NAME = "opencode_synced"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def get_log_dir() -> Path:
    return Path(get_opencode_config_dir()) / "logs"


def get_log_level(default: int = logging.INFO) -> int:
    """Level named by OPENCODE_SYNCED_LOG_LEVEL, or *default* if unset or unknown."""
    level_str = os.environ.get("OPENCODE_SYNCED_LOG_LEVEL", "").upper()
    return _LEVELS.get(level_str, default)


def is_file_logging_enabled() -> bool:
    return os.environ.get("OPENCODE_SYNCED_LOG_FILE", "false").lower() in ("true", "1")


def _formatter(level: int) -> logging.Formatter:
    return logging.Formatter(
        LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT, DATE_FORMAT
    )


def _log_file_path() -> Path:
    log_dir = get_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"opencode_synced_{datetime.now().strftime('%Y%m%d')}.log"


def setup_logging(
    level: int | None = None,
    log_file: bool | None = None,
) -> logging.Logger:
    """Attach stderr (and optionally file) handlers to the package logger.

    Args:
        level: Log level. Defaults to get_log_level().
        log_file: Also write to a dated file under get_log_dir().
            Defaults to OPENCODE_SYNCED_LOG_FILE.

    Returns:
        The package logger.
    """
    if level is None:
        level = get_log_level()
    if log_file is None:
        log_file = is_file_logging_enabled()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(_log_file_path(), encoding="utf-8"))

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter(level))
        package_logger.addHandler(handler)

    # Don't propagate to root logger
    package_logger.propagate = False
    return package_logger


def set_debug_mode() -> None:
    """Switch the package logger and its handlers to DEBUG with line numbers."""
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG)
    for handler in package_logger.handlers:
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(_formatter(logging.DEBUG))
