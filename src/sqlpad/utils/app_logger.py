"""Application logging configuration and utilities."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sqlpad.constants import (
    LOG_BACKUP_COUNT,
    LOG_MAX_BYTES,
)

# Global logger registry
_loggers: dict[str, logging.Logger] = {}
_configured: bool = False


def setup_logging(
    log_file: Path | None = None,
    *,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> None:
    """Configure application logging with file rotation and console output.

    Sets up two handlers:
    - Console handler: simple format on stderr so it never mixes with the grid
    - File handler: DEBUG level, detailed format with rotation

    Args:
        log_file: Path to log file (None = console only)
        console_level: Logging level for console output (default: WARNING)
        file_level: Logging level for file output (default: DEBUG)
    """
    global _configured

    root_logger = logging.getLogger("sqlpad")
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(fmt="%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        from sqlpad.utils.file_utils import ensure_directory

        ensure_directory(log_file.parent)

        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(file_level)
        file_formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured
