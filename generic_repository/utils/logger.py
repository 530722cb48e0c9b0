"""
Logger utility for consistent logging across the repository package.

This module provides a standardized way to create and configure loggers,
ensuring consistent log formatting and behavior between the repositories,
the database setup code and the application embedding them.

Features:
- Consistent log format across all modules
- Log level taken from Settings (LOG_LEVEL / DEBUG)
- Stream handler to stdout for easy viewing in console/terminal
- Rotating file handlers for error and debug logs
- Prevents duplicate log handlers when called multiple times
"""

import logging
import logging.handlers
import sys
from typing import Optional
from pathlib import Path

from generic_repository.utils.config import Settings, get_settings

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

def _resolve_level(settings: Settings) -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure global logging for the application.

    Replaces any handlers already installed on the root logger, so it is
    safe to call again after the settings change.

    Args:
        settings: Settings to read the log configuration from. Defaults to
            the cached application settings.

    Returns:
        logging.Logger: The package logger
    """
    settings = settings or get_settings()
    log_level = _resolve_level(settings)

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    verbose_formatter = logging.Formatter(VERBOSE_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    standard_formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(standard_formatter)
    console_handler.setLevel(logging.DEBUG if settings.DEBUG else log_level)
    root_logger.addHandler(console_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        log_dir / "error.log",
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(verbose_formatter)
    root_logger.addHandler(error_file_handler)

    if settings.DEBUG or settings.ENABLE_DEBUG_LOG:
        debug_file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "debug.log",
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT
        )
        debug_file_handler.setLevel(log_level)
        debug_file_handler.setFormatter(verbose_formatter)
        root_logger.addHandler(debug_file_handler)

    # SQL statements are only interesting in debug mode
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )

    logger = logging.getLogger('generic_repository')
    logger.info(f"Logging initialized with level {settings.LOG_LEVEL.upper()}")

    return logger

def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance with consistent formatting.

    If neither the logger nor the root logger has handlers yet, a stdout
    handler is attached so messages are not lost before setup_logging runs.

    Args:
        name: Name for the logger, usually ``__name__``.
        level: The logging level to set. If None, uses LOG_LEVEL from settings.

    Returns:
        logging.Logger: Configured logger instance ready for use.

    Example:
        ```python
        from generic_repository.utils.logger import get_logger

        logger = get_logger(__name__)
        logger.debug("Staged 3 entities for insertion")
        ```
    """
    if level is None:
        level = _resolve_level(get_settings())

    logger = logging.getLogger(name or __name__)
    logger.setLevel(level)

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
