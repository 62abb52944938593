"""
Logger utility for consistent logging across restdao.

This module provides a standardized way to create and configure loggers,
ensuring consistent log formatting and behavior.

Features:
- Consistent log format across all modules
- Configurable log level based on settings or environment variables
- Stream handler to stdout for easy viewing in console/terminal
- Optional rotating file handler for errors
- Prevents duplicate log handlers when called multiple times
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

from restdao.utils.config import Settings

# Default log format
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _level_from(settings: Optional[Settings]) -> int:
    if settings is not None:
        debug_mode = settings.DEBUG
        log_level_name = settings.LOG_LEVEL.upper()
    else:
        debug_mode = os.getenv("DEBUG", "False").lower() == "true"
        log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    if debug_mode:
        return logging.DEBUG
    return getattr(logging, log_level_name, logging.INFO)


def setup_logging(settings: Optional[Settings] = None, error_log: Optional[Path] = None) -> logging.Logger:
    """
    Configure global logging for the application.

    Args:
        settings: Settings to read DEBUG and LOG_LEVEL from; the environment is used when omitted
        error_log: Optional path of a rotating file receiving ERROR records

    Returns:
        logging.Logger: The restdao package logger
    """
    log_level = _level_from(settings)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates when reloading
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if error_log is not None:
        error_log.parent.mkdir(parents=True, exist_ok=True)
        error_file_handler = logging.handlers.RotatingFileHandler(
            error_log,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5
        )
        error_file_handler.setLevel(logging.ERROR)
        error_file_handler.setFormatter(logging.Formatter(VERBOSE_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        root_logger.addHandler(error_file_handler)

    # SQL statements are only logged when debugging
    logging.getLogger('sqlalchemy.engine').setLevel(
        logging.INFO if log_level == logging.DEBUG else logging.WARNING
    )

    logger = logging.getLogger('restdao')
    logger.info(f"Logging initialized with level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance with consistent formatting.

    If neither the logger nor the root logger has handlers yet, a stdout
    handler is attached so messages are not lost.

    Args:
        name: Optional name for the logger, usually __name__
        level: The logging level to set. If None, uses the level from environment.

    Returns:
        logging.Logger: Configured logger instance ready for use.
    """
    if level is None:
        level = _level_from(None)

    logger = logging.getLogger(name or 'restdao')
    logger.setLevel(level)

    root_logger = logging.getLogger()
    if not logger.handlers and not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
