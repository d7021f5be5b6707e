"""Logging setup for the Projects Tracker.

Services get their loggers from get_logger(); create_app() calls
configure_logging() once to attach handlers to the package logger.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

PACKAGE_LOGGER = 'project_tracker'

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'


def configure_logging(level: str = 'INFO', log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally rotating file) handlers.

    Safe to call more than once: handlers are only added the first time,
    later calls just update the level.

    Args:
        level: Logging level name, e.g. 'INFO' or 'DEBUG'.
        log_file: Optional path of a rotating log file.

    Returns:
        The package root logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if logger.handlers:
        return logger  # avoid duplicate handlers across app instances

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f'{PACKAGE_LOGGER}.{name}'
    return logging.getLogger(name)
