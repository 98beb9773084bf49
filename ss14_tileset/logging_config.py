#!/usr/bin/env python3
"""
Logging configuration for the tileset tools
Provides consistent logging setup across all modules
"""

import logging
import sys
from typing import Optional

from .constants import DEFAULT_LOG_LEVEL, LOGGER_NAME


def setup_logging(level: str = DEFAULT_LOG_LEVEL,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup logging configuration for the tileset tools.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write logs to (defaults to console only)

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Clear any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create log file {log_file}: {e}")

    # Prevent propagation to root logger
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'tileset_converter')

    Returns:
        Logger instance
    """
    return logging.getLogger(f'{LOGGER_NAME}.{name}')


def log_written(logger: logging.Logger, message: str, verbose: bool) -> None:
    """
    Report a written file at INFO when verbose, DEBUG otherwise.

    Library callers only see these records once a handler is attached, for
    example through setup_logging(); the command line tools do this for you.
    """
    logger.log(logging.INFO if verbose else logging.DEBUG, message)
