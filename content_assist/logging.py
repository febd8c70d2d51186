"""Logging configuration for content-assist.

One package logger, ``content_assist``, with per-module children.
Nothing is printed until setup_logging() installs a handler.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


logger = logging.getLogger("content_assist")
logger.addHandler(logging.NullHandler())


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[Path] = None,
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> logging.Logger:
    """Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        log_format: Format string for log messages

    Returns:
        Configured package logger
    """
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a module.

    Args:
        name: Short module name (e.g. "transport")

    Returns:
        Child logger of the package logger
    """
    return logging.getLogger(f"content_assist.{name}")
