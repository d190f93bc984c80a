"""Logging setup for the ``cloudquant`` logger hierarchy."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT_LOGGER = "cloudquant"

DEFAULT_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(message)s"
)


def setup_logger(
    log_level: str = "INFO",
    log_file: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure the package logger with a console and optional file handler.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        log_file: Optional path to a log file.
        format_string: Optional custom format string.

    Returns:
        The configured ``cloudquant`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Re-running setup must not stack handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger, e.g. ``cloudquant.polling``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
