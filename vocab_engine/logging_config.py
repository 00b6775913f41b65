"""Logging configuration for the vocabulary engine"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config.settings import LoggingSettings

ROOT_LOGGER = "vocab_engine"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONCISE_FORMAT = "%(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client libraries log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def _formatter(detailed: bool) -> logging.Formatter:
    if detailed:
        return logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT)
    return logging.Formatter(fmt=CONCISE_FORMAT)


def setup_logging(
    level: str = "INFO", log_file: str | Path | None = None
) -> logging.Logger:
    """Configure the ``vocab_engine`` logger tree

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives detailed records

    Returns:
        The namespaced parent logger
    """
    level = level.upper()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_formatter(detailed=level == "DEBUG"))
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(_formatter(detailed=True))
        logger.addHandler(file_handler)

    # Provider traffic is only interesting when debugging
    quiet_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    return logger


def configure_from_settings(
    config: LoggingSettings,
    debug: bool = False,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Apply ``LoggingSettings``; ``debug`` and ``log_file`` override it"""
    return setup_logging(
        "DEBUG" if debug else config.level,
        log_file or config.file,
    )


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)
