"""
Logging utilities for quillpress.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Get a logger with a stdout stream handler attached once.

    Args:
        name: Logger name (usually ``__name__``)
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT))
        logger.addHandler(handler)
        logger.setLevel(level)

    return logger


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the ``quillpress`` package logger.

    Args:
        level: Logging level (name or number)
        log_file: Optional file receiving a rotating copy of the log
        max_bytes: Rotation threshold for ``log_file``
        backup_count: Number of rotated files kept
        console: Attach a stdout handler (off when the root logger already prints)

    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("quillpress")
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    if console:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if log_file:
        from logging.handlers import RotatingFileHandler

        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_log_level(level: Union[int, str], name: str = "quillpress") -> None:
    """Change the level of a logger and all of its handlers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
