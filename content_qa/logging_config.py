"""
Logging Configuration Module

Installs one set of handlers on every package logger of the application so
that all pipeline stages log in the same format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

PACKAGE_LOGGERS = ("content_qa", "chunking", "vector_store", "retrieval", "generation")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the content Q&A application.

    Args:
        level: Logging level, as int or name (default: INFO)
        log_file: Optional path to log file
        format_string: Optional custom format string

    Returns:
        The configured content_qa logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()
        for handler in handlers:
            handler.setLevel(level)
            logger.addHandler(handler)
        logger.propagate = False

    return logging.getLogger("content_qa")
