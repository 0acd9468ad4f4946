# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""
Monitoring Package

Provides:
- Logger factory and one-shot logging setup
- Colored console formatter
- Client exception hierarchy
"""

import logging as std_logging
from typing import Optional

from .logging.log_colored_formatter import ColoredLogFormatter

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging for the client.

    Args:
        log_level: Level name (DEBUG, INFO, ...)
        log_file: Optional path of a plain-text log file
    """
    level = getattr(std_logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root = std_logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = std_logging.StreamHandler()
    console.setFormatter(ColoredLogFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = std_logging.FileHandler(log_file)
        file_handler.setFormatter(std_logging.Formatter(_PLAIN_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(level)
    # Transport libraries are chatty at DEBUG
    std_logging.getLogger("httpx").setLevel(max(level, std_logging.WARNING))
    std_logging.getLogger("aiohttp").setLevel(max(level, std_logging.WARNING))


def get_logger(name: str) -> std_logging.Logger:
    """Get a module logger."""
    return std_logging.getLogger(name)


__all__ = [
    "ColoredLogFormatter",
    "get_logger",
    "setup_logging",
]
