# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Colored console log formatter."""

import logging

from colorama import Fore, Style


class ColoredLogFormatter(logging.Formatter):
    """
    Console formatter that colors the level name and shortens logger names.

    Logger names like "spotiquiz.src.infrastructure.channel.room_channel" are
    reduced to their last component ("room_channel").
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.BLUE,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.MAGENTA,
    }

    def __init__(self, datefmt: str = "%H:%M:%S"):
        super().__init__(datefmt=datefmt)

    @staticmethod
    def _simplify_component_name(name: str) -> str:
        return name.rsplit(".", 1)[-1]

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        timestamp = self.formatTime(record, self.datefmt)
        component = self._simplify_component_name(record.name)
        line = (
            f"{Style.DIM}{timestamp}{Style.RESET_ALL} "
            f"{color}{record.levelname:<8}{Style.RESET_ALL} "
            f"{Fore.CYAN}[{component}]{Style.RESET_ALL} "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
