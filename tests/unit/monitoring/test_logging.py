# Copyright (c) 2026 The SpotiQuiz Authors
# This file is part of SpotiQuiz and is licensed for non-commercial use only.
# See the LICENSE file for details.

"""Tests for logging formatters and utilities."""

import logging
import sys

import pytest
from colorama import Fore, Style

from spotiquiz.src.monitoring import get_logger, setup_logging
from spotiquiz.src.monitoring.logging.log_colored_formatter import ColoredLogFormatter


def _record(level=logging.INFO, msg="Test message", name="spotiquiz.src.infrastructure.channel.room_channel", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestColoredLogFormatter:
    """Test colored log formatter."""

    @pytest.fixture
    def formatter(self):
        return ColoredLogFormatter()

    def test_init(self, formatter):
        assert isinstance(formatter, logging.Formatter)

    def test_simplify_component_name(self):
        assert ColoredLogFormatter._simplify_component_name("spotiquiz.src.domain.models") == "models"
        assert ColoredLogFormatter._simplify_component_name("simple") == "simple"

    def test_format_info_message(self, formatter):
        result = formatter.format(_record())

        assert "Test message" in result
        assert f"{Fore.CYAN}[room_channel]" in result
        assert Fore.GREEN in result
        assert Style.RESET_ALL in result

    @pytest.mark.parametrize("level, color", [
        (logging.DEBUG, Fore.BLUE),
        (logging.WARNING, Fore.YELLOW),
        (logging.ERROR, Fore.RED),
        (logging.CRITICAL, Fore.MAGENTA),
    ])
    def test_level_colors(self, formatter, level, color):
        result = formatter.format(_record(level=level))
        assert color in result

    def test_format_includes_exception(self, formatter):
        try:
            raise ValueError("kaboom")
        except ValueError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        result = formatter.format(record)

        assert "Traceback" in result
        assert "kaboom" in result


class TestSetupLogging:
    """Test one-shot logging configuration."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_console_handler_uses_colored_formatter(self):
        setup_logging("DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ColoredLogFormatter)

    def test_transport_loggers_are_quieted(self):
        setup_logging("DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("aiohttp").level == logging.WARNING

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "client.log"
        setup_logging("info", str(log_file))

        get_logger("spotiquiz.test").info("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "written to file" in log_file.read_text()

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")

    def test_get_logger(self):
        assert get_logger("spotiquiz.x") is logging.getLogger("spotiquiz.x")


class TestMonitoringPackage:
    """The logging subpackage must not shadow the standard library module."""

    def test_package_exposes_stdlib_logging_helpers(self):
        import spotiquiz.src.monitoring as monitoring
        import spotiquiz.src.monitoring.logging as logging_subpackage

        assert monitoring.logging is logging_subpackage
        assert isinstance(monitoring.get_logger("spotiquiz.pkg"), logging.Logger)

    def test_setup_logging_after_subpackage_import(self):
        import spotiquiz.src.monitoring.logging.log_colored_formatter  # noqa: F401

        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        try:
            setup_logging("WARNING")
            assert root.level == logging.WARNING
            assert isinstance(root.handlers[0], logging.StreamHandler)
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in handlers:
                root.addHandler(handler)
            root.setLevel(level)
