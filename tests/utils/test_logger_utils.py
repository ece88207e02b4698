"""Unit tests for utils.logger_utils module."""

from __future__ import annotations

import logging
import warnings
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

import pytest

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def log_file(tmp_path: Path) -> Iterator[Path]:
    LoggerUtils.close()
    yield tmp_path / "translator_bot.log"
    LoggerUtils.close()


def test_get_logger_uses_namespace() -> None:
    assert LoggerUtils.get_logger().name == "TranslatorBot"
    assert LoggerUtils.get_logger("core.bot").name == "TranslatorBot.core.bot"


def test_configuration_happens_once(log_file: Path) -> None:
    first = LoggerUtils(log_file)
    second = LoggerUtils(log_file.with_name("other.log"))

    handlers: list[logging.Handler] = LoggerUtils.get_logger().handlers
    assert first is second
    assert len(handlers) == 2
    assert sum(isinstance(handler, RotatingFileHandler) for handler in handlers) == 1
    assert not log_file.with_name("other.log").exists()


def test_file_receives_debug_records_after_set_level(log_file: Path) -> None:
    logger_utils = LoggerUtils(log_file)
    logger: logging.Logger = LoggerUtils.get_logger("tests.sample")

    logger.debug("hidden at the default level")
    logger_utils.set_level("debug")
    logger.debug("안녕 visible")

    text: str = log_file.read_text(encoding="utf-8")
    assert "hidden at the default level" not in text
    assert "TranslatorBot.tests.sample" in text
    assert "안녕 visible" in text


def test_unknown_level_falls_back_to_info(log_file: Path) -> None:
    logger_utils = LoggerUtils(log_file)
    logger_utils.set_level("DEBUG")

    logger_utils.set_level("chatty")  # type: ignore[arg-type]

    assert LoggerUtils.get_logger().level == logging.INFO


def test_warnings_are_written_to_the_log(log_file: Path) -> None:
    original = warnings.showwarning
    LoggerUtils(log_file)

    warnings.showwarning("old option", DeprecationWarning, "config.py", 12)

    assert "config.py:12: DeprecationWarning: old option" in log_file.read_text(encoding="utf-8")
    LoggerUtils.close()
    assert warnings.showwarning is original


def test_library_logger_shares_handlers_until_close(log_file: Path) -> None:
    LoggerUtils(log_file)

    library_logger: logging.Logger = LoggerUtils.attach_library_logger("tests.library", logging.ERROR)

    assert library_logger.handlers == LoggerUtils.get_logger().handlers
    assert library_logger.propagate is False
    assert library_logger.level == logging.ERROR

    LoggerUtils.close()

    assert library_logger.handlers == []
    assert LoggerUtils.get_logger().handlers == []


def test_empty_filename_disables_file_logging(log_file: Path) -> None:
    _ = log_file
    LoggerUtils("")

    handlers: list[logging.Handler] = LoggerUtils.get_logger().handlers
    assert not any(isinstance(handler, RotatingFileHandler) for handler in handlers)
