"""Logging setup for the translator bot.

All loggers of the application live below one namespace logger ('TranslatorBot'), which owns
a terse console handler and a rotating UTF-8 log file. Library loggers such as discord.py's can be
routed through the same handlers, and Python warnings are written to the log instead of stderr.
"""

from __future__ import annotations

import logging
import sys
import warnings
from logging import Formatter, StreamHandler
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any, ClassVar, Final, Literal, Self, TextIO, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

__all__: list[str] = ["LoggerUtils"]

LevelType: TypeAlias = Literal["NOTSET", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FILE_SIZE: Final[int] = 2 * 1024 * 1024
LOG_BACKUP_COUNT: Final[int] = 2
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
CONSOLE_FORMAT: Final[str] = "%(message)s"
FILE_FORMAT: Final[str] = "%(asctime)s %(levelname)-8s %(lineno)4d %(name)-40s\t%(funcName)s\t%(message)s"


class LoggerUtils:
    """Process-wide logging configuration.

    Constructing the class configures the namespace logger once; later constructions return the same
    instance without touching the handlers. `get_logger` can be used before configuration, records are
    simply not emitted until handlers exist.

    Attributes:
        NAMESPACE (ClassVar[str]): Name of the logger every application logger descends from.
    """

    NAMESPACE: ClassVar[str] = "TranslatorBot"
    _instance: ClassVar[Self | None] = None
    _configured: ClassVar[bool] = False
    _library_loggers: ClassVar[list[str]] = []
    _original_showwarning: ClassVar[Callable[..., Any] | None] = None

    def __new__(cls, *args, **kwargs) -> Self:
        _ = args, kwargs
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, filename: str | Path) -> None:
        """Configure console and file logging.

        Args:
            filename (str | Path): Absolute path of the log file. An empty value disables file logging.
        """
        if LoggerUtils._configured:
            return

        self.root_logger: logging.Logger = logging.getLogger(self.NAMESPACE)
        # handlers filter by their own level, the logger level must stay below them
        self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
        self._add_console_handler()

        log_file: str = str(filename).strip()
        if log_file:
            self._add_file_handler(log_file)
        else:
            self.root_logger.warning("No log file name given, file logging disabled")

        LoggerUtils._original_showwarning = warnings.showwarning
        warnings.showwarning = self._log_warning
        LoggerUtils._configured = True

    def _add_console_handler(self) -> None:
        if sys.stderr is None:
            # pythonw and similar hosts have no console
            self.root_logger.addHandler(logging.NullHandler())
            return
        console_handler: StreamHandler[TextIO] = StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(Formatter(CONSOLE_FORMAT))
        self.root_logger.addHandler(console_handler)

    def _add_file_handler(self, filename: str) -> None:
        try:
            file_handler = RotatingFileHandler(
                filename=filename, maxBytes=LOG_FILE_SIZE, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
            )
        except OSError as err:
            self.root_logger.error("Cannot open log file '%s', file logging disabled: %s", filename, err)
            return
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(Formatter(FILE_FORMAT))
        self.root_logger.addHandler(file_handler)

    def _log_warning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """Replacement for warnings.showwarning that writes to the namespace logger."""
        _ = file, line
        self.root_logger.warning("%s:%d: %s: %s", filename, lineno, category.__name__, message)

    def set_level(self, level: LevelType | str) -> None:
        """Change the level of the namespace logger.

        Unknown level names fall back to INFO with a warning.

        Args:
            level (LevelType | str): Level name, case-insensitive.
        """
        level_value: int | None = logging.getLevelNamesMapping().get(level.upper())
        if level_value is None:
            self.root_logger.setLevel(DEFAULT_LOG_LEVEL)
            self.root_logger.warning("Unknown logging level '%s', using INFO", level)
            return
        self.root_logger.setLevel(level_value)

    @classmethod
    def close(cls) -> None:
        """Close every handler, restore warnings.showwarning and allow reconfiguration."""
        if not cls._configured:
            return
        root_logger: logging.Logger = logging.getLogger(cls.NAMESPACE)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for library_name in cls._library_loggers:
            logging.getLogger(library_name).handlers.clear()
        cls._library_loggers.clear()

        if cls._original_showwarning is not None:
            warnings.showwarning = cls._original_showwarning
            cls._original_showwarning = None
        cls._configured = False
        cls._instance = None

    @classmethod
    def attach_library_logger(cls, library_name: str, level: int = logging.WARNING) -> logging.Logger:
        """Route a third-party library logger through the namespace logger's handlers.

        The library logger stops propagating to the Python root logger, so each record is emitted once.

        Args:
            library_name (str): Logger name of the library, e.g. 'discord'.
            level (int): Level applied to the library logger.

        Returns:
            logging.Logger: The library logger.
        """
        library_logger: logging.Logger = logging.getLogger(library_name)
        library_logger.handlers.clear()
        for handler in cls.get_logger().handlers:
            library_logger.addHandler(handler)
        library_logger.setLevel(level)
        library_logger.propagate = False
        if library_name not in cls._library_loggers:
            cls._library_loggers.append(library_name)
        return library_logger

    @staticmethod
    def get_logger(name: str | None = None) -> logging.Logger:
        """Return 'TranslatorBot.<name>', or the namespace logger itself when no name is given."""
        if not name:
            return logging.getLogger(LoggerUtils.NAMESPACE)
        return logging.getLogger(f"{LoggerUtils.NAMESPACE}.{name}")
