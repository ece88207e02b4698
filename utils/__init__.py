"""Utility modules for the translator bot.

This package provides utility functions for logging, file handling, string manipulation,
bounded task execution and background task tracking.
"""

from utils.concurrency_queue import ConcurrencyQueue
from utils.file_utils import FileUtils
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils
from utils.task_utils import BackgroundTasks

__all__: list[str] = ["BackgroundTasks", "ConcurrencyQueue", "FileUtils", "LoggerUtils", "StringUtils"]
