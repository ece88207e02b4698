"""Data models for the translator bot.

This package contains dataclass definitions for configuration, translation results, translation memory,
server settings, sessions and regular expression patterns used throughout the application.
"""

from __future__ import annotations

from models.config_models import Config
from models.memory_models import MemoryEntry, MemoryStatistics
from models.re_models import EMOJI_CODE_PATTERN, EXCESS_NEWLINES_PATTERN, TIMESTAMP_PATTERN, URL_PATTERN
from models.server_models import ServerConfig, ServerStats, StatsDelta
from models.session_models import Session, SessionSummary
from models.translation_models import (
    CACHE_BACKEND_ID,
    TokenUsage,
    TranslationFailure,
    TranslationResult,
)

__all__: list[str] = [
    "CACHE_BACKEND_ID",
    "EMOJI_CODE_PATTERN",
    "EXCESS_NEWLINES_PATTERN",
    "TIMESTAMP_PATTERN",
    "URL_PATTERN",
    "Config",
    "MemoryEntry",
    "MemoryStatistics",
    "ServerConfig",
    "ServerStats",
    "Session",
    "SessionSummary",
    "StatsDelta",
    "TokenUsage",
    "TranslationFailure",
    "TranslationResult",
]
