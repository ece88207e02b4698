"""Configuration data models for the translator bot.

This module defines data classes representing the configuration sections of the INI file,
such as bot behaviour, translation defaults, preprocessing switches, translation memory,
webhook delivery and backend settings.
Each data class encapsulates related configuration options, providing a structured way to manage
and access settings throughout the application.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Backends",
    "Config",
    "Memory",
    "Preprocessing",
    "Webhook",
]


@dataclass
class General:
    DEBUG: bool = False
    SCRIPT_NAME: str = ""
    DATA_DIR: str = "data"


@dataclass
class Bot:
    PREFIX: str = "!"
    ACTIVITY: str = "!help | Translating..."
    OWNER_ID: int = 0


@dataclass
class Translation:
    DEFAULT_MODE: str = "korean"
    DEFAULT_MODEL: str = "gpt4o"
    AUTO_TRANSLATE: bool = True
    CONCURRENCY_LIMIT: int = 3
    MIN_DETECTION_LENGTH: int = 3
    METRICS_INTERVAL: int = 50


@dataclass
class Preprocessing:
    ENABLED: bool = True
    MIN_LENGTH: int = 10
    REMOVE_EMOJIS: bool = True
    REMOVE_TIMESTAMPS: bool = True
    REMOVE_URLS: bool = True


@dataclass
class Memory:
    FILENAME: str = "translation_memory.json"
    LIMIT: int = 500
    WRITE_DELAY: float = 30.0
    MAX_BUFFER_SIZE: int = 20


@dataclass
class Emoji:
    TRANSLATING: str = "🔄"
    ERROR: str = "❌"
    FALLBACK_FLAG: str = "❓"


@dataclass
class Webhook:
    NAME: str = "TranslationBot"
    AVATAR_URL: str = ""
    MAX_LENGTH: int = 1950
    PART_DELAY: float = 0.5


@dataclass
class Backends:
    TIMEOUT: float = 30.0
    TEMPERATURE: float = 0.7
    MAX_TOKENS: int = 1000
    DETECTION_BACKEND: str = "gpt4o"
    OPENAI_MODEL: str = "gpt-4o"
    DETECTION_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-7-sonnet-20250219"
    GEMINI_MODEL: str = "gemini-2.0-flash"


@dataclass
class Prompts:
    KOREAN: str = (
        "You are a professional translator between Korean and English, and from Japanese to Korean. "
        "Translate naturally while keeping the tone of the original message. "
        "Reply with the translation only."
    )
    JAPANESE: str = (
        "You are a professional translator between Japanese and English, and from Korean to Japanese. "
        "Translate naturally while keeping the tone of the original message. "
        "Reply with the translation only."
    )


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    BOT: Bot = field(default_factory=Bot)
    TRANSLATION: Translation = field(default_factory=Translation)
    PREPROCESSING: Preprocessing = field(default_factory=Preprocessing)
    MEMORY: Memory = field(default_factory=Memory)
    EMOJI: Emoji = field(default_factory=Emoji)
    WEBHOOK: Webhook = field(default_factory=Webhook)
    BACKENDS: Backends = field(default_factory=Backends)
    PROMPTS: Prompts = field(default_factory=Prompts)
