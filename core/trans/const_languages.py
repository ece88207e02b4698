"""Language, mode and backend constants for the translator.

Language codes follow ISO 639-2 ('eng', 'kor', 'jpn').
"""

from __future__ import annotations

from typing import Final, Literal, TypeAlias

__all__: list[str] = [
    "BACKEND_IDS",
    "DEFAULT_LANGUAGE",
    "FLAGS",
    "LANGUAGES",
    "LANGUAGE_NAMES",
    "MODES",
    "LanguageCode",
    "TranslationMode",
    "language_name",
    "needs_translation",
    "resolve_target_language",
]

LanguageCode: TypeAlias = Literal["eng", "kor", "jpn"]
TranslationMode: TypeAlias = Literal["korean", "japanese"]

DEFAULT_LANGUAGE: Final[str] = "eng"

LANGUAGES: Final[tuple[str, ...]] = ("eng", "kor", "jpn")

LANGUAGE_NAMES: Final[dict[str, str]] = {
    "eng": "English",
    "kor": "Korean",
    "jpn": "Japanese",
}

FLAGS: Final[dict[str, str]] = {
    "eng": "🇺🇸",
    "kor": "🇰🇷",
    "jpn": "🇯🇵",
}

MODES: Final[tuple[str, ...]] = ("korean", "japanese")

BACKEND_IDS: Final[tuple[str, ...]] = ("gpt4o", "claude", "gemini")

# mode -> source language -> target language
_TARGET_TABLE: Final[dict[str, dict[str, str]]] = {
    "korean": {"kor": "eng", "eng": "kor", "jpn": "kor"},
    "japanese": {"jpn": "eng", "eng": "jpn", "kor": "jpn"},
}


def resolve_target_language(source_lang: str, mode: str) -> str:
    """Return the target language for a detected source language under a translation mode.

    Unknown modes or languages resolve to English.

    Args:
        source_lang (str): Detected source language code.
        mode (str): Translation mode ('korean' or 'japanese').

    Returns:
        str: Target language code.
    """
    return _TARGET_TABLE.get(mode, {}).get(source_lang, DEFAULT_LANGUAGE)


def needs_translation(source_lang: str) -> bool:
    """Return True if messages in the given language are translated."""
    return source_lang in LANGUAGES


def language_name(code: str) -> str:
    """Return the English name of a language code, or the code itself when unknown."""
    return LANGUAGE_NAMES.get(code, code)
