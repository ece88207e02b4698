"""Translation memory package.

Provides the JSON-backed translation memory used to reuse earlier translations.
"""

from __future__ import annotations

from core.cache.manager import TranslationMemory

__all__: list[str] = ["TranslationMemory"]
