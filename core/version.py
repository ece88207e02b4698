"""Version of the translator bot."""

from __future__ import annotations

__all__: list[str] = ["VERSION"]

VERSION: str = "1.0.0"
