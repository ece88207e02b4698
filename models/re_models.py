"""Regular expressions for chat message preprocessing.

Patterns for custom emoji codes, copied message timestamps, URLs and blank-line runs.
"""

from __future__ import annotations

import re
from re import Pattern
from typing import Final

__all__: list[str] = [
    "EMOJI_CODE_PATTERN",
    "EXCESS_NEWLINES_PATTERN",
    "TIMESTAMP_PATTERN",
    "URL_PATTERN",
]

# Emoji shortcodes and custom emoji names
# Examples: ":smile:", ":blob_wave:"
EMOJI_CODE_PATTERN: Final[Pattern[str]] = re.compile(r":\S+:")

# Author line of a message copied from the Discord client, the author name is kept
# Examples: "alice — Today at 9:15 PM", "bob — 03/14/2025 11:02 AM"
TIMESTAMP_PATTERN: Final[Pattern[str]] = re.compile(
    r"([^—\n]+) — (?:Today at|Yesterday at|\d{1,2}/\d{1,2}/\d{4}) \d{1,2}:\d{2} [AP]M"
)

# Regular expression that matches http and https URLs
# Examples: "http://example.com", "https://www.example.com/path?q=1"
URL_PATTERN: Final[Pattern[str]] = re.compile(r"https?://\S+")

# Three or more consecutive line breaks
EXCESS_NEWLINES_PATTERN: Final[Pattern[str]] = re.compile(r"\n{3,}")
