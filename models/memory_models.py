"""Models for translation memory data.

Defines the persisted translation memory entry and the statistics snapshot
reported by the memory store.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, dataclass_json

from models.translation_models import TokenUsage

__all__: list[str] = ["MemoryEntry", "MemoryStatistics"]


@dataclass_json
@dataclass
class MemoryEntry(DataClassJsonMixin):
    """Translation memory entry as stored in the JSON file.

    Attributes:
        translation (str): Translated text.
        tokens (TokenUsage): Token usage recorded when the translation was produced.
        timestamp (str): ISO-8601 time of the last write. Used for oldest-first eviction.
    """

    translation: str
    tokens: TokenUsage = field(default_factory=TokenUsage)
    timestamp: str = ""


@dataclass
class MemoryStatistics:
    """Translation memory usage statistics.

    Attributes:
        total_entries (int): Number of stored entries.
        limit (int): Maximum number of entries kept.
        pending_writes (int): Mutations not yet written to disk.
        oldest_entry (str | None): Timestamp of the oldest entry.
        newest_entry (str | None): Timestamp of the newest entry.
    """

    total_entries: int = 0
    limit: int = 0
    pending_writes: int = 0
    oldest_entry: str | None = None
    newest_entry: str | None = None
