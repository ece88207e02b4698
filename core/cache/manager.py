"""Translation memory store.

Keeps previously produced translations in memory, keyed by lower-cased source text and translation mode,
and persists them to a single JSON file. Writes are coalesced: a delayed flush is scheduled on the first
unsaved change and an immediate flush happens once enough changes accumulate.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from models.memory_models import MemoryEntry, MemoryStatistics
from models.translation_models import TokenUsage
from utils.file_utils import FileMissingError, FileUtils, InvalidFileFormatError
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config

__all__: list[str] = ["TranslationMemory"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TranslationMemory:
    """Bounded (text, mode) -> translation store backed by a JSON file.

    All mutations run synchronously on the event loop thread, so no locking is needed.
    When the number of entries exceeds the limit, entries with the oldest timestamp are evicted first;
    ties are broken by insertion order.

    Attributes:
        MIN_TIMESTAMP (ClassVar[datetime]): Ordering value used for entries with an unreadable timestamp.
    """

    MIN_TIMESTAMP: ClassVar[datetime] = datetime.min.replace(tzinfo=UTC)

    def __init__(self, config: Config, *, path: Path | None = None) -> None:
        """Initialize the translation memory.

        Args:
            config (Config): Application configuration.
            path (Path | None): JSON file location. Defaults to MEMORY.FILENAME inside GENERAL.DATA_DIR.
        """
        self.config: Config = config
        self._path: Path = path or FileUtils.resolve_path(Path(config.GENERAL.DATA_DIR) / config.MEMORY.FILENAME)
        self._limit: int = config.MEMORY.LIMIT
        self._write_delay: float = config.MEMORY.WRITE_DELAY
        self._max_buffer_size: int = config.MEMORY.MAX_BUFFER_SIZE
        self._entries: dict[str, MemoryEntry] = {}
        self._pending_writes: int = 0
        self._flush_handle: asyncio.TimerHandle | None = None
        self._is_loaded: bool = False
        logger.debug("TranslationMemory instance created (path: %s)", self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def pending_writes(self) -> int:
        """Number of mutations since the last successful flush."""
        return self._pending_writes

    @property
    def is_flush_scheduled(self) -> bool:
        return self._flush_handle is not None

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def load(self) -> None:
        """Load the memory file into the store.

        A missing file or a file that cannot be parsed leaves the store empty.
        Entries beyond the limit are evicted oldest first.
        """
        self._entries.clear()
        self._pending_writes = 0
        self._is_loaded = True

        try:
            raw: Any = FileUtils.read_json(self._path)
        except FileMissingError:
            logger.info("Translation memory file not found, starting empty: %s", self._path)
            return
        except InvalidFileFormatError as err:
            logger.warning("Failed to read translation memory, starting empty: %s", err)
            return

        if not isinstance(raw, dict):
            logger.warning("Translation memory '%s' has an unexpected format, starting empty", self._path)
            return

        skipped: int = 0
        for key, value in raw.items():
            entry: MemoryEntry | None = self._entry_from_json(value)
            if entry is None:
                skipped += 1
                continue
            self._entries[str(key)] = entry

        if skipped:
            logger.warning("Skipped %d malformed translation memory entries", skipped)
        evicted: int = self._evict_overflow()
        if evicted:
            self._pending_writes += evicted
        logger.info("Loaded %d translation memory entries", len(self._entries))

    @staticmethod
    def _entry_from_json(value: Any) -> MemoryEntry | None:
        if not isinstance(value, dict) or not isinstance(value.get("translation"), str):
            return None
        tokens: Any = value.get("tokens")
        timestamp: Any = value.get("timestamp")
        try:
            token_usage: TokenUsage = TokenUsage.from_dict(tokens) if isinstance(tokens, dict) else TokenUsage()
        except (KeyError, TypeError, ValueError):
            token_usage = TokenUsage()
        return MemoryEntry(
            translation=value["translation"],
            tokens=token_usage,
            timestamp=timestamp if isinstance(timestamp, str) else "",
        )

    def get(self, text: str, mode: str) -> MemoryEntry | None:
        """Look up a stored translation.

        Args:
            text (str): Source text. Matched case-insensitively.
            mode (str): Translation mode. Matched exactly.

        Returns:
            MemoryEntry | None: The stored entry, or None on a miss.
        """
        key: str = StringUtils.generate_memory_key(text, mode)
        entry: MemoryEntry | None = self._entries.get(key)
        if entry is None:
            logger.debug("Memory miss for key: %s", key[:16])
            return None
        logger.debug("Memory hit for key: %s", key[:16])
        return entry

    def put(self, text: str, mode: str, translation: str, tokens: TokenUsage) -> MemoryEntry:
        """Store a translation, overwriting any previous entry for the same key.

        The entry is stamped with the current time and moved to the newest position.
        The change is persisted later by the coalesced write logic.

        Args:
            text (str): Source text.
            mode (str): Translation mode.
            translation (str): Translated text.
            tokens (TokenUsage): Token usage of the translation.

        Returns:
            MemoryEntry: The stored entry.
        """
        key: str = StringUtils.generate_memory_key(text, mode)
        entry = MemoryEntry(translation=translation, tokens=tokens, timestamp=self._now().isoformat())
        self._entries.pop(key, None)
        self._entries[key] = entry
        self._pending_writes += 1

        evicted: int = self._evict_overflow()
        if evicted:
            logger.debug("Evicted %d translation memory entries", evicted)

        if self._pending_writes >= self._max_buffer_size:
            logger.debug("Pending writes reached %d, flushing translation memory", self._pending_writes)
            self.flush()
        elif self._flush_handle is None:
            self._schedule_flush()
        return entry

    def _evict_overflow(self) -> int:
        evicted: int = 0
        while len(self._entries) > self._limit:
            oldest_key: str = min(self._entries, key=lambda k: self._timestamp_of(self._entries[k]))
            del self._entries[oldest_key]
            evicted += 1
        return evicted

    def _timestamp_of(self, entry: MemoryEntry) -> datetime:
        try:
            stamp: datetime = datetime.fromisoformat(entry.timestamp)
        except ValueError:
            return self.MIN_TIMESTAMP
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=UTC)
        return stamp

    def _schedule_flush(self) -> None:
        try:
            loop: asyncio.AbstractEventLoop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, delayed flush not scheduled")
            return
        self._flush_handle = loop.call_later(self._write_delay, self._on_flush_timer)
        logger.debug("Translation memory flush scheduled in %.1f sec", self._write_delay)

    def _cancel_scheduled_flush(self) -> None:
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    def _on_flush_timer(self) -> None:
        self._flush_handle = None
        if self._pending_writes > 0:
            self.flush()

    def flush(self) -> bool:
        """Write the whole store to disk immediately.

        The file is replaced atomically via a temporary file. Any scheduled flush is cancelled.
        On failure the in-memory state and the pending-write count are kept.

        Returns:
            bool: True if the file was written, False otherwise.
        """
        self._cancel_scheduled_flush()
        payload: dict[str, dict[str, Any]] = {key: entry.to_dict() for key, entry in self._entries.items()}
        try:
            FileUtils.write_json_atomic(self._path, payload)
        except (OSError, TypeError, ValueError) as err:
            logger.error("Failed to write translation memory '%s': %s", self._path, err)
            return False

        logger.debug("Translation memory flushed (%d entries)", len(self._entries))
        self._pending_writes = 0
        return True

    def get_statistics(self) -> MemoryStatistics:
        """Return a snapshot of the memory usage.

        Returns:
            MemoryStatistics: Entry count, limit, pending writes and timestamp range.
        """
        stats = MemoryStatistics(
            total_entries=len(self._entries), limit=self._limit, pending_writes=self._pending_writes
        )
        if self._entries:
            ordered: list[MemoryEntry] = sorted(self._entries.values(), key=self._timestamp_of)
            stats.oldest_entry = ordered[0].timestamp
            stats.newest_entry = ordered[-1].timestamp
        return stats
