"""Unit tests for core.cache.manager module."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from core.cache.manager import TranslationMemory
from models.config_models import Config
from models.translation_models import TokenUsage

if TYPE_CHECKING:
    from pathlib import Path

    from models.memory_models import MemoryEntry


def _make_memory(
    tmp_path: Path, *, limit: int = 500, write_delay: float = 30.0, buffer_size: int = 20
) -> TranslationMemory:
    config = Config()
    config.MEMORY.LIMIT = limit
    config.MEMORY.WRITE_DELAY = write_delay
    config.MEMORY.MAX_BUFFER_SIZE = buffer_size
    memory = TranslationMemory(config, path=tmp_path / "translation_memory.json")
    memory.load()
    return memory


def test_load_missing_file_starts_empty(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)

    assert memory.is_loaded is True
    assert memory.size == 0
    assert memory.pending_writes == 0


def test_put_then_get_is_case_insensitive_on_text(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)

    memory.put("Hello World", "korean", "안녕하세요 세계", TokenUsage.from_counts(10, 5))
    entry: MemoryEntry | None = memory.get("hello world", "korean")

    assert entry is not None
    assert entry.translation == "안녕하세요 세계"
    assert entry.tokens.total == 15
    assert entry.timestamp


def test_modes_are_isolated(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)

    memory.put("hello", "korean", "안녕", TokenUsage())

    assert memory.get("hello", "japanese") is None
    assert memory.get("hello", "korean") is not None


def test_put_overwrites_existing_entry(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)

    memory.put("hello", "korean", "first", TokenUsage())
    memory.put("HELLO", "korean", "second", TokenUsage())

    assert memory.size == 1
    entry: MemoryEntry | None = memory.get("hello", "korean")
    assert entry is not None
    assert entry.translation == "second"


def test_flush_and_reload_round_trip(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)
    memory.put("안녕", "korean", "Hello", TokenUsage.from_counts(3, 2))

    assert memory.flush() is True
    assert memory.pending_writes == 0

    payload = json.loads(memory.path.read_text(encoding="utf-8"))
    assert payload["안녕_korean"]["translation"] == "Hello"
    assert payload["안녕_korean"]["tokens"] == {"prompt": 3, "completion": 2, "total": 5}

    reloaded = TranslationMemory(memory.config, path=memory.path)
    reloaded.load()
    entry: MemoryEntry | None = reloaded.get("안녕", "korean")
    assert entry is not None
    assert entry.translation == "Hello"
    assert entry.tokens.total == 5


def test_eviction_removes_oldest_entry(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path, limit=2)
    stamps: list[str] = [
        "2025-01-01T00:00:00+00:00",
        "2025-01-02T00:00:00+00:00",
        "2025-01-03T00:00:00+00:00",
    ]

    with patch.object(TranslationMemory, "_now") as now:
        now.return_value.isoformat.side_effect = stamps
        memory.put("one", "korean", "1", TokenUsage())
        memory.put("two", "korean", "2", TokenUsage())
        memory.put("three", "korean", "3", TokenUsage())

    assert memory.size == 2
    assert memory.get("one", "korean") is None
    assert memory.get("two", "korean") is not None
    assert memory.get("three", "korean") is not None


def test_load_evicts_entries_beyond_limit(tmp_path: Path) -> None:
    path: Path = tmp_path / "translation_memory.json"
    path.write_text(
        json.dumps(
            {
                "new_korean": {"translation": "n", "timestamp": "2025-03-01T00:00:00+00:00"},
                "old_korean": {"translation": "o", "timestamp": "2024-01-01T00:00:00+00:00"},
            }
        ),
        encoding="utf-8",
    )
    config = Config()
    config.MEMORY.LIMIT = 1
    memory = TranslationMemory(config, path=path)

    memory.load()

    assert memory.size == 1
    assert memory.get("new", "korean") is not None
    assert memory.pending_writes == 1


def test_buffer_threshold_triggers_immediate_flush(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path, buffer_size=2)

    memory.put("one", "korean", "1", TokenUsage())
    assert memory.path.exists() is False

    memory.put("two", "korean", "2", TokenUsage())

    assert memory.path.exists() is True
    assert memory.pending_writes == 0


@pytest.mark.asyncio
async def test_put_schedules_delayed_flush(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path, write_delay=0.01)

    memory.put("one", "korean", "1", TokenUsage())
    assert memory.is_flush_scheduled is True

    await asyncio.sleep(0.05)

    assert memory.is_flush_scheduled is False
    assert memory.pending_writes == 0
    assert memory.path.exists() is True


@pytest.mark.asyncio
async def test_buffer_threshold_cancels_scheduled_flush(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path, buffer_size=3)

    memory.put("one", "korean", "1", TokenUsage())
    assert memory.is_flush_scheduled is True

    memory.put("two", "korean", "2", TokenUsage())
    memory.put("three", "korean", "3", TokenUsage())

    assert memory.is_flush_scheduled is False
    assert memory.pending_writes == 0
    assert set(json.loads(memory.path.read_text(encoding="utf-8"))) == {"one_korean", "two_korean", "three_korean"}


@pytest.mark.asyncio
async def test_put_after_flush_arms_a_new_timer(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)

    memory.put("one", "korean", "1", TokenUsage())
    memory.flush()
    assert memory.is_flush_scheduled is False

    memory.put("two", "korean", "2", TokenUsage())

    assert memory.is_flush_scheduled is True
    assert memory.pending_writes == 1
    memory.flush()


def test_flush_timer_without_pending_writes_does_not_rewrite(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)
    memory.put("one", "korean", "1", TokenUsage())
    memory.flush()

    with patch("core.cache.manager.FileUtils.write_json_atomic") as write:
        memory._on_flush_timer()

    write.assert_not_called()
    assert memory.is_flush_scheduled is False


def test_corrupt_file_starts_empty(tmp_path: Path) -> None:
    path: Path = tmp_path / "translation_memory.json"
    path.write_text("{not json", encoding="utf-8")
    memory = TranslationMemory(Config(), path=path)

    memory.load()

    assert memory.is_loaded is True
    assert memory.size == 0


def test_malformed_entries_are_skipped(tmp_path: Path) -> None:
    path: Path = tmp_path / "translation_memory.json"
    path.write_text(
        json.dumps({"good_korean": {"translation": "ok"}, "bad_korean": {"tokens": {}}, "worse_korean": 3}),
        encoding="utf-8",
    )
    memory = TranslationMemory(Config(), path=path)

    memory.load()

    assert memory.size == 1
    assert memory.get("good", "korean") is not None


def test_flush_failure_keeps_pending_writes(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path)
    memory.put("one", "korean", "1", TokenUsage())

    with patch("core.cache.manager.FileUtils.write_json_atomic", side_effect=OSError("disk full")):
        assert memory.flush() is False

    assert memory.pending_writes == 1


def test_statistics_report_entry_range(tmp_path: Path) -> None:
    memory: TranslationMemory = _make_memory(tmp_path, limit=10)

    with patch.object(TranslationMemory, "_now") as now:
        now.return_value.isoformat.side_effect = ["2025-01-01T00:00:00+00:00", "2025-02-01T00:00:00+00:00"]
        memory.put("one", "korean", "1", TokenUsage())
        memory.put("two", "korean", "2", TokenUsage())

    stats = memory.get_statistics()

    assert stats.total_entries == 2
    assert stats.limit == 10
    assert stats.pending_writes == 2
    assert stats.oldest_entry == "2025-01-01T00:00:00+00:00"
    assert stats.newest_entry == "2025-02-01T00:00:00+00:00"
