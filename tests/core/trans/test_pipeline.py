"""Unit tests for core.trans.pipeline module."""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from core.cache.manager import TranslationMemory
from core.trans.interface import BackendAPIError, BackendRateLimitError, BackendResult
from core.trans.pipeline import TranslationPipeline
from models.config_models import Config
from models.translation_models import TokenUsage, TranslationFailure, TranslationResult

if TYPE_CHECKING:
    from pathlib import Path


def _make_message(content: str, message_id: int = 1) -> MagicMock:
    message = MagicMock()
    message.content = content
    message.message_id = message_id
    message.react = AsyncMock(return_value=True)
    message.unreact = AsyncMock(return_value=True)
    message.clear_reactions = AsyncMock(return_value=True)
    return message


@pytest.fixture
def pipeline_bundle(tmp_path: Path) -> SimpleNamespace:
    config = Config()
    memory = TranslationMemory(config, path=tmp_path / "translation_memory.json")
    memory.load()

    backend = MagicMock()
    backend.backend_name = "gpt4o"
    backend.translate = AsyncMock(return_value=BackendResult("Hello", TokenUsage.from_counts(20, 5)))

    backend_manager = MagicMock()
    backend_manager.detect_language = AsyncMock(return_value="kor")
    backend_manager.get_backend = MagicMock(return_value=backend)

    pipeline = TranslationPipeline(config, memory, backend_manager)
    return SimpleNamespace(pipeline=pipeline, memory=memory, backend=backend, backend_manager=backend_manager)


@pytest.mark.asyncio
async def test_korean_message_is_translated_and_remembered(pipeline_bundle: SimpleNamespace) -> None:
    message: MagicMock = _make_message("안녕")

    outcome = await pipeline_bundle.pipeline.translate_message(message, mode="korean", backend_name="gpt4o")
    await pipeline_bundle.pipeline.background.wait_all()

    assert isinstance(outcome, TranslationResult)
    assert outcome.translated_text == "Hello"
    assert outcome.source_lang == "kor"
    assert outcome.target_lang == "eng"
    assert outcome.backend == "gpt4o"
    assert outcome.tokens.total == 25
    assert outcome.latency_ms is not None
    pipeline_bundle.backend.translate.assert_awaited_once_with("안녕", "kor", "korean")

    entry = pipeline_bundle.memory.get("안녕", "korean")
    assert entry is not None
    assert entry.translation == "Hello"

    message.react.assert_any_await("🔄")
    message.unreact.assert_awaited_once_with("🔄")
    message.react.assert_any_await("🇰🇷")


@pytest.mark.asyncio
async def test_second_message_is_served_from_memory(pipeline_bundle: SimpleNamespace) -> None:
    await pipeline_bundle.pipeline.translate_message(_make_message("안녕"), mode="korean", backend_name="gpt4o")
    message: MagicMock = _make_message("안녕", message_id=2)

    outcome = await pipeline_bundle.pipeline.translate_message(message, mode="korean", backend_name="gpt4o")
    await pipeline_bundle.pipeline.background.wait_all()

    assert isinstance(outcome, TranslationResult)
    assert outcome.backend == "cache"
    assert outcome.from_cache is True
    assert outcome.translated_text == "Hello"
    assert outcome.latency_ms is None
    assert pipeline_bundle.backend.translate.await_count == 1
    assert pipeline_bundle.pipeline.metrics.cache_hits == 1
    message.react.assert_awaited_once_with("🇰🇷")


@pytest.mark.asyncio
async def test_english_message_targets_mode_language(pipeline_bundle: SimpleNamespace) -> None:
    pipeline_bundle.backend_manager.detect_language.return_value = "eng"
    message: MagicMock = _make_message("good morning")

    outcome = await pipeline_bundle.pipeline.translate_message(message, mode="japanese", backend_name="gpt4o")
    await pipeline_bundle.pipeline.background.wait_all()

    assert isinstance(outcome, TranslationResult)
    assert outcome.target_lang == "jpn"
    message.react.assert_any_await("🇺🇸")
    assert call("🇯🇵") not in message.react.await_args_list


@pytest.mark.asyncio
async def test_command_text_is_not_translated(pipeline_bundle: SimpleNamespace) -> None:
    outcome = await pipeline_bundle.pipeline.translate_message(
        _make_message("!start"), mode="korean", backend_name="gpt4o"
    )

    assert outcome is None
    pipeline_bundle.backend_manager.detect_language.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_text_after_preprocessing_is_not_translated(pipeline_bundle: SimpleNamespace) -> None:
    outcome = await pipeline_bundle.pipeline.translate_message(
        _make_message("https://example.com/a/very/long/link"), mode="korean", backend_name="gpt4o"
    )

    assert outcome is None
    assert pipeline_bundle.pipeline.metrics.attempts == 0


@pytest.mark.asyncio
async def test_unsupported_language_is_not_translated(pipeline_bundle: SimpleNamespace) -> None:
    pipeline_bundle.backend_manager.detect_language.return_value = "fra"

    outcome = await pipeline_bundle.pipeline.translate_message(
        _make_message("bonjour tout le monde"), mode="korean", backend_name="gpt4o"
    )

    assert outcome is None
    pipeline_bundle.backend.translate.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limit_failure_is_classified(pipeline_bundle: SimpleNamespace) -> None:
    pipeline_bundle.backend.translate.side_effect = BackendRateLimitError("429")
    message: MagicMock = _make_message("안녕하세요")

    outcome = await pipeline_bundle.pipeline.translate_message(message, mode="korean", backend_name="gpt4o")
    await pipeline_bundle.pipeline.background.wait_all()

    assert isinstance(outcome, TranslationFailure)
    assert outcome.kind == "rate_limit"
    assert pipeline_bundle.pipeline.metrics.failures == 1
    assert pipeline_bundle.memory.get("안녕하세요", "korean") is None
    message.clear_reactions.assert_awaited_once()
    message.react.assert_any_await("❌")


def test_preprocess_removes_urls_timestamps_and_emoji_codes(pipeline_bundle: SimpleNamespace) -> None:
    text: str = "alice — Today at 9:15 PM\nlook :smile: https://example.com/x here\n\n\n\nbye"

    assert pipeline_bundle.pipeline.preprocess(text) == "alice:\nlook   here\n\nbye"


def test_preprocess_keeps_short_text(pipeline_bundle: SimpleNamespace) -> None:
    assert pipeline_bundle.pipeline.preprocess("  :ok:  ") == ":ok:"


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (BackendRateLimitError("slow down"), "rate_limit"),
        (BackendAPIError("bad request"), "backend"),
        (RuntimeError("Rate limit reached"), "rate_limit"),
        (RuntimeError("API key invalid"), "backend"),
        (RuntimeError("connection reset"), "unknown"),
    ],
)
def test_classify_failure(error: Exception, kind: str) -> None:
    assert TranslationPipeline.classify_failure(error).kind == kind
