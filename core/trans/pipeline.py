"""Per-message translation pipeline.

Runs preprocessing, language detection, target resolution, translation memory lookup and the backend call
for one chat message. Reaction side effects are detached from the main path and failures are returned as
classified values instead of being raised.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.trans.const_languages import FLAGS, needs_translation, resolve_target_language
from core.trans.interface import BackendError, BackendRateLimitError
from models.translation_models import CACHE_BACKEND_ID, TranslationFailure, TranslationResult
from utils.logger_utils import LoggerUtils
from utils.string_utils import StringUtils
from utils.task_utils import BackgroundTasks

if TYPE_CHECKING:
    import logging

    from config.loader import Config
    from core.cache.manager import TranslationMemory
    from core.trans.interface import BackendInterface, BackendResult
    from core.trans.manager import BackendManager
    from handlers.chat_message import ChatMessageHandler
    from models.memory_models import MemoryEntry
    from models.translation_models import FailureKind, TranslationOutcome


__all__: list[str] = ["PipelineMetrics", "TranslationPipeline"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class PipelineMetrics:
    """Running counters of the pipeline.

    Attributes:
        attempts (int): Messages that reached language detection.
        cache_hits (int): Translations served from the translation memory.
        backend_calls (int): Successful backend translations.
        failures (int): Attempts that ended with a TranslationFailure.
        total_latency_ms (float): Sum of backend latencies.
    """

    attempts: int = 0
    cache_hits: int = 0
    backend_calls: int = 0
    failures: int = 0
    total_latency_ms: float = 0.0

    @property
    def average_latency_ms(self) -> float:
        if self.backend_calls == 0:
            return 0.0
        return self.total_latency_ms / self.backend_calls

    @property
    def cache_hit_rate(self) -> float:
        served: int = self.cache_hits + self.backend_calls
        if served == 0:
            return 0.0
        return self.cache_hits / served


class TranslationPipeline:
    """Translate one chat message end to end.

    The pipeline never raises for translation problems: a message that needs no translation yields None,
    a successful translation yields TranslationResult and any failure yields TranslationFailure.
    """

    def __init__(self, config: Config, memory: TranslationMemory, backend_manager: BackendManager) -> None:
        self.config: Config = config
        self.memory: TranslationMemory = memory
        self.backend_manager: BackendManager = backend_manager
        self.metrics: PipelineMetrics = PipelineMetrics()
        self.background: BackgroundTasks = BackgroundTasks()
        # message id -> pending "translating" reaction task
        self._indicators: dict[int, asyncio.Task[bool]] = {}

    def preprocess(self, text: str) -> str:
        """Clean up a chat message before translation.

        Text shorter than PREPROCESSING.MIN_LENGTH characters is only trimmed.

        Args:
            text (str): Raw message content.

        Returns:
            str: Cleaned text. May be empty.
        """
        text = StringUtils.ensure_str(text)
        options = self.config.PREPROCESSING
        if not options.ENABLED or len(text) < options.MIN_LENGTH:
            return text.strip()

        if options.REMOVE_URLS:
            text = StringUtils.remove_url(text)
        if options.REMOVE_TIMESTAMPS:
            text = StringUtils.remove_timestamps(text)
        if options.REMOVE_EMOJIS:
            text = StringUtils.remove_emoji_codes(text)
        return StringUtils.collapse_newlines(text).strip()

    async def translate_message(
        self, message: ChatMessageHandler, *, mode: str, backend_name: str
    ) -> TranslationOutcome:
        """Translate a chat message.

        Args:
            message (ChatMessageHandler): The message; its content is translated and it receives status reactions.
            mode (str): Translation mode of the server.
            backend_name (str): Backend selected by the server.

        Returns:
            TranslationOutcome: None if no translation is needed, otherwise a result or a classified failure.
        """
        text: str = self.preprocess(message.content)
        if not text:
            logger.debug("Nothing left to translate after preprocessing")
            return None
        if text.startswith(self.config.BOT.PREFIX):
            logger.debug("Command-like text skipped")
            return None

        self.metrics.attempts += 1
        try:
            return await self._translate(message, text, mode=mode, backend_name=backend_name)
        except Exception as err:  # noqa: BLE001 - pipeline boundary
            failure: TranslationFailure = self.classify_failure(err)
            self.metrics.failures += 1
            logger.error("Translation failed (%s): %s", failure.kind, err)
            self.background.spawn(self._mark_failed(message), name=f"mark-failed-{message.message_id}")
            return failure
        finally:
            self._log_metrics_periodically()

    async def _translate(
        self, message: ChatMessageHandler, text: str, *, mode: str, backend_name: str
    ) -> TranslationResult | None:
        source_lang: str = await self.backend_manager.detect_language(text, backend_name)
        if not needs_translation(source_lang):
            logger.debug("Language '%s' is not translated", source_lang)
            return None
        target_lang: str = resolve_target_language(source_lang, mode)
        flag: str = FLAGS.get(source_lang, self.config.EMOJI.FALLBACK_FLAG)

        cached: MemoryEntry | None = self.memory.get(text, mode)
        if cached is not None:
            self.metrics.cache_hits += 1
            self.background.spawn(message.react(flag), name=f"flag-{message.message_id}")
            return TranslationResult(
                original_text=text,
                translated_text=cached.translation,
                source_lang=source_lang,
                target_lang=target_lang,
                backend=CACHE_BACKEND_ID,
                tokens=cached.tokens,
            )

        self._indicators[message.message_id] = self.background.spawn(
            message.react(self.config.EMOJI.TRANSLATING), name=f"translating-{message.message_id}"
        )
        backend: BackendInterface = self.backend_manager.get_backend(backend_name)
        start_time: float = time.perf_counter()
        reply: BackendResult = await backend.translate(text, source_lang, mode)
        latency_ms: float = (time.perf_counter() - start_time) * 1000

        self.metrics.backend_calls += 1
        self.metrics.total_latency_ms += latency_ms
        self.memory.put(text, mode, reply.translation, reply.tokens)
        self.background.spawn(self._mark_translated(message, flag), name=f"flag-{message.message_id}")
        logger.debug("'%s' translated %s -> %s in %.0f ms", backend.backend_name, source_lang, target_lang, latency_ms)

        return TranslationResult(
            original_text=text,
            translated_text=reply.translation,
            source_lang=source_lang,
            target_lang=target_lang,
            backend=backend.backend_name,
            tokens=reply.tokens,
            latency_ms=latency_ms,
        )

    async def _mark_translated(self, message: ChatMessageHandler, flag: str) -> None:
        await self._wait_indicator(message)
        await message.unreact(self.config.EMOJI.TRANSLATING)
        await message.react(flag)

    async def _mark_failed(self, message: ChatMessageHandler) -> None:
        await self._wait_indicator(message)
        await message.clear_reactions()
        await message.react(self.config.EMOJI.ERROR)

    async def _wait_indicator(self, message: ChatMessageHandler) -> None:
        """Let a pending 'translating' reaction land before it is removed."""
        indicator: asyncio.Task[bool] | None = self._indicators.pop(message.message_id, None)
        if indicator is not None:
            await asyncio.wait([indicator])

    @staticmethod
    def classify_failure(err: Exception) -> TranslationFailure:
        """Map an exception to the failure kind shown to users.

        Backend exceptions are classified by type. Other exceptions fall back to inspecting the message text.

        Args:
            err (Exception): The exception raised while translating.

        Returns:
            TranslationFailure: The classified failure.
        """
        kind: FailureKind
        if isinstance(err, BackendRateLimitError):
            kind = "rate_limit"
        elif isinstance(err, BackendError):
            kind = "backend"
        else:
            text: str = str(err).lower()
            if "rate limit" in text:
                kind = "rate_limit"
            elif "api" in text:
                kind = "backend"
            else:
                kind = "unknown"
        return TranslationFailure(kind=kind, message=str(err))

    def _log_metrics_periodically(self) -> None:
        interval: int = self.config.TRANSLATION.METRICS_INTERVAL
        if interval <= 0 or self.metrics.attempts == 0 or self.metrics.attempts % interval != 0:
            return
        logger.info(
            "Translation metrics: attempts=%d cache_hits=%d (%.0f%%) backend_calls=%d failures=%d avg_latency=%.0fms",
            self.metrics.attempts,
            self.metrics.cache_hits,
            self.metrics.cache_hit_rate * 100,
            self.metrics.backend_calls,
            self.metrics.failures,
            self.metrics.average_latency_ms,
        )
