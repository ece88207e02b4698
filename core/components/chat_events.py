from __future__ import annotations

import time
from typing import TYPE_CHECKING, ClassVar

from discord.ext import commands

from core.components.base import ComponentBase
from handlers.chat_message import ChatMessageHandler
from handlers.message_formatter import MessageFormatter
from models.server_models import StatsDelta
from models.translation_models import TranslationFailure, TranslationResult
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    import discord

    from models.server_models import ServerConfig
    from models.translation_models import TranslationOutcome


__all__: list[str] = ["ChatEventsManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

ERROR_USERNAME: str = "Translation Error"


class ChatEventsManager(ComponentBase):
    """Handler for incoming chat messages.

    Messages in channels with an active session are passed through the concurrency queue to the
    translation pipeline. The result is delivered through the channel webhook and counted in the
    session and server statistics. Each failed message produces exactly one error message.
    """

    priority: ClassVar[int] = 0

    @commands.Cog.listener()
    async def on_message(self, payload: discord.Message) -> None:
        if self._should_ignore_message(payload):
            return

        message = ChatMessageHandler(payload)
        channel_id: int = message.channel_id
        server_id: int | None = message.server_id
        if server_id is None or not self.session_registry.is_active(channel_id):
            return

        server_config: ServerConfig = self.config_store.load(server_id)
        if not server_config.auto_translate:
            logger.debug("Auto translation disabled for server %s", server_id)
            return

        try:
            await self.shared.queue.submit(lambda: self._handle_message(message, server_config))
        except Exception as err:  # noqa: BLE001 - isolate per-message failures
            logger.error("Message %s could not be processed: %s", message.message_id, err)

    def _should_ignore_message(self, payload: discord.Message) -> bool:
        if payload.author.bot:
            return True
        if payload.guild is None:
            return True
        # Commands are processed by the command framework.
        return (payload.content or "").startswith(self.config.BOT.PREFIX)

    async def _handle_message(self, message: ChatMessageHandler, server_config: ServerConfig) -> TranslationOutcome:
        start_time: float = time.perf_counter()
        outcome: TranslationOutcome = await self.shared.pipeline.translate_message(
            message, mode=server_config.mode, backend_name=server_config.model
        )

        if isinstance(outcome, TranslationFailure):
            await self._deliver_error(message, outcome)
        elif isinstance(outcome, TranslationResult):
            await self._deliver_translation(message, outcome)
            logger.debug(
                "Message %s processed in %.0f ms (%s)",
                message.message_id,
                (time.perf_counter() - start_time) * 1000,
                outcome.backend,
            )
        return outcome

    async def _deliver_translation(self, message: ChatMessageHandler, result: TranslationResult) -> None:
        formatted: str = MessageFormatter.format_translation(result)
        delivered: bool = await self.shared.webhook_manager.send(
            message.channel,
            MessageFormatter.format_delivery(message.author_name, formatted),
            username=f"Translator ({result.backend})",
            fallback=message.reply,
        )
        if not delivered:
            logger.error("Translation of message %s could not be delivered", message.message_id)

        # The session may have ended while the translation was running.
        self.session_registry.record_translation(message.channel_id, result.tokens.total)
        if message.server_id is not None:
            self.config_store.update_stats(
                message.server_id, StatsDelta(translations=1, tokens=result.tokens.total)
            )

    async def _deliver_error(self, message: ChatMessageHandler, failure: TranslationFailure) -> None:
        error_message: str = MessageFormatter.format_error(failure.kind)
        delivered: bool = await self.shared.webhook_manager.send(
            message.channel,
            f"**Error**: {error_message}",
            username=ERROR_USERNAME,
            fallback=message.reply,
        )
        if not delivered:
            logger.error("Error message for message %s could not be delivered", message.message_id)
