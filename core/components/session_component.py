"""Session commands: start and end translation sessions and show server statistics."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar

from discord.ext import commands

from core.components.base import ComponentBase
from core.session_registry import AlreadyActiveError, NoActiveSessionError
from core.trans.const_languages import FLAGS
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.server_models import ServerConfig
    from models.session_models import Session, SessionSummary


__all__: list[str] = ["SessionCommandManager", "format_last_used", "mode_label"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


def mode_label(mode: str) -> str:
    return "Korean" if mode == "korean" else "Japanese"


def format_last_used(last_used: str | None) -> str:
    """Format an ISO-8601 timestamp as 'Mar 5, 2025, 02:30 PM' in local time."""
    if not last_used:
        return "Never"
    try:
        moment: datetime = datetime.fromisoformat(last_used).astimezone()
    except ValueError:
        return last_used
    return f"{moment:%b} {moment.day}, {moment:%Y, %I:%M %p}"


class SessionCommandManager(ComponentBase):
    """Commands controlling the translation session of a channel."""

    priority: ClassVar[int] = 10

    @commands.command()
    @commands.guild_only()
    async def start(self, context: commands.Context) -> None:
        """Start a translation session in the current channel."""
        logger.debug("Command 'start' invoked by user: %s", context.author.name)
        prefix: str = self.config.BOT.PREFIX
        server_id: int = context.guild.id  # type: ignore[union-attr]
        server_config: ServerConfig = self.config_store.load(server_id)

        try:
            self.session_registry.start(context.channel.id, server_id)
        except AlreadyActiveError:
            await self.reply(
                context,
                f"A translation session is already active in this channel. Use `{prefix}end` to stop it first.",
            )
            return

        await self.reply(
            context,
            "🎉 Translation session started in this channel!\n\n"
            f"Mode: **{mode_label(server_config.mode)}**\n"
            f"Model: **{server_config.model}**\n\n"
            "• Messages will be automatically translated\n"
            f"• Use `{prefix}end` to stop the session\n"
            f"• Use `{prefix}mode [korean|japanese]` to change language mode\n"
            f"• Use `{prefix}model [gpt4o|claude|gemini]` to change AI model",
        )

    @commands.command()
    @commands.guild_only()
    async def end(self, context: commands.Context) -> None:
        """End the translation session of the current channel."""
        logger.debug("Command 'end' invoked by user: %s", context.author.name)
        prefix: str = self.config.BOT.PREFIX

        try:
            summary: SessionSummary = self.session_registry.end(context.channel.id)
        except NoActiveSessionError:
            await self.reply(
                context, f"No active translation session in this channel. Use `{prefix}start` to begin one."
            )
            return

        await self.reply(
            context,
            "🛑 Translation session ended!\n\n"
            "**Session Statistics:**\n"
            f"• Duration: {summary.duration_text}\n"
            f"• Messages Translated: {summary.translations}\n"
            f"• Total Tokens Used: {summary.tokens}\n\n"
            f"Use `{prefix}start` to begin a new translation session.",
        )

    @commands.command()
    @commands.guild_only()
    async def stats(self, context: commands.Context) -> None:
        """Show translation statistics of the server."""
        logger.debug("Command 'stats' invoked by user: %s", context.author.name)
        server_id: int = context.guild.id  # type: ignore[union-attr]
        server_config: ServerConfig = self.config_store.load(server_id)
        sessions: list[Session] = self.session_registry.sessions_for_server(server_id)
        session_tokens: int = sum(session.tokens for session in sessions)
        flag: str = FLAGS["kor"] if server_config.mode == "korean" else FLAGS["jpn"]

        await self.reply(
            context,
            "📊 **Translation Statistics for This Server**\n\n"
            "**Current Status:**\n"
            f"• Mode: {flag} {mode_label(server_config.mode)}\n"
            f"• Model: {server_config.model}\n"
            f"• Active Sessions: {len(sessions)}\n\n"
            "**Usage Statistics:**\n"
            f"• Total Translations: {server_config.stats.total_translations}\n"
            f"• Total Tokens Used: {server_config.stats.total_tokens}\n"
            f"• Tokens in Active Sessions: {session_tokens}\n"
            f"• Sessions Started: {server_config.stats.sessions_started}\n"
            f"• Last Used: {format_last_used(server_config.stats.last_used)}",
        )
