"""Memory service component for the translation memory."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from discord.ext import commands

from core.components.base import ComponentBase
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.cache.manager import TranslationMemory
    from models.memory_models import MemoryStatistics

__all__: list[str] = ["MemoryServiceComponent"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class MemoryServiceComponent(ComponentBase):
    """Load the translation memory on startup, flush it on unload and report statistics."""

    priority: ClassVar[int] = -10

    async def cog_load(self) -> None:
        memory: TranslationMemory = self.shared.memory
        if not memory.is_loaded:
            memory.load()
        logger.debug("'%s' component loaded", self.__class__.__name__)

    async def cog_unload(self) -> None:
        self.shared.memory.flush()
        logger.debug("'%s' component unloaded", self.__class__.__name__)

    @commands.command()
    async def memory_stats(self, context: commands.Context) -> None:
        """Display translation memory statistics.

        Args:
            context (commands.Context): Context object passed during command execution.

        Note:
            Restricted to the bot owner.
        """
        logger.debug("Command 'memory_stats' invoked by user: %s", context.author.name)

        if not await self.bot.is_owner(context.author):
            await self.reply(context, "This command is available to the bot owner only.")
            return

        stats: MemoryStatistics = self.shared.memory.get_statistics()
        summary_lines: list[str] = [
            "🧠 **Translation Memory Statistics**",
            f"• Entries: {stats.total_entries}/{stats.limit}",
            f"• Pending writes: {stats.pending_writes}",
            f"• Oldest entry: {stats.oldest_entry or 'n/a'}",
            f"• Newest entry: {stats.newest_entry or 'n/a'}",
        ]
        await self.reply(context, "\n".join(summary_lines))
        logger.info("Memory statistics displayed")
