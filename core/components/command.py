"""Command component for the translator bot.

Provides chat commands to switch the translation mode and backend of a server
and to show help.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Final

from discord.ext import commands

from core.components.base import ComponentBase
from core.components.session_component import mode_label
from core.trans.const_languages import BACKEND_IDS, MODES
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.server_models import ServerConfig


__all__: list[str] = ["BotCommandManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MODE_DESCRIPTIONS: Final[dict[str, str]] = {
    "korean": "Translates Korean ↔ English and Japanese → Korean",
    "japanese": "Translates Japanese ↔ English and Korean → Japanese",
}

MODEL_DESCRIPTIONS: Final[dict[str, str]] = {
    "gpt4o": "OpenAI's GPT-4o model",
    "claude": "Anthropic's Claude 3.7 Sonnet model",
    "gemini": "Google's Gemini 2.0 Flash model",
}

COMMAND_DESCRIPTIONS: Final[list[tuple[str, str]]] = [
    ("start", "Start a translation session in the current channel"),
    ("end", "End the current translation session"),
    ("mode [korean|japanese]", "Switch language mode (korean/japanese)"),
    ("model [gpt4o|claude|gemini]", "Switch AI model (gpt4o/claude/gemini)"),
    ("stats", "Show translation statistics"),
    ("help", "Show this help message"),
]


class BotCommandManager(ComponentBase):
    """Commands changing server settings and showing information about the bot."""

    priority: ClassVar[int] = 20

    def _available_modes(self) -> str:
        prefix: str = self.config.BOT.PREFIX
        return "\n".join(f"• `{prefix}mode {mode}` - {MODE_DESCRIPTIONS[mode]}" for mode in MODES)

    def _available_models(self) -> str:
        prefix: str = self.config.BOT.PREFIX
        return "\n".join(f"• `{prefix}model {model}` - {MODEL_DESCRIPTIONS[model]}" for model in BACKEND_IDS)

    @commands.command()
    @commands.guild_only()
    async def mode(self, context: commands.Context, requested: str | None = None) -> None:
        """Display or change the translation mode of the server.

        Args:
            context (commands.Context): The context object passed during command execution.
            requested (str | None): Mode to switch to. The current mode is displayed when omitted.
        """
        logger.debug("Command 'mode' invoked by user: %s", context.author.name)
        server_id: int = context.guild.id  # type: ignore[union-attr]
        server_config: ServerConfig = self.config_store.load(server_id)

        if requested is None:
            await self.reply(
                context,
                f"Current language mode is: **{mode_label(server_config.mode)}**\n\n"
                f"Available modes:\n{self._available_modes()}",
            )
            return

        requested = requested.lower()
        if requested not in MODES:
            await self.reply(context, f'❌ Invalid mode: "{requested}"\n\nAvailable modes:\n{self._available_modes()}')
            return

        if server_config.mode == requested:
            await self.reply(context, f"Language mode is already set to **{mode_label(requested)}**")
            return

        server_config.mode = requested
        self.config_store.save(server_id, server_config)
        logger.info("Server %s switched to '%s' mode", server_id, requested)
        await self.reply(
            context, f"✅ Language mode changed to **{mode_label(requested)}**\n\n• {MODE_DESCRIPTIONS[requested]}"
        )

    @commands.command()
    @commands.guild_only()
    async def model(self, context: commands.Context, requested: str | None = None) -> None:
        """Display or change the translation backend of the server.

        The change takes effect for messages that start processing after it.

        Args:
            context (commands.Context): The context object passed during command execution.
            requested (str | None): Backend to switch to. The current backend is displayed when omitted.
        """
        logger.debug("Command 'model' invoked by user: %s", context.author.name)
        server_id: int = context.guild.id  # type: ignore[union-attr]
        server_config: ServerConfig = self.config_store.load(server_id)

        if requested is None:
            await self.reply(
                context,
                f"Current AI model is: **{server_config.model}**\n\nAvailable models:\n{self._available_models()}",
            )
            return

        requested = requested.lower()
        if requested not in BACKEND_IDS:
            await self.reply(
                context, f'❌ Invalid model: "{requested}"\n\nAvailable models:\n{self._available_models()}'
            )
            return

        if server_config.model == requested:
            await self.reply(context, f"AI model is already set to **{requested}**")
            return

        if requested not in self.shared.backend_manager.available_backends:
            logger.warning("Server %s selected backend '%s', which is not configured", server_id, requested)

        server_config.model = requested
        self.config_store.save(server_id, server_config)
        logger.info("Server %s switched to '%s' backend", server_id, requested)
        await self.reply(
            context, f"✅ AI model changed to **{requested}**\n\nNow using: {MODEL_DESCRIPTIONS[requested]}"
        )

    @commands.command(name="help")
    async def show_help(self, context: commands.Context) -> None:
        """Show the available commands."""
        logger.debug("Command 'help' invoked by user: %s", context.author.name)
        prefix: str = self.config.BOT.PREFIX
        command_lines: str = "\n".join(f"• `{prefix}{usage}` - {text}" for usage, text in COMMAND_DESCRIPTIONS)

        await self.reply(
            context,
            "🤖 **Discord Translation Bot Help**\n\n"
            f"**Available Commands:**\n{command_lines}\n\n"
            "**How It Works:**\n"
            f"1. Start a translation session with `{prefix}start` in a specific channel\n"
            "2. Send messages in any supported language (English, Korean, Japanese)\n"
            "3. The bot automatically detects the language and translates when needed\n"
            "4. Translations are posted in the channel under the original author's name\n"
            f"5. End the session with `{prefix}end` when you're done\n\n"
            "**Language Modes:**\n"
            f"• **Korean Mode**: {MODE_DESCRIPTIONS['korean']}\n"
            f"• **Japanese Mode**: {MODE_DESCRIPTIONS['japanese']}",
        )
