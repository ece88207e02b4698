"""Translator bot core implementation.

This module provides the main Bot class that extends discord.ext.commands.Bot and orchestrates
the bot's core functionality including event handling, component lifecycle management and
graceful shutdown of the translation services.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from core.components import (
    BotCommandManager,  # noqa: F401
    ChatEventsManager,  # noqa: F401
    ComponentBase,
    MemoryServiceComponent,  # noqa: F401
    SessionCommandManager,  # noqa: F401
)
from core.shared_data import SharedData
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from config.loader import Config


__all__: list[str] = ["Bot"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

COMMAND_ERROR_MESSAGE: str = "❌ There was an error trying to execute that command!"


class Bot(commands.Bot):
    """Discord translation bot implementation.

    Extends discord.ext.commands.Bot to translate chat messages in channels with an active session.
    Manages component lifecycle and graceful shutdown.

    Attributes:
        config (Config): Bot configuration settings.
        shared_data (SharedData): Shared translation services.
        attached_components (list[ComponentBase]): List of attached bot components.
    """

    def __init__(self, config: Config) -> None:
        """Initialise the bot with configuration.

        Args:
            config (Config): The configuration object containing bot settings.
        """
        logger.debug("Initialising %s", self.__class__.__name__)
        LoggerUtils.attach_library_logger("discord", logging.WARNING)

        self.config: Config = config
        self.shared_data: SharedData = SharedData(config)
        self._shutdown_started: bool = False

        self.attached_components: list[ComponentBase] = []

        intents: discord.Intents = discord.Intents.default()
        intents.message_content = True
        intents.guild_reactions = True

        super().__init__(
            command_prefix=config.BOT.PREFIX,
            intents=intents,
            help_command=None,
            owner_id=config.BOT.OWNER_ID or None,
            case_insensitive=True,
        )

    async def setup_hook(self) -> None:
        """Asynchronous setup hook called during bot initialization.

        This method initializes shared data and attaches registered components.
        """
        logger.debug("Setting up %s", self.__class__.__name__)

        await self.shared_data.async_init()

        for _descriptor in ComponentBase.component_priority_list():
            _component: ComponentBase = _descriptor.component(self)
            await self.attach_component(_component)

    async def attach_component(self, component: ComponentBase) -> None:
        """Attach a component to the bot.

        Args:
            component (ComponentBase): The component to attach.
        """
        logger.debug("Attaching component: %s", component.__class__.__name__)
        try:
            await self.add_cog(component)
        except (discord.ClientException, commands.CommandError) as err:
            logger.error("Failed to load component %s: %s", component.__class__.__name__, err)
            return

        self.attached_components.append(component)
        logger.debug("Successfully attached component: %s", component.__class__.__name__)

    async def detach_component(self, component: ComponentBase) -> None:
        """Detach a component from the bot.

        Args:
            component (ComponentBase): The component to detach.
        """
        logger.debug("Detaching component: %s", component.__class__.__name__)
        try:
            await self.remove_cog(component.qualified_name)
        except Exception as err:  # noqa: BLE001
            logger.error("Unexpected error while detaching component %s: %s", component.__class__.__name__, err)
        else:
            logger.debug("Successfully detached component: %s", component.__class__.__name__)
        finally:
            if component in self.attached_components:
                self.attached_components.remove(component)

    async def on_ready(self) -> None:
        """Called when the bot is connected. Sets the presence and logs the connected servers."""
        if self.user is None:
            return
        self.shared_data.webhook_manager.bot_user_id = self.user.id
        try:
            await self.change_presence(activity=discord.Game(name=self.config.BOT.ACTIVITY))
        except (discord.HTTPException, TypeError) as err:
            logger.warning("Failed to set bot activity: %s", err)

        logger.info("Logged in as %s, ready in %d servers", self.user, len(self.guilds))
        for guild in self.guilds:
            logger.info("Connected server: %s (%s)", guild.name, guild.id)

    async def on_command_error(self, context: commands.Context, exception: commands.CommandError) -> None:
        """Called when an error occurs in a command. Replies once with a generic error message.

        Args:
            context (commands.Context): The context of the failed command.
            exception (commands.CommandError): The error raised.
        """
        if isinstance(exception, commands.CommandNotFound):
            logger.debug("Unknown command: %s", context.message.content)
            return
        if isinstance(exception, commands.NoPrivateMessage):
            logger.debug("Command '%s' used outside a server", context.command)
            return

        logger.error("Command error in '%s': %s", context.command, exception)
        try:
            await context.reply(COMMAND_ERROR_MESSAGE, mention_author=False)
        except discord.HTTPException as err:
            logger.warning("Failed to report command error: %s", err)

    async def on_error(self, event_method: str, /, *args, **kwargs) -> None:
        """Called when an event handler raises."""
        _ = args, kwargs
        logger.exception("Event error in '%s'", event_method)

    def flush_memory(self) -> bool:
        """Write the translation memory to disk immediately, if the services were started.

        The memory file is left untouched until it has been loaded, so an early shutdown
        cannot replace stored translations with an empty document.
        """
        if not self.shared_data.is_initialized:
            return False
        if not self.shared_data.memory.is_loaded:
            logger.debug("Translation memory not loaded, flush skipped")
            return False
        return self.shared_data.memory.flush()

    async def close(self) -> None:
        """Close the bot and perform any necessary cleanup.

        Note:
            close() may be invoked more than once (signal handler and library shutdown).
            Cleanup runs only once, while the base implementation is still called every time.
        """
        if not self._shutdown_started:
            self._shutdown_started = True
            logger.info("Start shutdown sequence")
            for _component in reversed(self.attached_components):
                await self.detach_component(_component)

            if self.shared_data.is_initialized:
                await self.shared_data.pipeline.background.cancel_all()
                self.flush_memory()
                self.shared_data.webhook_manager.cleanup()
                await self.shared_data.backend_manager.shutdown()
            logger.info("Shutdown sequence complete")
        await super().close()
