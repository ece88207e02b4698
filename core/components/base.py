"""Base component for chat event handlers and commands.

This module provides the ComponentBase class that all bot components inherit from,
offering common access to shared services and reply helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, NamedTuple

import discord
from discord.ext import commands

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config
    from core.bot import Bot
    from core.server_config_store import ServerConfigStore
    from core.session_registry import SessionRegistry
    from core.shared_data import SharedData


__all__: list[str] = ["ComponentBase", "ComponentDescriptor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ComponentDescriptor(NamedTuple):
    """Descriptor for bot components: the component class and its load priority."""

    component: type[ComponentBase]
    priority: int


class ComponentBase(commands.Cog):
    """Base class for bot components.

    Every subclass is registered automatically and loaded by the bot in ascending priority order.

    Attributes:
        bot (Bot): The bot instance with shared data and configuration.
        shared (SharedData): Shared data accessible to all components.
        priority (ClassVar[int]): Load order; lower values load first.
        component_registry (ClassVar[dict[str, ComponentDescriptor]]): Registry of all components.
    """

    priority: ClassVar[int] = 100
    component_registry: ClassVar[dict[str, ComponentDescriptor]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.component_registry[cls.__name__] = ComponentDescriptor(component=cls, priority=cls.priority)

    @classmethod
    def component_priority_list(cls) -> list[ComponentDescriptor]:
        return sorted(cls.component_registry.values(), key=lambda descriptor: descriptor.priority)

    def __init__(self, bot: Bot) -> None:
        """Initialize the component.

        Args:
            bot (Bot): The bot instance with shared data.

        Raises:
            RuntimeError: If shared data is not initialized.
        """
        self.bot: Bot = bot
        if bot.shared_data is None:
            msg = "Shared data is not initialized."
            raise RuntimeError(msg)
        self.shared: SharedData = bot.shared_data

    @property
    def config(self) -> Config:
        return self.shared.config

    @property
    def session_registry(self) -> SessionRegistry:
        return self.shared.session_registry

    @property
    def config_store(self) -> ServerConfigStore:
        return self.shared.config_store

    async def cog_load(self) -> None:
        logger.debug("'%s' component loaded", self.__class__.__name__)

    async def cog_unload(self) -> None:
        logger.debug("'%s' component unloaded", self.__class__.__name__)

    @staticmethod
    async def reply(context: commands.Context, content: str) -> None:
        """Reply to the invoking message without pinging its author. Failures are logged only."""
        try:
            await context.reply(content, mention_author=False)
        except discord.HTTPException as err:
            logger.warning("Failed to reply to command '%s': %s", context.command, err)
