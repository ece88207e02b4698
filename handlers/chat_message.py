"""Handler for chat messages, providing access to message content, author, and reaction helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from discord.abc import Snowflake


__all__: list[str] = ["ChatMessageHandler"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ChatMessageHandler:
    """Wrapper around a discord.Message.

    Reaction and reply helpers never raise for platform errors: failures are logged and reported
    through the return value, so callers can treat them as best-effort side effects.
    """

    def __init__(self, message: discord.Message, me: Snowflake | None = None) -> None:
        """Initialize ChatMessageHandler with a Discord message.

        Args:
            message (discord.Message): The Discord message object.
            me (Snowflake | None): The bot user, used to remove the bot's own reactions.
                Defaults to the bot member of the message's server.
        """
        self._message: discord.Message = message
        self._me: Snowflake | None = me if me is not None else getattr(message.guild, "me", None)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(id={self.message_id}, channel={self.channel_id}, author='{self.author_name}')"
        )

    @property
    def message(self) -> discord.Message:
        return self._message

    @property
    def content(self) -> str:
        return self._message.content or ""

    @property
    def message_id(self) -> int:
        return self._message.id

    @property
    def channel(self) -> discord.abc.Messageable:
        return self._message.channel

    @property
    def channel_id(self) -> int:
        return self._message.channel.id

    @property
    def server_id(self) -> int | None:
        return self._message.guild.id if self._message.guild is not None else None

    @property
    def author_name(self) -> str:
        return self._message.author.display_name

    @property
    def author_is_bot(self) -> bool:
        return self._message.author.bot

    async def react(self, emoji: str) -> bool:
        """Add a reaction to the message.

        Args:
            emoji (str): Unicode emoji to add.

        Returns:
            bool: True if the reaction was added.
        """
        try:
            await self._message.add_reaction(emoji)
        except discord.HTTPException as err:
            logger.warning("Failed to add reaction '%s' to message %s: %s", emoji, self.message_id, err)
            return False
        return True

    async def unreact(self, emoji: str) -> bool:
        """Remove the bot's own reaction from the message.

        Args:
            emoji (str): Unicode emoji to remove.

        Returns:
            bool: True if the reaction was removed.
        """
        if self._me is None:
            logger.debug("Bot user unknown, cannot remove reaction '%s'", emoji)
            return False
        try:
            await self._message.remove_reaction(emoji, self._me)
        except discord.HTTPException as err:
            logger.warning("Failed to remove reaction '%s' from message %s: %s", emoji, self.message_id, err)
            return False
        return True

    async def clear_reactions(self) -> bool:
        """Remove every reaction from the message. Requires the Manage Messages permission.

        Returns:
            bool: True if the reactions were cleared.
        """
        try:
            await self._message.clear_reactions()
        except discord.HTTPException as err:
            logger.warning("Failed to clear reactions of message %s: %s", self.message_id, err)
            return False
        return True

    async def reply(self, content: str) -> discord.Message | None:
        """Reply to the message without pinging the author.

        Args:
            content (str): Reply text.

        Returns:
            discord.Message | None: The sent message, or None if sending failed.
        """
        try:
            return await self._message.reply(content, mention_author=False)
        except discord.HTTPException as err:
            logger.warning("Failed to reply to message %s: %s", self.message_id, err)
            return None
