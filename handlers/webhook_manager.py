"""Webhook-based delivery of translated messages.

Translations are posted through one named webhook per channel so that they can carry a custom
sender name and avatar. When the webhook cannot be used, delivery falls back to a plain reply.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import discord

from handlers.message_formatter import MessageFormatter
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

    from models.config_models import Config


__all__: list[str] = ["WebhookManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class WebhookManager:
    """Get-or-create cache of named webhooks and split-aware sending.

    Attributes:
        config (Config): Application configuration (WEBHOOK section).
    """

    def __init__(self, config: Config, bot_user_id: int | None = None) -> None:
        self.config: Config = config
        self.bot_user_id: int | None = bot_user_id
        self._webhooks: dict[int, discord.Webhook] = {}

    @property
    def cached_channels(self) -> list[int]:
        return list(self._webhooks)

    async def get_or_create(self, channel: discord.abc.Messageable) -> discord.Webhook:
        """Return the bot's named webhook of a channel, creating it when missing.

        Args:
            channel (discord.abc.Messageable): Channel to post into. Must support webhooks.

        Returns:
            discord.Webhook: The webhook.

        Raises:
            discord.HTTPException: If listing or creating webhooks fails.
            TypeError: If the channel does not support webhooks.
        """
        channel_id: int = channel.id
        cached: discord.Webhook | None = self._webhooks.get(channel_id)
        if cached is not None:
            return cached

        if not isinstance(channel, discord.TextChannel):
            msg: str = f"Channel {channel_id} does not support webhooks"
            raise TypeError(msg)

        name: str = self.config.WEBHOOK.NAME
        webhook: discord.Webhook | None = None
        for existing in await channel.webhooks():
            if existing.name != name:
                continue
            if self.bot_user_id is None or (existing.user is not None and existing.user.id == self.bot_user_id):
                webhook = existing
                break

        if webhook is None:
            webhook = await channel.create_webhook(name=name, reason="Translation delivery")
            logger.info("Created webhook '%s' in channel %s", name, channel_id)

        self._webhooks[channel_id] = webhook
        return webhook

    async def send(
        self,
        channel: discord.abc.Messageable,
        content: str,
        *,
        username: str,
        fallback: Callable[[str], Awaitable[object | None]],
    ) -> bool:
        """Send content through the channel webhook, splitting it into labelled parts when needed.

        Parts are sent in order with WEBHOOK.PART_DELAY seconds between them. If the webhook fails,
        the unsent parts are delivered with the fallback sender instead.

        Args:
            channel (discord.abc.Messageable): Destination channel.
            content (str): Full message content.
            username (str): Sender name shown on the webhook message.
            fallback (Callable[[str], Awaitable[object | None]]): Sender used when the webhook fails.
                A None return value is treated as a failed send.

        Returns:
            bool: True if every part was delivered by either path.
        """
        parts: list[str] = MessageFormatter.split_message_content(content, self.config.WEBHOOK.MAX_LENGTH)
        sent: int = 0
        try:
            webhook: discord.Webhook = await self.get_or_create(channel)
            for part in parts:
                if sent > 0:
                    await asyncio.sleep(self.config.WEBHOOK.PART_DELAY)
                await webhook.send(
                    content=part,
                    username=username,
                    avatar_url=self.config.WEBHOOK.AVATAR_URL or discord.utils.MISSING,
                    allowed_mentions=discord.AllowedMentions.none(),
                )
                sent += 1
        except (discord.HTTPException, TypeError, ValueError) as err:
            logger.warning("Webhook delivery failed in channel %s, falling back to reply: %s", channel.id, err)
            if isinstance(err, discord.NotFound):
                # Webhook was deleted externally.
                self._webhooks.pop(channel.id, None)
            return await self._send_fallback(parts[sent:], fallback, first=sent == 0)
        return True

    async def _send_fallback(
        self, parts: list[str], fallback: Callable[[str], Awaitable[object | None]], *, first: bool
    ) -> bool:
        delivered: bool = True
        for index, part in enumerate(parts):
            if index > 0 or not first:
                await asyncio.sleep(self.config.WEBHOOK.PART_DELAY)
            try:
                result: object | None = await fallback(part)
            except discord.HTTPException as err:
                logger.error("Fallback delivery failed: %s", err)
                return False
            if result is None:
                logger.error("Fallback delivery failed for part %d/%d", index + 1, len(parts))
                delivered = False
        return delivered

    def cleanup(self) -> None:
        """Forget all cached webhooks."""
        for channel_id in self._webhooks:
            logger.debug("Released webhook for channel %s", channel_id)
        self._webhooks.clear()
