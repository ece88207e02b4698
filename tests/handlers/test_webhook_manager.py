"""Unit tests for handlers.webhook_manager module."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from handlers.webhook_manager import WebhookManager
from models.config_models import Config


def _make_webhook(name: str = "TranslationBot", user_id: int = 999) -> MagicMock:
    webhook = MagicMock()
    webhook.name = name
    webhook.user = MagicMock(id=user_id)
    webhook.send = AsyncMock()
    return webhook


def _make_channel(existing: list[MagicMock] | None = None, created: MagicMock | None = None) -> MagicMock:
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = 100
    channel.webhooks = AsyncMock(return_value=existing or [])
    channel.create_webhook = AsyncMock(return_value=created or _make_webhook())
    return channel


def _not_found() -> discord.NotFound:
    return discord.NotFound(MagicMock(status=404, reason="Not Found"), "Unknown Webhook")


@pytest.fixture
def manager() -> WebhookManager:
    config = Config()
    config.WEBHOOK.PART_DELAY = 0.0
    return WebhookManager(config, bot_user_id=999)


@pytest.mark.asyncio
async def test_get_or_create_reuses_existing_bot_webhook(manager: WebhookManager) -> None:
    foreign: MagicMock = _make_webhook(user_id=1)
    own: MagicMock = _make_webhook(user_id=999)
    channel: MagicMock = _make_channel([_make_webhook("Other"), foreign, own])

    webhook = await manager.get_or_create(channel)

    assert webhook is own
    channel.create_webhook.assert_not_awaited()
    assert manager.cached_channels == [100]


@pytest.mark.asyncio
async def test_get_or_create_creates_missing_webhook_once(manager: WebhookManager) -> None:
    created: MagicMock = _make_webhook()
    channel: MagicMock = _make_channel(created=created)

    first = await manager.get_or_create(channel)
    second = await manager.get_or_create(channel)

    assert first is created
    assert second is created
    channel.create_webhook.assert_awaited_once_with(name="TranslationBot", reason="Translation delivery")
    channel.webhooks.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_or_create_rejects_channels_without_webhooks(manager: WebhookManager) -> None:
    channel = MagicMock()
    channel.id = 5

    with pytest.raises(TypeError):
        await manager.get_or_create(channel)


@pytest.mark.asyncio
async def test_send_delivers_with_username_and_no_mentions(manager: WebhookManager) -> None:
    webhook: MagicMock = _make_webhook()
    channel: MagicMock = _make_channel([webhook])
    fallback = AsyncMock()

    assert await manager.send(channel, "**alice**: Hello", username="Translator (gpt4o)", fallback=fallback) is True

    webhook.send.assert_awaited_once()
    kwargs = webhook.send.await_args.kwargs
    assert kwargs["content"] == "**alice**: Hello"
    assert kwargs["username"] == "Translator (gpt4o)"
    assert kwargs["avatar_url"] is discord.utils.MISSING
    assert kwargs["allowed_mentions"].everyone is False
    fallback.assert_not_awaited()


@pytest.mark.asyncio
async def test_send_splits_long_content_into_labelled_parts(manager: WebhookManager) -> None:
    manager.config.WEBHOOK.MAX_LENGTH = 20
    webhook: MagicMock = _make_webhook()
    channel: MagicMock = _make_channel([webhook])

    assert await manager.send(channel, "first line\nsecond line\nthird", username="u", fallback=AsyncMock()) is True

    contents: list[str] = [call.kwargs["content"] for call in webhook.send.await_args_list]
    assert contents == ["[Part 1/2] first line\n", "[Part 2/2] second line\nthird"]


@pytest.mark.asyncio
async def test_send_falls_back_to_reply_when_webhook_is_gone(manager: WebhookManager) -> None:
    webhook: MagicMock = _make_webhook()
    webhook.send.side_effect = _not_found()
    channel: MagicMock = _make_channel([webhook])
    fallback = AsyncMock(return_value=MagicMock())

    assert await manager.send(channel, "Hello", username="u", fallback=fallback) is True

    fallback.assert_awaited_once_with("Hello")
    assert manager.cached_channels == []


@pytest.mark.asyncio
async def test_send_falls_back_only_for_unsent_parts(manager: WebhookManager) -> None:
    manager.config.WEBHOOK.MAX_LENGTH = 12
    webhook: MagicMock = _make_webhook()
    webhook.send.side_effect = [None, discord.HTTPException(MagicMock(status=500, reason="Error"), "boom")]
    channel: MagicMock = _make_channel([webhook])
    fallback = AsyncMock(return_value=MagicMock())

    assert await manager.send(channel, "first line\nsecond line\n", username="u", fallback=fallback) is True

    fallback.assert_awaited_once_with("[Part 2/2] second line\n")
    assert manager.cached_channels == [100]


@pytest.mark.asyncio
async def test_send_reports_failed_fallback(manager: WebhookManager) -> None:
    channel: MagicMock = _make_channel()
    channel.webhooks.side_effect = discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions")
    fallback = AsyncMock(return_value=None)

    assert await manager.send(channel, "Hello", username="u", fallback=fallback) is False

    fallback.assert_awaited_once_with("Hello")


@pytest.mark.asyncio
async def test_cleanup_forgets_cached_webhooks(manager: WebhookManager) -> None:
    await manager.get_or_create(_make_channel())

    manager.cleanup()

    assert manager.cached_channels == []
