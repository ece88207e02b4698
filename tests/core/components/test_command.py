"""Unit tests for core.components.command module."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.components.command import BotCommandManager
from models.config_models import Config
from models.server_models import ServerConfig


def _make_context(server_id: int = 1) -> MagicMock:
    context = MagicMock()
    context.author.name = "tester"
    context.guild.id = server_id
    context.reply = AsyncMock()
    return context


def _reply_text(context: MagicMock) -> str:
    context.reply.assert_awaited_once()
    return context.reply.await_args.args[0]


@pytest.fixture
def command_bundle() -> SimpleNamespace:
    config = Config()

    server_config = ServerConfig()
    config_store = MagicMock()
    config_store.load = MagicMock(return_value=server_config)

    backend_manager = MagicMock()
    backend_manager.available_backends = ["gpt4o", "claude"]

    shared = MagicMock()
    shared.config = config
    shared.config_store = config_store
    shared.backend_manager = backend_manager

    bot = MagicMock()
    bot.shared_data = shared

    command = BotCommandManager(bot)
    return SimpleNamespace(command=command, config_store=config_store, server_config=server_config)


@pytest.mark.asyncio
async def test_mode_without_argument_shows_current_mode(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.mode.callback(command_bundle.command, context)

    assert _reply_text(context) == (
        "Current language mode is: **Korean**\n\n"
        "Available modes:\n"
        "• `!mode korean` - Translates Korean ↔ English and Japanese → Korean\n"
        "• `!mode japanese` - Translates Japanese ↔ English and Korean → Japanese"
    )


@pytest.mark.asyncio
async def test_mode_switches_and_saves(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.mode.callback(command_bundle.command, context, "Japanese")

    assert command_bundle.server_config.mode == "japanese"
    command_bundle.config_store.save.assert_called_once_with(1, command_bundle.server_config)
    assert _reply_text(context) == (
        "✅ Language mode changed to **Japanese**\n\n• Translates Japanese ↔ English and Korean → Japanese"
    )


@pytest.mark.asyncio
async def test_mode_same_value_is_reported(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.mode.callback(command_bundle.command, context, "korean")

    command_bundle.config_store.save.assert_not_called()
    assert _reply_text(context) == "Language mode is already set to **Korean**"


@pytest.mark.asyncio
async def test_mode_invalid_value_is_rejected(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.mode.callback(command_bundle.command, context, "french")

    command_bundle.config_store.save.assert_not_called()
    assert _reply_text(context).startswith('❌ Invalid mode: "french"\n\nAvailable modes:\n')


@pytest.mark.asyncio
async def test_model_without_argument_lists_models(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.model.callback(command_bundle.command, context)

    text: str = _reply_text(context)
    assert text.startswith("Current AI model is: **gpt4o**\n\nAvailable models:\n")
    assert "• `!model claude` - Anthropic's Claude 3.7 Sonnet model" in text
    assert "• `!model gemini` - Google's Gemini 2.0 Flash model" in text


@pytest.mark.asyncio
async def test_model_switches_and_saves(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.model.callback(command_bundle.command, context, "claude")

    assert command_bundle.server_config.model == "claude"
    command_bundle.config_store.save.assert_called_once_with(1, command_bundle.server_config)
    assert _reply_text(context) == (
        "✅ AI model changed to **claude**\n\nNow using: Anthropic's Claude 3.7 Sonnet model"
    )


@pytest.mark.asyncio
async def test_model_switch_to_unconfigured_backend_is_saved(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.model.callback(command_bundle.command, context, "gemini")

    assert command_bundle.server_config.model == "gemini"
    command_bundle.config_store.save.assert_called_once()


@pytest.mark.asyncio
async def test_model_same_and_invalid_values(command_bundle: SimpleNamespace) -> None:
    same: MagicMock = _make_context()
    invalid: MagicMock = _make_context()

    await command_bundle.command.model.callback(command_bundle.command, same, "gpt4o")
    await command_bundle.command.model.callback(command_bundle.command, invalid, "llama")

    command_bundle.config_store.save.assert_not_called()
    assert _reply_text(same) == "AI model is already set to **gpt4o**"
    assert _reply_text(invalid).startswith('❌ Invalid model: "llama"')


@pytest.mark.asyncio
async def test_help_lists_commands(command_bundle: SimpleNamespace) -> None:
    context: MagicMock = _make_context()

    await command_bundle.command.show_help.callback(command_bundle.command, context)

    text: str = _reply_text(context)
    assert text.startswith("🤖 **Discord Translation Bot Help**")
    for usage in ("!start", "!end", "!mode [korean|japanese]", "!model [gpt4o|claude|gemini]", "!stats", "!help"):
        assert f"• `{usage}` - " in text
    assert "**Language Modes:**" in text


def test_registered_commands(command_bundle: SimpleNamespace) -> None:
    names: set[str] = {command.name for command in command_bundle.command.get_commands()}

    assert names == {"mode", "model", "help"}
