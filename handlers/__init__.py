"""Chat message handling utilities for the translator bot.

This package provides a wrapper around platform messages with reaction helpers, formatting and
splitting of translated output, and webhook-based delivery.
"""

from handlers.chat_message import ChatMessageHandler
from handlers.message_formatter import MessageFormatter
from handlers.webhook_manager import WebhookManager

__all__: list[str] = [
    "ChatMessageHandler",
    "MessageFormatter",
    "WebhookManager",
]
