"""Message formatter for translated output.

This module provides the MessageFormatter class, which builds the text posted for a translation
(token footer, author prefix, user-facing error messages) and splits long content into
labelled parts that fit the platform message limit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.translation_models import FailureKind, TranslationResult


__all__: list[str] = ["MessageFormatter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_MAX_LENGTH: Final[int] = 1950
SENTENCE_BOUNDARIES: Final[tuple[str, ...]] = (". ", "! ", "? ", "。", "！", "？")

ERROR_MESSAGES: Final[dict[str, str]] = {
    "rate_limit": "❌ Rate limit exceeded. Please try again in a few moments.",
    "backend": "❌ Translation API error. Please try a different model.",
    "unknown": "❌ Failed to translate message. Please try again later.",
}


class MessageFormatter:
    """Builds translated output and splits it for delivery."""

    @staticmethod
    def format_translation(result: TranslationResult) -> str:
        """Format a translation for display.

        Fresh translations carry a token footer. Translations served from memory are shown as is.

        Args:
            result (TranslationResult): The translation to display.

        Returns:
            str: Display text.
        """
        if result.from_cache:
            return result.translated_text
        return f"{result.translated_text}\n📊 Tokens: {result.tokens.total}"

    @staticmethod
    def format_delivery(author_name: str, formatted: str) -> str:
        """Prefix the display text with the original author's name."""
        return f"**{author_name}**: {formatted}"

    @staticmethod
    def format_error(kind: FailureKind) -> str:
        """Return the user-facing message of a failure kind."""
        return ERROR_MESSAGES.get(kind, ERROR_MESSAGES["unknown"])

    @staticmethod
    def part_label(index: int, total: int) -> str:
        return f"[Part {index}/{total}] "

    @staticmethod
    def _find_cut(window: str) -> int:
        """Return the cut position inside a full window: after a line break, after a sentence end, or hard."""
        newline: int = window.rfind("\n")
        if newline > 0:
            return newline + 1

        best: int = 0
        for boundary in SENTENCE_BOUNDARIES:
            position: int = window.rfind(boundary)
            if position > 0:
                best = max(best, position + len(boundary))
        if best > 0:
            return best
        return len(window)

    @staticmethod
    def split_content(content: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[str]:
        """Split content into consecutive pieces of at most max_length characters.

        Pieces are cut after the last line break in range, else after the last sentence end,
        else exactly at max_length. Joining the pieces gives back the original content.

        Args:
            content (str): Text to split.
            max_length (int): Maximum piece length.

        Returns:
            list[str]: The pieces in order. A single element if no split is needed.

        Raises:
            ValueError: If max_length is not positive.
        """
        if max_length < 1:
            msg: str = f"max_length must be positive: {max_length}"
            raise ValueError(msg)

        pieces: list[str] = []
        remaining: str = content
        while len(remaining) > max_length:
            cut: int = MessageFormatter._find_cut(remaining[:max_length])
            pieces.append(remaining[:cut])
            remaining = remaining[cut:]
        pieces.append(remaining)
        return pieces

    @staticmethod
    def split_message_content(content: str, max_length: int = DEFAULT_MAX_LENGTH) -> list[str]:
        """Split content for delivery and label each part when more than one is needed.

        Labels have the form '[Part i/N] ' and are not counted against max_length.

        Args:
            content (str): Text to deliver.
            max_length (int): Maximum length of the content part of each message.

        Returns:
            list[str]: Messages to send, in order.
        """
        pieces: list[str] = MessageFormatter.split_content(content, max_length)
        if len(pieces) == 1:
            return pieces
        logger.debug("Content of %d characters split into %d parts", len(content), len(pieces))
        total: int = len(pieces)
        return [MessageFormatter.part_label(i, total) + piece for i, piece in enumerate(pieces, start=1)]

    @staticmethod
    def strip_part_label(part: str, index: int, total: int) -> str:
        """Remove the '[Part i/N] ' label added by split_message_content."""
        return part.removeprefix(MessageFormatter.part_label(index, total))
