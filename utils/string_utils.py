from __future__ import annotations

from models.re_models import EMOJI_CODE_PATTERN, EXCESS_NEWLINES_PATTERN, TIMESTAMP_PATTERN, URL_PATTERN

__all__: list[str] = ["StringUtils"]


class StringUtils:
    """Utility class for string manipulation and processing.

    Provides static methods for the text clean-up applied to chat messages before translation,
    such as removing URLs, emoji codes and copied timestamps, and collapsing blank lines.
    """

    @staticmethod
    def ensure_str(value: str | None) -> str:
        """Ensure that the value is a string, returning an empty string if None.

        Note: Does not use strip() to preserve significant whitespace.

        Args:
            value (str | None): The value to ensure as a string.

        Returns:
            str: The value as a string, or empty string if None.
        """
        if not isinstance(value, str):
            value = str(value) if value is not None else ""
        return value

    @staticmethod
    def remove_url(value: str) -> str:
        """Remove http and https URLs from the given string.

        Args:
            value (str): The string to process.

        Returns:
            str: The string with URLs removed.
        """
        value = StringUtils.ensure_str(value)
        if not value:
            return value
        return URL_PATTERN.sub("", value)

    @staticmethod
    def remove_emoji_codes(value: str) -> str:
        """Remove ':name:' emoji codes from the given string."""
        value = StringUtils.ensure_str(value)
        return EMOJI_CODE_PATTERN.sub("", value)

    @staticmethod
    def remove_timestamps(value: str) -> str:
        """Replace 'author — Today at 9:15 PM' annotations with 'author:'."""
        value = StringUtils.ensure_str(value)
        return TIMESTAMP_PATTERN.sub(r"\1:", value)

    @staticmethod
    def collapse_newlines(value: str) -> str:
        """Collapse runs of three or more line breaks into a single blank line.

        Args:
            value (str): The string to process.

        Returns:
            str: The string with at most two consecutive line breaks.
        """
        value = StringUtils.ensure_str(value)
        return EXCESS_NEWLINES_PATTERN.sub("\n\n", value)

    @staticmethod
    def generate_memory_key(text: str, mode: str) -> str:
        """Generate the translation memory key for a text and translation mode.

        The text part is case-folded with str.lower(), the mode is kept as is.

        Args:
            text (str): Source text.
            mode (str): Translation mode.

        Returns:
            str: Key in the form '<lowercased text>_<mode>'.
        """
        return f"{StringUtils.ensure_str(text).lower()}_{mode}"
