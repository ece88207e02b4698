"""This module defines the abstract base class for translation backends and related exceptions.
It includes the BackendResult data class for backend replies, and exceptions for rate limits and API failures.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from core.trans.const_languages import DEFAULT_LANGUAGE, language_name, resolve_target_language
from models.translation_models import TokenUsage
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config

__all__: list[str] = [
    "BackendAPIError",
    "BackendAttributes",
    "BackendError",
    "BackendInterface",
    "BackendNotAvailableError",
    "BackendRateLimitError",
    "BackendResult",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DETECTION_SYSTEM_PROMPT: Final[str] = (
    "Analyze the text and determine the alphabet used. "
    "Respond with 'Korean' for 한글, 'Japanese' for 日本語, or 'English' for English or other languages."
)
DETECTION_MAX_TOKENS: Final[int] = 10


@dataclass
class BackendAttributes:
    """Backend-specific identity and model selection.

    Attributes:
        name (str): Distinguished backend identifier ('gpt4o', 'claude', 'gemini').
        model (str): Provider model used for translation.
        detection_model (str): Provider model used for language detection.
    """

    name: str
    model: str
    detection_model: str = ""


@dataclass
class BackendResult:
    """Data class for a backend reply.

    Attributes:
        translation (str): Text returned by the model.
        tokens (TokenUsage): Token usage reported or estimated for the call.
    """

    translation: str
    tokens: TokenUsage = field(default_factory=TokenUsage)


class BackendError(Exception):
    """An error occurred while calling a translation backend."""


class BackendRateLimitError(BackendError):
    """The request was rate-limited by the provider."""


class BackendAPIError(BackendError):
    """The provider rejected the request or returned an unusable response."""


class BackendNotAvailableError(BackendError):
    """The backend is not configured (e.g. missing API key) or has been closed."""


class BackendInterface(ABC):
    """Abstract base class for language-model translation backends.

    Subclasses implement a single chat-completion primitive, `_complete`. Translation and
    language detection are built on top of it, so every backend exposes the same capability.

    Attributes:
        registered (ClassVar[dict[str, type[BackendInterface]]]): Registered backend classes
            keyed by their distinguished names.
        API_KEY_ENV (ClassVar[str]): Environment variable holding the provider API key.
    """

    registered: ClassVar[dict[str, type[BackendInterface]]] = {}
    API_KEY_ENV: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs) -> None:
        """Register the subclass in the registered dictionary.

        Args:
            **kwargs: Additional keyword arguments passed to parent class.
        """
        super().__init_subclass__(**kwargs)
        if not hasattr(cls, "fetch_backend_name") or not callable(cls.fetch_backend_name):
            msg = "Subclasses of BackendInterface must implement the static method fetch_backend_name()."
            raise TypeError(msg)

        if not isinstance(cls.fetch_backend_name(), str) or cls.fetch_backend_name() == "":
            return  # Nameless backends (e.g. test doubles) are not registered.

        if cls.fetch_backend_name() in cls.registered:
            msg: str = f"A translation backend with the name '{cls.fetch_backend_name()}' is already registered."
            raise ValueError(msg)

        cls.registered[cls.fetch_backend_name()] = cls

    def __init__(self) -> None:
        self._attributes: BackendAttributes | None = None
        self._config: Config | None = None

    @property
    def attributes(self) -> BackendAttributes:
        if self._attributes is None:
            msg = "Backend attributes have not been set."
            raise RuntimeError(msg)
        return self._attributes

    @attributes.setter
    def attributes(self, attributes: BackendAttributes) -> None:
        if self._attributes is not None:
            msg = "Backend attributes can only be set once during initialization."
            raise RuntimeError(msg)
        self._attributes = attributes

    @property
    def backend_name(self) -> str:
        return self.attributes.name

    @property
    def config(self) -> Config:
        if self._config is None:
            msg = "Backend has not been initialized."
            raise RuntimeError(msg)
        return self._config

    @staticmethod
    @abstractmethod
    def fetch_backend_name() -> str:
        """Fetch the distinguished name of the backend.

        Called during class registration in __init_subclass__.

        Returns:
            str: The distinguished name of the backend.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backend can currently serve requests."""
        raise NotImplementedError

    @abstractmethod
    def initialize(self, config: Config) -> None:
        """Initialize the backend with the given configuration.

        Args:
            config (Config): Configuration object containing model names and timeouts.

        Raises:
            BackendNotAvailableError: If the backend cannot be set up (e.g. no API key).
        """
        raise NotImplementedError

    @abstractmethod
    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> BackendResult:
        """Run one chat completion against the provider.

        Args:
            system_prompt (str): Instructions for the model.
            user_prompt (str): User turn content.
            model (str): Provider model name.
            temperature (float): Sampling temperature.
            max_tokens (int): Upper bound of generated tokens.

        Returns:
            BackendResult: Generated text and token usage.

        Raises:
            BackendRateLimitError: If the provider rate-limited the request.
            BackendAPIError: If the provider call failed.
        """
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Release network resources held by the backend."""
        raise NotImplementedError

    def system_prompt_for(self, mode: str) -> str:
        """Return the configured system prompt of a translation mode."""
        prompt: str = getattr(self.config.PROMPTS, mode.upper(), "")
        if not prompt:
            logger.warning("No system prompt configured for mode '%s'", mode)
        return prompt

    @staticmethod
    def build_user_prompt(text: str, source_lang: str, target_lang: str) -> str:
        """Build the translation request for the user turn."""
        return f'Translate the following {language_name(source_lang)} text to {language_name(target_lang)}: "{text}"'

    async def translate(self, text: str, source_lang: str, mode: str) -> BackendResult:
        """Translate text detected as `source_lang` according to the translation mode.

        Args:
            text (str): Preprocessed source text.
            source_lang (str): Detected source language code.
            mode (str): Translation mode deciding the target language and the system prompt.

        Returns:
            BackendResult: Translation and token usage.

        Raises:
            BackendRateLimitError: If the provider rate-limited the request.
            BackendAPIError: If the provider call failed or returned no text.
        """
        target_lang: str = resolve_target_language(source_lang, mode)
        result: BackendResult = await self._complete(
            self.system_prompt_for(mode),
            self.build_user_prompt(text, source_lang, target_lang),
            model=self.attributes.model,
            temperature=self.config.BACKENDS.TEMPERATURE,
            max_tokens=self.config.BACKENDS.MAX_TOKENS,
        )
        result.translation = result.translation.strip()
        if not result.translation:
            msg: str = f"'{self.backend_name}' returned an empty translation"
            raise BackendAPIError(msg)
        return result

    async def detect_language(self, text: str) -> str:
        """Classify the script of the text as 'kor', 'jpn' or 'eng'.

        Args:
            text (str): Text to classify.

        Returns:
            str: Detected language code. Anything not recognised as Korean or Japanese is 'eng'.

        Raises:
            BackendError: If the classification call fails.
        """
        result: BackendResult = await self._complete(
            DETECTION_SYSTEM_PROMPT,
            text,
            model=self.attributes.detection_model or self.attributes.model,
            temperature=0.0,
            max_tokens=DETECTION_MAX_TOKENS,
        )
        return self.parse_detected_language(result.translation)

    @staticmethod
    def parse_detected_language(answer: str) -> str:
        """Map the classifier answer to a language code."""
        normalized: str = answer.strip().lower()
        if "korean" in normalized:
            return "kor"
        if "japanese" in normalized:
            return "jpn"
        return DEFAULT_LANGUAGE

    def is_rate_limit_error(self, err: Exception) -> bool:
        return isinstance(err, BackendRateLimitError)

    def get_authentication_key(self) -> str:
        """Retrieve the API key from the environment variable named by API_KEY_ENV.

        Returns:
            str: The API key, or an empty string if the variable is not set.
        """
        if not self.API_KEY_ENV:
            return ""
        return os.getenv(self.API_KEY_ENV, "")
