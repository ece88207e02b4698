from __future__ import annotations

from typing import TYPE_CHECKING

from core.trans.const_languages import DEFAULT_LANGUAGE
from core.trans.engines import (
    AnthropicBackend,  # noqa: F401
    GeminiBackend,  # noqa: F401
    OpenAIBackend,  # noqa: F401
)
from core.trans.interface import BackendError, BackendInterface, BackendNotAvailableError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["BackendManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class BackendManager:
    """Manager for translation backends.

    Instantiates every registered backend that can be configured, resolves a server's backend choice
    to a usable instance, and provides best-effort language detection.
    """

    def __init__(self, config: Config) -> None:
        """Initialize the BackendManager with the given configuration.

        Args:
            config (Config): The configuration object containing backend settings.
        """
        self.config: Config = config
        self._instances: dict[str, BackendInterface] = {}
        logger.debug("Registered translation backends: %s", BackendInterface.registered)

    async def initialize(self) -> None:
        """Initialize every registered backend whose credentials are available."""
        logger.info("BackendManager initialization started")
        for _name, _cls in BackendInterface.registered.items():
            _instance: BackendInterface = _cls()
            try:
                _instance.initialize(self.config)
            except BackendNotAvailableError as err:
                logger.warning("Translation backend '%s' disabled: %s", _name, err)
                continue
            except BackendError as err:
                logger.critical("Exception in '%s' backend setup: %s", _name, err)
                continue
            self._instances[_name] = _instance
            logger.info("Translation backend initialized: '%s' (%s)", _name, _instance.attributes.model)

        if not self._instances:
            logger.critical("No translation backend is available. Check the API key environment variables.")

    @property
    def available_backends(self) -> list[str]:
        return [name for name, instance in self._instances.items() if instance.is_available]

    def get_backend(self, name: str) -> BackendInterface:
        """Resolve a backend identifier to an available instance.

        Unknown or unavailable identifiers fall back to TRANSLATION.DEFAULT_MODEL, then to any available backend.

        Args:
            name (str): Requested backend identifier.

        Returns:
            BackendInterface: The backend to use.

        Raises:
            BackendNotAvailableError: If no backend is available at all.
        """
        for candidate in (name, self.config.TRANSLATION.DEFAULT_MODEL, *self._instances):
            instance: BackendInterface | None = self._instances.get(candidate)
            if instance is not None and instance.is_available:
                if candidate != name:
                    logger.warning("Translation backend '%s' unavailable, using '%s'", name, candidate)
                return instance

        msg: str = f"No translation backend available (requested: '{name}')"
        raise BackendNotAvailableError(msg)

    async def detect_language(self, text: str, fallback_backend: str | None = None) -> str:
        """Detect the language of the text, never raising.

        Text shorter than TRANSLATION.MIN_DETECTION_LENGTH characters is treated as English without a call.
        Any detection failure is logged and also yields English.

        Args:
            text (str): Text to classify.
            fallback_backend (str | None): Backend to use when the detection backend is unavailable.

        Returns:
            str: 'eng', 'kor' or 'jpn'.
        """
        stripped: str = text.strip()
        if len(stripped) < self.config.TRANSLATION.MIN_DETECTION_LENGTH:
            logger.debug("Text too short for detection, assuming '%s'", DEFAULT_LANGUAGE)
            return DEFAULT_LANGUAGE

        try:
            backend: BackendInterface = self.get_backend(
                self.config.BACKENDS.DETECTION_BACKEND
                if self.config.BACKENDS.DETECTION_BACKEND in self.available_backends
                else fallback_backend or self.config.BACKENDS.DETECTION_BACKEND
            )
            detected: str = await backend.detect_language(stripped)
        except Exception as err:  # noqa: BLE001 - detection is best effort
            logger.error("Language detection failed, assuming '%s': %s", DEFAULT_LANGUAGE, err)
            return DEFAULT_LANGUAGE

        logger.debug("Detected language: '%s'", detected)
        return detected

    async def shutdown(self) -> None:
        """Close every backend and release its network resources."""
        for _name, _instance in self._instances.items():
            try:
                await _instance.close()
            except Exception as err:  # noqa: BLE001
                logger.error("Error while closing backend '%s': %s", _name, err)
            else:
                logger.debug("Backend closed: '%s'", _name)
        self._instances.clear()
