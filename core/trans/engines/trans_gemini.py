from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from core.trans.engines.http_backend import HttpBackend
from core.trans.interface import BackendAPIError, BackendAttributes, BackendNotAvailableError, BackendResult
from models.translation_models import TokenUsage
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["GeminiBackend"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

GENERATE_CONTENT_URL: Final[str] = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class GeminiBackend(HttpBackend):
    """Translation backend using the Google Generative Language generateContent REST API."""

    API_KEY_ENV = "GOOGLE_API_KEY"

    def __init__(self) -> None:
        super().__init__()
        self._api_key: str = ""

    @staticmethod
    def fetch_backend_name() -> str:
        return "gemini"

    @property
    def is_available(self) -> bool:
        return bool(self._api_key) and not self._closed

    def initialize(self, config: Config) -> None:
        self._api_key = self.get_authentication_key()
        if not self._api_key:
            msg: str = f"Environment variable '{self.API_KEY_ENV}' is not set"
            raise BackendNotAvailableError(msg)

        self._config = config
        self.attributes = BackendAttributes(name=self.fetch_backend_name(), model=config.BACKENDS.GEMINI_MODEL)

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> BackendResult:
        if not self.is_available:
            msg = "Gemini backend is not initialized"
            raise BackendNotAvailableError(msg)

        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_tokens},
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        headers: dict[str, str] = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

        response: dict[str, Any] = await self._post_json(GENERATE_CONTENT_URL.format(model=model), payload, headers)
        text: str = self._extract_text(response)

        usage: Any = response.get("usageMetadata")
        tokens = TokenUsage()
        if isinstance(usage, dict):
            prompt_tokens: int = int(usage.get("promptTokenCount", 0))
            completion_tokens: int = int(usage.get("candidatesTokenCount", 0))
            tokens = TokenUsage(
                prompt=prompt_tokens,
                completion=completion_tokens,
                total=int(usage.get("totalTokenCount", prompt_tokens + completion_tokens)),
            )
        return BackendResult(translation=text, tokens=tokens)

    @staticmethod
    def _extract_text(response: dict[str, Any]) -> str:
        try:
            parts: list[dict[str, Any]] = response["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as err:
            feedback: Any = response.get("promptFeedback")
            msg: str = f"Gemini API response has no candidates (feedback: {feedback})"
            raise BackendAPIError(msg) from err
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
