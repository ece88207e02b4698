from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from core.trans.engines.http_backend import HttpBackend
from core.trans.interface import BackendAPIError, BackendAttributes, BackendNotAvailableError, BackendResult
from models.translation_models import TokenUsage
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from config.loader import Config


__all__: list[str] = ["AnthropicBackend"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MESSAGES_URL: Final[str] = "https://api.anthropic.com/v1/messages"
API_VERSION: Final[str] = "2023-06-01"
CHARS_PER_TOKEN: Final[int] = 4


class AnthropicBackend(HttpBackend):
    """Translation backend using the Anthropic Messages REST API.

    When the response carries no usage block, token counts are estimated as one token per four characters.
    """

    API_KEY_ENV = "ANTHROPIC_API_KEY"

    def __init__(self) -> None:
        super().__init__()
        self._api_key: str = ""

    @staticmethod
    def fetch_backend_name() -> str:
        return "claude"

    @property
    def is_available(self) -> bool:
        return bool(self._api_key) and not self._closed

    def initialize(self, config: Config) -> None:
        self._api_key = self.get_authentication_key()
        if not self._api_key:
            msg: str = f"Environment variable '{self.API_KEY_ENV}' is not set"
            raise BackendNotAvailableError(msg)

        self._config = config
        self.attributes = BackendAttributes(name=self.fetch_backend_name(), model=config.BACKENDS.ANTHROPIC_MODEL)

    @staticmethod
    def estimate_tokens(text: str) -> int:
        return -(-len(text) // CHARS_PER_TOKEN)

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
            msg = "Anthropic backend is not initialized"
            raise BackendNotAvailableError(msg)

        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt
        headers: dict[str, str] = {
            "x-api-key": self._api_key,
            "anthropic-version": API_VERSION,
            "content-type": "application/json",
        }

        response: dict[str, Any] = await self._post_json(MESSAGES_URL, payload, headers)
        text: str = self._extract_text(response)

        usage: Any = response.get("usage")
        if isinstance(usage, dict) and "input_tokens" in usage and "output_tokens" in usage:
            tokens: TokenUsage = TokenUsage.from_counts(int(usage["input_tokens"]), int(usage["output_tokens"]))
        else:
            logger.debug("No usage block in Anthropic response, estimating token counts")
            tokens = TokenUsage.from_counts(
                self.estimate_tokens(system_prompt + user_prompt), self.estimate_tokens(text)
            )
        return BackendResult(translation=text, tokens=tokens)

    @staticmethod
    def _extract_text(response: dict[str, Any]) -> str:
        content: Any = response.get("content")
        if not isinstance(content, list):
            msg = "Anthropic API response has no content"
            raise BackendAPIError(msg)
        return "".join(
            block.get("text", "") for block in content if isinstance(block, dict) and block.get("type") == "text"
        )
