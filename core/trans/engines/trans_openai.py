from __future__ import annotations

from typing import TYPE_CHECKING

from openai import APIConnectionError, AsyncOpenAI, OpenAIError, RateLimitError

from core.trans.interface import (
    BackendAPIError,
    BackendAttributes,
    BackendInterface,
    BackendNotAvailableError,
    BackendRateLimitError,
    BackendResult,
)
from models.translation_models import TokenUsage
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from openai.types.chat import ChatCompletion

    from config.loader import Config


__all__: list[str] = ["OpenAIBackend"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class OpenAIBackend(BackendInterface):
    """Translation backend using the OpenAI chat completions API.

    The same client also serves the lightweight language classifier (DETECTION_MODEL).
    """

    API_KEY_ENV = "OPENAI_API_KEY"

    def __init__(self) -> None:
        super().__init__()
        self._client: AsyncOpenAI | None = None

    @staticmethod
    def fetch_backend_name() -> str:
        return "gpt4o"

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def initialize(self, config: Config) -> None:
        api_key: str = self.get_authentication_key()
        if not api_key:
            msg: str = f"Environment variable '{self.API_KEY_ENV}' is not set"
            raise BackendNotAvailableError(msg)

        self._config = config
        self.attributes = BackendAttributes(
            name=self.fetch_backend_name(),
            model=config.BACKENDS.OPENAI_MODEL,
            detection_model=config.BACKENDS.DETECTION_MODEL,
        )
        self._client = AsyncOpenAI(api_key=api_key, timeout=config.BACKENDS.TIMEOUT)
        logger.debug("OpenAI client created (model: %s)", self.attributes.model)

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> BackendResult:
        if self._client is None:
            msg = "OpenAI backend is not initialized"
            raise BackendNotAvailableError(msg)

        try:
            response: ChatCompletion = await self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except RateLimitError as err:
            msg: str = f"OpenAI rate limit exceeded: {err}"
            raise BackendRateLimitError(msg) from err
        except APIConnectionError as err:
            msg = f"OpenAI API connection failed: {err}"
            raise BackendAPIError(msg) from err
        except OpenAIError as err:
            msg = f"OpenAI API error: {err}"
            raise BackendAPIError(msg) from err

        if not response.choices:
            msg = "OpenAI API returned no choices"
            raise BackendAPIError(msg)

        content: str = response.choices[0].message.content or ""
        tokens = TokenUsage()
        if response.usage is not None:
            tokens = TokenUsage(
                prompt=response.usage.prompt_tokens,
                completion=response.usage.completion_tokens,
                total=response.usage.total_tokens,
            )
        return BackendResult(translation=content, tokens=tokens)

    async def close(self) -> None:
        logger.debug("'%s': 'termination process'", self.__class__.__name__)
        if self._client is not None:
            await self._client.close()
            self._client = None
