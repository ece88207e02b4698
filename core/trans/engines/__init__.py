"""Translation backend implementations.

This package contains concrete implementations of the BackendInterface for the supported
language-model providers. Importing the package registers every backend by its distinguished name.

Modules:
- AnthropicBackend: Anthropic Messages API over aiohttp ('claude').
- GeminiBackend: Google Generative Language API over aiohttp ('gemini').
- HttpBackend: Shared aiohttp session handling and HTTP error mapping.
- OpenAIBackend: OpenAI chat completions via the official SDK ('gpt4o').
"""

from core.trans.engines.http_backend import HttpBackend
from core.trans.engines.trans_anthropic import AnthropicBackend
from core.trans.engines.trans_gemini import GeminiBackend
from core.trans.engines.trans_openai import OpenAIBackend

__all__: list[str] = [
    "AnthropicBackend",
    "GeminiBackend",
    "HttpBackend",
    "OpenAIBackend",
]
