"""Models for translation-related data.

Defines token usage, translation results and classified translation failures
returned by the translation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Literal, TypeAlias

from dataclasses_json import DataClassJsonMixin, dataclass_json

__all__: list[str] = [
    "CACHE_BACKEND_ID",
    "FailureKind",
    "TokenUsage",
    "TranslationFailure",
    "TranslationOutcome",
    "TranslationResult",
]

# Backend identifier recorded on results served from the translation memory.
CACHE_BACKEND_ID: Final[str] = "cache"

FailureKind: TypeAlias = Literal["rate_limit", "backend", "unknown"]


@dataclass_json
@dataclass
class TokenUsage(DataClassJsonMixin):
    """Token consumption reported (or estimated) by a backend.

    Attributes:
        prompt (int): Tokens consumed by the request.
        completion (int): Tokens consumed by the response.
        total (int): Total tokens billed for the call.
    """

    prompt: int = 0
    completion: int = 0
    total: int = 0

    @classmethod
    def from_counts(cls, prompt: int, completion: int) -> TokenUsage:
        return cls(prompt=prompt, completion=completion, total=prompt + completion)


@dataclass
class TranslationResult:
    """Result of a successful translation.

    Attributes:
        original_text (str): Preprocessed source text.
        translated_text (str): Translation produced by the backend or the memory.
        source_lang (str): Detected source language code.
        target_lang (str): Resolved target language code.
        backend (str): Backend identifier, or CACHE_BACKEND_ID for memory hits.
        tokens (TokenUsage): Token usage of the call (as recorded when cached).
        latency_ms (float | None): Backend latency in milliseconds. None for memory hits.
    """

    original_text: str
    translated_text: str
    source_lang: str
    target_lang: str
    backend: str
    tokens: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float | None = None

    @property
    def from_cache(self) -> bool:
        return self.backend == CACHE_BACKEND_ID


@dataclass
class TranslationFailure:
    """Classified failure of a translation attempt.

    Attributes:
        kind (FailureKind): Coarse classification used to pick the user-facing message.
        message (str): Description of the underlying error.
    """

    kind: FailureKind
    message: str = ""


TranslationOutcome: TypeAlias = TranslationResult | TranslationFailure | None
