"""Translation backends, language rules and the per-message pipeline.

This package provides translation through pluggable language-model backends (OpenAI, Anthropic, Gemini),
LLM-based language detection and the pipeline that ties them to the translation memory.
"""

from core.trans.interface import (
    BackendAPIError,
    BackendError,
    BackendInterface,
    BackendNotAvailableError,
    BackendRateLimitError,
    BackendResult,
)
from core.trans.manager import BackendManager
from core.trans.pipeline import PipelineMetrics, TranslationPipeline

__all__: list[str] = [
    "BackendAPIError",
    "BackendError",
    "BackendInterface",
    "BackendManager",
    "BackendNotAvailableError",
    "BackendRateLimitError",
    "BackendResult",
    "PipelineMetrics",
    "TranslationPipeline",
]
