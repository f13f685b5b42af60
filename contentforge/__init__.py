"""Application package for prompting, inference and iterative generation."""

from .generator import ArticleGenerator, GenerationResult
from .inference import HuggingFaceClient
from .pipeline import count_words, prepare_sources
from .prompting import (
    build_continuation_prompt,
    build_initial_prompt,
    build_polish_prompt,
)
from .schemas import GenerateRequest, GenerateResponse, SourceExcerpt

__all__ = [
    "ArticleGenerator",
    "GenerateRequest",
    "GenerateResponse",
    "GenerationResult",
    "HuggingFaceClient",
    "SourceExcerpt",
    "build_continuation_prompt",
    "build_initial_prompt",
    "build_polish_prompt",
    "count_words",
    "prepare_sources",
]
