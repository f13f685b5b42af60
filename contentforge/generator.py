"""Iterative article generation.

This module drives the generation passes against a text-generation client:
one initial pass, continuation passes until the target length or the pass
cap is reached, then a best-effort polish pass.
"""

from dataclasses import dataclass
import logging
from typing import Iterable, Optional, Protocol, Tuple

from contentforge.errors import GenerationError, InferenceError
from contentforge.pipeline import count_words, prepare_sources
from contentforge.prompting import (
    build_continuation_prompt,
    build_initial_prompt,
    build_polish_prompt,
)
from contentforge.schemas import SourceExcerpt


logger = logging.getLogger(__name__)

MAX_CONTINUATIONS = 6
INITIAL_MAX_NEW_TOKENS = 512
CONTINUATION_MAX_NEW_TOKENS = 512
POLISH_MAX_NEW_TOKENS = 300


class TextGenerationClient(Protocol):
    model: str

    def generate(self, prompt: str, max_new_tokens: int = 512) -> str:
        ...


@dataclass
class GenerationResult:
    """Finished article plus the bookkeeping gathered while producing it."""

    content: str
    word_count: int
    note: str
    continuations: int = 0
    polished: bool = False


class ArticleGenerator:
    """Generates long-form articles by repeatedly extending a draft."""

    def __init__(self, client: TextGenerationClient, max_continuations: int = MAX_CONTINUATIONS):
        self.client = client
        self.max_continuations = max_continuations

    def _continue(self, article: str, target_words: int) -> Tuple[str, int]:
        """Extend the draft until it is long enough or the pass cap is hit."""
        words = count_words(article)
        passes = 0
        while words < target_words and passes < self.max_continuations:
            passes += 1
            try:
                extra = self.client.generate(
                    build_continuation_prompt(article), CONTINUATION_MAX_NEW_TOKENS
                )
            except InferenceError as exc:
                # Keep what we have; a failed pass ends the loop.
                logger.warning("Continuation pass %d failed: %s", passes, exc)
                break
            article += "\n\n" + extra.strip()
            words = count_words(article)
        return article, passes

    def _polish(self, article: str) -> Optional[str]:
        """Return the restructured article, or None if polishing failed."""
        try:
            polished = self.client.generate(
                build_polish_prompt(article), POLISH_MAX_NEW_TOKENS
            ).strip()
        except InferenceError as exc:
            logger.warning("Polish failed, using existing output: %s", exc)
            return None
        if not polished:
            logger.warning("Polish returned no text, using existing output")
            return None
        return polished

    def generate(
        self,
        topic: str,
        target_words: int = 2200,
        sources: Optional[Iterable[Optional[SourceExcerpt]]] = None,
        style: str = "neutral",
    ) -> GenerationResult:
        """Produce an article of roughly `target_words` words.

        Only a failure of the first pass is fatal and raises
        `GenerationError`; later failures degrade to the text gathered so far.
        """
        prompt = build_initial_prompt(topic, style, target_words, prepare_sources(sources))
        try:
            article = self.client.generate(prompt, INITIAL_MAX_NEW_TOKENS).strip()
        except InferenceError as exc:
            logger.error("First generation pass failed: %s", exc)
            raise GenerationError(exc) from exc

        article, passes = self._continue(article, target_words)

        polished = self._polish(article)
        if polished is not None:
            article = polished

        result = GenerationResult(
            content=article,
            word_count=count_words(article),
            note=f"Generated using Hugging Face model: {self.client.model}",
            continuations=passes,
            polished=polished is not None,
        )
        logger.info(
            "Generated article: %d words, %d continuation(s), polished=%s",
            result.word_count,
            result.continuations,
            result.polished,
        )
        return result
