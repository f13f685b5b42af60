"""Input preprocessing pipeline for article generation.

This module counts words in generated text and turns raw source excerpts
into the blocks embedded in the initial prompt.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from contentforge.schemas import SourceExcerpt


# ASCII word characters only: letters, digits and underscore.
WORD_PATTERN = re.compile(r"\w+", re.ASCII)

# Hard-cap each excerpt to keep the prompt within practical limits.
MAX_SOURCE_CHARS = 1800


@dataclass
class SourceBlock:
    """A source excerpt ready to be embedded in a prompt."""

    title: str
    excerpt: str

    def render(self) -> str:
        return f"SOURCE: {self.title}\n{self.excerpt}\n---\n"


def count_words(text: str) -> int:
    """Count maximal runs of word characters in `text`."""
    if not text:
        return 0
    return len(WORD_PATTERN.findall(text))


def prepare_sources(
    sources: Optional[Iterable[Optional[SourceExcerpt]]],
) -> List[SourceBlock]:
    """Keep usable excerpts in input order, truncating each one's text."""
    blocks = []
    for source in sources or []:
        # Entries missing a title or text are skipped silently.
        if source is None or not source.title or not source.text:
            continue
        blocks.append(
            SourceBlock(title=source.title, excerpt=source.text[:MAX_SOURCE_CHARS])
        )
    return blocks


def format_sources(blocks: Iterable[SourceBlock]) -> str:
    """Concatenate rendered source blocks into a single prompt section."""
    return "".join(block.render() for block in blocks)
