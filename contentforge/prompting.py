"""Prompt templates for the initial, continuation and polish passes."""

from typing import Iterable

from contentforge.pipeline import SourceBlock, format_sources


def build_initial_prompt(
    topic: str, style: str, target_words: int, sources: Iterable[SourceBlock]
) -> str:
    """
    First-pass prompt asking the model to synthesize a structured article:
    - Uses the sources only as background, never copied verbatim
    - Headings, subheadings, paragraphs and a concluding summary
    - Continues in later passes if the target length is not reached
    """
    sources_text = format_sources(sources)

    return f"""
You are an expert writer. Using the information from the SOURCES below and your knowledge, write an original, well-structured long-form article on the requested TOPIC.
- Topic: {topic}
- Tone / Style: {style}
- Requirements: produce a cohesive article with headings, subheadings, paragraphs, and a concluding summary. Avoid copying source text verbatim; synthesize and paraphrase. Aim to reach approximately {target_words} words total. If the model cannot produce that in one pass, continue generation step-by-step until the target is reached.
Use the SOURCES only as background; ensure the output reads naturally and is original.
SOURCES:
{sources_text}
BEGIN ARTICLE:
"""


def build_continuation_prompt(article: str) -> str:
    """Ask the model to extend the article without repeating it."""
    return f"""
The article so far (do not repeat it) is below. Continue the article in the same tone and style. Do not introduce unrelated topics. Produce a LONG continuation to help reach the target word count.

CURRENT ARTICLE:
{article}

CONTINUE:
"""


def build_polish_prompt(article: str) -> str:
    return f"""
Below is the full article. If it lacks clear headings, add suitable headings and reorganize into sections. Add a concluding summary paragraph at the end. Do not change the meaning but improve structure and flow.

ARTICLE:
{article}

RETURN THE IMPROVED ARTICLE:
"""
