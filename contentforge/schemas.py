"""Pydantic schemas for the article generation API."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class SourceExcerpt(BaseModel):
    """A titled piece of reference text supplied by the caller."""

    title: Optional[str] = Field(default=None, description="Source title.")
    text: Optional[str] = Field(default=None, description="Source body text.")


class GenerateRequest(BaseModel):
    """Inbound payload describing the article to write."""

    topic: str = Field(..., description="Article topic (at least 3 characters).")
    target_words: int = Field(
        default=2200, gt=0, description="Approximate length goal in words."
    )
    sources: List[SourceExcerpt] = Field(
        default_factory=list,
        description="Optional source excerpts, used in the given order.",
    )
    style: str = Field(default="neutral", description="Tone / style guideline.")

    @field_validator("sources", mode="before")
    @classmethod
    def drop_non_object_sources(cls, value: Any) -> Any:
        # Entries that are not objects are ignored rather than rejected.
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return value

    @field_validator("topic")
    @classmethod
    def topic_long_enough(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("topic must be at least 3 characters long")
        return value


class GenerateResponse(BaseModel):
    """Final article returned to the caller."""

    content: str
    word_count: int
    note: str


class ErrorResponse(BaseModel):
    error: str
