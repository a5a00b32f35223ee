"""Writing request, generated document, and quality report models.

Pydantic v2. Field names are snake_case in Python and camelCase on the wire
(the frontend contract), e.g. ``word_count`` <-> ``wordCount``.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Average silent reading speed used for the reading-time estimate
WORDS_PER_MINUTE = 200

_WHITESPACE_RUN = re.compile(r"\s+")


def count_words(content: str) -> int:
    """Count words as the number of fields between whitespace runs.

    Leading or trailing whitespace yields an empty field that is counted,
    and an empty string counts as one field.
    """
    return len(_WHITESPACE_RUN.split(content))


def estimate_reading_time(word_count: int) -> int:
    """Minutes needed to read ``word_count`` words, rounded up."""
    return math.ceil(word_count / WORDS_PER_MINUTE)


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WritingRequest(CamelModel):
    """What the user asked for. Immutable once the pipeline starts."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    topic: str = Field(min_length=1, max_length=500, description="Paper topic")
    instructions: str = Field(min_length=1, max_length=5000, description="Assignment instructions")
    word_count: int = Field(gt=0, le=20000, description="Target length in words")
    reference_file_url: Optional[str] = Field(
        default=None,
        description="URL of an uploaded reference document (only quoted in the prompt)",
    )

    @field_validator("topic", "instructions")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("reference_file_url")
    @classmethod
    def _empty_url_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class GeneratedDocument(CamelModel):
    """Draft and humanized text with metrics derived from the humanized text.

    ``word_count`` and ``estimated_reading_time`` are always recomputed from
    ``humanized_content``; values passed in are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    raw_content: str = Field(alias="content", description="Draft from the generation stage")
    humanized_content: str
    word_count: int = Field(ge=0)
    estimated_reading_time: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _derive_metrics(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {
            key: value
            for key, value in data.items()
            if key not in ("wordCount", "estimatedReadingTime")
        }
        content = data.get("humanized_content", data.get("humanizedContent"))
        if isinstance(content, str):
            words = count_words(content)
            data["word_count"] = words
            data["estimated_reading_time"] = estimate_reading_time(words)
        return data

    @classmethod
    def from_contents(cls, raw_content: str, humanized_content: str) -> GeneratedDocument:
        return cls(raw_content=raw_content, humanized_content=humanized_content)


class QualityLevel(str, Enum):
    """Qualitative bucket for a quality score."""
    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"


class QualityIndicators(CamelModel):
    """Bucketed view of the three scores."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    originality_level: QualityLevel
    human_like_score: QualityLevel
    academic_quality: QualityLevel


class QualityReport(CamelModel):
    """Result of the quality-check stage. Never mutated after creation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    plagiarism_score: float = Field(ge=0, le=100, description="Estimated % of matched text (lower is better)")
    ai_detection_score: float = Field(ge=0, le=100, description="Estimated % AI-likelihood (lower is better)")
    readability_score: float = Field(ge=0, le=100, description="Readability (higher is better)")
    indicators: QualityIndicators = Field(alias="qualityIndicators")


class CheckContentRequest(CamelModel):
    """Request body for a standalone quality check."""

    content: str = Field(min_length=1)
