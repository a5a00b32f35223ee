"""LLM data models.

Vendor-neutral request and response models for text generation.
These models abstract away provider-specific details.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class PromptMessage(BaseModel):
    """A single message sent to the model."""

    role: Literal["system", "user", "assistant"]
    content: str


class LLMRequest(BaseModel):
    """Vendor-neutral LLM request."""

    messages: list[PromptMessage]
    model: str = ""  # empty means provider default
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int | None = None
    stop: list[str] | None = None

    @classmethod
    def from_prompt(cls, prompt: str, **kwargs: Any) -> "LLMRequest":
        """Build a single-turn request from one prompt string."""
        return cls(messages=[PromptMessage(role="user", content=prompt)], **kwargs)


class Usage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class LLMResponse(BaseModel):
    """Vendor-neutral LLM response."""

    text: str | None
    finish_reason: str
    usage: Usage
    model: str
    provider: str
    latency_ms: int
    request_id: str | None = None
