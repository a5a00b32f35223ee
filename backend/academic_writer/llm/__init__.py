"""LLM provider abstraction layer.

This module provides a vendor-neutral interface for text generation through
Gemini, OpenAI, or Anthropic.
"""

from .client import LLMClient
from .errors import (
    AuthenticationError,
    ContentFilterError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from .models import LLMRequest, LLMResponse, PromptMessage, Usage

__all__ = [
    "LLMClient",
    "LLMRequest",
    "LLMResponse",
    "PromptMessage",
    "Usage",
    "LLMError",
    "AuthenticationError",
    "RateLimitError",
    "TimeoutError",
    "InvalidRequestError",
    "ContentFilterError",
    "ModelNotFoundError",
    "ProviderError",
]
