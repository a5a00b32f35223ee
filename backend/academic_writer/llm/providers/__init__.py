"""LLM provider implementations.

This package contains provider-specific implementations of the LLMProvider interface.
"""

from .anthropic import AnthropicProvider
from .base import LLMProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "AnthropicProvider",
]
