"""API routes package."""

from . import chat, health, writing

__all__ = ["chat", "health", "writing"]
