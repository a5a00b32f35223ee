"""Chat assistant models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field

from .writing import CamelModel


class ChatMessage(CamelModel):
    """One turn of the advisory chat, held by the client session."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChatContext(CamelModel):
    """Where the user is in the writing wizard."""

    current_step: int = 1
    topic: Optional[str] = None
    instructions: Optional[str] = None
    word_count: Optional[int] = None


class ChatRequest(CamelModel):
    """Request body for the chat assistant."""

    message: str = Field(min_length=1, max_length=4000)
    context: Optional[ChatContext] = None
    chat_history: list[ChatMessage] = Field(default_factory=list)


class ChatReply(CamelModel):
    """Assistant reply plus follow-up prompts for the current step."""

    message: str
    suggestions: list[str] = Field(default_factory=list)
