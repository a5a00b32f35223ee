"""Chat assistant service.

Advisory side-channel, independent of the writing pipeline. Provider
failures never reach the user: the reply falls back to a fixed apology with
the same step-based suggestions.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from academic_writer.config import Settings
from academic_writer.llm import LLMClient, LLMError, LLMRequest
from academic_writer.models import ChatContext, ChatMessage, ChatReply
from academic_writer.services.prompts import build_chat_prompt

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I'm sorry, I'm having trouble responding right now. Please try again in a moment."

STEP_SUGGESTIONS: dict[int, tuple[str, str, str]] = {
    1: (
        "Help me choose a research topic",
        "What makes a good academic title?",
        "How specific should my topic be?",
    ),
    2: (
        "What citation style should I use?",
        "How do I write clear instructions?",
        "What academic level should I specify?",
    ),
    3: (
        "How many words for my paper type?",
        "What affects reading time?",
        "Tips for paper length planning",
    ),
    4: (
        "What reference files help most?",
        "How to use uploaded documents?",
        "Best practices for sources",
    ),
}

DEFAULT_SUGGESTIONS = (
    "Help with academic writing",
    "Citation and formatting tips",
    "Research strategies",
)


def suggestions_for_step(current_step: Optional[int]) -> list[str]:
    """Fixed follow-up prompts for a wizard step (step 1 when unknown)."""
    step = current_step or 1
    return list(STEP_SUGGESTIONS.get(step, DEFAULT_SUGGESTIONS))


class ChatAssistant:
    """Answers writing questions with one model call per message."""

    def __init__(self, client: LLMClient, settings: Settings):
        self._client = client
        self._temperature = settings.generation_temperature

    async def reply(
        self,
        message: str,
        context: Optional[ChatContext] = None,
        history: Sequence[ChatMessage] = (),
    ) -> ChatReply:
        suggestions = suggestions_for_step(context.current_step if context else None)
        prompt = build_chat_prompt(message, context, history)

        try:
            response = await self._client.generate(
                LLMRequest.from_prompt(prompt, temperature=self._temperature)
            )
        except LLMError as e:
            logger.error(f"Chat error: {e}")
            return ChatReply(message=FALLBACK_MESSAGE, suggestions=suggestions)
        except Exception:
            logger.exception("Unexpected chat provider error")
            return ChatReply(message=FALLBACK_MESSAGE, suggestions=suggestions)

        text = (response.text or "").strip()
        if not text:
            logger.warning("Chat model returned an empty reply")
            return ChatReply(message=FALLBACK_MESSAGE, suggestions=suggestions)

        return ChatReply(message=text, suggestions=suggestions)
