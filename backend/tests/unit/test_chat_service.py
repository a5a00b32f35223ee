"""Unit tests for the chat assistant."""

import pytest

from academic_writer.llm.errors import AuthenticationError
from academic_writer.models import ChatContext, ChatMessage
from academic_writer.services.chat_service import (
    DEFAULT_SUGGESTIONS,
    FALLBACK_MESSAGE,
    ChatAssistant,
    suggestions_for_step,
)


@pytest.fixture
def assistant(llm_client, settings):
    return ChatAssistant(llm_client, settings)


class TestSuggestions:
    def test_step_one(self):
        assert suggestions_for_step(1) == [
            "Help me choose a research topic",
            "What makes a good academic title?",
            "How specific should my topic be?",
        ]

    def test_unknown_step_defaults_to_step_one(self):
        assert suggestions_for_step(None) == suggestions_for_step(1)

    def test_step_outside_wizard(self):
        assert suggestions_for_step(9) == list(DEFAULT_SUGGESTIONS)

    @pytest.mark.parametrize("step", [1, 2, 3, 4])
    def test_three_suggestions_per_step(self, step):
        assert len(suggestions_for_step(step)) == 3


class TestChatAssistant:
    """Tests for chat replies."""

    @pytest.mark.asyncio
    async def test_reply_with_context(self, assistant, fake_provider):
        fake_provider.queue("Try narrowing your topic to one region.")

        reply = await assistant.reply(
            "Is my topic too broad?",
            ChatContext(current_step=1, topic="Climate Change"),
            [ChatMessage(role="user", content="Hi")],
        )

        assert reply.message == "Try narrowing your topic to one region."
        assert reply.suggestions == suggestions_for_step(1)
        prompt = fake_provider.requests[0].messages[0].content
        assert "Topic: Climate Change" in prompt
        assert "User's question: Is my topic too broad?" in prompt

    @pytest.mark.asyncio
    async def test_provider_failure_returns_fallback(self, assistant, fake_provider):
        fake_provider.queue(AuthenticationError("bad key", provider="gemini"))

        reply = await assistant.reply("Help", ChatContext(current_step=3))

        assert reply.message == FALLBACK_MESSAGE
        assert reply.suggestions == suggestions_for_step(3)

    @pytest.mark.asyncio
    async def test_empty_reply_returns_fallback(self, assistant, fake_provider):
        fake_provider.queue("  ")

        reply = await assistant.reply("Help")

        assert reply.message == FALLBACK_MESSAGE
        assert reply.suggestions == suggestions_for_step(1)

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_fallback(self, assistant, fake_provider):
        fake_provider.queue(RuntimeError("sdk blew up"))

        reply = await assistant.reply("hi", ChatContext(current_step=1), [])

        assert reply.message == FALLBACK_MESSAGE
        assert reply.suggestions == suggestions_for_step(1)
