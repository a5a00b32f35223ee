"""Unit tests for Anthropic provider."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from academic_writer.llm.errors import (
    AuthenticationError,
    ContentFilterError,
    InvalidRequestError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from academic_writer.llm.models import LLMRequest, PromptMessage
from academic_writer.llm.providers.anthropic import DEFAULT_MAX_TOKENS, AnthropicProvider


class FakeAPIStatusError(Exception):
    def __init__(self, status_code: int, message: str, response=None, request_id=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.response = response
        self.request_id = request_id


def _text_block(text):
    block = MagicMock()
    block.type = "text"
    block.text = text
    return block


def _mock_message(blocks, stop_reason="end_turn"):
    response = MagicMock()
    response.id = "msg_123"
    response.model = "claude-sonnet-4-5-20250929"
    response.content = blocks
    response.stop_reason = stop_reason
    response.usage.input_tokens = 11
    response.usage.output_tokens = 4
    return response


class TestAnthropicRequestBuilding:
    """Tests for request conversion."""

    def test_system_messages_lifted_to_top_level(self):
        provider = AnthropicProvider(api_key="test-key")
        request = LLMRequest(
            messages=[
                PromptMessage(role="system", content="Rule one"),
                PromptMessage(role="system", content="Rule two"),
                PromptMessage(role="user", content="Hi"),
            ],
        )

        built = provider._build_request(request)

        assert built["system"] == "Rule one\n\nRule two"
        assert built["messages"] == [{"role": "user", "content": "Hi"}]

    def test_default_max_tokens(self):
        provider = AnthropicProvider(api_key="test-key")
        built = provider._build_request(LLMRequest.from_prompt("Hi"))
        assert built["max_tokens"] == DEFAULT_MAX_TOKENS
        assert "system" not in built

    def test_temperature_clamped_to_one(self):
        provider = AnthropicProvider(api_key="test-key")
        built = provider._build_request(LLMRequest.from_prompt("Hi", temperature=1.6))
        assert built["temperature"] == 1.0

    def test_stop_sequences(self):
        provider = AnthropicProvider(api_key="test-key")
        built = provider._build_request(LLMRequest.from_prompt("Hi", stop=["###"]))
        assert built["stop_sequences"] == ["###"]


class TestAnthropicResponseParsing:
    """Tests for response conversion."""

    def test_text_blocks_joined(self):
        provider = AnthropicProvider(api_key="test-key")
        tool_block = MagicMock()
        tool_block.type = "tool_use"

        response = provider._parse_response(
            _mock_message([_text_block("Part one"), tool_block, _text_block("Part two")]),
            latency_ms=10,
        )

        assert response.text == "Part one\nPart two"
        assert response.usage.total_tokens == 15
        assert response.request_id == "msg_123"

    @pytest.mark.parametrize(
        "stop_reason,expected",
        [("end_turn", "stop"), ("max_tokens", "length"), ("stop_sequence", "stop")],
    )
    def test_finish_reason_mapping(self, stop_reason, expected):
        provider = AnthropicProvider(api_key="test-key")
        response = provider._parse_response(
            _mock_message([_text_block("x")], stop_reason=stop_reason), latency_ms=1
        )
        assert response.finish_reason == expected

    def test_no_text_blocks(self):
        provider = AnthropicProvider(api_key="test-key")
        response = provider._parse_response(_mock_message([]), latency_ms=1)
        assert response.text is None


class TestAnthropicErrorMapping:
    """Tests for API error mapping."""

    @pytest.mark.parametrize(
        "status_code,message,expected",
        [
            (401, "bad key", AuthenticationError),
            (404, "no such model", ModelNotFoundError),
            (429, "too many requests", RateLimitError),
            (400, "max_tokens too large", InvalidRequestError),
            (400, "potentially harmful content", ContentFilterError),
            (529, "overloaded", ProviderError),
        ],
    )
    def test_status_mapping(self, status_code, message, expected):
        provider = AnthropicProvider(api_key="test-key")

        with pytest.raises(expected) as exc_info:
            provider._handle_api_error(FakeAPIStatusError(status_code, message))

        assert exc_info.value.provider == "anthropic"


class TestAnthropicGenerate:
    """Tests for the generate call."""

    def test_missing_api_key_raises_error(self):
        with pytest.raises(AuthenticationError):
            _ = AnthropicProvider(api_key=None).client

    @pytest.mark.asyncio
    async def test_generate_success(self):
        provider = AnthropicProvider(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=_mock_message([_text_block("Hello")]))

        with patch.object(provider, "_client", mock_client):
            response = await provider.generate(LLMRequest.from_prompt("Hi"))

        assert response.text == "Hello"
        assert response.provider == "anthropic"

    @pytest.mark.asyncio
    async def test_generate_timeout(self):
        from anthropic import APITimeoutError

        provider = AnthropicProvider(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(side_effect=APITimeoutError(request=MagicMock()))

        with patch.object(provider, "_client", mock_client):
            with pytest.raises(TimeoutError):
                await provider.generate(LLMRequest.from_prompt("Hi"))
