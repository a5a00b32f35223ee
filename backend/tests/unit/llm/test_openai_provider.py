"""Unit tests for OpenAI provider.

Tests cover:
- Request building and response parsing
- Error handling and mapping
- Lazy client creation
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from academic_writer.llm.errors import (
    AuthenticationError,
    ContentFilterError,
    InvalidRequestError,
    LLMError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    TimeoutError,
)
from academic_writer.llm.models import LLMRequest, PromptMessage
from academic_writer.llm.providers.openai import OpenAIProvider


class FakeAPIStatusError(Exception):
    """Fake API error for testing exception chaining."""

    def __init__(self, status_code: int, message: str, response=None, request_id=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.response = response
        self.request_id = request_id


def _mock_completion(text="Hello!", finish_reason="stop", choices=True):
    response = MagicMock()
    response.id = "chatcmpl-123"
    response.model = "gpt-4o-mini"
    response.choices = [MagicMock()] if choices else []
    if choices:
        response.choices[0].message.content = text
        response.choices[0].finish_reason = finish_reason
    response.usage.prompt_tokens = 5
    response.usage.completion_tokens = 2
    response.usage.total_tokens = 7
    return response


class TestOpenAIProviderInit:
    """Tests for OpenAI provider initialization."""

    def test_provider_name(self):
        provider = OpenAIProvider(api_key="test-key")
        assert provider.name == "openai"

    def test_default_model(self):
        provider = OpenAIProvider(api_key="test-key")
        assert provider._default_model == "gpt-4o-mini"

    def test_is_configured(self):
        assert OpenAIProvider(api_key="test-key").is_configured is True
        assert OpenAIProvider(api_key=None).is_configured is False

    def test_client_lazy_initialization(self):
        """Client is built on first access, with SDK retries disabled."""
        provider = OpenAIProvider(api_key="test-key")
        assert provider._client is None

        client = provider.client

        assert provider._client is client
        assert client.max_retries == 0

    def test_missing_api_key_raises_error(self):
        provider = OpenAIProvider(api_key=None)

        with pytest.raises(AuthenticationError) as exc_info:
            _ = provider.client

        assert "not configured" in str(exc_info.value)


class TestOpenAIRequestBuilding:
    """Tests for request conversion."""

    def test_basic_request(self):
        provider = OpenAIProvider(api_key="test-key")
        request = LLMRequest(
            messages=[
                PromptMessage(role="system", content="Be formal"),
                PromptMessage(role="user", content="Hi"),
            ],
            temperature=0.5,
        )

        built = provider._build_request(request)

        assert built["model"] == "gpt-4o-mini"
        assert built["temperature"] == 0.5
        assert built["messages"] == [
            {"role": "system", "content": "Be formal"},
            {"role": "user", "content": "Hi"},
        ]
        assert "max_tokens" not in built
        assert "stop" not in built

    def test_optional_fields(self):
        provider = OpenAIProvider(api_key="test-key")
        request = LLMRequest.from_prompt("Hi", model="gpt-4o", max_tokens=100, stop=["END"])

        built = provider._build_request(request)

        assert built["model"] == "gpt-4o"
        assert built["max_tokens"] == 100
        assert built["stop"] == ["END"]


class TestOpenAIResponseParsing:
    """Tests for response conversion."""

    def test_parse_response(self):
        provider = OpenAIProvider(api_key="test-key")

        response = provider._parse_response(_mock_completion(), latency_ms=42)

        assert response.text == "Hello!"
        assert response.finish_reason == "stop"
        assert response.usage.total_tokens == 7
        assert response.model == "gpt-4o-mini"
        assert response.request_id == "chatcmpl-123"
        assert response.latency_ms == 42

    def test_no_choices_is_provider_error(self):
        provider = OpenAIProvider(api_key="test-key")

        with pytest.raises(ProviderError, match="no choices"):
            provider._parse_response(_mock_completion(choices=False), latency_ms=1)


class TestOpenAIErrorMapping:
    """Tests for API error mapping."""

    @pytest.mark.parametrize(
        "status_code,message,expected",
        [
            (401, "Invalid API key", AuthenticationError),
            (403, "Access denied", AuthenticationError),
            (404, "Model not found", ModelNotFoundError),
            (400, "Invalid request parameters", InvalidRequestError),
            (400, "Content blocked by safety filter", ContentFilterError),
            (500, "Internal server error", ProviderError),
            (503, "Service unavailable", ProviderError),
            (418, "Teapot", LLMError),
        ],
    )
    def test_status_mapping(self, status_code, message, expected):
        provider = OpenAIProvider(api_key="test-key")
        error = FakeAPIStatusError(status_code=status_code, message=message, request_id="req-1")

        with pytest.raises(expected) as exc_info:
            provider._handle_api_error(error)

        assert exc_info.value.provider == "openai"
        assert exc_info.value.request_id == "req-1"
        assert exc_info.value.__cause__ is error

    def test_rate_limit_with_retry_after(self):
        provider = OpenAIProvider(api_key="test-key")
        response = MagicMock()
        response.headers = {"retry-after": "30"}
        error = FakeAPIStatusError(status_code=429, message="Rate limit exceeded", response=response)

        with pytest.raises(RateLimitError) as exc_info:
            provider._handle_api_error(error)

        assert exc_info.value.retry_after == 30.0

    def test_rate_limit_without_retry_after(self):
        provider = OpenAIProvider(api_key="test-key")
        error = FakeAPIStatusError(status_code=429, message="Rate limit exceeded")

        with pytest.raises(RateLimitError) as exc_info:
            provider._handle_api_error(error)

        assert exc_info.value.retry_after is None


class TestOpenAIGenerate:
    """Tests for the generate call."""

    @pytest.mark.asyncio
    async def test_generate_success(self):
        provider = OpenAIProvider(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(return_value=_mock_completion())

        with patch.object(provider, "_client", mock_client):
            response = await provider.generate(LLMRequest.from_prompt("Hi"))

        assert response.text == "Hello!"
        assert response.provider == "openai"
        mock_client.chat.completions.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_generate_timeout(self):
        from openai import APITimeoutError

        provider = OpenAIProvider(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=APITimeoutError(request=MagicMock())
        )

        with patch.object(provider, "_client", mock_client):
            with pytest.raises(TimeoutError) as exc_info:
                await provider.generate(LLMRequest.from_prompt("Hi"))

        assert "timed out" in str(exc_info.value).lower()

    @pytest.mark.asyncio
    async def test_generate_connection_error(self):
        from openai import APIConnectionError

        provider = OpenAIProvider(api_key="test-key")
        mock_client = AsyncMock()
        mock_client.chat.completions.create = AsyncMock(
            side_effect=APIConnectionError(request=MagicMock())
        )

        with patch.object(provider, "_client", mock_client):
            with pytest.raises(ProviderError) as exc_info:
                await provider.generate(LLMRequest.from_prompt("Hi"))

        assert "connect" in str(exc_info.value).lower()
