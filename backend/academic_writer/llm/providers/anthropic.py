"""Anthropic provider: Messages API over the official async SDK."""

import time
from typing import Any, NoReturn

from anthropic import AsyncAnthropic, APIConnectionError, APIStatusError, APITimeoutError

from ..errors import AuthenticationError, ProviderError, TimeoutError, error_for_status
from ..models import LLMRequest, LLMResponse, Usage
from .base import LLMProvider
from .openai import retry_after_seconds

# Essays run long; the Messages API requires an explicit ceiling
DEFAULT_MAX_TOKENS = 8192

_FINISH_REASONS = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "max_tokens": "length",
}


class AnthropicProvider(LLMProvider):
    """Anthropic Messages API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        default_model: str = "claude-sonnet-4-5-20250929",
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._default_model = default_model
        self._client: AsyncAnthropic | None = None

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> AsyncAnthropic:
        """SDK client, created on first use."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "Anthropic API key not configured. Set ANTHROPIC_API_KEY environment variable.",
                    provider=self.name,
                )
            self._client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        return self._client

    async def generate(self, request: LLMRequest) -> LLMResponse:
        started = time.perf_counter()
        try:
            message = await self.client.messages.create(**self._build_request(request))
        except APITimeoutError as e:
            raise TimeoutError(
                f"Anthropic request timed out after {self._timeout}s", provider=self.name
            ) from e
        except APIConnectionError as e:
            raise ProviderError(f"Failed to connect to Anthropic: {e}", provider=self.name) from e
        except APIStatusError as e:
            self._handle_api_error(e)

        return self._parse_response(message, int((time.perf_counter() - started) * 1000))

    def _build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Messages API keyword arguments; system turns become the top-level ``system``."""
        system = [m.content for m in request.messages if m.role == "system"]
        params: dict[str, Any] = {
            "model": request.model or self._default_model,
            "messages": [m.model_dump() for m in request.messages if m.role != "system"],
            "max_tokens": request.max_tokens or DEFAULT_MAX_TOKENS,
            # Messages API caps temperature at 1.0
            "temperature": min(request.temperature, 1.0),
        }
        if system:
            params["system"] = "\n\n".join(system)
        if request.stop:
            params["stop_sequences"] = request.stop
        return params

    def _parse_response(self, message: Any, latency_ms: int) -> LLMResponse:
        texts = [block.text for block in message.content if block.type == "text"]
        usage = message.usage

        return LLMResponse(
            text="\n".join(texts) if texts else None,
            finish_reason=_FINISH_REASONS.get(message.stop_reason, message.stop_reason or "stop"),
            usage=Usage(
                prompt_tokens=usage.input_tokens,
                completion_tokens=usage.output_tokens,
                total_tokens=usage.input_tokens + usage.output_tokens,
            ),
            model=message.model,
            provider=self.name,
            latency_ms=latency_ms,
            request_id=message.id,
        )

    def _handle_api_error(self, error: APIStatusError) -> NoReturn:
        raise error_for_status(
            error.status_code,
            str(getattr(error, "message", error)),
            provider=self.name,
            vendor="Anthropic",
            request_id=getattr(error, "request_id", None),
            retry_after=retry_after_seconds(error),
            filter_markers=("safety", "harmful"),
        ) from error
