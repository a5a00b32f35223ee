"""OpenAI provider: Chat Completions over the official async SDK."""

import time
from typing import Any, NoReturn

from openai import AsyncOpenAI, APIConnectionError, APIStatusError, APITimeoutError

from ..errors import AuthenticationError, ProviderError, TimeoutError, error_for_status
from ..models import LLMRequest, LLMResponse, Usage
from .base import LLMProvider


def retry_after_seconds(error: APIStatusError) -> float | None:
    """Parse the ``retry-after`` header of a failed call, if present and numeric."""
    response = getattr(error, "response", None)
    value = response.headers.get("retry-after") if response is not None else None
    try:
        return float(value) if value else None
    except ValueError:
        return None


class OpenAIProvider(LLMProvider):
    """OpenAI Chat Completions API provider."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        default_model: str = "gpt-4o-mini",
    ):
        self._api_key = api_key
        self._timeout = timeout
        self._default_model = default_model
        self._client: AsyncOpenAI | None = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> AsyncOpenAI:
        """SDK client, created on first use."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "OpenAI API key not configured. Set OPENAI_API_KEY environment variable.",
                    provider=self.name,
                )
            # SDK retries off: one request per call
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        return self._client

    async def generate(self, request: LLMRequest) -> LLMResponse:
        started = time.perf_counter()
        try:
            completion = await self.client.chat.completions.create(**self._build_request(request))
        except APITimeoutError as e:
            raise TimeoutError(
                f"OpenAI request timed out after {self._timeout}s", provider=self.name
            ) from e
        except APIConnectionError as e:
            raise ProviderError(f"Failed to connect to OpenAI: {e}", provider=self.name) from e
        except APIStatusError as e:
            self._handle_api_error(e)

        return self._parse_response(completion, int((time.perf_counter() - started) * 1000))

    def _build_request(self, request: LLMRequest) -> dict[str, Any]:
        """Chat Completions keyword arguments for a request."""
        params: dict[str, Any] = {
            "model": request.model or self._default_model,
            "messages": [message.model_dump() for message in request.messages],
            "temperature": request.temperature,
        }
        if request.max_tokens:
            params["max_tokens"] = request.max_tokens
        if request.stop:
            params["stop"] = request.stop
        return params

    def _parse_response(self, completion: Any, latency_ms: int) -> LLMResponse:
        if not completion.choices:
            raise ProviderError(
                "OpenAI returned no choices",
                provider=self.name,
                request_id=getattr(completion, "id", None),
            )
        choice = completion.choices[0]
        usage = completion.usage

        return LLMResponse(
            text=choice.message.content,
            finish_reason=choice.finish_reason or "stop",
            usage=Usage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            ),
            model=completion.model,
            provider=self.name,
            latency_ms=latency_ms,
            request_id=completion.id,
        )

    def _handle_api_error(self, error: APIStatusError) -> NoReturn:
        raise error_for_status(
            error.status_code,
            str(getattr(error, "message", error)),
            provider=self.name,
            vendor="OpenAI",
            request_id=getattr(error, "request_id", None),
            retry_after=retry_after_seconds(error),
            filter_markers=("content_filter", "safety"),
        ) from error
