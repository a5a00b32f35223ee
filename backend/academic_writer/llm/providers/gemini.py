"""Google Gemini provider implementation.

Implements the LLMProvider interface on top of the google-genai SDK's
async surface (``client.aio.models.generate_content``).
"""

import time
from typing import Any, NoReturn

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import AuthenticationError, ContentFilterError, ProviderError, TimeoutError, error_for_status
from ..models import LLMRequest, LLMResponse, Usage
from .base import LLMProvider

_BLOCKED_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII", "RECITATION"}


def _enum_name(value: Any) -> str | None:
    """Return the bare name of an SDK enum (or the string itself)."""
    if value is None:
        return None
    return getattr(value, "name", None) or str(value)


class GeminiProvider(LLMProvider):
    """Gemini API provider (default for the writing pipeline)."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        default_model: str = "gemini-1.5-flash",
    ):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key.
            timeout: Request timeout in seconds.
            default_model: Default model to use if not specified in request.
        """
        self._api_key = api_key
        self._timeout = timeout
        self._default_model = default_model
        self._client: genai.Client | None = None

    @property
    def name(self) -> str:
        """Provider identifier."""
        return "gemini"

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @property
    def client(self) -> genai.Client:
        """Lazy-initialized google-genai client."""
        if self._client is None:
            if not self._api_key:
                raise AuthenticationError(
                    "Gemini API key not configured. Set GEMINI_API_KEY environment variable.",
                    provider=self.name,
                )
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
            )
        return self._client

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send a generate_content request to Gemini."""
        start_time = time.perf_counter()
        model = request.model or self._default_model
        contents, config = self._build_request(request)

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except httpx.TimeoutException as e:
            raise TimeoutError(
                f"Gemini request timed out after {self._timeout}s",
                provider=self.name,
            ) from e
        except httpx.TransportError as e:
            raise ProviderError(
                f"Failed to connect to Gemini: {e}",
                provider=self.name,
            ) from e
        except genai_errors.APIError as e:
            self._handle_api_error(e)

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        return self._parse_response(response, model, latency_ms)

    def _build_request(self, request: LLMRequest) -> tuple[list[dict[str, Any]], types.GenerateContentConfig]:
        """Convert LLMRequest to Gemini contents + config."""
        system_parts = [msg.content for msg in request.messages if msg.role == "system"]
        contents = [
            {
                # Gemini calls the assistant role "model"
                "role": "model" if msg.role == "assistant" else "user",
                "parts": [{"text": msg.content}],
            }
            for msg in request.messages
            if msg.role != "system"
        ]

        config = types.GenerateContentConfig(
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            stop_sequences=request.stop,
            system_instruction="\n\n".join(system_parts) if system_parts else None,
        )
        return contents, config

    def _parse_response(self, response: Any, model: str, latency_ms: int) -> LLMResponse:
        """Convert a GenerateContentResponse to LLMResponse."""
        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise ContentFilterError(
                f"Prompt blocked by Gemini: {_enum_name(feedback.block_reason)}",
                provider=self.name,
            )

        candidates = response.candidates or []
        finish_reason = _enum_name(candidates[0].finish_reason) if candidates else None
        text = response.text

        if not text and finish_reason in _BLOCKED_FINISH_REASONS:
            raise ContentFilterError(
                f"Response blocked by Gemini safety filters ({finish_reason})",
                provider=self.name,
            )

        usage = response.usage_metadata
        prompt_tokens = (usage.prompt_token_count or 0) if usage else 0
        completion_tokens = (usage.candidates_token_count or 0) if usage else 0

        return LLMResponse(
            text=text,
            finish_reason="length" if finish_reason == "MAX_TOKENS" else "stop",
            usage=Usage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
            model=getattr(response, "model_version", None) or model,
            provider=self.name,
            latency_ms=latency_ms,
            request_id=getattr(response, "response_id", None),
        )

    def _handle_api_error(self, error: genai_errors.APIError) -> NoReturn:
        raise error_for_status(
            error.code or 0,
            error.message or str(error),
            provider=self.name,
            vendor="Gemini",
        ) from error
