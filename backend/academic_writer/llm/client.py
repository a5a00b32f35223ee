"""High-level LLM client.

Routes requests to the configured provider. Each call is a single
request/response round trip: there is no retry and no fallback to another
vendor, so a failure is reported to the caller exactly once.
"""

import logging
import uuid

from ..config import SUPPORTED_PROVIDERS, Settings
from .errors import TRANSIENT_ERRORS, LLMError
from .models import LLMRequest, LLMResponse
from .providers.anthropic import AnthropicProvider
from .providers.base import LLMProvider
from .providers.gemini import GeminiProvider
from .providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMClient:
    """Vendor-neutral LLM client bound to one provider.

    Usage:
        client = LLMClient(settings)
        response = await client.generate(LLMRequest.from_prompt("Hello"))
    """

    def __init__(self, settings: Settings, providers: dict[str, LLMProvider] | None = None):
        """Initialize LLM client.

        Args:
            settings: Application settings carrying provider name, model,
                timeout, and API keys.
            providers: Optional provider instances by name (tests inject fakes).
        """
        self._settings = settings
        self._provider_name = settings.llm_provider
        self._model = settings.llm_model
        self._providers: dict[str, LLMProvider] = providers or {
            "gemini": GeminiProvider(
                api_key=settings.gemini_api_key,
                timeout=settings.llm_timeout_seconds,
            ),
            "openai": OpenAIProvider(
                api_key=settings.openai_api_key,
                timeout=settings.llm_timeout_seconds,
            ),
            "anthropic": AnthropicProvider(
                api_key=settings.anthropic_api_key,
                timeout=settings.llm_timeout_seconds,
            ),
        }

    @property
    def provider_name(self) -> str:
        return self._provider_name

    def get_provider(self, name: str) -> LLMProvider:
        """Get a specific provider by name.

        Raises:
            ValueError: If provider name is not recognized.
        """
        if name not in self._providers:
            raise ValueError(f"Unknown provider: {name}. Available: {list(SUPPORTED_PROVIDERS)}")
        return self._providers[name]

    def is_provider_available(self, name: str) -> bool:
        """Check if a provider is known and has credentials configured."""
        provider = self._providers.get(name)
        return provider is not None and provider.is_configured

    async def generate(
        self,
        request: LLMRequest,
        correlation_id: str | None = None,
    ) -> LLMResponse:
        """Send one request to the configured provider.

        Args:
            request: LLM request to send. An empty ``model`` is replaced by
                the configured model (or the provider default).
            correlation_id: Optional ID that ties log lines together.

        Returns:
            The provider's response.

        Raises:
            LLMError: On any provider failure.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        provider = self.get_provider(self._provider_name)

        if not request.model and self._model:
            request = request.model_copy(update={"model": self._model})

        try:
            response = await provider.generate(request)
        except LLMError as e:
            e.correlation_id = correlation_id
            logger.log(
                logging.WARNING if isinstance(e, TRANSIENT_ERRORS) else logging.ERROR,
                "LLM request failed: %s",
                str(e),
                extra={
                    "correlation_id": correlation_id,
                    "provider": provider.name,
                    "error_type": type(e).__name__,
                    "transient": isinstance(e, TRANSIENT_ERRORS),
                },
            )
            raise

        logger.info(
            "LLM request succeeded",
            extra={
                "correlation_id": correlation_id,
                "provider": response.provider,
                "model": response.model,
                "latency_ms": response.latency_ms,
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "finish_reason": response.finish_reason,
            },
        )
        return response
