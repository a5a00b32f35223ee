"""Provider interface shared by the Gemini, OpenAI, and Anthropic adapters."""

from abc import ABC, abstractmethod

from ..models import LLMRequest, LLMResponse


class LLMProvider(ABC):
    """One vendor's text-generation API behind a uniform call.

    Implementations translate ``LLMRequest`` into the vendor SDK call, make
    exactly one request, and translate SDK failures into ``LLMError``
    subclasses.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in settings and logs ('gemini', 'openai', 'anthropic')."""

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether an API key is available."""

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Send ``request`` and return the model's reply.

        Raises:
            LLMError: A subclass describing the failure (authentication,
                rate limit, timeout, invalid request, content filter,
                unknown model, or provider-side error).
        """
