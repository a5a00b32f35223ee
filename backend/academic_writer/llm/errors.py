"""LLM error hierarchy.

Provider SDK exceptions are mapped onto these types so the writing stages can
handle failures without knowing which vendor served the request. Nothing in
this package retries; the type only tells the caller whether resubmitting
later might help.
"""


class LLMError(Exception):
    """Base exception for LLM operations."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.request_id = request_id
        self.correlation_id = correlation_id

    def __str__(self) -> str:
        text = super().__str__()
        context = [
            f"{label}={value}"
            for label, value in (("provider", self.provider), ("request_id", self.request_id))
            if value
        ]
        return " ".join([text, *context])


class AuthenticationError(LLMError):
    """Missing API key, or the key was rejected (401/403)."""


class RateLimitError(LLMError):
    """Rate limit or quota exceeded (429).

    ``retry_after`` carries the provider's hint in seconds when one is sent.
    """

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        provider: str | None = None,
        request_id: str | None = None,
        correlation_id: str | None = None,
    ):
        super().__init__(message, provider, request_id, correlation_id)
        self.retry_after = retry_after


class TimeoutError(LLMError):
    """No response within the configured transport timeout."""


class InvalidRequestError(LLMError):
    """Request rejected as malformed (400), e.g. too many tokens."""


class ContentFilterError(LLMError):
    """Prompt or response blocked by the provider's safety filters."""


class ProviderError(LLMError):
    """Provider-side failure (5xx), connection failure, or unusable response."""


class ModelNotFoundError(LLMError):
    """Model identifier not recognized (404)."""


# Failures that may succeed if the caller resubmits later
TRANSIENT_ERRORS = (RateLimitError, TimeoutError, ProviderError)


def error_for_status(
    status_code: int,
    message: str,
    provider: str,
    vendor: str,
    request_id: str | None = None,
    retry_after: float | None = None,
    filter_markers: tuple[str, ...] = ("safety",),
) -> LLMError:
    """Build the LLMError for an HTTP status returned by a provider API.

    Args:
        status_code: HTTP status of the failed call.
        message: Provider's error message.
        provider: Provider identifier stored on the error.
        vendor: Display name used in the error text.
        request_id: Provider request ID, if known.
        retry_after: Retry hint for 429 responses.
        filter_markers: Lower-case substrings that mark a 400 as a safety block.
    """
    context = {"provider": provider, "request_id": request_id}

    if status_code in (401, 403):
        return AuthenticationError(f"{vendor} rejected credentials: {message}", **context)
    if status_code == 404:
        return ModelNotFoundError(f"Model not found: {message}", **context)
    if status_code == 429:
        return RateLimitError(
            f"{vendor} rate limit exceeded: {message}", retry_after=retry_after, **context
        )
    if status_code == 400:
        lowered = message.lower()
        if any(marker in lowered for marker in filter_markers):
            return ContentFilterError(f"Content blocked by {vendor} safety filters: {message}", **context)
        return InvalidRequestError(f"Invalid request to {vendor}: {message}", **context)
    if status_code >= 500:
        return ProviderError(f"{vendor} server error ({status_code}): {message}", **context)
    return LLMError(f"{vendor} error ({status_code}): {message}", **context)
