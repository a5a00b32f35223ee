"""Pytest fixtures for testing."""

from collections import deque
from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Union

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from academic_writer.api.main import app
from academic_writer.config import Settings
from academic_writer.llm import LLMClient, LLMRequest, LLMResponse, Usage
from academic_writer.llm.errors import LLMError
from academic_writer.llm.providers.base import LLMProvider
from academic_writer.models import WritingRequest
from academic_writer.services.job_store import JobStore
from academic_writer.services.writing_service import WritingService, set_writing_service


def create_mock_response(text: str = "Test response", provider: str = "gemini") -> LLMResponse:
    """Create a mock LLMResponse for testing."""
    return LLMResponse(
        text=text,
        finish_reason="stop",
        usage=Usage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        model="test-model",
        provider=provider,
        latency_ms=100,
    )


class FakeProvider(LLMProvider):
    """Scripted provider: returns (or raises) queued outcomes in order."""

    def __init__(self, name: str = "gemini"):
        self._name = name
        self.outcomes: deque[Union[str, Exception]] = deque()
        self.requests: list[LLMRequest] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_configured(self) -> bool:
        return True

    def queue(self, *outcomes: Union[str, Exception]) -> "FakeProvider":
        self.outcomes.extend(outcomes)
        return self

    async def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        if not self.outcomes:
            raise LLMError("No scripted response left", provider=self._name)
        outcome = self.outcomes.popleft()
        if isinstance(outcome, Exception):
            raise outcome
        return create_mock_response(outcome, provider=self._name)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with no simulated delays and a temporary uploads dir."""
    return Settings(
        llm_provider="gemini",
        gemini_api_key="test-key",
        quality_check_delay_seconds=0.0,
        export_delay_seconds=0.0,
        uploads_dir=tmp_path / "uploads",
        storage_signing_secret="test-secret",
        public_base_url="http://test",
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_provider():
    """Factory for named scripted providers."""
    return FakeProvider


@pytest.fixture
def llm_client(settings: Settings, fake_provider: FakeProvider) -> LLMClient:
    return LLMClient(settings, providers={"gemini": fake_provider})


@pytest.fixture
def writing_service(settings: Settings, llm_client: LLMClient) -> Generator[WritingService, None, None]:
    """Writing service wired to the fake provider, installed as the default."""
    service = WritingService(settings, client=llm_client, job_store=JobStore())
    set_writing_service(service)
    yield service
    set_writing_service(None)


@pytest.fixture
def client(writing_service: WritingService) -> TestClient:
    """Synchronous HTTP client for the API."""
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(writing_service: WritingService) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client sharing the test's event loop (for background jobs)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def climate_request() -> WritingRequest:
    return WritingRequest(
        topic="Climate Change",
        instructions="APA style, 3 sources",
        word_count=1000,
    )


@pytest.fixture
def sample_essay() -> str:
    """Markdown-style essay as a model would return it."""
    return (
        "# Climate Change\n\n"
        "## Introduction\n\n"
        "Climate change is **the** defining challenge of our time.\n\n"
        "## Conclusion\n\n"
        "We still have *time* to act."
    )
