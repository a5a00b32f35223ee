"""Unit tests for the generation and humanization stages."""

import pytest

from academic_writer.api.exceptions import GenerationFailure
from academic_writer.llm.errors import ContentFilterError, RateLimitError
from academic_writer.services.generation_service import (
    GENERATION_STAGE,
    HUMANIZATION_STAGE,
    GenerationStage,
)


@pytest.fixture
def stage(llm_client, settings):
    return GenerationStage(llm_client, settings)


class TestGenerationStage:
    """Tests for GenerationStage."""

    @pytest.mark.asyncio
    async def test_draft_sends_academic_prompt(self, stage, fake_provider, climate_request):
        fake_provider.queue("  The draft.  ")

        text = await stage.draft(climate_request)

        assert text == "The draft."
        request = fake_provider.requests[0]
        assert request.messages[0].role == "user"
        assert "Topic: Climate Change" in request.messages[0].content
        assert request.temperature == 0.7

    @pytest.mark.asyncio
    async def test_humanize_sends_draft(self, stage, fake_provider):
        fake_provider.queue("Humanized.")

        text = await stage.humanize("The draft.")

        assert text == "Humanized."
        assert "The draft." in fake_provider.requests[0].messages[0].content

    @pytest.mark.asyncio
    async def test_provider_error_becomes_generation_failure(self, stage, fake_provider, climate_request):
        cause = RateLimitError("quota", provider="gemini")
        fake_provider.queue(cause)

        with pytest.raises(GenerationFailure) as exc_info:
            await stage.draft(climate_request)

        assert exc_info.value.stage == GENERATION_STAGE
        assert exc_info.value.__cause__ is cause
        assert len(fake_provider.requests) == 1

    @pytest.mark.asyncio
    async def test_humanize_failure_names_stage(self, stage, fake_provider):
        fake_provider.queue(ContentFilterError("blocked", provider="gemini"))

        with pytest.raises(GenerationFailure) as exc_info:
            await stage.humanize("draft")

        assert exc_info.value.stage == HUMANIZATION_STAGE

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_generation_failure(self, stage, fake_provider, climate_request):
        cause = ValueError("malformed response")
        fake_provider.queue(cause)

        with pytest.raises(GenerationFailure) as exc_info:
            await stage.draft(climate_request)

        assert exc_info.value.stage == GENERATION_STAGE
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_empty_response_is_failure(self, stage, fake_provider, climate_request):
        fake_provider.queue("   \n")

        with pytest.raises(GenerationFailure, match="empty"):
            await stage.draft(climate_request)

    @pytest.mark.asyncio
    async def test_temperature_from_settings(self, llm_client, settings, fake_provider):
        stage = GenerationStage(llm_client, settings.model_copy(update={"generation_temperature": 0.2}))
        fake_provider.queue("ok")

        await stage.generate("prompt")

        assert fake_provider.requests[0].temperature == 0.2
