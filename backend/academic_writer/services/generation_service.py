"""Generation and humanization stages.

Both stages are one request/response round trip to the configured model.
Provider errors and empty responses surface as ``GenerationFailure``; no
partial text is returned and nothing is retried.
"""

from __future__ import annotations

import logging

from academic_writer.api.exceptions import GenerationFailure
from academic_writer.config import Settings
from academic_writer.llm import LLMClient, LLMError, LLMRequest
from academic_writer.models import WritingRequest
from academic_writer.services.prompts import build_academic_prompt, build_humanize_prompt

logger = logging.getLogger(__name__)

GENERATION_STAGE = "generation"
HUMANIZATION_STAGE = "humanization"


class GenerationStage:
    """Uniform ``generate(prompt) -> text`` wrapper over the LLM client."""

    def __init__(self, client: LLMClient, settings: Settings):
        self._client = client
        self._temperature = settings.generation_temperature

    async def generate(self, prompt: str, stage: str = GENERATION_STAGE) -> str:
        """Send one prompt and return the model's text.

        Args:
            prompt: Full prompt text.
            stage: Stage name reported on failure.

        Raises:
            GenerationFailure: On provider error or empty response.
        """
        request = LLMRequest.from_prompt(prompt, temperature=self._temperature)

        try:
            response = await self._client.generate(request)
        except LLMError as e:
            logger.warning(f"{stage} call failed: {e}")
            raise GenerationFailure(stage, str(e)) from e
        except Exception as e:
            logger.exception(f"{stage} call failed unexpectedly")
            raise GenerationFailure(stage, f"unexpected provider error: {e}") from e

        text = (response.text or "").strip()
        if not text:
            raise GenerationFailure(stage, "model returned an empty response")
        return text

    async def draft(self, request: WritingRequest) -> str:
        """Generate the initial academic draft for a request."""
        return await self.generate(build_academic_prompt(request), stage=GENERATION_STAGE)

    async def humanize(self, draft: str) -> str:
        """Rewrite a draft with the humanization prompt (second, independent call)."""
        return await self.generate(build_humanize_prompt(draft), stage=HUMANIZATION_STAGE)
