"""Writing pipeline orchestrator.

Runs generation -> humanization -> quality check for one WritingRequest.

Each call to ``WritingPipeline.run`` creates a fresh ``PipelineRun`` that owns
the request, the intermediate text, and the final report; nothing is shared
between runs. The stage listener is awaited on entering every stage, before
that stage's work starts, so callers can report progress.
"""

from __future__ import annotations

import logging
import uuid
from typing import Awaitable, Callable, Optional

from academic_writer.api.exceptions import GenerationFailure, InvalidStageTransition
from academic_writer.models import (
    Checking,
    Complete,
    Failed,
    GeneratedDocument,
    Generating,
    Humanizing,
    Idle,
    PipelineResult,
    PipelineStage,
    StageState,
    WritingRequest,
    can_transition,
)
from academic_writer.services.generation_service import GenerationStage
from academic_writer.services.quality_service import QualityEstimator

logger = logging.getLogger(__name__)

StageListener = Callable[[PipelineStage], Awaitable[None]]


class PipelineRun:
    """State of a single pipeline run."""

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id or str(uuid.uuid4())
        self._state: StageState = Idle()
        self.history: list[PipelineStage] = [PipelineStage.idle]

    @property
    def state(self) -> StageState:
        return self._state

    @property
    def stage(self) -> PipelineStage:
        return self._state.stage

    def advance(self, new_state: StageState) -> None:
        """Move to ``new_state``.

        Raises:
            InvalidStageTransition: If the move is not in the transition table.
        """
        if not can_transition(self.stage, new_state.stage):
            raise InvalidStageTransition(self.stage.value, new_state.stage.value)
        logger.info(
            f"Pipeline run {self.run_id}: {self.stage.value} -> {new_state.stage.value}",
            extra={"run_id": self.run_id, "stage": new_state.stage.value},
        )
        self._state = new_state
        self.history.append(new_state.stage)

    def fail(self, error: str) -> None:
        """Move to ``failed``, dropping whatever the current stage was holding."""
        self.advance(Failed(failed_stage=self.stage, error=error))


class WritingPipeline:
    """Sequences the writing stages and reports stage transitions."""

    def __init__(self, generation: GenerationStage, estimator: QualityEstimator):
        self._generation = generation
        self._estimator = estimator

    async def run(
        self,
        request: WritingRequest,
        on_stage: Optional[StageListener] = None,
        run: Optional[PipelineRun] = None,
    ) -> PipelineResult:
        """Run the full pipeline for one request.

        Args:
            request: Validated writing request.
            on_stage: Awaited with each stage as the run enters it.
            run: Optional run object to drive (callers that want to inspect
                the final state pass their own). Must still be idle.

        Returns:
            The document and its quality report.

        Raises:
            GenerationFailure: If the draft or humanization call fails. The
                run ends in ``failed`` and no document is returned.
            InvalidStageTransition: If ``run`` has already been started.
        """
        run = run or PipelineRun()
        if run.stage != PipelineStage.idle:
            raise InvalidStageTransition(run.stage.value, PipelineStage.generating.value)

        async def enter(state: StageState) -> None:
            run.advance(state)
            if on_stage is not None:
                await on_stage(state.stage)

        try:
            await enter(Generating(request=request))
            raw_content = await self._generation.draft(request)

            await enter(Humanizing(request=request, raw_content=raw_content))
            humanized = await self._generation.humanize(raw_content)
            document = GeneratedDocument.from_contents(raw_content, humanized)

            await enter(Checking(request=request, document=document))
            report = await self._estimator.estimate(document.humanized_content)

            # The run only becomes complete once the listener has accepted it
            complete = Complete(document=document, report=report)
            if on_stage is not None:
                await on_stage(complete.stage)
            run.advance(complete)
        except Exception as e:
            logger.error(
                f"Pipeline run {run.run_id} failed during {run.stage.value}: {e}",
                extra={"run_id": run.run_id, "stage": run.stage.value},
            )
            if not isinstance(e, GenerationFailure):
                logger.exception("Unexpected pipeline error")
            run.fail(str(e))
            if on_stage is not None:
                await on_stage(PipelineStage.failed)
            raise

        return PipelineResult(document=document, quality_metrics=report)
