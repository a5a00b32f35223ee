"""Writing service: wires the pipeline stages, export, chat, and storage.

All collaborators are built from one ``Settings`` object. Routes reach the
service through ``get_writing_service()``; tests swap it with
``set_writing_service()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from academic_writer.api.exceptions import GenerationFailure, JobNotFoundError
from academic_writer.config import Settings, get_settings
from academic_writer.llm import LLMClient
from academic_writer.models import (
    ChatReply,
    ChatRequest,
    ExportOutcome,
    ExportRequest,
    GeneratedDocument,
    JobStatusData,
    PipelineResult,
    PipelineStage,
    QualityReport,
    TERMINAL_STAGES,
    UploadDocumentRequest,
    UploadedDocument,
    WritingRequest,
)
from academic_writer.services.chat_service import ChatAssistant
from academic_writer.services.export_service import ExportDispatcher, SimulatedDeliveryChannel
from academic_writer.services.generation_service import GenerationStage
from academic_writer.services.job_store import JobStore, get_job_store
from academic_writer.services.pipeline import WritingPipeline
from academic_writer.services.quality_service import QualityEstimator, SyntheticQualityEstimator
from academic_writer.services.storage_service import (
    LocalObjectStorage,
    build_storage,
    upload_reference_document,
)

logger = logging.getLogger(__name__)


class WritingService:
    """Facade over everything the HTTP layer needs."""

    def __init__(
        self,
        settings: Settings,
        client: Optional[LLMClient] = None,
        estimator: Optional[QualityEstimator] = None,
        dispatcher: Optional[ExportDispatcher] = None,
        storage: Optional[LocalObjectStorage] = None,
        job_store: Optional[JobStore] = None,
    ):
        self.settings = settings
        self.client = client or LLMClient(settings)
        self.generation = GenerationStage(self.client, settings)
        self.estimator = estimator or SyntheticQualityEstimator(
            delay_seconds=settings.quality_check_delay_seconds
        )
        self.pipeline = WritingPipeline(self.generation, self.estimator)
        self.dispatcher = dispatcher or ExportDispatcher(
            SimulatedDeliveryChannel(delay_seconds=settings.export_delay_seconds)
        )
        self.chat = ChatAssistant(self.client, settings)
        self.storage = storage or build_storage(settings)
        self._job_store = job_store
        self._tasks: set[asyncio.Task] = set()

    @property
    def job_store(self) -> JobStore:
        return self._job_store if self._job_store is not None else get_job_store()

    async def generate_document(self, request: WritingRequest) -> GeneratedDocument:
        """Draft and humanize without the quality check.

        Raises:
            GenerationFailure: If either model call fails.
        """
        raw_content = await self.generation.draft(request)
        humanized = await self.generation.humanize(raw_content)
        return GeneratedDocument.from_contents(raw_content, humanized)

    async def check_content(self, content: str) -> QualityReport:
        return await self.estimator.estimate(content)

    async def run_pipeline(self, request: WritingRequest) -> PipelineResult:
        return await self.pipeline.run(request)

    async def start_job(self, request: WritingRequest) -> str:
        """Start a background pipeline run and return its job ID."""
        store = self.job_store
        job_id = await store.create()

        logger.info(f"Starting pipeline job {job_id}")
        task = asyncio.create_task(self._run_job(job_id, request), name=f"pipeline_{job_id}")
        # Keep a reference so the task is not garbage-collected mid-run
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job_id

    async def _run_job(self, job_id: str, request: WritingRequest) -> None:
        store = self.job_store

        async def on_stage(stage: PipelineStage) -> None:
            # terminal stages are written together with their result or error
            if stage not in TERMINAL_STAGES:
                await store.record_stage(job_id, stage)

        try:
            result = await self.pipeline.run(request, on_stage=on_stage)
        except GenerationFailure as e:
            await store.fail(
                job_id,
                error=f"Content generation failed during {e.stage}. Please try again.",
                error_code="GENERATION_FAILED",
            )
            return
        except Exception:
            logger.exception(f"Pipeline job {job_id} crashed")
            await store.fail(
                job_id,
                error="Unexpected error while generating the paper.",
                error_code="INTERNAL_ERROR",
            )
            return

        await store.complete(job_id, result)

    async def get_job_status(self, job_id: str) -> JobStatusData:
        """Current stage of a background run.

        Raises:
            JobNotFoundError: If the job is unknown or expired.
        """
        job = await self.job_store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return JobStatusData.from_job(job)

    async def export(self, request: ExportRequest) -> ExportOutcome:
        return await self.dispatcher.deliver(request)

    async def chat_reply(self, request: ChatRequest) -> ChatReply:
        return await self.chat.reply(request.message, request.context, request.chat_history)

    async def upload(self, request: UploadDocumentRequest) -> UploadedDocument:
        return await upload_reference_document(
            self.storage,
            file_name=request.file_name,
            file_data=request.file_data,
            content_type=request.content_type,
        )

    async def shutdown(self) -> None:
        """Cancel background runs still in flight."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


# Module-level singleton instance
_default_service: Optional[WritingService] = None


def get_writing_service() -> WritingService:
    """Get the default writing service, building it from settings on first access."""
    global _default_service
    if _default_service is None:
        _default_service = WritingService(get_settings())
    return _default_service


def set_writing_service(service: Optional[WritingService]) -> None:
    """Replace the default writing service (None resets it)."""
    global _default_service
    _default_service = service
