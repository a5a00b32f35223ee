"""In-memory registry of background pipeline runs.

The registry only mirrors progress for polling: each run still owns its own
request, document, and report, and writes here through ``record_stage``,
``complete``, or ``fail``. Entries live in process memory, are lost on
restart, and finished entries are purged once they are older than the TTL.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from academic_writer.models import PipelineJob, PipelineResult, PipelineStage, TERMINAL_STAGES

logger = logging.getLogger(__name__)

# Finished jobs stay pollable for an hour
DEFAULT_JOB_TTL_SECONDS = 3600

PURGE_INTERVAL_SECONDS = 300


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """Lock-guarded map of job ID to ``PipelineJob``.

    Usage:
        store = JobStore()
        job_id = await store.create()
        await store.record_stage(job_id, PipelineStage.generating)
        await store.complete(job_id, result)
    """

    def __init__(self, ttl_seconds: int = DEFAULT_JOB_TTL_SECONDS):
        self._jobs: dict[str, PipelineJob] = {}
        self._lock = asyncio.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._purge_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._jobs)

    async def create(self) -> str:
        """Register a new idle job and return its ID."""
        job = PipelineJob(job_id=str(uuid4()))
        async with self._lock:
            self._jobs[job.job_id] = job
        return job.job_id

    async def get(self, job_id: str) -> Optional[PipelineJob]:
        """Snapshot of a job, or None if unknown or purged."""
        async with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy() if job is not None else None

    async def record_stage(self, job_id: str, stage: PipelineStage) -> bool:
        """Note that a run entered a working stage.

        Terminal stages go through ``complete`` / ``fail`` so the result or
        error lands together with the stage.

        Returns:
            False if the job is unknown.
        """
        if stage in TERMINAL_STAGES:
            raise ValueError(f"Use complete() or fail() for terminal stage '{stage.value}'")
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return False
            job.stage = stage
            if stage == PipelineStage.generating and job.started_at is None:
                job.started_at = _utcnow()
            return True

    async def complete(self, job_id: str, result: PipelineResult) -> bool:
        """Mark a job complete with its result."""
        return await self._finish(job_id, PipelineStage.complete, result=result)

    async def fail(self, job_id: str, error: str, error_code: str) -> bool:
        """Mark a job failed. Any partial output is discarded."""
        return await self._finish(
            job_id, PipelineStage.failed, error=error, error_code=error_code
        )

    async def _finish(self, job_id: str, stage: PipelineStage, **fields) -> bool:
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return False
            if job.is_terminal():
                logger.warning(f"Job {job_id} already {job.stage.value}; ignoring {stage.value}")
                return False
            job.stage = stage
            job.result = fields.get("result")
            job.error = fields.get("error")
            job.error_code = fields.get("error_code")
            job.completed_at = _utcnow()
            return True

    async def active_count(self) -> int:
        """Jobs still in idle or a working stage."""
        async with self._lock:
            return sum(not job.is_terminal() for job in self._jobs.values())

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Drop finished jobs older than the TTL.

        Returns:
            Number of jobs removed.
        """
        cutoff = (now or _utcnow()) - self._ttl
        async with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.completed_at is not None and job.completed_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]

        if expired:
            logger.info(f"Purged {len(expired)} finished jobs")
        return len(expired)

    async def start_purging(self, interval_seconds: float = PURGE_INTERVAL_SECONDS) -> None:
        """Start the periodic purge task (no-op if already running)."""
        if self._purge_task is None or self._purge_task.done():
            self._purge_task = asyncio.create_task(self._purge_forever(interval_seconds))

    async def stop_purging(self) -> None:
        """Cancel the periodic purge task and wait for it to exit."""
        task, self._purge_task = self._purge_task, None
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _purge_forever(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                await self.purge_expired()
            except Exception:
                logger.exception("Job purge failed")


# Module-level singleton instance
_default_store: Optional[JobStore] = None


def get_job_store() -> JobStore:
    """Get the default job store, creating it on first access."""
    global _default_store
    if _default_store is None:
        _default_store = JobStore()
    return _default_store


def set_job_store(store: Optional[JobStore]) -> None:
    """Replace the default job store (None resets it)."""
    global _default_store
    _default_store = store
