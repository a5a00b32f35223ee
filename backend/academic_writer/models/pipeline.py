"""Pipeline stage model.

A run moves through ``idle -> generating -> humanizing -> checking ->
complete``, or into ``failed`` from any non-idle stage. Each stage is its own
model carrying only the data that exists at that point of the run, so a
``Checking`` state always has a document and a ``Complete`` state always
has a report.

Pydantic v2. Extra fields are forbidden to prevent drift.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .writing import GeneratedDocument, QualityReport, WritingRequest


def _utcnow() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class PipelineStage(str, Enum):
    """Stages of a pipeline run."""
    idle = "idle"
    generating = "generating"
    humanizing = "humanizing"
    checking = "checking"
    complete = "complete"
    failed = "failed"


ALLOWED_TRANSITIONS: dict[PipelineStage, frozenset[PipelineStage]] = {
    PipelineStage.idle: frozenset({PipelineStage.generating}),
    PipelineStage.generating: frozenset({PipelineStage.humanizing, PipelineStage.failed}),
    PipelineStage.humanizing: frozenset({PipelineStage.checking, PipelineStage.failed}),
    PipelineStage.checking: frozenset({PipelineStage.complete, PipelineStage.failed}),
    PipelineStage.complete: frozenset(),
    PipelineStage.failed: frozenset(),
}

TERMINAL_STAGES = frozenset({PipelineStage.complete, PipelineStage.failed})


def can_transition(current: PipelineStage, target: PipelineStage) -> bool:
    """Check whether ``current -> target`` is a legal transition."""
    return target in ALLOWED_TRANSITIONS[current]


class _StageState(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Idle(_StageState):
    stage: Literal[PipelineStage.idle] = PipelineStage.idle


class Generating(_StageState):
    stage: Literal[PipelineStage.generating] = PipelineStage.generating
    request: WritingRequest


class Humanizing(_StageState):
    stage: Literal[PipelineStage.humanizing] = PipelineStage.humanizing
    request: WritingRequest
    raw_content: str


class Checking(_StageState):
    stage: Literal[PipelineStage.checking] = PipelineStage.checking
    request: WritingRequest
    document: GeneratedDocument


class Complete(_StageState):
    stage: Literal[PipelineStage.complete] = PipelineStage.complete
    document: GeneratedDocument
    report: QualityReport


class Failed(_StageState):
    """Terminal failure. Partial results are not kept."""

    stage: Literal[PipelineStage.failed] = PipelineStage.failed
    failed_stage: PipelineStage
    error: str


StageState = Union[Idle, Generating, Humanizing, Checking, Complete, Failed]


class PipelineResult(BaseModel):
    """What a successful run hands back to the caller."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    document: GeneratedDocument
    quality_metrics: QualityReport


class PipelineJob(BaseModel):
    """In-memory record of a background pipeline run, for progress polling."""
    model_config = ConfigDict(extra="forbid")

    job_id: str = Field(description="UUID identifier for this job")
    stage: PipelineStage = Field(default=PipelineStage.idle, description="Current stage")
    created_at: datetime = Field(default_factory=_utcnow)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    result: Optional[PipelineResult] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    def is_terminal(self) -> bool:
        """Check if the job reached complete or failed."""
        return self.stage in TERMINAL_STAGES


class JobStatusData(BaseModel):
    """Polling response for a background pipeline run."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    job_id: str
    stage: PipelineStage
    result: Optional[PipelineResult] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def from_job(cls, job: PipelineJob) -> JobStatusData:
        return cls(
            job_id=job.job_id,
            stage=job.stage,
            result=job.result,
            error=job.error,
            error_code=job.error_code,
        )
