"""Backend models package.

Note: keep backend models as the source-of-truth schemas for OpenAPI + frontend types.
"""

from .chat import ChatContext, ChatMessage, ChatReply, ChatRequest
from .export import DownloadRequest, ExportFormat, ExportOutcome, ExportRequest
from .pipeline import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STAGES,
    Checking,
    Complete,
    Failed,
    Generating,
    Humanizing,
    Idle,
    JobStatusData,
    PipelineJob,
    PipelineResult,
    PipelineStage,
    StageState,
    can_transition,
)
from .upload import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    SIGNED_URL_TTL_SECONDS,
    UploadDocumentRequest,
    UploadedDocument,
)
from .writing import (
    CheckContentRequest,
    GeneratedDocument,
    QualityIndicators,
    QualityLevel,
    QualityReport,
    WritingRequest,
    count_words,
    estimate_reading_time,
)

__all__ = [
    # Writing
    "WritingRequest",
    "GeneratedDocument",
    "QualityLevel",
    "QualityIndicators",
    "QualityReport",
    "CheckContentRequest",
    "count_words",
    "estimate_reading_time",
    # Pipeline
    "PipelineStage",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STAGES",
    "can_transition",
    "StageState",
    "Idle",
    "Generating",
    "Humanizing",
    "Checking",
    "Complete",
    "Failed",
    "PipelineResult",
    "PipelineJob",
    "JobStatusData",
    # Chat
    "ChatMessage",
    "ChatContext",
    "ChatRequest",
    "ChatReply",
    # Export
    "ExportFormat",
    "ExportRequest",
    "ExportOutcome",
    "DownloadRequest",
    # Upload
    "MAX_FILE_SIZE",
    "ALLOWED_MIME_TYPES",
    "ALLOWED_EXTENSIONS",
    "SIGNED_URL_TTL_SECONDS",
    "UploadDocumentRequest",
    "UploadedDocument",
]
