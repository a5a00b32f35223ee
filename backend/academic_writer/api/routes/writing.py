"""Writing pipeline endpoints.

Provides endpoints for:
- POST /writing/generate: Draft + humanize a paper
- POST /writing/check: Quality-check a paper
- POST /writing/pipeline: Full generate -> humanize -> check run
- POST /writing/jobs, GET /writing/jobs/{job_id}: Background run with polling
- POST /writing/export: Deliver a paper by email (simulated)
- POST /writing/download: Plain-text download of a paper
- POST /writing/upload, GET /writing/files/{key}: Reference documents
"""

import mimetypes
from urllib.parse import quote

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse

from academic_writer.models import (
    CheckContentRequest,
    DownloadRequest,
    ExportOutcome,
    ExportRequest,
    GeneratedDocument,
    JobStatusData,
    PipelineResult,
    PipelineStage,
    QualityReport,
    UploadDocumentRequest,
    UploadedDocument,
    WritingRequest,
)
from academic_writer.services.export_service import build_download
from academic_writer.services.writing_service import get_writing_service

router = APIRouter(prefix="/writing", tags=["Writing"])


@router.post("/generate", response_model=GeneratedDocument)
async def generate_content(request: WritingRequest) -> GeneratedDocument:
    """Generate an academic paper and a humanized rewrite of it.

    Two sequential model calls. If either fails the request fails with
    GENERATION_FAILED and no text is returned.
    """
    return await get_writing_service().generate_document(request)


@router.post("/check", response_model=QualityReport)
async def check_content(request: CheckContentRequest) -> QualityReport:
    """Score a paper for originality, human-likeness, and readability."""
    return await get_writing_service().check_content(request.content)


@router.post("/pipeline", response_model=PipelineResult)
async def run_pipeline(request: WritingRequest) -> PipelineResult:
    """Run generation, humanization, and the quality check in one call."""
    return await get_writing_service().run_pipeline(request)


@router.post("/jobs", status_code=202)
async def start_pipeline_job(request: WritingRequest) -> JSONResponse:
    """Start a background pipeline run.

    Returns immediately with a job ID. Poll /jobs/{job_id} for the stage.
    """
    job_id = await get_writing_service().start_job(request)
    return JSONResponse(
        status_code=202,
        content={"jobId": job_id, "stage": PipelineStage.idle.value},
    )


@router.get("/jobs/{job_id}", response_model=JobStatusData)
async def get_pipeline_job(job_id: str) -> JobStatusData:
    """Current stage of a background run, with the result once complete."""
    return await get_writing_service().get_job_status(job_id)


@router.post("/export", response_model=ExportOutcome)
async def export_content(request: ExportRequest) -> ExportOutcome:
    """Render a paper and send it to an email address.

    Delivery failures come back as success=false, not as an HTTP error.
    """
    return await get_writing_service().export(request)


@router.post("/download")
async def download_content(request: DownloadRequest) -> Response:
    """Return the paper as a plain-text attachment."""
    filename, body = build_download(request.content, request.title)
    return Response(
        content=body,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/upload", response_model=UploadedDocument)
async def upload_document(request: UploadDocumentRequest) -> UploadedDocument:
    """Store a base64 reference document and return a signed URL for it.

    Accepts PDF, DOC, DOCX, or TXT up to 10MB. The URL is valid for 7 days.
    """
    return await get_writing_service().upload(request)


@router.get("/files/{key}")
async def download_reference(
    key: str,
    expires: int = Query(...),
    signature: str = Query(..., min_length=1),
) -> Response:
    """Serve an uploaded reference document for a valid signed link."""
    storage = get_writing_service().storage
    storage.verify(key, expires, signature)
    content = await storage.read(key)
    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(key)}"},
    )
