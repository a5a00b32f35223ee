"""FastAPI application setup."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from academic_writer.api.exceptions import (
    FileTooLargeError,
    GenerationFailure,
    InvalidFileTypeError,
    InvalidSignatureError,
    JobNotFoundError,
    StoredFileNotFoundError,
    ValidationError,
)
from academic_writer.api.response import error_response
from academic_writer.api.routes import chat, health, writing
from academic_writer.config import get_settings
from academic_writer.llm import LLMError
from academic_writer.services.job_store import get_job_store
from academic_writer.services.writing_service import get_writing_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting with LLM provider '{settings.llm_provider}'")
    if not settings.api_key_for(settings.llm_provider):
        logger.warning(f"No API key configured for LLM provider '{settings.llm_provider}'")
    await get_job_store().start_purging()
    yield
    # Shutdown
    unfinished = await get_job_store().active_count()
    if unfinished:
        logger.warning(f"Shutting down with {unfinished} unfinished jobs")
    await get_writing_service().shutdown()
    await get_job_store().stop_purging()


app = FastAPI(
    title="Academic Writer API",
    description="Backend API for generating, humanizing, checking, and exporting academic papers",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware for frontend dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


# Exception handlers
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed requests before any work starts."""
    return JSONResponse(
        status_code=400,
        content=error_response("VALIDATION_ERROR", _describe_validation_error(exc)),
    )


@app.exception_handler(GenerationFailure)
async def generation_failure_handler(request: Request, exc: GenerationFailure) -> JSONResponse:
    """Handle failed drafting or humanization calls. No partial text is returned."""
    return JSONResponse(
        status_code=502,
        content=error_response(
            "GENERATION_FAILED",
            f"Content generation failed during {exc.stage}. Please try again.",
        ),
    )


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError) -> JSONResponse:
    """Handle LLM errors that escape a stage wrapper."""
    return JSONResponse(
        status_code=503,
        content=error_response("AI_SERVICE_ERROR", "AI service is temporarily unavailable. Please try again."),
    )


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_response(
            "FILE_TOO_LARGE",
            f"File size exceeds maximum of {exc.max_size // (1024 * 1024)}MB",
        ),
    )


@app.exception_handler(InvalidFileTypeError)
async def invalid_file_type_handler(request: Request, exc: InvalidFileTypeError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=error_response(
            "INVALID_FILE_TYPE",
            f"File type '{exc.file_type}' is not supported. Allowed: PDF, DOC, DOCX, TXT",
        ),
    )


# Errors whose message is shown as-is
_PASSTHROUGH_ERRORS: dict[type[Exception], tuple[int, str]] = {
    ValidationError: (400, "VALIDATION_ERROR"),
    JobNotFoundError: (404, "JOB_NOT_FOUND"),
    StoredFileNotFoundError: (404, "FILE_NOT_FOUND"),
    InvalidSignatureError: (403, "INVALID_DOWNLOAD_LINK"),
}


def _passthrough_handler(status_code: int, code: str):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=error_response(code, str(exc)))

    return handler


for _exc_type, (_status_code, _code) in _PASSTHROUGH_ERRORS.items():
    app.add_exception_handler(_exc_type, _passthrough_handler(_status_code, _code))


# Register routes
app.include_router(health.router)
app.include_router(writing.router, prefix="/api")
app.include_router(chat.router, prefix="/api")
