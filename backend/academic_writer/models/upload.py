"""Reference document upload models and limits."""

from __future__ import annotations

from pydantic import Field

from .writing import CamelModel

# Maximum reference document size: 10MB
MAX_FILE_SIZE = 10 * 1024 * 1024

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
}

ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt"}

# Signed download URLs stay valid for 7 days
SIGNED_URL_TTL_SECONDS = 7 * 24 * 3600


class UploadDocumentRequest(CamelModel):
    """Request body for a reference document upload."""

    file_name: str = Field(min_length=1, max_length=255)
    file_data: str = Field(min_length=1, description="Base64-encoded file bytes")
    content_type: str = Field(min_length=1)


class UploadedDocument(CamelModel):
    """Where the uploaded document can be fetched from."""

    file_url: str
    file_name: str = Field(description="Unique stored key")
