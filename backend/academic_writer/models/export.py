"""Export and delivery models."""

from __future__ import annotations

from enum import Enum

from pydantic import EmailStr, Field

from .writing import CamelModel


class ExportFormat(str, Enum):
    """Formats a delivery can be requested in."""
    pdf = "pdf"
    docx = "docx"


class ExportRequest(CamelModel):
    """One delivery request. Consumed once; nothing is persisted."""

    content: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=300)
    email: EmailStr = Field(description="Destination address")
    format: ExportFormat = ExportFormat.pdf


class ExportOutcome(CamelModel):
    """User-visible result of a delivery attempt."""

    success: bool
    message: str


class DownloadRequest(CamelModel):
    """Request body for a plain-text download."""

    content: str = Field(min_length=1)
    title: str = ""
