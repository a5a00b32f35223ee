"""Services package for backend business logic."""

from . import chat_service
from . import export_service
from . import generation_service
from . import pipeline
from . import quality_service
from . import storage_service

__all__ = [
    "chat_service",
    "export_service",
    "generation_service",
    "pipeline",
    "quality_service",
    "storage_service",
]
