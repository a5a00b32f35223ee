"""Health check endpoint."""

from fastapi import APIRouter

from academic_writer.api.response import success_response
from academic_writer.services.writing_service import get_writing_service

router = APIRouter(tags=["System"])


@router.get("/health")
async def health_check() -> dict:
    """Return system health status and whether the LLM provider is configured."""
    client = get_writing_service().client
    return success_response({
        "status": "ok",
        "provider": client.provider_name,
        "providerConfigured": client.is_provider_available(client.provider_name),
    })
