"""Chat assistant endpoint."""

from fastapi import APIRouter

from academic_writer.models import ChatReply, ChatRequest
from academic_writer.services.writing_service import get_writing_service

router = APIRouter(prefix="/writing", tags=["Chat"])


@router.post("/chat", response_model=ChatReply)
async def chat_with_assistant(request: ChatRequest) -> ChatReply:
    """Answer a writing question in the context of the current wizard step.

    Always returns 200: if the model is unavailable the reply is a fixed
    apology with the usual suggestions for the step.
    """
    return await get_writing_service().chat_reply(request)
