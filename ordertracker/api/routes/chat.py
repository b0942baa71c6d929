"""
Chat API routes.

/api/chat answers every message (AI-first when configured, rules otherwise);
/api/chat-ai is the direct AI path with no rule fallback.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ordertracker.api.deps import get_assistant
from ordertracker.api.errors import provider_http_error
from ordertracker.assistant import ChatAssistant
from ordertracker.models.chat import AIHealthResponse, ChatReply, ChatRequest
from ordertracker.providers.base import ProviderError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=ChatReply, response_model_exclude_none=True)
async def chat(
    request: ChatRequest,
    assistant: ChatAssistant = Depends(get_assistant),
) -> ChatReply:
    """
    Answer a chat message.

    Raises:
        HTTPException: 400 if message is empty, 500 if processing fails
    """
    try:
        return await assistant.reply(request.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Chat processing failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Chat processing failed")


@router.post("/chat-ai", response_model=ChatReply, response_model_exclude_none=True)
async def chat_ai(
    request: ChatRequest,
    assistant: ChatAssistant = Depends(get_assistant),
) -> ChatReply:
    """
    Direct AI answer.

    Raises:
        HTTPException: 400 if message is empty, 501 if AI is not configured,
            502 if the model call fails
    """
    try:
        return await assistant.ask(request.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        raise provider_http_error(e)


@router.get("/ai-health", response_model=AIHealthResponse, response_model_exclude_none=True)
async def ai_health(assistant: ChatAssistant = Depends(get_assistant)) -> AIHealthResponse:
    """Check that the completion provider answers."""
    return await assistant.health()
