"""
Chat request/response models.

Every reply carries the routing decision in ``meta.route`` so the browser
(and the logs) can tell which path produced the answer.
"""

from typing import Optional

from pydantic import Field

from ordertracker.models.base import APIModel
from ordertracker.models.order import TrackingResponse


class ChatRequest(APIModel):
    """Body for POST /api/chat and /api/chat-ai"""

    message: str = Field(default="", description="Free-text user message")


class ChatMeta(APIModel):
    route: str = Field(description="Rule or path that produced the reply")
    order_id: Optional[str] = None
    error: Optional[str] = None
    ai_error: Optional[str] = Field(
        default=None, description="Set when the AI path failed and rules answered"
    )


class ChatReply(APIModel):
    reply: str
    data: Optional[TrackingResponse] = Field(
        default=None, description="Tracking snapshot for the UI, when one was looked up"
    )
    meta: Optional[ChatMeta] = None


class AIHealthResponse(APIModel):
    ok: bool
    model: str
    reply: Optional[str] = None
    reason: Optional[str] = None
