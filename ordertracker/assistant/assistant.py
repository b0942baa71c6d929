"""
Chat assistant: AI-first when a completion provider is configured, with
the rule-based intents as the fallback.
"""

import asyncio
import logging
import re

from ordertracker.assistant.intents import IntentRule, classify
from ordertracker.assistant.prompts import HEALTH_CHECK_MESSAGE, build_user_message
from ordertracker.config import DEFAULT_MODEL
from ordertracker.models.chat import AIHealthResponse, ChatMeta, ChatReply
from ordertracker.models.order import TrackingResponse
from ordertracker.providers.base import (
    CompletionProvider,
    ProviderError,
    ProviderNotConfigured,
)
from ordertracker.tracking.lookup import (
    ORDER_ID_PATTERN,
    TrackingLookup,
    parse_carrier_query,
)
from ordertracker.tracking.progress import get_tracking

logger = logging.getLogger(__name__)

HEALTH_OK_PATTERN = re.compile(r"^ok\b", re.IGNORECASE)


class ChatAssistant:
    """Answers chat messages for the tracker UI."""

    def __init__(
        self,
        lookup: TrackingLookup,
        completion: CompletionProvider | None = None,
        rules: list[IntentRule] | None = None,
    ):
        self.lookup = lookup
        self.completion = completion
        self.rules = rules

    @property
    def ai_enabled(self) -> bool:
        return self.completion is not None

    @property
    def model(self) -> str:
        return self.completion.model if self.completion is not None else DEFAULT_MODEL

    def _gather_context(self, message: str) -> tuple[list[str], TrackingResponse | None, str | None]:
        """Look up anything the message refers to so the model can quote it."""
        context: list[str] = []
        data = None
        order_id = None

        parsed = parse_carrier_query(message)
        if parsed and self.lookup.carrier_enabled:
            carrier, code = parsed
            try:
                data = self.lookup.track_carrier(carrier, code)
                context.append(f"Carrier {carrier} {code}: {data.status} ({data.progress}%)")
            except ProviderError as e:
                context.append(f"Carrier lookup failed: {e}")

        match = ORDER_ID_PATTERN.search(message)
        if match:
            snapshot = get_tracking(self.lookup.orders, match.group(0))
            if snapshot is not None:
                order_id = match.group(0)
                data = snapshot
                context.append(f"Order {order_id}: {snapshot.status} ({snapshot.progress}%)")

        return context, data, order_id

    async def _ask_model(self, message: str) -> tuple[str, TrackingResponse | None, str | None]:
        context, data, order_id = await asyncio.to_thread(self._gather_context, message)
        reply = await self.completion.complete(build_user_message(message, context))
        return reply, data, order_id

    async def reply(self, message: str) -> ChatReply:
        """
        Answer a chat message.

        The AI path is tried first when configured; if it fails the rule
        reply is returned with ``meta.aiError`` set.

        Raises:
            ValueError: Empty message
        """
        message = (message or "").strip()
        if not message:
            raise ValueError("message is required")

        ai_error = None
        if self.completion is not None:
            try:
                text, data, order_id = await self._ask_model(message)
                logger.info("Chat routed", extra={"json_fields": {"route": "ai-first"}})
                return ChatReply(
                    reply=text,
                    data=data,
                    meta=ChatMeta(route="ai-first", order_id=order_id),
                )
            except ProviderError as e:
                logger.warning("AI-first chat failed, using rules: %s", e)
                ai_error = str(e)

        result = await asyncio.to_thread(classify, message, self.lookup, self.rules)
        if ai_error:
            result.meta.ai_error = ai_error
        return result

    async def ask(self, message: str) -> ChatReply:
        """
        Direct AI answer with no rule fallback.

        Raises:
            ValueError: Empty message
            ProviderNotConfigured: No completion provider
            ProviderError: The completion call failed
        """
        message = (message or "").strip()
        if not message:
            raise ValueError("message is required")
        if self.completion is None:
            raise ProviderNotConfigured("AI not configured on server (set GOOGLE_API_KEY)")

        text, data, order_id = await self._ask_model(message)
        return ChatReply(reply=text, data=data, meta=ChatMeta(route="ai", order_id=order_id))

    async def health(self) -> AIHealthResponse:
        """Round-trip a trivial prompt through the completion provider."""
        if self.completion is None:
            return AIHealthResponse(ok=False, model=self.model, reason="AI not configured")
        try:
            reply = await self.completion.complete(HEALTH_CHECK_MESSAGE)
        except ProviderError as e:
            return AIHealthResponse(ok=False, model=self.model, reason=str(e))
        return AIHealthResponse(
            ok=bool(HEALTH_OK_PATTERN.match(reply.strip())),
            model=self.model,
            reply=reply,
        )
