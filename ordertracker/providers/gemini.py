"""
Gemini completion provider through Google ADK.

Each call runs in a fresh in-memory session that is discarded afterwards,
so no conversation state survives between messages.
"""

import logging
from uuid import uuid4

from google.adk.agents.llm_agent import Agent
from google.adk.runners import InMemoryRunner
from google.genai.types import Content, Part

from ordertracker.config import DEFAULT_MODEL
from ordertracker.providers.base import CompletionProvider, ProviderUnavailable

logger = logging.getLogger(__name__)

APP_NAME = "order-tracker-chat"


class GeminiCompletionProvider(CompletionProvider):
    """Stateless single-turn completions from an ADK agent."""

    def __init__(self, instruction: str, model: str = DEFAULT_MODEL):
        self.model = model
        self.agent = Agent(
            model=model,
            name="order_tracker_assistant",
            description="Customer support assistant for an order tracking site",
            instruction=instruction,
        )
        self.runner = InMemoryRunner(agent=self.agent, app_name=APP_NAME)

    async def complete(self, message: str) -> str:
        user_id = f"anon-{uuid4().hex[:8]}"
        try:
            session = await self.runner.session_service.create_session(
                app_name=self.runner.app_name,
                user_id=user_id,
            )
        except Exception as e:
            logger.warning("Gemini session setup failed: %s", e)
            raise ProviderUnavailable(f"AI session setup failed: {e}") from e
        content = Content(parts=[Part(text=message)], role="user")

        response_text = ""
        try:
            async for event in self.runner.run_async(
                user_id=user_id,
                session_id=session.id,
                new_message=content,
            ):
                if event.content is None or not event.content.parts:
                    continue
                for part in event.content.parts:
                    if part.text:
                        response_text = part.text
        except Exception as e:
            logger.warning("Gemini completion failed: %s", e)
            raise ProviderUnavailable(f"AI request failed: {e}") from e
        finally:
            await self.runner.session_service.delete_session(
                app_name=self.runner.app_name,
                user_id=user_id,
                session_id=session.id,
            )

        if not response_text.strip():
            raise ProviderUnavailable("AI returned an empty response")
        return response_text.strip()
