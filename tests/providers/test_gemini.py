"""
Tests for the Gemini completion provider.

The ADK runner is replaced by a mock; no model is called.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from ordertracker.providers.base import ProviderUnavailable
from ordertracker.providers.gemini import GeminiCompletionProvider


def _event(text):
    return SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text=text)]))


def _provider(events=None, error=None):
    provider = GeminiCompletionProvider(instruction="Be brief.", model="gemini-2.5-flash")

    async def run_async(**kwargs):
        if error is not None:
            raise error
        for event in events or []:
            yield event

    runner = MagicMock()
    runner.app_name = "order-tracker-chat"
    runner.session_service.create_session = AsyncMock(return_value=SimpleNamespace(id="s1"))
    runner.session_service.delete_session = AsyncMock()
    runner.run_async = run_async
    provider.runner = runner
    return provider


async def test_complete_returns_last_text():
    provider = _provider([_event("thinking"), SimpleNamespace(content=None), _event(" ok ")])

    assert await provider.complete("Reply with just: ok") == "ok"
    provider.runner.session_service.delete_session.assert_awaited_once()


async def test_complete_wraps_errors():
    provider = _provider(error=RuntimeError("quota"))

    with pytest.raises(ProviderUnavailable, match="quota"):
        await provider.complete("hello")
    provider.runner.session_service.delete_session.assert_awaited_once()


async def test_complete_empty_reply():
    provider = _provider([_event("   ")])

    with pytest.raises(ProviderUnavailable, match="empty"):
        await provider.complete("hello")


async def test_complete_wraps_session_errors():
    """Test that a failed session setup is reported as a provider error"""
    provider = _provider([_event("ok")])
    provider.runner.session_service.create_session = AsyncMock(side_effect=RuntimeError("auth"))

    with pytest.raises(ProviderUnavailable, match="auth"):
        await provider.complete("hello")
    provider.runner.session_service.delete_session.assert_not_awaited()
