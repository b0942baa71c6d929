"""
Tests for the chat endpoints.
"""

from ordertracker.api import deps
from ordertracker.api.main import app
from ordertracker.assistant import ChatAssistant, IntentRule
from ordertracker.providers.base import ProviderUnavailable

from conftest import FakeCompletionProvider


def _use_completion(completion):
    app.dependency_overrides[deps.get_completion_provider] = lambda: completion


class TestChat:
    def test_rule_reply(self, client):
        response = client.post("/api/chat", json={"message": "track 1002"})

        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "Order 1002: Shipped (50%)."
        assert data["meta"] == {"route": "order-status", "orderId": "1002"}
        assert data["data"]["status"] == "Shipped"

    def test_faq_reply(self, client):
        data = client.post("/api/chat", json={"message": "What is your return policy?"}).json()

        assert data["meta"]["route"] == "return-policy"
        assert "7 days" in data["reply"]
        assert "data" not in data

    def test_carrier_prefix_without_key(self, client):
        data = client.post("/api/chat", json={"message": "ekart:FMPC1234567"}).json()

        assert data["meta"]["route"] == "carrier-unconfigured"
        assert "not configured" in data["reply"]

    def test_empty_message(self, client):
        response = client.post("/api/chat", json={"message": "  "})

        assert response.status_code == 400
        assert response.json()["detail"] == "message is required"

    def test_ai_first(self, client):
        completion = FakeCompletionProvider(reply="It's on its way.")
        _use_completion(completion)

        data = client.post("/api/chat", json={"message": "where is 1002?"}).json()

        assert data["reply"] == "It's on its way."
        assert data["meta"]["route"] == "ai-first"
        assert "Order 1002: Shipped (50%)" in completion.prompts[0]

    def test_ai_failure_falls_back(self, client):
        _use_completion(FakeCompletionProvider(error=ProviderUnavailable("AI request failed: quota")))

        data = client.post("/api/chat", json={"message": "hello"}).json()

        assert data["meta"]["route"] == "greeting"
        assert data["meta"]["aiError"] == "AI request failed: quota"

    def test_unexpected_error(self, client, order_store):
        """Test failures inside the rules surface as a generic 500"""

        def boom(ctx):
            raise RuntimeError("rule crashed")

        def broken_assistant():
            from ordertracker.tracking.lookup import TrackingLookup

            return ChatAssistant(TrackingLookup(order_store), rules=[IntentRule("boom", None, boom)])

        app.dependency_overrides[deps.get_assistant] = broken_assistant

        response = client.post("/api/chat", json={"message": "hello"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Chat processing failed"


class TestChatAI:
    def test_not_configured(self, client):
        response = client.post("/api/chat-ai", json={"message": "hello"})

        assert response.status_code == 501
        assert response.json()["detail"] == "AI not configured on server (set GOOGLE_API_KEY)"

    def test_reply(self, client):
        _use_completion(FakeCompletionProvider(reply="Hello!"))

        data = client.post("/api/chat-ai", json={"message": "hello"}).json()

        assert data == {"reply": "Hello!", "meta": {"route": "ai"}}

    def test_provider_failure(self, client):
        _use_completion(FakeCompletionProvider(error=ProviderUnavailable("AI request failed")))

        response = client.post("/api/chat-ai", json={"message": "hello"})

        assert response.status_code == 502

    def test_empty_message(self, client):
        _use_completion(FakeCompletionProvider())

        assert client.post("/api/chat-ai", json={"message": ""}).status_code == 400


class TestAIHealth:
    def test_not_configured(self, client):
        data = client.get("/api/ai-health").json()

        assert data["ok"] is False
        assert data["reason"] == "AI not configured"

    def test_ok(self, client):
        _use_completion(FakeCompletionProvider(reply="ok"))

        data = client.get("/api/ai-health").json()

        assert data == {"ok": True, "model": "fake-model", "reply": "ok"}
