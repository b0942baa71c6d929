"""
Tests for POST /api/subscribe.
"""

from ordertracker.api import deps
from ordertracker.api.main import app

from conftest import FakeMailSender


def test_subscribe_sends_confirmation(client, subscription_store, mail_sender):
    """Test subscription is saved and a confirmation is emailed"""
    response = client.post("/api/subscribe", json={"orderId": "1002", "email": "a@example.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["emailSent"] is True
    assert data["subscription"]["orderId"] == "1002"
    assert "note" not in data
    assert [s.email for s in subscription_store.for_order("1002")] == ["a@example.com"]
    assert mail_sender.sent[0]["subject"] == "Subscribed to order 1002"


def test_subscribe_twice_keeps_both(client, subscription_store):
    for _ in range(2):
        client.post("/api/subscribe", json={"orderId": "1002", "email": "a@example.com"})

    assert len(subscription_store.for_order("1002")) == 2


def test_subscribe_unknown_order_is_accepted(client, subscription_store):
    response = client.post("/api/subscribe", json={"orderId": "ABC", "email": "a@example.com"})

    assert response.status_code == 200
    assert len(subscription_store.all()) == 1


def test_subscribe_without_email_configured(client, subscription_store):
    app.dependency_overrides[deps.get_mail_sender] = lambda: None

    response = client.post("/api/subscribe", json={"orderId": "1001", "email": "a@example.com"})

    data = response.json()
    assert data["emailSent"] is False
    assert data["note"] == "Email not configured; subscription saved"
    assert len(subscription_store.all()) == 1


def test_subscribe_when_send_fails(client, subscription_store):
    app.dependency_overrides[deps.get_mail_sender] = lambda: FakeMailSender(
        fail_for={"a@example.com"}
    )

    response = client.post("/api/subscribe", json={"orderId": "1001", "email": "a@example.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["emailSent"] is False
    assert data["note"] == "Confirmation email could not be sent; subscription saved"
    assert len(subscription_store.all()) == 1


def test_subscribe_missing_fields(client, subscription_store):
    response = client.post("/api/subscribe", json={"orderId": "1001"})

    assert response.status_code == 400
    assert response.json()["detail"] == "orderId and email are required"
    assert subscription_store.all() == []


def test_subscribe_invalid_email(client, subscription_store):
    """Test that a malformed address is rejected by request validation"""
    response = client.post("/api/subscribe", json={"orderId": "1001", "email": "not-an-email"})

    assert response.status_code == 422
    assert response.json()["detail"][0]["loc"] == ["body", "email"]
    assert subscription_store.all() == []


def test_subscribe_blank_email_is_missing(client):
    response = client.post("/api/subscribe", json={"orderId": "1001", "email": "   "})

    assert response.status_code == 400
    assert response.json()["detail"] == "orderId and email are required"


def test_subscribe_corrupt_store(client, subscription_store):
    subscription_store.path.write_text('{"not": "a list"}')

    response = client.post("/api/subscribe", json={"orderId": "1001", "email": "a@example.com"})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save subscription"
