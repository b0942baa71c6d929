"""
Tests for notification templates and delivery.
"""

from ordertracker.models.subscription import Subscription
from ordertracker.notifications import notify_subscribers, send_confirmation
from ordertracker.notifications.templates import status_update, subscription_confirmation

from conftest import FakeMailSender


def test_confirmation_template(order_store):
    content = subscription_confirmation("1002", order_store.get("1002"))

    assert content.subject == "Subscribed to order 1002"
    assert "Shipped" in content.html
    assert "Bengaluru" in content.text
    assert "<" not in content.text


def test_confirmation_for_unknown_order():
    content = subscription_confirmation("<x>", None)

    assert "&lt;x&gt;" in content.html
    assert "as soon as this order has an update" in content.text


def test_status_update_template(order_store):
    order = order_store.get("1002")
    order_store.advance("1002")

    content = status_update(order, "Shipped")

    assert content.subject == "Order 1002: In Transit"
    assert "moved from Shipped to" in content.text


def test_send_confirmation(order_store):
    sender = FakeMailSender()
    subscription = Subscription(order_id="1002", email="a@example.com")

    assert send_confirmation(sender, subscription, order_store.get("1002"))
    assert sender.sent[0]["to"] == "a@example.com"


def test_send_confirmation_without_sender(order_store):
    subscription = Subscription(order_id="1002", email="a@example.com")
    assert not send_confirmation(None, subscription, order_store.get("1002"))


def test_notify_each_record(order_store, subscription_store):
    """Test duplicate subscriptions each get an email"""
    for email in ["a@example.com", "a@example.com", "b@example.com"]:
        subscription_store.add(Subscription(order_id="1002", email=email))
    subscription_store.add(Subscription(order_id="1001", email="c@example.com"))
    sender = FakeMailSender(fail_for={"b@example.com"})

    results = notify_subscribers(sender, subscription_store, order_store.get("1002"), "Packed")

    assert [(r.email, r.sent) for r in results] == [
        ("a@example.com", True),
        ("a@example.com", True),
        ("b@example.com", False),
    ]
    assert [m["to"] for m in sender.sent] == ["a@example.com", "a@example.com"]
    assert sender.sent[0]["subject"] == "Order 1002: Shipped"


def test_notify_without_subscribers(order_store, subscription_store):
    assert notify_subscribers(FakeMailSender(), subscription_store, order_store.get("1002"), "Packed") == []


def test_notify_without_sender(order_store, subscription_store):
    subscription_store.add(Subscription(order_id="1002", email="a@example.com"))

    results = notify_subscribers(None, subscription_store, order_store.get("1002"), "Packed")

    assert [r.sent for r in results] == [False]
