"""
pytest configuration and fixtures.

Loads environment variables from .env file for all tests and provides
in-memory fakes for every external capability (carrier tracking, AI
completion, mail, geocoding) so no test touches the network.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from ordertracker.providers.base import (
    CarrierCheckpoint,
    CarrierShipment,
    CompletionProvider,
    Geocoder,
    MailSender,
    ProviderUnavailable,
    TrackingNotFound,
    TrackingProvider,
)
from ordertracker.store import FileSubscriptionStore, InMemoryOrderStore

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Load .env file before running tests"""
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"

    if env_file.exists():
        load_dotenv(env_file)


class FakeTrackingProvider(TrackingProvider):
    """Returns canned shipments keyed by (carrier, number)."""

    def __init__(self, shipments=None, detected=None, error=None):
        self.shipments = shipments or {}
        self.detected = detected or {}
        self.error = error
        self.calls = []

    def track(self, carrier, tracking_number):
        self.calls.append((carrier, tracking_number))
        if self.error is not None:
            raise self.error
        shipment = self.shipments.get((carrier, tracking_number))
        if shipment is None:
            raise TrackingNotFound("Tracking not found")
        return shipment

    def detect(self, tracking_number):
        return list(self.detected.get(tracking_number, []))


class FakeCompletionProvider(CompletionProvider):
    """Echoes a fixed reply and records prompts."""

    def __init__(self, reply="ok", error=None, model="fake-model"):
        self.reply = reply
        self.error = error
        self.model = model
        self.prompts = []

    async def complete(self, message):
        self.prompts.append(message)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeMailSender(MailSender):
    """Collects sent messages; addresses in ``fail_for`` raise."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to_email, subject, html, text):
        if to_email in self.fail_for:
            raise ProviderUnavailable(f"Email send failed for {to_email}")
        self.sent.append({"to": to_email, "subject": subject, "html": html, "text": text})


class FakeGeocoder(Geocoder):
    def __init__(self, places=None):
        self.places = places or {}

    def geocode(self, place):
        return self.places.get(place)


def make_shipment(**overrides) -> CarrierShipment:
    data = {
        "carrier": "ekart",
        "tracking_number": "FMPC1234567",
        "status": "In Transit",
        "progress": 70,
        "checkpoints": [
            CarrierCheckpoint(tag="InTransit", location="Delhi", coordinates=(28.61, 77.21)),
            CarrierCheckpoint(tag="InTransit", location="Jaipur", coordinates=(26.91, 75.79)),
        ],
        "origin_place": "Delhi",
        "destination_place": None,
    }
    data.update(overrides)
    return CarrierShipment(**data)


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    """Demo order table seeded at a fixed time."""
    return InMemoryOrderStore.with_demo_orders(now=FIXED_NOW)


@pytest.fixture
def subscription_store(tmp_path) -> FileSubscriptionStore:
    return FileSubscriptionStore(tmp_path / "subscriptions.json")


@pytest.fixture
def mail_sender() -> FakeMailSender:
    return FakeMailSender()


@pytest.fixture
def client(order_store, subscription_store, mail_sender):
    """
    TestClient with stores and providers replaced by fakes.

    Defaults: no carrier provider, no AI, fake mail, no admin token.
    Tests change a collaborator by setting ``app.dependency_overrides``.
    """
    from ordertracker.api import deps
    from ordertracker.api.main import app
    from ordertracker.config import Settings, get_settings

    settings = Settings(stream_interval_seconds=1)

    app.dependency_overrides = {
        get_settings: lambda: settings,
        deps.get_order_store: lambda: order_store,
        deps.get_subscription_store: lambda: subscription_store,
        deps.get_tracking_provider: lambda: None,
        deps.get_geocoder: lambda: FakeGeocoder(),
        deps.get_completion_provider: lambda: None,
        deps.get_mail_sender: lambda: mail_sender,
    }
    yield TestClient(app)
    app.dependency_overrides = {}
