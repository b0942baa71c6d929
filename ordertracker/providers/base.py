"""
Capability interfaces for external services.

Core logic only talks to these abstractions; the concrete adapters in this
package are the only code that performs network calls.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ordertracker.models.base import LatLng


class ProviderError(Exception):
    """Base error for external provider failures."""


class ProviderNotConfigured(ProviderError):
    """The provider has no credentials configured."""


class TrackingNotFound(ProviderError):
    """The provider does not know the tracking number."""


class ProviderRejected(ProviderError):
    """The provider answered with an application-level error."""


class ProviderUnavailable(ProviderError):
    """Network failure or unreadable response."""


@dataclass
class CarrierCheckpoint:
    """One scan event reported by a carrier."""

    tag: str | None = None
    location: str | None = None
    message: str | None = None
    checkpoint_time: str | None = None
    coordinates: LatLng | None = None


@dataclass
class CarrierShipment:
    """Carrier tracking result in local vocabulary."""

    carrier: str
    tracking_number: str
    status: str
    progress: int
    checkpoints: list[CarrierCheckpoint] = field(default_factory=list)
    origin_place: str | None = None
    destination_place: str | None = None


class TrackingProvider(ABC):
    """Third-party shipment tracking."""

    @abstractmethod
    def track(self, carrier: str, tracking_number: str) -> CarrierShipment:
        """
        Look up a shipment.

        Raises:
            TrackingNotFound: Unknown tracking number
            ProviderRejected: Provider refused the request
            ProviderUnavailable: Network or parse failure
        """

    @abstractmethod
    def detect(self, tracking_number: str) -> list[str]:
        """Return candidate carrier slugs for a tracking number."""


class CompletionProvider(ABC):
    """Text completion (AI chat)."""

    model: str = ""

    @abstractmethod
    async def complete(self, message: str) -> str:
        """Return the model's reply to a single, stateless message."""


class MailSender(ABC):
    """Outgoing email."""

    @abstractmethod
    def send(self, to_email: str, subject: str, html: str, text: str) -> None:
        """
        Send one message.

        Raises:
            ProviderUnavailable: Relay unreachable or send refused
        """


class Geocoder(ABC):
    """Place name to coordinates."""

    @abstractmethod
    def geocode(self, place: str) -> LatLng | None:
        """Return (lat, lng) for a place, or None if it cannot be resolved."""
