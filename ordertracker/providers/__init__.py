"""
External service adapters.

Each adapter implements one capability interface from ``providers.base``.
"""

from ordertracker.providers.base import (
    CarrierCheckpoint,
    CarrierShipment,
    CompletionProvider,
    Geocoder,
    MailSender,
    ProviderError,
    ProviderNotConfigured,
    ProviderRejected,
    ProviderUnavailable,
    TrackingNotFound,
    TrackingProvider,
)

__all__ = [
    "CarrierCheckpoint",
    "CarrierShipment",
    "CompletionProvider",
    "Geocoder",
    "MailSender",
    "ProviderError",
    "ProviderNotConfigured",
    "ProviderRejected",
    "ProviderUnavailable",
    "TrackingNotFound",
    "TrackingProvider",
]
