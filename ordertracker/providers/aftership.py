"""
AfterShip carrier adapter.

Calls the AfterShip v4 REST API and maps its tracking tags onto the local
status vocabulary. Errors propagate as ProviderError subclasses; nothing is
retried.
"""

import logging
from typing import Any
from urllib.parse import quote

import requests

from ordertracker.providers.base import (
    CarrierCheckpoint,
    CarrierShipment,
    ProviderNotConfigured,
    ProviderRejected,
    ProviderUnavailable,
    TrackingNotFound,
    TrackingProvider,
)

logger = logging.getLogger(__name__)

AFTERSHIP_BASE_URL = "https://api.aftership.com/v4"

# AfterShip meta code for an unknown tracking
NOT_FOUND_CODE = 4004

# (tags, local status, progress); first match wins
TAG_MAPPING: list[tuple[set[str], str, int]] = [
    ({"pending", "info_received", "inforeceived"}, "Processing", 15),
    ({"intransit", "in_transit"}, "In Transit", 70),
    ({"outfordelivery", "out_for_delivery"}, "Out for Delivery", 85),
    ({"delivered"}, "Delivered", 100),
    ({"exception", "failed_attempt", "attemptfail"}, "Exception", 50),
    ({"expired", "canceled", "cancelled"}, "Canceled", 0),
]

FALLBACK_STATUS = ("Shipped", 50)


def map_carrier_tag(tag: str | None) -> tuple[str, int]:
    """
    Translate an AfterShip tag to (status, progress).

    Unrecognized or missing tags map to Shipped / 50.
    """
    normalized = (tag or "").strip().lower()
    for tags, status, progress in TAG_MAPPING:
        if normalized in tags:
            return status, progress
    return FALLBACK_STATUS


def _checkpoint_coordinates(checkpoint: dict) -> tuple[float, float] | None:
    lat = checkpoint.get("latitude")
    lng = checkpoint.get("longitude")
    if lat is None or lng is None:
        return None
    try:
        return float(lat), float(lng)
    except (TypeError, ValueError):
        return None


def _checkpoint_place(checkpoint: dict) -> str | None:
    if checkpoint.get("location"):
        return checkpoint["location"]
    parts = [checkpoint.get("city"), checkpoint.get("state"), checkpoint.get("country_name")]
    place = ", ".join(p for p in parts if p)
    return place or None


def parse_tracking(carrier: str, tracking_number: str, tracking: dict) -> CarrierShipment:
    """Convert the ``data.tracking`` object of an AfterShip response."""
    status, progress = map_carrier_tag(tracking.get("tag") or tracking.get("subtag"))

    checkpoints = [
        CarrierCheckpoint(
            tag=cp.get("tag"),
            location=_checkpoint_place(cp),
            message=cp.get("message"),
            checkpoint_time=cp.get("checkpoint_time"),
            coordinates=_checkpoint_coordinates(cp),
        )
        for cp in tracking.get("checkpoints") or []
        if isinstance(cp, dict)
    ]

    origin_place = checkpoints[0].location if checkpoints else None
    origin_place = origin_place or tracking.get("origin_country_iso3")

    destination_place = tracking.get("destination_city") or None
    if destination_place and tracking.get("destination_country_iso3"):
        destination_place = f"{destination_place}, {tracking['destination_country_iso3']}"
    destination_place = destination_place or tracking.get("destination_country_iso3")
    if not destination_place and len(checkpoints) > 1:
        destination_place = checkpoints[-1].location

    return CarrierShipment(
        carrier=tracking.get("slug") or carrier,
        tracking_number=tracking.get("tracking_number") or tracking_number,
        status=status,
        progress=progress,
        checkpoints=checkpoints,
        origin_place=origin_place,
        destination_place=destination_place,
    )


class AfterShipProvider(TrackingProvider):
    """TrackingProvider backed by the AfterShip API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = AFTERSHIP_BASE_URL,
        timeout: int = 15,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        if not self.api_key:
            raise ProviderNotConfigured(
                "Tracking provider not configured on server (set AFTERSHIP_API_KEY)"
            )

        headers = {
            "aftership-api-key": self.api_key,
            "accept": "application/json",
        }
        try:
            response = requests.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.warning("AfterShip request failed: %s", e)
            raise ProviderUnavailable("Tracking provider request failed") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderUnavailable("Failed to parse provider response") from e

        if not isinstance(payload, dict):
            raise ProviderUnavailable("Failed to parse provider response")

        meta = payload.get("meta") or {}
        code = meta.get("code")
        if code and code not in (200, 201):
            message = meta.get("message") or "Tracking error"
            if code == NOT_FOUND_CODE:
                raise TrackingNotFound(message)
            raise ProviderRejected(message)

        return payload.get("data") or {}

    def track(self, carrier: str, tracking_number: str) -> CarrierShipment:
        slug = quote(carrier.strip().lower(), safe="")
        number = quote(tracking_number.strip(), safe="")
        data = self._request("GET", f"/trackings/{slug}/{number}")

        tracking = data.get("tracking")
        if not isinstance(tracking, dict):
            raise TrackingNotFound("Tracking not found")

        shipment = parse_tracking(carrier, tracking_number, tracking)
        logger.info(
            "Carrier lookup %s:%s -> %s",
            shipment.carrier,
            shipment.tracking_number,
            shipment.status,
        )
        return shipment

    def detect(self, tracking_number: str) -> list[str]:
        data = self._request(
            "POST",
            "/couriers/detect",
            json={"tracking": {"tracking_number": tracking_number.strip()}},
        )
        couriers = data.get("couriers") or []
        return [c["slug"] for c in couriers if isinstance(c, dict) and c.get("slug")]
