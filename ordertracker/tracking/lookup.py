"""
Tracking lookups that span the demo table and carrier providers.

``TrackingLookup.resolve`` backs /api/track-any and email ingest: demo order
first, then an explicit ``carrier:number`` query, then carrier auto-detect.
Without a provider key it answers with official carrier links instead.
"""

import logging
import re

from ordertracker.models.base import LatLng
from ordertracker.models.order import TrackingResponse, TrackingRoute
from ordertracker.providers.base import (
    CarrierShipment,
    Geocoder,
    ProviderError,
    ProviderNotConfigured,
    TrackingNotFound,
    TrackingProvider,
)
from ordertracker.providers.links import guess_carrier, links_for, normalize_code
from ordertracker.store.base import OrderStore
from ordertracker.tracking.progress import interpolate, tracking_for_order

logger = logging.getLogger(__name__)

# Tokens that contain at least one digit: "1002", "O_ID_3000034"
ORDER_ID_PATTERN = re.compile(r"\b[A-Za-z_]*\d[\w-]*\b")

# "ekart:FMPC123456", "bluedart : 12345678901"
CARRIER_QUERY_PATTERN = re.compile(
    r"^\s*(?P<carrier>[A-Za-z][\w-]*)\s*:\s*(?P<code>[A-Za-z0-9][A-Za-z0-9 -]{3,})\s*$"
)

# Auto-detect can return many couriers; only the most likely are tried
MAX_DETECTED_CARRIERS = 3

FREE_MODE_NOTE = (
    "Live carrier tracking is not configured on this server. "
    "Open the official carrier site to see the latest status."
)


class NoKnownLinkFormat(TrackingNotFound):
    """No provider key and the number matches no known carrier format."""


def parse_carrier_query(text: str) -> tuple[str, str] | None:
    """Split ``carrier:number`` into (carrier slug, number)."""
    match = CARRIER_QUERY_PATTERN.match(text or "")
    if not match:
        return None
    return match.group("carrier").lower(), match.group("code").strip()


class TrackingLookup:
    """Resolves free-form tracking queries."""

    def __init__(
        self,
        orders: OrderStore,
        provider: TrackingProvider | None = None,
        geocoder: Geocoder | None = None,
    ):
        self.orders = orders
        self.provider = provider
        self.geocoder = geocoder

    @property
    def carrier_enabled(self) -> bool:
        return self.provider is not None

    def _geocode(self, place: str | None) -> LatLng | None:
        if not place or self.geocoder is None:
            return None
        try:
            return self.geocoder.geocode(place)
        except ProviderError as e:
            # Route is decoration; the status is still worth returning
            logger.warning("Geocoding %r failed: %s", place, e)
            return None

    def shipment_to_tracking(self, shipment: CarrierShipment) -> TrackingResponse:
        """Build a UI snapshot from a carrier result."""
        points = [cp.coordinates for cp in shipment.checkpoints if cp.coordinates]

        origin = points[0] if points else self._geocode(shipment.origin_place)
        dest = self._geocode(shipment.destination_place)
        if dest is None and len(points) >= 2:
            dest = points[-1]

        if points:
            current = points[-1]
        elif origin and dest:
            current = interpolate(origin, dest, shipment.progress)
        else:
            current = None

        route = None
        if origin or dest or current:
            route = TrackingRoute(
                origin=origin,
                dest=dest,
                current=current,
                origin_name=shipment.origin_place,
                dest_name=shipment.destination_place,
            )

        return TrackingResponse(
            status=shipment.status,
            progress=shipment.progress,
            origin=origin,
            dest=dest,
            polyline=points if len(points) >= 2 else None,
            route=route,
            source="carrier",
            carrier=shipment.carrier,
            tracking=shipment.tracking_number,
        )

    def track_carrier(self, carrier: str, tracking_number: str) -> TrackingResponse:
        """
        Look up a shipment with a known carrier.

        Raises:
            ProviderNotConfigured: No tracking provider
            ProviderError: Provider failures propagate unchanged
        """
        if self.provider is None:
            raise ProviderNotConfigured(
                "Tracking provider not configured on server (set AFTERSHIP_API_KEY)"
            )
        shipment = self.provider.track(carrier, tracking_number)
        return self.shipment_to_tracking(shipment)

    def _auto_detect(self, code: str) -> TrackingResponse:
        slugs = self.provider.detect(code)[:MAX_DETECTED_CARRIERS]
        if not slugs:
            guessed = guess_carrier(code)
            slugs = [guessed] if guessed else []

        for slug in slugs:
            try:
                return self.track_carrier(slug, code)
            except TrackingNotFound:
                logger.info("Carrier %s does not know %s", slug, code)

        raise TrackingNotFound(f"No carrier recognised tracking number: {code}")

    def free_mode(self, code: str) -> TrackingResponse:
        """Links to official carrier sites for a tracking number."""
        normalized = normalize_code(code)
        links = links_for(normalized)
        if not links:
            raise NoKnownLinkFormat(
                f"Tracking provider not configured and no known link format for: {code}"
            )
        return TrackingResponse(
            status="Unknown",
            progress=0,
            source="links",
            carrier=guess_carrier(normalized),
            tracking=normalized,
            links=links,
            note=FREE_MODE_NOTE,
        )

    def resolve(self, query: str) -> TrackingResponse:
        """
        Resolve a demo order id, ``carrier:number`` or bare tracking number.

        Raises:
            ValueError: Empty query
            TrackingNotFound: Nothing matched (NoKnownLinkFormat in free mode)
            ProviderError: Provider failures propagate unchanged
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("query is required")

        order = self.orders.get(query)
        if order is not None:
            return tracking_for_order(order)

        parsed = parse_carrier_query(query)
        code = parsed[1] if parsed else query

        if self.provider is None:
            return self.free_mode(code)

        if parsed:
            return self.track_carrier(parsed[0], code)
        return self._auto_detect(code)
