from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

from pydantic import Field

from ordertracker.models.base import APIModel, LatLng


class OrderStatus(StrEnum):
    """Order status as shown to customers"""

    PROCESSING = "Processing"
    PACKED = "Packed"
    SHIPPED = "Shipped"
    IN_TRANSIT = "In Transit"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"  # Terminal, never produced by advance
    RETURNED = "Returned"  # Terminal, never produced by advance


# Forward-only sequence walked by the admin advance action
ADVANCE_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PROCESSING,
    OrderStatus.PACKED,
    OrderStatus.SHIPPED,
    OrderStatus.IN_TRANSIT,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)


class TimelineEvent(APIModel):
    """A single status change in an order's history"""

    label: str = Field(description="Status reached")
    ts: datetime = Field(description="When the status was reached")


class DemoOrder(APIModel):
    """
    Demo shipment record.

    Stands in for a real order database: seeded at startup, mutated only by
    the admin advance action, never deleted.
    """

    id: str = Field(description="Order identifier")
    status: OrderStatus = Field(description="Current status")
    origin: LatLng = Field(description="Origin (lat, lng)")
    dest: LatLng = Field(description="Destination (lat, lng)")
    origin_name: Optional[str] = Field(default=None, description="Origin display name")
    dest_name: Optional[str] = Field(
        default=None, description="Destination display name"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Order placement time",
    )
    timeline: list[TimelineEvent] = Field(
        default_factory=list, description="Status history, oldest first"
    )


class CarrierLink(APIModel):
    """Deep link to a carrier's own tracking page"""

    carrier: str = Field(description="Carrier display name")
    url: str = Field(description="Tracking page URL")


class TrackingRoute(APIModel):
    """Route geometry rendered by the map"""

    origin: Optional[LatLng] = None
    dest: Optional[LatLng] = None
    current: Optional[LatLng] = Field(
        default=None, description="Synthesized current position"
    )
    origin_name: Optional[str] = None
    dest_name: Optional[str] = None


class TrackingResponse(APIModel):
    """Tracking snapshot returned by every lookup endpoint"""

    status: str = Field(description="Status in local vocabulary")
    progress: int = Field(ge=0, le=100, description="Progress percentage")
    origin: Optional[LatLng] = None
    dest: Optional[LatLng] = None
    polyline: Optional[list[LatLng]] = None
    route: Optional[TrackingRoute] = None

    # Lookup provenance (carrier / free-mode lookups)
    source: Optional[str] = Field(
        default=None, description="'demo', 'carrier' or 'links'"
    )
    carrier: Optional[str] = None
    tracking: Optional[str] = None
    links: Optional[list[CarrierLink]] = None
    note: Optional[str] = None


class OrderSummary(APIModel):
    """Short order listing entry"""

    id: str
    status: OrderStatus
    progress: int
    origin_name: Optional[str] = None
    dest_name: Optional[str] = None


class OrderDetail(TrackingResponse):
    """Tracking snapshot plus identity and timeline"""

    id: str
    timeline: list[TimelineEvent] = Field(default_factory=list)


class OrderListResponse(APIModel):
    orders: list[OrderSummary] = Field(default_factory=list)


class EtaResponse(APIModel):
    order_id: str
    eta_iso: Optional[datetime] = Field(default=None, alias="etaISO")
    note: str = ""


class AnalyticsResponse(APIModel):
    total: int
    by_status: dict[str, int] = Field(default_factory=dict)


class ReturnPolicy(APIModel):
    window_days: int
    conditions: list[str] = Field(default_factory=list)
    refund_note: str


class ReturnsResponse(APIModel):
    policy: ReturnPolicy
    eligible: list[OrderSummary] = Field(default_factory=list)


class TrackRequest(APIModel):
    """Body for POST /api/track"""

    order_id: Optional[str] = None


class TrackAnyRequest(APIModel):
    """Body for POST /api/track-any"""

    query: Optional[str] = None


class NotificationResult(APIModel):
    email: str
    sent: bool


class AdvanceResponse(APIModel):
    id: str
    previous_status: OrderStatus
    status: OrderStatus
    progress: int
    advanced: bool
    notifications: list[NotificationResult] = Field(default_factory=list)


class StreamSnapshot(APIModel):
    """One server-sent event on /api/stream/{orderId}"""

    id: str
    status: OrderStatus
    progress: int
    route: Optional[TrackingRoute] = None
    ts: datetime = Field(description="When the snapshot was taken")
