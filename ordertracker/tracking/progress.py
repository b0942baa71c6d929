"""
Status to progress mapping and route synthesis.

Positions here are cosmetic: the "current" location is a straight-line
interpolation between origin and destination, and the polyline is a fixed
three-point curve. Nothing is routed.
"""

from datetime import datetime, timedelta, timezone

from ordertracker.models.base import LatLng
from ordertracker.models.order import (
    DemoOrder,
    EtaResponse,
    OrderDetail,
    OrderStatus,
    OrderSummary,
    TrackingResponse,
    TrackingRoute,
)
from ordertracker.store.base import OrderStore

STATUS_PROGRESS: dict[str, int] = {
    OrderStatus.PROCESSING: 25,
    OrderStatus.PACKED: 35,
    OrderStatus.SHIPPED: 50,
    OrderStatus.IN_TRANSIT: 70,
    OrderStatus.OUT_FOR_DELIVERY: 85,
    OrderStatus.DELIVERED: 100,
    OrderStatus.CANCELED: 0,
    OrderStatus.RETURNED: 0,
}

DEFAULT_PROGRESS = 40

# Latitude offset applied to the polyline midpoint
MIDPOINT_BOW = 0.5

# Days until delivery by status; missing statuses have no ETA
ETA_DAYS: dict[str, int] = {
    OrderStatus.PROCESSING: 5,
    OrderStatus.PACKED: 4,
    OrderStatus.SHIPPED: 3,
    OrderStatus.IN_TRANSIT: 2,
    OrderStatus.OUT_FOR_DELIVERY: 0,
}


def progress_for(status: str) -> int:
    """Progress percentage for a status, DEFAULT_PROGRESS if unmapped."""
    return STATUS_PROGRESS.get(status, DEFAULT_PROGRESS)


def build_polyline(origin: LatLng | None, dest: LatLng | None) -> list[LatLng] | None:
    """Origin, a midpoint bowed north, destination."""
    if origin is None or dest is None:
        return None

    olat, olng = origin
    dlat, dlng = dest
    mid = ((olat + dlat) / 2 + MIDPOINT_BOW, (olng + dlng) / 2)
    return [tuple(origin), mid, tuple(dest)]


def interpolate(origin: LatLng, dest: LatLng, progress: float) -> LatLng:
    """
    Linear position between origin and destination.

    Args:
        origin: Start point
        dest: End point
        progress: Percentage travelled, clamped to [0, 100]

    Returns:
        Point on the origin-destination segment
    """
    t = max(0.0, min(100.0, float(progress))) / 100.0
    return (
        origin[0] + (dest[0] - origin[0]) * t,
        origin[1] + (dest[1] - origin[1]) * t,
    )


def build_route(order: DemoOrder, progress: int | None = None) -> TrackingRoute:
    if progress is None:
        progress = progress_for(order.status)
    return TrackingRoute(
        origin=order.origin,
        dest=order.dest,
        current=interpolate(order.origin, order.dest, progress),
        origin_name=order.origin_name,
        dest_name=order.dest_name,
    )


def tracking_for_order(order: DemoOrder) -> TrackingResponse:
    """Tracking snapshot for a demo order."""
    progress = progress_for(order.status)
    return TrackingResponse(
        status=order.status.value,
        progress=progress,
        origin=order.origin,
        dest=order.dest,
        polyline=build_polyline(order.origin, order.dest),
        route=build_route(order, progress),
        source="demo",
    )


def get_tracking(store: OrderStore, order_id: str) -> TrackingResponse | None:
    """Look up an order and build its snapshot; None if unknown."""
    order = store.get(order_id)
    if order is None:
        return None
    return tracking_for_order(order)


def order_detail(order: DemoOrder) -> OrderDetail:
    snapshot = tracking_for_order(order)
    return OrderDetail(
        id=order.id,
        timeline=list(order.timeline),
        **snapshot.model_dump(),
    )


def order_summary(order: DemoOrder) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        status=order.status,
        progress=progress_for(order.status),
        origin_name=order.origin_name,
        dest_name=order.dest_name,
    )


def estimate_delivery(order: DemoOrder, now: datetime | None = None) -> EtaResponse:
    """Rough delivery estimate from the current status."""
    now = now or datetime.now(timezone.utc)

    if order.status == OrderStatus.DELIVERED:
        return EtaResponse(order_id=order.id, note="Delivered")
    if order.status in (OrderStatus.CANCELED, OrderStatus.RETURNED):
        return EtaResponse(
            order_id=order.id, note=f"No delivery expected ({order.status.value})"
        )

    days = ETA_DAYS.get(order.status)
    if days is None:
        return EtaResponse(order_id=order.id, note="ETA unavailable")
    if days == 0:
        return EtaResponse(order_id=order.id, eta_iso=now, note="Arriving today")

    return EtaResponse(
        order_id=order.id,
        eta_iso=now + timedelta(days=days),
        note=f"Estimated {days} day{'s' if days != 1 else ''} from now",
    )
