"""
Tracking API routes.

Demo order lookups, carrier lookups and the free-form track-any endpoint
the browser UI uses for its search box.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ordertracker.api.deps import get_order_store, get_tracking_lookup
from ordertracker.api.errors import provider_http_error
from ordertracker.models.order import TrackAnyRequest, TrackingResponse, TrackRequest
from ordertracker.providers.base import ProviderError
from ordertracker.store.base import OrderStore
from ordertracker.tracking.lookup import TrackingLookup
from ordertracker.tracking.progress import get_tracking

logger = logging.getLogger(__name__)

router = APIRouter()


def _demo_tracking(store: OrderStore, order_id: str | None) -> TrackingResponse:
    order_id = (order_id or "").strip()
    if not order_id:
        raise HTTPException(status_code=400, detail="orderId is required")

    tracking = get_tracking(store, order_id)
    if tracking is None:
        raise HTTPException(status_code=404, detail=f"Order not found: {order_id}")
    return tracking


@router.get("/track", response_model=TrackingResponse, response_model_exclude_none=True)
async def track_by_query(
    order_id: str | None = Query(default=None, alias="orderId", description="Demo order id"),
    store: OrderStore = Depends(get_order_store),
) -> TrackingResponse:
    """
    Track a demo order.

    Raises:
        HTTPException: 400 if orderId is missing, 404 if the order is unknown
    """
    return _demo_tracking(store, order_id)


@router.get(
    "/track/{order_id}", response_model=TrackingResponse, response_model_exclude_none=True
)
async def track_by_path(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
) -> TrackingResponse:
    """Track a demo order by path parameter."""
    return _demo_tracking(store, order_id)


@router.post("/track", response_model=TrackingResponse, response_model_exclude_none=True)
async def track_by_body(
    request: TrackRequest,
    store: OrderStore = Depends(get_order_store),
) -> TrackingResponse:
    """Track a demo order from a JSON body ``{"orderId": ...}``."""
    return _demo_tracking(store, request.order_id)


@router.get(
    "/track-carrier", response_model=TrackingResponse, response_model_exclude_none=True
)
def track_carrier(
    carrier: str | None = Query(default=None, description="Carrier slug, e.g. ekart"),
    tracking: str | None = Query(default=None, description="Carrier tracking number"),
    lookup: TrackingLookup = Depends(get_tracking_lookup),
) -> TrackingResponse:
    """
    Track a shipment with a carrier through the tracking provider.

    Raises:
        HTTPException: 400 if carrier or tracking is missing; 501 when the
            provider is not configured; 404/400/502 for provider failures
    """
    carrier = (carrier or "").strip().lower()
    tracking = (tracking or "").strip()
    if not carrier or not tracking:
        raise HTTPException(status_code=400, detail="carrier and tracking are required")

    try:
        return lookup.track_carrier(carrier, tracking)
    except ProviderError as e:
        logger.info("Carrier lookup %s:%s failed: %s", carrier, tracking, e)
        raise provider_http_error(e)


@router.post("/track-any", response_model=TrackingResponse, response_model_exclude_none=True)
def track_any(
    request: TrackAnyRequest,
    lookup: TrackingLookup = Depends(get_tracking_lookup),
) -> TrackingResponse:
    """
    Track anything the user typed: a demo order id, ``carrier:number`` or
    a bare tracking number.

    Without a tracking provider, returns links to official carrier sites.

    Raises:
        HTTPException: 400 if query is empty; 404 when nothing matches
            (including "no known link format" without a provider)
    """
    try:
        return lookup.resolve(request.query or "")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ProviderError as e:
        raise provider_http_error(e)
