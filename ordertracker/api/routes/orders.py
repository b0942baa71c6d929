"""
Order API routes.

Read-only views over the demo order table plus the admin advance action,
which is the only thing that changes an order's status.
"""

import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException, Query

from ordertracker.api.deps import (
    get_mail_sender,
    get_order_store,
    get_subscription_store,
    require_admin,
)
from ordertracker.models.order import (
    AdvanceResponse,
    AnalyticsResponse,
    EtaResponse,
    OrderDetail,
    OrderListResponse,
    ReturnsResponse,
)
from ordertracker.notifications import notify_subscribers
from ordertracker.providers.base import MailSender
from ordertracker.store.base import OrderStore, SubscriptionStore
from ordertracker.tracking.progress import (
    estimate_delivery,
    order_detail,
    order_summary,
    progress_for,
)
from ordertracker.tracking.returns import RETURN_POLICY, eligible_returns

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_order_or_404(store: OrderStore, order_id: str):
    order = store.get(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order not found: {order_id}")
    return order


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    email: str | None = Query(
        default=None, description="Only orders this address is subscribed to"
    ),
    store: OrderStore = Depends(get_order_store),
    subscriptions: SubscriptionStore = Depends(get_subscription_store),
) -> OrderListResponse:
    """
    List demo orders.

    Args:
        email: Optional subscriber address; unknown order ids in its
            subscriptions are ignored

    Returns:
        OrderListResponse with one summary per order
    """
    orders = store.list()

    email = (email or "").strip()
    if email:
        subscribed = {s.order_id for s in subscriptions.for_email(email)}
        orders = [o for o in orders if o.id in subscribed]

    return OrderListResponse(orders=[order_summary(o) for o in orders])


@router.get(
    "/orders/{order_id}", response_model=OrderDetail, response_model_exclude_none=True
)
async def get_order(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
) -> OrderDetail:
    """Order detail with its status timeline."""
    return order_detail(_get_order_or_404(store, order_id))


@router.get("/eta/{order_id}", response_model=EtaResponse)
async def get_eta(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
) -> EtaResponse:
    """Estimated delivery time from the order's current status."""
    return estimate_delivery(_get_order_or_404(store, order_id))


@router.get("/search", response_model=OrderListResponse)
async def search_orders(
    q: str | None = Query(default=None, description="Order id, status or place name"),
    store: OrderStore = Depends(get_order_store),
) -> OrderListResponse:
    """
    Search orders by id, status or origin/destination name.

    Raises:
        HTTPException: 400 if q is empty
    """
    q = (q or "").strip()
    if not q:
        raise HTTPException(status_code=400, detail="q is required")
    return OrderListResponse(orders=[order_summary(o) for o in store.search(q)])


@router.get("/analytics", response_model=AnalyticsResponse)
async def analytics(store: OrderStore = Depends(get_order_store)) -> AnalyticsResponse:
    """Order counts by status."""
    orders = store.list()
    counts = Counter(o.status.value for o in orders)
    return AnalyticsResponse(total=len(orders), by_status=dict(counts))


@router.get("/returns", response_model=ReturnsResponse)
async def returns(store: OrderStore = Depends(get_order_store)) -> ReturnsResponse:
    """Returns policy and the delivered orders still inside the window."""
    eligible = eligible_returns(store.list())
    return ReturnsResponse(
        policy=RETURN_POLICY,
        eligible=[order_summary(o) for o in eligible],
    )


@router.post(
    "/admin/advance/{order_id}",
    response_model=AdvanceResponse,
    dependencies=[Depends(require_admin)],
)
def advance_order(
    order_id: str,
    store: OrderStore = Depends(get_order_store),
    subscriptions: SubscriptionStore = Depends(get_subscription_store),
    sender: MailSender | None = Depends(get_mail_sender),
) -> AdvanceResponse:
    """
    Move an order one step forward and email its subscribers.

    Delivered, Canceled and Returned orders are left as they are and no
    one is notified.

    Raises:
        HTTPException: 404 if the order is unknown
    """
    result = store.advance(order_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Order not found: {order_id}")

    notifications = []
    if result.advanced:
        notifications = notify_subscribers(
            sender, subscriptions, result.order, result.previous_status.value
        )

    return AdvanceResponse(
        id=result.order.id,
        previous_status=result.previous_status,
        status=result.order.status,
        progress=progress_for(result.order.status),
        advanced=result.advanced,
        notifications=notifications,
    )
