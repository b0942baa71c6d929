"""
Returns policy and eligibility.
"""

from datetime import datetime, timedelta, timezone

from ordertracker.models.order import DemoOrder, OrderStatus, ReturnPolicy

RETURN_WINDOW_DAYS = 7

RETURN_POLICY = ReturnPolicy(
    window_days=RETURN_WINDOW_DAYS,
    conditions=[
        "Items must be unused with original packaging",
        "Request within 7 days of delivery",
        "Some categories may be non-returnable",
    ],
    refund_note="Refunds are issued after the returned item is inspected.",
)


def delivered_at(order: DemoOrder) -> datetime | None:
    """Timestamp of the Delivered timeline event, if any."""
    for event in reversed(order.timeline):
        if event.label == OrderStatus.DELIVERED.value:
            return event.ts
    return None


def is_return_eligible(order: DemoOrder, now: datetime | None = None) -> bool:
    if order.status != OrderStatus.DELIVERED:
        return False
    delivered = delivered_at(order)
    if delivered is None:
        # Delivered without a recorded event; give it the benefit of the doubt
        return True
    now = now or datetime.now(timezone.utc)
    return now - delivered <= timedelta(days=RETURN_WINDOW_DAYS)


def eligible_returns(orders: list[DemoOrder], now: datetime | None = None) -> list[DemoOrder]:
    return [order for order in orders if is_return_eligible(order, now)]
