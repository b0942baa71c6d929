"""
In-memory order store seeded with demo shipments.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from ordertracker.models.order import (
    ADVANCE_SEQUENCE,
    DemoOrder,
    OrderStatus,
    TimelineEvent,
)
from ordertracker.store.base import AdvanceResult, OrderStore

logger = logging.getLogger(__name__)

# Gap between seeded timeline events
SEED_STEP = timedelta(hours=18)

# id -> (status, origin, dest, origin_name, dest_name)
DEMO_ORDERS: dict[str, tuple] = {
    "1001": (
        OrderStatus.PROCESSING,
        (28.6139, 77.209),
        (19.076, 72.8777),
        "Delhi",
        "Mumbai",
    ),
    "1002": (
        OrderStatus.SHIPPED,
        (12.9716, 77.5946),
        (13.0827, 80.2707),
        "Bengaluru",
        "Chennai",
    ),
    # City deliveries: origin and destination coincide
    "1003": (
        OrderStatus.OUT_FOR_DELIVERY,
        (22.5726, 88.3639),
        (22.5726, 88.3639),
        "Kolkata",
        "Kolkata",
    ),
    "1004": (
        OrderStatus.DELIVERED,
        (17.385, 78.4867),
        (17.385, 78.4867),
        "Hyderabad",
        "Hyderabad",
    ),
    "O_ID_3000034": (
        OrderStatus.SHIPPED,
        (28.6139, 77.209),
        (26.9124, 75.7873),
        "Delhi",
        "Jaipur",
    ),
}


def seed_timeline(status: OrderStatus, created_at: datetime) -> list[TimelineEvent]:
    """Build a plausible history that ends at ``status``."""
    if status not in ADVANCE_SEQUENCE:
        return [TimelineEvent(label=status.value, ts=created_at)]

    stages = ADVANCE_SEQUENCE[: ADVANCE_SEQUENCE.index(status) + 1]
    return [
        TimelineEvent(label=stage.value, ts=created_at + SEED_STEP * i)
        for i, stage in enumerate(stages)
    ]


class InMemoryOrderStore(OrderStore):
    """Process-wide order table. Writes are last-wins; nothing is locked."""

    def __init__(self, orders: list[DemoOrder] | None = None):
        self._orders: dict[str, DemoOrder] = {o.id: o for o in orders or []}

    @classmethod
    def with_demo_orders(cls, now: datetime | None = None) -> "InMemoryOrderStore":
        """Create a store holding the demo dataset."""
        now = now or datetime.now(timezone.utc)
        orders = []
        for order_id, (status, origin, dest, origin_name, dest_name) in DEMO_ORDERS.items():
            # Place the order far enough back that its history ends before now
            steps = len(seed_timeline(status, now))
            created_at = now - SEED_STEP * steps
            orders.append(
                DemoOrder(
                    id=order_id,
                    status=status,
                    origin=origin,
                    dest=dest,
                    origin_name=origin_name,
                    dest_name=dest_name,
                    created_at=created_at,
                    timeline=seed_timeline(status, created_at),
                )
            )
        return cls(orders)

    def get(self, order_id: str) -> DemoOrder | None:
        return self._orders.get(order_id)

    def list(self) -> list[DemoOrder]:
        return list(self._orders.values())

    def advance(self, order_id: str) -> AdvanceResult | None:
        order = self._orders.get(order_id)
        if order is None:
            return None

        previous = order.status
        # Terminal statuses (Delivered, Canceled, Returned) stay put
        if previous not in ADVANCE_SEQUENCE or previous == ADVANCE_SEQUENCE[-1]:
            logger.info("Order %s not advanced (status=%s)", order_id, previous)
            return AdvanceResult(order=order, previous_status=previous)

        next_status = ADVANCE_SEQUENCE[ADVANCE_SEQUENCE.index(previous) + 1]
        order.status = next_status
        order.timeline.append(
            TimelineEvent(label=next_status.value, ts=datetime.now(timezone.utc))
        )

        logger.info("Order %s advanced: %s -> %s", order_id, previous, next_status)
        return AdvanceResult(order=order, previous_status=previous)
