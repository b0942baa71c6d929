"""
Store interfaces.

Request handlers depend on these abstractions rather than on a module-level
table, so tests can substitute their own implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ordertracker.models.order import DemoOrder, OrderStatus
from ordertracker.models.subscription import Subscription


@dataclass
class AdvanceResult:
    """Outcome of an advance request."""

    order: DemoOrder
    previous_status: OrderStatus

    @property
    def advanced(self) -> bool:
        return self.order.status != self.previous_status


class OrderStore(ABC):
    """Read/advance access to orders."""

    @abstractmethod
    def get(self, order_id: str) -> DemoOrder | None:
        """Return the order, or None if unknown."""

    @abstractmethod
    def list(self) -> list[DemoOrder]:
        """Return all orders in insertion order."""

    @abstractmethod
    def advance(self, order_id: str) -> AdvanceResult | None:
        """
        Step an order one stage forward.

        Returns:
            AdvanceResult, or None if the order is unknown
        """

    def search(self, query: str) -> list[DemoOrder]:
        """Case-insensitive match on id, status and place names."""
        needle = query.strip().lower()
        if not needle:
            return []

        matches = []
        for order in self.list():
            haystack = [order.id, order.status.value, order.origin_name, order.dest_name]
            if any(field and needle in field.lower() for field in haystack):
                matches.append(order)
        return matches


class SubscriptionStore(ABC):
    """Append-only subscription list."""

    @abstractmethod
    def add(self, subscription: Subscription) -> Subscription:
        """Append a record (duplicates allowed)."""

    @abstractmethod
    def all(self) -> list[Subscription]:
        """Return every record in insertion order."""

    def for_order(self, order_id: str) -> list[Subscription]:
        return [s for s in self.all() if s.order_id == order_id]

    def for_email(self, email: str) -> list[Subscription]:
        email = email.strip().lower()
        return [s for s in self.all() if s.email.lower() == email]
