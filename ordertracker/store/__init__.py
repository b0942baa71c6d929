"""
Order Tracker storage.

Order table and subscription list behind small store interfaces.
"""

from ordertracker.store.base import AdvanceResult, OrderStore, SubscriptionStore
from ordertracker.store.memory import InMemoryOrderStore
from ordertracker.store.subscriptions import FileSubscriptionStore

__all__ = [
    "AdvanceResult",
    "FileSubscriptionStore",
    "InMemoryOrderStore",
    "OrderStore",
    "SubscriptionStore",
]
