"""
Order Tracker data models.

Pydantic models for the demo order table, tracking snapshots, subscriptions,
chat and email ingest payloads.
"""

# Chat models
from ordertracker.models.chat import AIHealthResponse, ChatMeta, ChatReply, ChatRequest

# Ingest models
from ordertracker.models.ingest import (
    IngestEmailRequest,
    IngestResponse,
    TrackingCandidate,
)

# Order models
from ordertracker.models.order import (
    ADVANCE_SEQUENCE,
    CarrierLink,
    DemoOrder,
    OrderDetail,
    OrderStatus,
    OrderSummary,
    TimelineEvent,
    TrackingResponse,
    TrackingRoute,
)

# Subscription models
from ordertracker.models.subscription import (
    SubscribeRequest,
    SubscribeResponse,
    Subscription,
)

__all__ = [
    # Order models
    "ADVANCE_SEQUENCE",
    "CarrierLink",
    "DemoOrder",
    "OrderDetail",
    "OrderStatus",
    "OrderSummary",
    "TimelineEvent",
    "TrackingResponse",
    "TrackingRoute",
    # Subscription models
    "SubscribeRequest",
    "SubscribeResponse",
    "Subscription",
    # Chat models
    "AIHealthResponse",
    "ChatMeta",
    "ChatReply",
    "ChatRequest",
    # Ingest models
    "IngestEmailRequest",
    "IngestResponse",
    "TrackingCandidate",
]
