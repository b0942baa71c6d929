from datetime import datetime, timezone
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from ordertracker.models.base import APIModel


class Subscription(APIModel):
    """
    Email subscription to an order's status updates.

    Stored as-is in a flat file; the same order/email pair may appear
    several times and the order id is not checked against the store.
    """

    order_id: str = Field(description="Subscribed order id")
    email: EmailStr = Field(description="Recipient address")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Subscription time",
    )


class SubscribeRequest(APIModel):
    """Body for POST /api/subscribe"""

    order_id: str = Field(default="")
    email: Optional[EmailStr] = Field(default=None)

    @field_validator("order_id", mode="before")
    @classmethod
    def _strip_order_id(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_missing(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class SubscribeResponse(APIModel):
    ok: bool = True
    subscription: Subscription
    email_sent: bool = False
    note: Optional[str] = None
