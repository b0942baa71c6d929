"""
Subscription API route.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ordertracker.api.deps import get_mail_sender, get_order_store, get_subscription_store
from ordertracker.models.subscription import SubscribeRequest, SubscribeResponse, Subscription
from ordertracker.notifications import send_confirmation
from ordertracker.providers.base import MailSender
from ordertracker.store.base import OrderStore, SubscriptionStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/subscribe", response_model=SubscribeResponse, response_model_exclude_none=True)
def subscribe(
    request: SubscribeRequest,
    store: OrderStore = Depends(get_order_store),
    subscriptions: SubscriptionStore = Depends(get_subscription_store),
    sender: MailSender | None = Depends(get_mail_sender),
) -> SubscribeResponse:
    """
    Subscribe an email address to an order's status updates.

    The record is saved first; the confirmation email is best effort.
    Repeating a subscription stores another record. An address that is
    not a valid email fails request validation (422).

    Raises:
        HTTPException: 400 if orderId or email is missing
    """
    if not request.order_id or not request.email:
        raise HTTPException(status_code=400, detail="orderId and email are required")

    try:
        subscription = subscriptions.add(
            Subscription(order_id=request.order_id, email=request.email)
        )
    except (OSError, ValueError) as e:
        logger.error("Failed to save subscription: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save subscription")

    logger.info(
        "Subscription saved",
        extra={"json_fields": {"order_id": subscription.order_id}},
    )

    if sender is None:
        return SubscribeResponse(
            subscription=subscription,
            email_sent=False,
            note="Email not configured; subscription saved",
        )

    email_sent = send_confirmation(sender, subscription, store.get(subscription.order_id))
    return SubscribeResponse(
        subscription=subscription,
        email_sent=email_sent,
        note=None if email_sent else "Confirmation email could not be sent; subscription saved",
    )
