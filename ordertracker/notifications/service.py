"""
Subscriber notifications.

Email is optional: without a configured sender nothing is sent and callers
get ``sent=False`` results. Send failures are logged and reported, never
raised into the request that triggered them.
"""

import logging

from ordertracker.models.order import DemoOrder, NotificationResult
from ordertracker.models.subscription import Subscription
from ordertracker.notifications import templates
from ordertracker.providers.base import MailSender, ProviderError
from ordertracker.store.base import SubscriptionStore

logger = logging.getLogger(__name__)


def _send(sender: MailSender | None, to_email: str, content: templates.EmailContent) -> bool:
    if sender is None:
        return False
    try:
        sender.send(to_email, content.subject, content.html, content.text)
        return True
    except ProviderError as e:
        logger.warning("Notification to %s not sent: %s", to_email, e)
        return False


def send_confirmation(
    sender: MailSender | None,
    subscription: Subscription,
    order: DemoOrder | None,
) -> bool:
    """Email a subscription confirmation; True if it was handed to the relay."""
    content = templates.subscription_confirmation(subscription.order_id, order)
    return _send(sender, subscription.email, content)


def notify_subscribers(
    sender: MailSender | None,
    subscriptions: SubscriptionStore,
    order: DemoOrder,
    previous_status: str,
) -> list[NotificationResult]:
    """
    Email every subscription record for the order.

    Duplicate records each get their own message.

    Returns:
        One result per subscription record, in file order
    """
    records = subscriptions.for_order(order.id)
    if not records:
        return []

    content = templates.status_update(order, previous_status)
    results = [
        NotificationResult(email=record.email, sent=_send(sender, record.email, content))
        for record in records
    ]

    logger.info(
        "Notified subscribers of order %s",
        order.id,
        extra={
            "json_fields": {
                "recipients": len(results),
                "sent": sum(r.sent for r in results),
                "status": order.status.value,
            }
        },
    )
    return results
