"""
Email templates for subscription confirmations and status updates.

Templates are HTML; the plain-text alternative is derived from the HTML
with BeautifulSoup so the two never drift apart.
"""

from dataclasses import dataclass
from html import escape

from ordertracker.models.order import DemoOrder
from ordertracker.utils.html import html_to_text

_LAYOUT = """\
<html>
<body style="font-family: Arial, sans-serif; color: #1f2937;">
  <h2 style="color: #b8860b;">{heading}</h2>
  {content}
  <hr>
  <p style="color: #6b7280; font-size: 12px;">
    You are receiving this because you subscribed to updates for order {order_id}.
  </p>
</body>
</html>
"""


@dataclass
class EmailContent:
    subject: str
    html: str
    text: str


def _render(subject: str, heading: str, content: str, order_id: str) -> EmailContent:
    html = _LAYOUT.format(
        heading=escape(heading),
        content=content,
        order_id=escape(order_id),
    )
    return EmailContent(subject=subject, html=html, text=html_to_text(html))


def _route_line(order: DemoOrder | None) -> str:
    if order is None or not (order.origin_name or order.dest_name):
        return ""
    origin = escape(order.origin_name or "origin")
    dest = escape(order.dest_name or "destination")
    return f"<p>Route: {origin} &rarr; {dest}</p>"


def subscription_confirmation(order_id: str, order: DemoOrder | None) -> EmailContent:
    """Sent once when someone subscribes to an order."""
    status_line = (
        f"<p>Current status: <strong>{escape(order.status.value)}</strong></p>"
        if order is not None
        else "<p>We will email you as soon as this order has an update.</p>"
    )
    content = (
        f"<p>You are now subscribed to updates for order "
        f"<strong>{escape(order_id)}</strong>.</p>"
        f"{status_line}{_route_line(order)}"
    )
    return _render(
        subject=f"Subscribed to order {order_id}",
        heading="Subscription confirmed",
        content=content,
        order_id=order_id,
    )


def status_update(order: DemoOrder, previous_status: str) -> EmailContent:
    """Sent to every subscriber when an order moves to a new stage."""
    content = (
        f"<p>Order <strong>{escape(order.id)}</strong> moved from "
        f"{escape(previous_status)} to <strong>{escape(order.status.value)}</strong>.</p>"
        f"{_route_line(order)}"
    )
    return _render(
        subject=f"Order {order.id}: {order.status.value}",
        heading="Your order has an update",
        content=content,
        order_id=order.id,
    )
