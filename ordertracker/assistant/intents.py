"""
Rule-based chat intents.

Rules are evaluated in order and the first one that produces a reply wins.
A rule's pattern gates its handler; a handler may still decline by
returning None (e.g. the carrier rule when the message has no usable code).
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ordertracker.models.chat import ChatMeta, ChatReply
from ordertracker.models.order import TrackingResponse
from ordertracker.providers.base import ProviderError
from ordertracker.tracking.lookup import ORDER_ID_PATTERN, TrackingLookup
from ordertracker.tracking.progress import get_tracking

logger = logging.getLogger(__name__)

# "ekart:FMPC123456" anywhere in the message
CARRIER_CODE_PATTERN = re.compile(
    r"(?P<carrier>[A-Za-z][\w-]*)\s*:\s*(?P<code>[A-Za-z0-9][A-Za-z0-9-]{3,})"
)

# Words that look like a carrier prefix in "order: 1002" but are not
NOT_CARRIERS = {"order", "orders", "track", "tracking", "status", "id"}

ISSUE_PATTERN = re.compile(
    r"\b(issue|problem|complain|damag|broken|defect|faulty|wrong|missing|lost|late\b|delay"
    r"|refund|return|replace|exchange|cancel|not\s*work|doesn['’]?t\s*work|cannot"
    r"|can['’]?t|error|fail|stuck)",
    re.IGNORECASE,
)

# Order-level complaints also treat "support" as a request for help
COMPLAINT_PATTERN = re.compile(rf"(support|{ISSUE_PATTERN.pattern})", re.IGNORECASE)

RETURN_POLICY_REPLY = (
    "Returns/Refunds: Request within 7 days of delivery. Items must be unused with "
    "original packaging. Refunds issued after inspection. Some categories may be "
    "non-returnable."
)
CANCEL_POLICY_REPLY = (
    "Cancellation: Possible before shipping. If already shipped, wait for delivery "
    "or refuse at the door; otherwise request a return from Orders."
)
GREETING_REPLY = (
    "Hi! I can track orders (e.g., 1002), help with returns, and answer basic "
    "questions. What can I do for you?"
)
THANKS_REPLY = "You're welcome. Happy to help!"
DELIVERY_TIME_REPLY = (
    "Delivery times: Standard 3-5 business days (metros) and 5-7 days (other "
    "regions). Check live status via your Order ID for a precise ETA."
)
CONTACT_REPLY = (
    "Support: You can chat here. For escalations email support@example.com with "
    "your Order ID and issue summary."
)
PAYMENT_REPLY = (
    "Payments: We accept UPI, cards, and Cash on Delivery in eligible areas. "
    "COD fees may apply."
)
HELP_REPLY = (
    "I can track orders by ID (e.g., 1002) or by carrier code like ekart:TRACK_ID. "
    'Try: "track 1002" or "ekart:FMPC123456".'
)
CARRIER_UNCONFIGURED_REPLY = (
    "Carrier tracking is not configured on the server yet. Please track by Order ID "
    "(e.g., 1002), or ask your admin to set AFTERSHIP_API_KEY."
)
DEFAULT_REPLY = (
    "I'm here to help track orders. Send an Order ID like 1002, or a carrier code "
    "like ekart:TRACK_ID."
)


@dataclass
class ChatContext:
    """One incoming message plus what the rules may consult."""

    message: str
    lookup: TrackingLookup

    def order_id_candidate(self) -> Optional[str]:
        match = ORDER_ID_PATTERN.search(self.message)
        return match.group(0) if match else None

    def carrier_code(self) -> Optional[tuple[str, str]]:
        match = CARRIER_CODE_PATTERN.search(self.message)
        if not match:
            return None
        carrier = match.group("carrier").lower()
        if carrier in NOT_CARRIERS:
            return None
        return carrier, match.group("code")


Handler = Callable[[ChatContext], Optional[ChatReply]]


@dataclass
class IntentRule:
    name: str
    pattern: Optional[re.Pattern]
    handler: Handler

    def apply(self, ctx: ChatContext) -> Optional[ChatReply]:
        if self.pattern is not None and not self.pattern.search(ctx.message):
            return None
        return self.handler(ctx)


def _describe(data: TrackingResponse) -> str:
    return f"{data.status} ({data.progress}%)"


def _issue_reply(order_id: str, data: TrackingResponse) -> str:
    return (
        f"I can help with your order {order_id}. Current status: {data.status}.\n"
        f"- To refresh status, reply: track {order_id}.\n"
        f"- For returns/replacements, share what went wrong "
        f"(e.g., 'return {order_id} damaged item').\n"
        "- For cancellations, note shipping may limit this."
    )


def static_reply(route: str, text: str) -> Handler:
    """Handler that always answers with fixed text."""

    def handler(_ctx: ChatContext) -> ChatReply:
        return ChatReply(reply=text, meta=ChatMeta(route=route))

    return handler


def handle_issue(ctx: ChatContext) -> ChatReply:
    order_id = ctx.order_id_candidate()
    data = get_tracking(ctx.lookup.orders, order_id) if order_id else None
    if data is not None:
        return ChatReply(
            reply=_issue_reply(order_id, data),
            data=data,
            meta=ChatMeta(route="issue", order_id=order_id),
        )
    return ChatReply(
        reply=(
            "I can help. Please share your Order ID (e.g., 1002).\n"
            "- To track, send: track <orderId>\n"
            "- For returns/replacements, describe the issue with the order ID.\n"
            "- For cancellations, note it may not be possible after shipping."
        ),
        meta=ChatMeta(route="issue-noid"),
    )


def handle_cancel_policy(ctx: ChatContext) -> Optional[ChatReply]:
    # A known order turns the question into an order issue
    order_id = ctx.order_id_candidate()
    if order_id and ctx.lookup.orders.get(order_id) is not None:
        return None
    return ChatReply(reply=CANCEL_POLICY_REPLY, meta=ChatMeta(route="cancel-policy"))


def handle_carrier(ctx: ChatContext) -> Optional[ChatReply]:
    parsed = ctx.carrier_code()
    if parsed is None:
        return None
    carrier, code = parsed

    if not ctx.lookup.carrier_enabled:
        return ChatReply(
            reply=CARRIER_UNCONFIGURED_REPLY,
            meta=ChatMeta(route="carrier-unconfigured"),
        )

    try:
        data = ctx.lookup.track_carrier(carrier, code)
    except ProviderError as e:
        logger.info("Carrier lookup from chat failed: %s", e)
        return ChatReply(
            reply=str(e) or "Carrier tracking failed.",
            meta=ChatMeta(route="carrier-error", error=str(e)),
        )
    return ChatReply(
        reply=f"Status: {_describe(data)}.",
        data=data,
        meta=ChatMeta(route="carrier"),
    )


def handle_order(ctx: ChatContext) -> Optional[ChatReply]:
    order_id = ctx.order_id_candidate()
    if order_id is None:
        return None

    data = get_tracking(ctx.lookup.orders, order_id)
    if data is None:
        return ChatReply(
            reply=(
                f"I couldn't find order {order_id} in the demo data. "
                "Try one like 1002 or O_ID_3000034."
            ),
            meta=ChatMeta(route="order-not-found", order_id=order_id),
        )

    if COMPLAINT_PATTERN.search(ctx.message):
        return ChatReply(
            reply=_issue_reply(order_id, data),
            data=data,
            meta=ChatMeta(route="order-issue", order_id=order_id),
        )
    return ChatReply(
        reply=f"Order {order_id}: {_describe(data)}.",
        data=data,
        meta=ChatMeta(route="order-status", order_id=order_id),
    )


def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


DEFAULT_RULES: list[IntentRule] = [
    IntentRule(
        "return-policy",
        _compile(r"(return|refund|replace|exchange).*policy|policy.*(return|refund|replace|exchange)"),
        static_reply("return-policy", RETURN_POLICY_REPLY),
    ),
    IntentRule(
        "cancel-policy",
        _compile(r"(how\s*do\s*i|can\s*i).*\bcancel|\bcancel(lation)?\b.*\b(policy|order)\b"),
        handle_cancel_policy,
    ),
    IntentRule("issue", ISSUE_PATTERN, handle_issue),
    IntentRule(
        "greeting",
        _compile(r"\b(hello|hi|hey|namaste|good\s*(morning|afternoon|evening))\b"),
        static_reply("greeting", GREETING_REPLY),
    ),
    IntentRule(
        "thanks",
        _compile(r"\b(thanks|thank\s*you|tysm|thx)\b"),
        static_reply("thanks", THANKS_REPLY),
    ),
    IntentRule(
        "delivery-time",
        _compile(
            r"(when|how\s*long).*(deliver|arrival|arrive|shipping)"
            r"|delivery\s*time|shipping\s*time|\beta\b"
        ),
        static_reply("delivery-time", DELIVERY_TIME_REPLY),
    ),
    IntentRule(
        "contact",
        _compile(r"(contact|reach|email|call).*support|customer\s*support"),
        static_reply("contact", CONTACT_REPLY),
    ),
    IntentRule(
        "payment",
        _compile(r"\b(payment|cod|cash\s*on\s*delivery|upi|card)\b"),
        static_reply("payment", PAYMENT_REPLY),
    ),
    IntentRule(
        "help",
        _compile(r"^\s*(help|what can you do\??|how (do|can) i\b|features\b)"),
        static_reply("help", HELP_REPLY),
    ),
    IntentRule("carrier", CARRIER_CODE_PATTERN, handle_carrier),
    IntentRule("order-status", ORDER_ID_PATTERN, handle_order),
    IntentRule("default", None, static_reply("default", DEFAULT_REPLY)),
]


def classify(
    message: str,
    lookup: TrackingLookup,
    rules: list[IntentRule] | None = None,
) -> ChatReply:
    """
    Answer a message with the first matching rule.

    Args:
        message: Non-empty user message
        lookup: Used by rules that need order or carrier data
        rules: Rule list to evaluate (defaults to DEFAULT_RULES)

    Returns:
        The reply of the first rule that answered
    """
    ctx = ChatContext(message=message, lookup=lookup)
    for rule in rules or DEFAULT_RULES:
        reply = rule.apply(ctx)
        if reply is not None:
            logger.info(
                "Chat routed",
                extra={"json_fields": {"route": reply.meta.route, "rule": rule.name}},
            )
            return reply
    # DEFAULT_RULES ends with a catch-all; custom lists may not
    return ChatReply(reply=DEFAULT_REPLY, meta=ChatMeta(route="default"))
