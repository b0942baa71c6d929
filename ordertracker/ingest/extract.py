"""
Tracking candidate extraction from pasted or fetched emails.

Candidates come from three places, in this order:

1. Labelled codes: "Tracking number: X", "AWB No. X", "Consignment no X"
2. Bare tokens that match a known carrier number format
3. Demo order ids that exist in the order store

The result keeps first-seen order and drops duplicates.
"""

import email
import email.policy
import re

from ordertracker.models.ingest import TrackingCandidate
from ordertracker.providers.links import guess_carrier, matching_formats, normalize_code
from ordertracker.store.base import OrderStore
from ordertracker.tracking.lookup import ORDER_ID_PATTERN
from ordertracker.utils.html import html_to_text, looks_like_html

LABELLED_CODE_PATTERN = re.compile(
    r"(?:tracking\s*(?:number|no\.?|id|code|#)?|awb\s*(?:number|no\.?|#)?"
    r"|consignment\s*(?:number|no\.?)?|waybill\s*(?:number|no\.?)?)"
    r"\s*[:#-]?\s*(?P<code>[A-Z0-9][A-Z0-9-]{5,39})\b",
    re.IGNORECASE,
)

# Long alphanumeric runs that might be a carrier number
TOKEN_PATTERN = re.compile(r"\b[A-Z0-9]{8,34}\b", re.IGNORECASE)

# Labelled matches must carry at least one digit to be a code
DIGIT_PATTERN = re.compile(r"\d")

# Lines like "Subject: ..." at the top of a pasted .eml
HEADER_PATTERN = re.compile(r"^(?:[A-Za-z-]+):\s.*$", re.MULTILINE)


def _looks_like_eml(raw: str) -> bool:
    head = raw.lstrip()[:2000]
    return bool(re.match(r"^[A-Za-z-]+:\s", head)) and len(HEADER_PATTERN.findall(head)) >= 2


def _eml_text(raw: str) -> str:
    message = email.message_from_string(raw, policy=email.policy.default)
    parts = []
    subject = message.get("Subject")
    if subject:
        parts.append(str(subject))

    body = message.get_body(preferencelist=("plain", "html"))
    if body is not None:
        content = body.get_content()
        if body.get_content_type() == "text/html":
            content = html_to_text(content)
        parts.append(content)
    elif not message.is_multipart():
        parts.append(message.get_payload())
    return "\n".join(parts)


def email_text(raw: str) -> str:
    """Readable text of a pasted email (plain text, HTML or .eml)."""
    if _looks_like_eml(raw):
        return _eml_text(raw)
    if looks_like_html(raw):
        return html_to_text(raw)
    return raw


def extract_tracking_candidates(text: str, orders: OrderStore | None = None) -> list[TrackingCandidate]:
    """
    Find codes in email text that might identify a shipment.

    Args:
        text: Email text (HTML is stripped first)
        orders: Store used to recognise demo order ids

    Returns:
        Candidates in priority order without duplicates
    """
    if looks_like_html(text):
        text = html_to_text(text)

    seen: set[str] = set()
    candidates: list[TrackingCandidate] = []

    def add(code: str, carrier: str | None) -> None:
        key = code.upper()
        if key in seen:
            return
        seen.add(key)
        candidates.append(TrackingCandidate(code=code, carrier=carrier))

    for match in LABELLED_CODE_PATTERN.finditer(text):
        code = normalize_code(match.group("code"))
        if DIGIT_PATTERN.search(code):
            add(code, guess_carrier(code))

    for match in TOKEN_PATTERN.finditer(text):
        code = normalize_code(match.group(0))
        formats = matching_formats(code)
        if formats:
            add(code, formats[0].slug)

    if orders is not None:
        for match in ORDER_ID_PATTERN.finditer(text):
            order_id = match.group(0)
            if orders.get(order_id) is not None:
                add(order_id, None)

    return candidates
