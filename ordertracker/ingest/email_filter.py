"""
Subject filtering for mailbox scans.

Only shipping-related mail is worth running candidate extraction on;
marketing mail often quotes order numbers without any tracking.
"""

import logging
import re
from typing import NamedTuple

logger = logging.getLogger(__name__)

# Regex patterns for shipping-related subject lines
SHIPPING_SUBJECT_PATTERNS = [
    r"order\s*#?[:\s]*\d+",
    r"shipping\s*confirmation",
    r"shipped",
    r"shipment",
    r"dispatched",
    r"out\s*for\s*delivery",
    r"delivery",
    r"delivered",
    r"tracking",
    r"track\s*your",
    r"\bawb\b",
    r"consignment",
    r"courier",
    r"package",
    r"parcel",
    r"your\s*order\s*(is|has)",
]

# Regex patterns to exclude (marketing, newsletters)
EXCLUDE_SUBJECT_PATTERNS = [
    r"newsletter",
    r"unsubscribe",
    r"\bsale\b",
    r"discount",
    r"% off",
    r"\bdeals?\b",
    r"promotion",
    r"recommend",
    r"review",
    r"survey",
    r"feedback",
    r"\bcart\b",
    r"miss\s*you",
]


class FilterResult(NamedTuple):
    """Result of email filtering check."""

    should_scan: bool
    reason: str


def should_scan_email(subject: str | None, sender: str | None = None) -> FilterResult:
    """
    Decide whether a mailbox message may carry tracking details.

    Args:
        subject: Email subject line
        sender: Sender address; logged for skipped mail, not used for scoring

    Returns:
        FilterResult: (should_scan, reason)
    """
    if not subject:
        return FilterResult(False, "Missing subject")

    subject_lower = subject.lower()

    for pattern in EXCLUDE_SUBJECT_PATTERNS:
        if re.search(pattern, subject_lower):
            logger.debug("Skipping marketing mail from %s", sender)
            return FilterResult(False, f"Subject matches exclusion pattern: {pattern}")

    for pattern in SHIPPING_SUBJECT_PATTERNS:
        if re.search(pattern, subject_lower):
            return FilterResult(True, "Matched shipping criteria")

    return FilterResult(False, "Subject does not match shipping patterns")
