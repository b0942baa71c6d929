"""
Email ingest: turn a pasted email or a mailbox scan into a tracking snapshot.
"""

import logging

from ordertracker.ingest.email_filter import should_scan_email
from ordertracker.ingest.extract import email_text, extract_tracking_candidates
from ordertracker.models.ingest import IngestResponse, TrackingCandidate
from ordertracker.models.order import TrackingResponse
from ordertracker.providers.base import ProviderRejected, TrackingNotFound
from ordertracker.providers.gmail import GmailScanner
from ordertracker.tracking.lookup import TrackingLookup

logger = logging.getLogger(__name__)


class NoCandidatesFound(TrackingNotFound):
    """The email holds nothing that looks like a tracking number or order id."""


class CandidatesUnresolved(TrackingNotFound):
    """Candidates were found but none resolved to a shipment."""

    def __init__(self, message: str, candidates: list[TrackingCandidate]):
        super().__init__(message)
        self.candidates = candidates


def resolve_first(
    lookup: TrackingLookup,
    candidates: list[TrackingCandidate],
) -> TrackingResponse | None:
    """
    Resolve candidates in order and return the first hit.

    Codes go through carrier auto-detect; the format-guessed carrier is
    only a fallback when detection finds nothing. Unknown and rejected
    numbers are skipped; an unreachable provider propagates so the caller
    can report it.
    """
    for candidate in candidates:
        try:
            return lookup.resolve(candidate.code)
        except (TrackingNotFound, ProviderRejected) as e:
            logger.info("Candidate %s did not resolve: %s", candidate.code, e)
    return None


def ingest_email(lookup: TrackingLookup, raw: str) -> IngestResponse:
    """
    Extract tracking candidates from an email and resolve the first one.

    Raises:
        ValueError: Empty email
        NoCandidatesFound: Nothing resembling a tracking number
        CandidatesUnresolved: No candidate resolved
    """
    if not (raw or "").strip():
        raise ValueError("raw email content is required")

    candidates = extract_tracking_candidates(email_text(raw), lookup.orders)
    if not candidates:
        raise NoCandidatesFound("No tracking number or order id found in email")

    selected = resolve_first(lookup, candidates)
    if selected is None:
        raise CandidatesUnresolved("Could not resolve any tracking candidate", candidates)

    logger.info(
        "Email ingested",
        extra={"json_fields": {"candidates": len(candidates), "source": selected.source}},
    )
    return IngestResponse(selected=selected, candidates=candidates)


def scan_gmail(lookup: TrackingLookup, scanner: GmailScanner) -> IngestResponse:
    """
    Scan recent mailbox messages and resolve the newest trackable one.

    Raises:
        ProviderNotConfigured: Gmail OAuth settings missing
        ProviderUnavailable: Token refresh or Gmail API failed
        NoCandidatesFound: No shipping email carried a candidate
        CandidatesUnresolved: No candidate resolved
    """
    messages = scanner.recent_messages()
    all_candidates: list[TrackingCandidate] = []
    scanned = 0

    for message in messages:
        result = should_scan_email(message.subject, message.sender)
        if not result.should_scan:
            logger.debug("Skipping message %s: %s", message.id, result.reason)
            continue
        scanned += 1

        text = "\n".join(filter(None, [message.subject, message.body]))
        candidates = extract_tracking_candidates(text, lookup.orders)
        if not candidates:
            continue

        known = {c.code for c in all_candidates}
        all_candidates.extend(c for c in candidates if c.code not in known)

        selected = resolve_first(lookup, candidates)
        if selected is not None:
            return IngestResponse(selected=selected, candidates=candidates, scanned=scanned)

    logger.info(
        "Gmail scan found nothing trackable",
        extra={"json_fields": {"messages": len(messages), "scanned": scanned}},
    )
    if not all_candidates:
        raise NoCandidatesFound(f"No tracking details found in {scanned} shipping email(s)")
    raise CandidatesUnresolved("Could not resolve any tracking candidate", all_candidates)
