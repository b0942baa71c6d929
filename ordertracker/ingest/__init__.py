"""
Email ingestion.

- extract: find tracking candidates in email text
- email_filter: subject filter for mailbox scans
- service: resolve candidates through the tracking lookup
"""

from ordertracker.ingest.email_filter import FilterResult, should_scan_email
from ordertracker.ingest.extract import email_text, extract_tracking_candidates
from ordertracker.ingest.service import (
    CandidatesUnresolved,
    NoCandidatesFound,
    ingest_email,
    scan_gmail,
)

__all__ = [
    "CandidatesUnresolved",
    "FilterResult",
    "NoCandidatesFound",
    "email_text",
    "extract_tracking_candidates",
    "ingest_email",
    "scan_gmail",
    "should_scan_email",
]
