"""
Email ingest API routes.

Paste an email (or scan the configured Gmail inbox) to find and resolve
a tracking number or demo order id in it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ordertracker.api.deps import get_gmail_scanner, get_tracking_lookup
from ordertracker.api.errors import provider_http_error
from ordertracker.ingest import CandidatesUnresolved, NoCandidatesFound, ingest_email, scan_gmail
from ordertracker.models.ingest import IngestEmailRequest, IngestResponse
from ordertracker.providers.base import ProviderError
from ordertracker.providers.gmail import GmailScanner
from ordertracker.tracking.lookup import TrackingLookup

logger = logging.getLogger(__name__)

router = APIRouter()


def _unresolved_detail(error: CandidatesUnresolved) -> dict:
    return {
        "message": str(error),
        "candidates": [c.model_dump(by_alias=True) for c in error.candidates],
    }


@router.post("/ingest-email", response_model=IngestResponse, response_model_exclude_none=True)
def ingest_email_route(
    request: IngestEmailRequest,
    lookup: TrackingLookup = Depends(get_tracking_lookup),
) -> IngestResponse:
    """
    Extract tracking candidates from a pasted email and resolve the first.

    Raises:
        HTTPException: 400 if raw is empty; 404 if nothing was found or
            nothing resolved (detail lists the candidates); 502 if the
            tracking provider is unreachable
    """
    try:
        return ingest_email(lookup, request.raw)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CandidatesUnresolved as e:
        raise HTTPException(status_code=404, detail=_unresolved_detail(e))
    except NoCandidatesFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProviderError as e:
        raise provider_http_error(e)


@router.get("/gmail/scan", response_model=IngestResponse, response_model_exclude_none=True)
def gmail_scan(
    lookup: TrackingLookup = Depends(get_tracking_lookup),
    scanner: GmailScanner = Depends(get_gmail_scanner),
) -> IngestResponse:
    """
    Scan recent Gmail shipping emails and resolve the newest trackable one.

    Raises:
        HTTPException: 501 if Gmail is not configured, 502 if Gmail is
            unreachable, 404 if no email held a resolvable candidate
    """
    try:
        return scan_gmail(lookup, scanner)
    except CandidatesUnresolved as e:
        raise HTTPException(status_code=404, detail=_unresolved_detail(e))
    except ProviderError as e:
        raise provider_http_error(e)
