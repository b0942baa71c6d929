"""
Email ingest request/response models.
"""

from typing import Optional

from pydantic import Field

from ordertracker.models.base import APIModel
from ordertracker.models.order import TrackingResponse


class IngestEmailRequest(APIModel):
    """Body for POST /api/ingest-email"""

    raw: str = Field(default="", description="Pasted email (plain text, HTML or EML)")


class TrackingCandidate(APIModel):
    """Code found in an email that may identify a shipment"""

    code: str = Field(description="Candidate tracking number or order id")
    carrier: Optional[str] = Field(
        default=None, description="Carrier guessed from the code format"
    )


class IngestResponse(APIModel):
    selected: TrackingResponse = Field(description="First candidate that resolved")
    candidates: list[TrackingCandidate] = Field(default_factory=list)
    scanned: Optional[int] = Field(
        default=None, description="Emails examined (Gmail scan only)"
    )
