"""
Provider error to HTTP status mapping.
"""

import logging

from fastapi import HTTPException

from ordertracker.providers.base import (
    ProviderError,
    ProviderNotConfigured,
    ProviderRejected,
    ProviderUnavailable,
    TrackingNotFound,
)

logger = logging.getLogger(__name__)

# Most specific first; subclasses of TrackingNotFound stay 404
PROVIDER_ERROR_STATUS: list[tuple[type[ProviderError], int]] = [
    (ProviderNotConfigured, 501),
    (TrackingNotFound, 404),
    (ProviderRejected, 400),
    (ProviderUnavailable, 502),
]


def provider_http_error(error: ProviderError) -> HTTPException:
    """Translate a provider failure into the HTTPException a route raises."""
    for error_type, status_code in PROVIDER_ERROR_STATUS:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))

    logger.error("Unmapped provider error: %r", error)
    return HTTPException(status_code=502, detail=str(error) or "Upstream provider error")
