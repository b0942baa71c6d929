"""
Official carrier tracking links keyed by tracking-number format.

Used when no tracking provider is configured: instead of a status we hand
the user deep links to the carriers whose number format matches.
"""

import re
from typing import NamedTuple
from urllib.parse import quote

from ordertracker.models.order import CarrierLink


class CarrierFormat(NamedTuple):
    """Tracking-number format of one carrier."""

    slug: str  # AfterShip courier slug
    name: str
    pattern: re.Pattern
    url_template: str


# Ordered from most to least specific; a number can match several carriers
CARRIER_FORMATS: list[CarrierFormat] = [
    CarrierFormat(
        "ups",
        "UPS",
        re.compile(r"^1Z[0-9A-Z]{16}$"),
        "https://www.ups.com/track?tracknum={code}",
    ),
    CarrierFormat(
        "amazon",
        "Amazon",
        re.compile(r"^TBA\d{12}$"),
        "https://track.amazon.in/tracking/{code}",
    ),
    CarrierFormat(
        "ekart",
        "Ekart",
        re.compile(r"^FMP[CP]\d{7,12}$"),
        "https://ekartlogistics.com/shipmenttrack/{code}",
    ),
    CarrierFormat(
        "india-post",
        "India Post",
        re.compile(r"^[A-Z]{2}\d{9}IN$"),
        "https://www.indiapost.gov.in/_layouts/15/dop.portal.tracking/trackconsignment.aspx?consignment={code}",
    ),
    CarrierFormat(
        "royal-mail",
        "Royal Mail",
        re.compile(r"^[A-Z]{2}\d{9}GB$"),
        "https://www.royalmail.com/track-your-item#/tracking-results/{code}",
    ),
    CarrierFormat(
        "usps",
        "USPS",
        re.compile(r"^(9[1-5]\d{20}|[A-Z]{2}\d{9}US)$"),
        "https://tools.usps.com/go/TrackConfirmAction?tLabels={code}",
    ),
    CarrierFormat(
        "dhl",
        "DHL",
        re.compile(r"^(\d{10}|JJD\d{18})$"),
        "https://www.dhl.com/global-en/home/tracking.html?tracking-id={code}",
    ),
    CarrierFormat(
        "bluedart",
        "Blue Dart",
        re.compile(r"^\d{11}$"),
        "https://www.bluedart.com/web/guest/trackdartresult?trackFor=0&trackNo={code}",
    ),
    CarrierFormat(
        "fedex",
        "FedEx",
        re.compile(r"^(\d{12}|\d{15})$"),
        "https://www.fedex.com/fedextrack/?trknbr={code}",
    ),
    CarrierFormat(
        "delhivery",
        "Delhivery",
        re.compile(r"^\d{13,14}$"),
        "https://www.delhivery.com/track/package/{code}",
    ),
]


def normalize_code(code: str) -> str:
    """Uppercase and drop spaces and dashes."""
    return re.sub(r"[\s-]+", "", code or "").upper()


def matching_formats(code: str) -> list[CarrierFormat]:
    normalized = normalize_code(code)
    if not normalized:
        return []
    return [fmt for fmt in CARRIER_FORMATS if fmt.pattern.match(normalized)]


def guess_carrier(code: str) -> str | None:
    """Slug of the first carrier whose format matches, if any."""
    formats = matching_formats(code)
    return formats[0].slug if formats else None


def links_for(code: str) -> list[CarrierLink]:
    """Official tracking links for every carrier whose format matches."""
    normalized = normalize_code(code)
    return [
        CarrierLink(
            carrier=fmt.name,
            url=fmt.url_template.format(code=quote(normalized, safe="")),
        )
        for fmt in matching_formats(normalized)
    ]
