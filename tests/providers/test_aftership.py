"""
Tests for the AfterShip adapter.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from ordertracker.providers.aftership import (
    AfterShipProvider,
    map_carrier_tag,
    parse_tracking,
)
from ordertracker.providers.base import (
    ProviderNotConfigured,
    ProviderRejected,
    ProviderUnavailable,
    TrackingNotFound,
)


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    return response


@pytest.mark.parametrize(
    "tag,expected",
    [
        ("InfoReceived", ("Processing", 15)),
        ("InTransit", ("In Transit", 70)),
        ("OutForDelivery", ("Out for Delivery", 85)),
        ("Delivered", ("Delivered", 100)),
        ("Exception", ("Exception", 50)),
        ("Expired", ("Canceled", 0)),
        ("SomethingNew", ("Shipped", 50)),
        (None, ("Shipped", 50)),
    ],
)
def test_map_carrier_tag(tag, expected):
    assert map_carrier_tag(tag) == expected


def test_parse_tracking_places():
    """Test origin/destination derivation from checkpoints and destination fields"""
    tracking = {
        "slug": "ekart",
        "tracking_number": "FMPC1234567",
        "tag": "InTransit",
        "destination_city": "Mumbai",
        "destination_country_iso3": "IND",
        "checkpoints": [
            {"city": "Delhi", "country_name": "India", "tag": "InTransit"},
            {"location": "Surat Hub", "latitude": "21.17", "longitude": "72.83"},
        ],
    }

    shipment = parse_tracking("ekart", "FMPC1234567", tracking)

    assert shipment.status == "In Transit"
    assert shipment.origin_place == "Delhi, India"
    assert shipment.destination_place == "Mumbai, IND"
    assert shipment.checkpoints[0].coordinates is None
    assert shipment.checkpoints[1].coordinates == (21.17, 72.83)


def test_parse_tracking_destination_falls_back_to_last_checkpoint():
    tracking = {
        "tag": "InTransit",
        "checkpoints": [{"location": "Delhi"}, {"location": "Jaipur"}],
    }

    shipment = parse_tracking("ekart", "FMPC1234567", tracking)

    assert shipment.carrier == "ekart"
    assert shipment.tracking_number == "FMPC1234567"
    assert shipment.origin_place == "Delhi"
    assert shipment.destination_place == "Jaipur"


def test_parse_tracking_without_checkpoints():
    tracking = {"tag": "Pending", "origin_country_iso3": "IND"}

    shipment = parse_tracking("dhl", "1234567890", tracking)

    assert shipment.checkpoints == []
    assert shipment.origin_place == "IND"
    assert shipment.destination_place is None


def test_track_requires_api_key():
    """Test that no request is made without an API key"""
    with patch("ordertracker.providers.aftership.requests.request") as mock_request:
        with pytest.raises(ProviderNotConfigured):
            AfterShipProvider(api_key=None).track("ekart", "FMPC1234567")
        mock_request.assert_not_called()


@patch("ordertracker.providers.aftership.requests.request")
def test_track_success(mock_request):
    mock_request.return_value = _response(
        {
            "meta": {"code": 200},
            "data": {"tracking": {"slug": "ekart", "tag": "Delivered", "checkpoints": []}},
        }
    )

    shipment = AfterShipProvider(api_key="test-key").track("Ekart", "FMPC1234567")

    assert shipment.status == "Delivered"
    assert shipment.progress == 100
    method, url = mock_request.call_args.args
    assert method == "GET"
    assert url == "https://api.aftership.com/v4/trackings/ekart/FMPC1234567"
    assert mock_request.call_args.kwargs["headers"]["aftership-api-key"] == "test-key"


@patch("ordertracker.providers.aftership.requests.request")
def test_track_not_found(mock_request):
    mock_request.return_value = _response(
        {"meta": {"code": 4004, "message": "Tracking does not exist."}, "data": {}}
    )

    with pytest.raises(TrackingNotFound, match="does not exist"):
        AfterShipProvider(api_key="k").track("ekart", "FMPC0000000")


@patch("ordertracker.providers.aftership.requests.request")
def test_track_rejected(mock_request):
    mock_request.return_value = _response(
        {"meta": {"code": 4005, "message": "Invalid slug"}, "data": {}}
    )

    with pytest.raises(ProviderRejected, match="Invalid slug"):
        AfterShipProvider(api_key="k").track("nope", "123")


@patch("ordertracker.providers.aftership.requests.request")
def test_track_missing_tracking_object(mock_request):
    mock_request.return_value = _response({"meta": {"code": 200}, "data": {}})

    with pytest.raises(TrackingNotFound):
        AfterShipProvider(api_key="k").track("ekart", "FMPC1234567")


@patch("ordertracker.providers.aftership.requests.request")
def test_track_network_error(mock_request):
    mock_request.side_effect = requests.ConnectionError("refused")

    with pytest.raises(ProviderUnavailable, match="request failed"):
        AfterShipProvider(api_key="k").track("ekart", "FMPC1234567")


@patch("ordertracker.providers.aftership.requests.request")
def test_track_unparseable_body(mock_request):
    response = Mock()
    response.json.side_effect = ValueError("not json")
    mock_request.return_value = response

    with pytest.raises(ProviderUnavailable):
        AfterShipProvider(api_key="k").track("ekart", "FMPC1234567")


@patch("ordertracker.providers.aftership.requests.request")
def test_detect_returns_slugs(mock_request):
    mock_request.return_value = _response(
        {
            "meta": {"code": 200},
            "data": {"couriers": [{"slug": "delhivery"}, {"slug": "bluedart"}, {"name": "x"}]},
        }
    )

    slugs = AfterShipProvider(api_key="k").detect(" 1234567890123 ")

    assert slugs == ["delhivery", "bluedart"]
    assert mock_request.call_args.kwargs["json"] == {
        "tracking": {"tracking_number": "1234567890123"}
    }
