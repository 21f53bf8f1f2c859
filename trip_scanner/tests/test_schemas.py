import json
from datetime import date

import pytest
from pydantic import ValidationError

from trip_scanner.models import Coordinate
from trip_scanner.schemas import (
    FlightSearchResponse,
    Region,
    SearchRequest,
    SearchStatus,
)


def make_payload():
    return {
        "destination": "BKK",
        "currency": "EUR",
        "generatedAt": "2025-01-15T10:30:00Z",
        "resultCount": 2,
        "status": "PARTIAL",
        "results": [
            {
                "origin": "waw",
                "city": "Warsaw",
                "price": 412.5,
                "stops": 1,
                "durationMinutes": 725,
                "airline": "LOT Polish Airlines",
                "airlineCode": "LO",
                "flightNumber": "LO123",
                "departureTime": "2025-02-01T08:15:00Z",
                "arrivalTime": "2025-02-01T20:20:00Z",
                "bookBy": None,
                "coordinates": {"latitude": 52.1657, "longitude": 20.9671},
                "segments": [
                    {
                        "segmentNumber": 1,
                        "flightNumber": "LO123",
                        "airline": "LOT Polish Airlines",
                        "airlineCode": "LO",
                        "departure": {
                            "airport": "WAW",
                            "city": "Warsaw",
                            "time": "2025-02-01T08:15:00Z",
                        },
                        "arrival": {
                            "airport": "DOH",
                            "city": "Doha",
                            "time": "2025-02-01T14:00:00Z",
                        },
                        "durationMinutes": 345,
                    }
                ],
                "layovers": [
                    {
                        "airport": "DOH",
                        "city": "Doha",
                        "durationMinutes": 50,
                        "isShort": True,
                        "isLong": False,
                        "description": "50m in Doha",
                    }
                ],
                "bookingOptions": [
                    {
                        "provider": "KAYAK",
                        "url": "https://example.com/kayak",
                        "priority": 2,
                        "displayLabel": "Kayak",
                        "commissionType": "AFFILIATE",
                        "requiresAuthentication": False,
                    },
                    {
                        "provider": "GOOGLE_FLIGHTS",
                        "url": "https://example.com/google",
                        "priority": 1,
                        "displayLabel": "Google Flights",
                        "commissionType": "NONE",
                        "requiresAuthentication": False,
                    },
                ],
            },
            {
                "origin": "CDG",
                "city": "Paris",
                "price": 480,
                "stops": 0,
                "durationMinutes": 690,
                "coordinates": None,
            },
        ],
    }


def test_parse_search_response():
    response = FlightSearchResponse.model_validate_json(json.dumps(make_payload()))

    assert response.status is SearchStatus.PARTIAL
    assert response.result_count == 2
    first, second = response.results
    assert first.origin == "WAW"
    assert first.duration_minutes == 725
    assert first.coordinates == Coordinate(52.1657, 20.9671)
    assert first.segments[0].arrival.airport == "DOH"
    assert first.layovers[0].is_short
    assert first.primary_booking_option.provider == "GOOGLE_FLIGHTS"
    assert second.coordinates is None
    assert second.segments is None
    assert second.primary_booking_option is None


def test_parse_rejects_missing_price():
    payload = make_payload()
    del payload["results"][1]["price"]
    with pytest.raises(ValidationError):
        FlightSearchResponse.model_validate(payload)


@pytest.mark.parametrize("price", ["NaN", "inf", "-Infinity"])
def test_parse_rejects_non_finite_price(price):
    payload = make_payload()
    payload["results"][0]["price"] = price
    with pytest.raises(ValidationError):
        FlightSearchResponse.model_validate(payload)


def test_search_request_normalizes_input():
    request = SearchRequest.model_validate(
        {"destination": " bkk ", "region": "north america", "maxResults": 20}
    )
    assert request.destination == "BKK"
    assert request.region is Region.NORTH_AMERICA
    assert request.max_results == 20


@pytest.mark.parametrize(
    "data",
    [
        {"destination": "BANGKOK"},
        {"destination": "BKK", "maxResults": 4},
        {"destination": "BKK", "maxResults": 51},
        {"destination": "BKK", "region": "MARS"},
    ],
)
def test_search_request_validation(data):
    with pytest.raises(ValidationError):
        SearchRequest.model_validate(data)


def test_search_request_dates():
    request = SearchRequest(
        destination="BKK", departure_date="2025-03-01", return_date="2025-03-15"
    )
    assert request.departure_date == date(2025, 3, 1)
    assert request.region is Region.EUROPE


@pytest.mark.parametrize(
    "value, expected",
    [
        ("EUROPE", Region.EUROPE),
        ("south_america", Region.SOUTH_AMERICA),
        (Region.ASIA, Region.ASIA),
        ("MARS", None),
        (None, None),
    ],
)
def test_region_parse(value, expected):
    assert Region.parse(value) is expected
