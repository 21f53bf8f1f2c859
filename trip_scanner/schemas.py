"""Pydantic models for search requests, search history and API payloads.

Field names are snake_case in Python and camelCase on the wire, matching
the JSON produced by the search API and the persisted history layout.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Coordinate


class Region(str, Enum):
    EUROPE = "EUROPE"
    NORTH_AMERICA = "NORTH_AMERICA"
    ASIA = "ASIA"
    SOUTH_AMERICA = "SOUTH_AMERICA"
    AFRICA = "AFRICA"
    OCEANIA = "OCEANIA"

    @classmethod
    def parse(cls, value: Any) -> Optional["Region"]:
        """Return the matching region or ``None`` for unknown tags."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper().replace(" ", "_"))
        except ValueError:
            return None


class SearchStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


def _upper_code(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


def _region_tag(value: Any) -> Any:
    return Region.parse(value) or value


# 9999-12-31T00:00:00Z in epoch milliseconds
MAX_TIMESTAMP_MS = 253_402_214_400_000

IataCode = Annotated[str, BeforeValidator(_upper_code)]
RegionTag = Annotated[Region, BeforeValidator(_region_tag)]


# ────────────────────────────────────────────────────────────────
# Search request & history
# ────────────────────────────────────────────────────────────────


class SearchRequest(_CamelModel):
    destination: IataCode = Field(min_length=3, max_length=3)
    region: RegionTag = Region.EUROPE
    max_results: int = Field(default=10, ge=5, le=50)
    departure_date: Optional[date] = None
    return_date: Optional[date] = None


class Price(_CamelModel):
    amount: float = Field(allow_inf_nan=False)
    currency: str


class EnrichmentStats(_CamelModel):
    """Outcome of a resolved search, attached to its history entry."""

    cheapest_price: Price
    cheapest_origin: str
    results_count: int


class RecentSearch(_CamelModel):
    destination: IataCode
    region: RegionTag
    max_results: int
    departure_date: Optional[date] = None
    return_date: Optional[date] = None
    timestamp: int = Field(ge=0, le=MAX_TIMESTAMP_MS)
    cheapest_price: Optional[Price] = None
    cheapest_origin: Optional[str] = None
    results_count: Optional[int] = None

    @property
    def key(self) -> Tuple[str, Region]:
        return (self.destination, self.region)

    @property
    def is_enriched(self) -> bool:
        return self.cheapest_price is not None

    def has_results(self, stats: EnrichmentStats) -> bool:
        """Return ``True`` if *stats* are already stored on this entry."""
        return (
            self.cheapest_price == stats.cheapest_price
            and self.cheapest_origin == stats.cheapest_origin
            and self.results_count == stats.results_count
        )

    def with_results(self, stats: EnrichmentStats) -> "RecentSearch":
        return self.model_copy(
            update={
                "cheapest_price": stats.cheapest_price,
                "cheapest_origin": stats.cheapest_origin,
                "results_count": stats.results_count,
            }
        )


# ────────────────────────────────────────────────────────────────
# Search API payload
# ────────────────────────────────────────────────────────────────


class Location(_CamelModel):
    airport: str
    city: str
    time: datetime


class FlightSegment(_CamelModel):
    segment_number: int
    flight_number: str
    airline: str
    airline_code: str
    departure: Location
    arrival: Location
    duration_minutes: int


class Layover(_CamelModel):
    airport: str
    city: str
    duration_minutes: int
    is_short: bool = False
    is_long: bool = False
    description: str = ""


class BookingOption(_CamelModel):
    provider: str
    url: str
    priority: int
    display_label: str
    commission_type: Literal["NONE", "AFFILIATE", "MARGIN"] = "NONE"
    requires_authentication: bool = False


class FlightOffer(_CamelModel):
    origin: IataCode
    city: str = ""
    price: float = Field(allow_inf_nan=False)
    stops: int = 0
    duration_minutes: int = 0
    coordinates: Optional[Coordinate] = None

    airline: Optional[str] = None
    airline_code: Optional[str] = None
    flight_number: Optional[str] = None
    departure_time: Optional[datetime] = None
    arrival_time: Optional[datetime] = None
    book_by: Optional[str] = None

    segments: Optional[List[FlightSegment]] = None
    layovers: Optional[List[Layover]] = None
    booking_options: Optional[List[BookingOption]] = None

    @field_validator("coordinates", mode="before")
    @classmethod
    def _coordinate_keys(cls, v: Any) -> Any:
        # the API has shipped both {lat, lng} and {latitude, longitude}
        if isinstance(v, dict):
            lat = v.get("latitude", v.get("lat"))
            lng = v.get("longitude", v.get("lng", v.get("lon")))
            return {"latitude": lat, "longitude": lng}
        if isinstance(v, (list, tuple)) and len(v) == 2:
            return {"latitude": v[0], "longitude": v[1]}
        return v

    @property
    def primary_booking_option(self) -> Optional[BookingOption]:
        if not self.booking_options:
            return None
        return min(self.booking_options, key=lambda opt: opt.priority)


class FlightSearchResponse(_CamelModel):
    destination: str
    currency: str
    generated_at: datetime
    result_count: int
    status: SearchStatus
    results: List[FlightOffer] = Field(default_factory=list)


__all__ = [
    "Region",
    "SearchStatus",
    "SearchRequest",
    "Price",
    "EnrichmentStats",
    "RecentSearch",
    "Location",
    "FlightSegment",
    "Layover",
    "BookingOption",
    "FlightOffer",
    "FlightSearchResponse",
]
