"""Value objects shared by the directory, resolver and aggregator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .schemas import FlightOffer


@dataclass(frozen=True, slots=True)
class Airport:
    code: str
    name: str
    city: str
    country: str


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class ResultStatistics:
    cheapest: float
    average: float
    most_expensive: float


@dataclass(frozen=True, slots=True)
class CityGrouping:
    """Distinct departure airports seen for one city."""

    city: str
    origins: Tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.origins)


@dataclass(frozen=True, slots=True)
class MapPoint:
    offer: "FlightOffer"
    coordinate: Coordinate
    rank: int
    is_cheapest: bool = False


@dataclass(frozen=True, slots=True)
class MapPoints:
    """Offers split into those placed on the map and those without geodata.

    ``unresolved`` holds origin codes, deduplicated in first-seen order.
    ``missing_count`` counts every offer that was not plotted, so
    ``len(plotted) + missing_count`` always equals the input size.
    """

    plotted: Tuple[MapPoint, ...] = ()
    unresolved: Tuple[str, ...] = ()
    missing_count: int = 0


@dataclass(frozen=True, slots=True)
class Bounds:
    south: float
    west: float
    north: float
    east: float

    @property
    def center(self) -> Coordinate:
        return Coordinate(
            latitude=(self.south + self.north) / 2,
            longitude=(self.west + self.east) / 2,
        )


@dataclass(frozen=True, slots=True)
class ResultsView:
    """Everything the results surface renders for one search."""

    destination: str
    destination_label: str
    currency: str
    statistics: Optional[ResultStatistics]
    cities: Tuple[CityGrouping, ...] = ()
    map_points: MapPoints = field(default_factory=MapPoints)
    bounds: Optional[Bounds] = None


__all__ = [
    "Airport",
    "Coordinate",
    "ResultStatistics",
    "CityGrouping",
    "MapPoint",
    "MapPoints",
    "Bounds",
    "ResultsView",
]
