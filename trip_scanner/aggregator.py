from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import pandas as pd

from .airports import AirportDirectory
from .coordinates import CoordinateResolver, default_resolver
from .models import Bounds, CityGrouping, MapPoint, MapPoints, ResultStatistics
from .schemas import EnrichmentStats, FlightOffer, FlightSearchResponse, Price

logger = logging.getLogger(__name__)


def statistics(offers: Sequence[FlightOffer]) -> Optional[ResultStatistics]:
    """Return cheapest, mean and highest price, or ``None`` for no offers."""

    if not offers:
        return None
    prices = pd.Series([offer.price for offer in offers], dtype="float64")
    return ResultStatistics(
        cheapest=float(prices.min()),
        average=float(prices.mean()),
        most_expensive=float(prices.max()),
    )


def group_by_city(
    offers: Sequence[FlightOffer],
    directory: Optional[AirportDirectory] = None,
) -> List[CityGrouping]:
    """Count distinct departure airports per city.

    Offers without a city fall back to the directory's city for their
    origin, then to the origin code itself. Groups are ordered by airport
    count (descending), then city name.
    """

    if not offers:
        return []

    df = pd.DataFrame(
        {
            "city": [_city_of(offer, directory) for offer in offers],
            "origin": [offer.origin for offer in offers],
        }
    )
    grouped = (
        df.groupby("city", sort=False)["origin"]
        .unique()
        .reset_index(name="origins")
    )
    grouped["count"] = grouped["origins"].map(len)
    grouped = grouped.sort_values(
        ["count", "city"], ascending=[False, True], kind="mergesort"
    )
    return [
        CityGrouping(city=row.city, origins=tuple(row.origins))
        for row in grouped.itertuples(index=False)
    ]


def _city_of(offer: FlightOffer, directory: Optional[AirportDirectory]) -> str:
    if offer.city and offer.city.strip():
        return offer.city.strip()
    if directory is not None:
        airport = directory.lookup(offer.origin)
        if airport is not None:
            return airport.city
    return offer.origin


def resolve_map_points(
    offers: Sequence[FlightOffer],
    resolver: Optional[CoordinateResolver] = None,
) -> MapPoints:
    """Split *offers* into plotted points and unresolved origin codes.

    The resolver is consulted first; coordinates embedded in the offer are
    the fallback. Nothing is ever placed at a default position.
    """

    resolver = resolver or default_resolver()
    plotted: List[MapPoint] = []
    unresolved: List[str] = []
    missing = 0

    for rank, offer in enumerate(offers, start=1):
        coordinate = resolver.resolve(offer.origin) or offer.coordinates
        if coordinate is None:
            missing += 1
            if offer.origin not in unresolved:
                unresolved.append(offer.origin)
            logger.warning("Missing coordinates for airport %s", offer.origin)
            continue
        plotted.append(
            MapPoint(
                offer=offer,
                coordinate=coordinate,
                rank=rank,
                is_cheapest=rank == 1,
            )
        )

    logger.info(
        "Map showing %d of %d offers. Missing: %s",
        len(plotted),
        len(offers),
        ", ".join(unresolved) or "none",
    )
    return MapPoints(
        plotted=tuple(plotted),
        unresolved=tuple(unresolved),
        missing_count=missing,
    )


def bounds(points: MapPoints) -> Optional[Bounds]:
    """Bounding box of the plotted points, ``None`` if nothing was plotted."""

    if not points.plotted:
        return None
    lats = [p.coordinate.latitude for p in points.plotted]
    lngs = [p.coordinate.longitude for p in points.plotted]
    return Bounds(south=min(lats), west=min(lngs), north=max(lats), east=max(lngs))


def enrichment_stats(
    response: FlightSearchResponse,
) -> Optional[EnrichmentStats]:
    """Summary stored on the history entry; offers arrive cheapest first."""

    if not response.results:
        return None
    cheapest = response.results[0]
    return EnrichmentStats(
        cheapest_price=Price(amount=cheapest.price, currency=response.currency),
        cheapest_origin=cheapest.origin,
        results_count=len(response.results),
    )


__all__ = [
    "statistics",
    "group_by_city",
    "resolve_map_points",
    "bounds",
    "enrichment_stats",
]
