"""Search flow: autocomplete -> submit -> results -> enrich history."""

from __future__ import annotations

import logging
from typing import List, Optional

from . import aggregator
from .airports import DEFAULT_SEARCH_LIMIT, AirportDirectory, default_directory
from .coordinates import CoordinateResolver, default_resolver
from .models import Airport, ResultsView
from .recent_searches import RecentSearchStore
from .schemas import FlightSearchResponse, RecentSearch, SearchRequest

logger = logging.getLogger(__name__)


class SearchFlow:
    def __init__(
        self,
        store: RecentSearchStore,
        directory: Optional[AirportDirectory] = None,
        resolver: Optional[CoordinateResolver] = None,
    ) -> None:
        self.store = store
        self.directory = directory or default_directory()
        self.resolver = resolver or default_resolver()

    def suggest(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> List[Airport]:
        return self.directory.search(query, limit)

    def submit(self, request: SearchRequest) -> List[RecentSearch]:
        return self.store.record(request)

    def complete(
        self, request: SearchRequest, response: FlightSearchResponse
    ) -> ResultsView:
        """Build the results view and fold the outcome into the history."""
        offers = response.results
        points = aggregator.resolve_map_points(offers, self.resolver)
        view = ResultsView(
            destination=request.destination,
            destination_label=self.directory.label(request.destination),
            currency=response.currency,
            statistics=aggregator.statistics(offers),
            cities=tuple(aggregator.group_by_city(offers, self.directory)),
            map_points=points,
            bounds=aggregator.bounds(points),
        )

        stats = aggregator.enrichment_stats(response)
        if stats is not None:
            self.store.enrich(request.destination, request.region, stats)
        else:
            logger.info(
                "No offers for %s; history left unchanged", request.destination
            )
        return view


__all__ = ["SearchFlow"]
