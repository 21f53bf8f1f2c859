"""Airport directory: bundled reference table plus code lookup and search."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .models import Airport

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10

# Multi-airport city codes (LON, PAR, NYC, ...) are listed next to their
# main airport so they surface together in search results.
AIRPORTS: Tuple[Airport, ...] = (
    # Europe
    Airport("LHR", "Heathrow Airport", "London", "United Kingdom"),
    Airport("LON", "All London Airports", "London", "United Kingdom"),
    Airport("CDG", "Charles de Gaulle Airport", "Paris", "France"),
    Airport("PAR", "All Paris Airports", "Paris", "France"),
    Airport("AMS", "Schiphol Airport", "Amsterdam", "Netherlands"),
    Airport("FRA", "Frankfurt Airport", "Frankfurt", "Germany"),
    Airport("MAD", "Barajas Airport", "Madrid", "Spain"),
    Airport("BCN", "Barcelona Airport", "Barcelona", "Spain"),
    Airport("FCO", "Fiumicino Airport", "Rome", "Italy"),
    Airport("MXP", "Malpensa Airport", "Milan", "Italy"),
    Airport("VCE", "Marco Polo Airport", "Venice", "Italy"),
    Airport("MUC", "Munich Airport", "Munich", "Germany"),
    Airport("ZRH", "Zurich Airport", "Zurich", "Switzerland"),
    Airport("VIE", "Vienna Airport", "Vienna", "Austria"),
    Airport("CPH", "Copenhagen Airport", "Copenhagen", "Denmark"),
    Airport("ARN", "Arlanda Airport", "Stockholm", "Sweden"),
    Airport("OSL", "Oslo Airport", "Oslo", "Norway"),
    Airport("HEL", "Helsinki Airport", "Helsinki", "Finland"),
    Airport("DUB", "Dublin Airport", "Dublin", "Ireland"),
    Airport("LIS", "Lisbon Airport", "Lisbon", "Portugal"),
    Airport("ATH", "Athens Airport", "Athens", "Greece"),
    Airport("IST", "Istanbul Airport", "Istanbul", "Turkey"),
    Airport("PRG", "Prague Airport", "Prague", "Czech Republic"),
    Airport("BUD", "Budapest Airport", "Budapest", "Hungary"),
    Airport("WAW", "Warsaw Airport", "Warsaw", "Poland"),
    # North America
    Airport("JFK", "John F. Kennedy Airport", "New York", "United States"),
    Airport("NYC", "All New York Airports", "New York", "United States"),
    Airport("LAX", "Los Angeles Airport", "Los Angeles", "United States"),
    Airport("ORD", "O'Hare Airport", "Chicago", "United States"),
    Airport("CHI", "All Chicago Airports", "Chicago", "United States"),
    Airport("SFO", "San Francisco Airport", "San Francisco", "United States"),
    Airport("MIA", "Miami Airport", "Miami", "United States"),
    Airport("DFW", "Dallas Fort Worth Airport", "Dallas", "United States"),
    Airport("SEA", "Seattle-Tacoma Airport", "Seattle", "United States"),
    Airport("LAS", "Las Vegas Airport", "Las Vegas", "United States"),
    Airport("BOS", "Logan Airport", "Boston", "United States"),
    Airport("IAD", "Dulles Airport", "Washington DC", "United States"),
    Airport("WAS", "All Washington DC Airports", "Washington DC", "United States"),
    Airport("ATL", "Hartsfield-Jackson Airport", "Atlanta", "United States"),
    Airport("DEN", "Denver Airport", "Denver", "United States"),
    Airport("PHX", "Phoenix Airport", "Phoenix", "United States"),
    Airport("YYZ", "Toronto Pearson Airport", "Toronto", "Canada"),
    Airport("YVR", "Vancouver Airport", "Vancouver", "Canada"),
    Airport("YUL", "Montreal Airport", "Montreal", "Canada"),
    Airport("MEX", "Mexico City Airport", "Mexico City", "Mexico"),
    Airport("CUN", "Cancun Airport", "Cancun", "Mexico"),
    # Asia
    Airport("BKK", "Suvarnabhumi Airport", "Bangkok", "Thailand"),
    Airport("NRT", "Narita Airport", "Tokyo", "Japan"),
    Airport("TOK", "All Tokyo Airports", "Tokyo", "Japan"),
    Airport("HND", "Haneda Airport", "Tokyo", "Japan"),
    Airport("ICN", "Incheon Airport", "Seoul", "South Korea"),
    Airport("SEL", "All Seoul Airports", "Seoul", "South Korea"),
    Airport("SIN", "Changi Airport", "Singapore", "Singapore"),
    Airport("HKG", "Hong Kong Airport", "Hong Kong", "Hong Kong"),
    Airport("PVG", "Pudong Airport", "Shanghai", "China"),
    Airport("SHA", "All Shanghai Airports", "Shanghai", "China"),
    Airport("PEK", "Beijing Capital Airport", "Beijing", "China"),
    Airport("BJS", "All Beijing Airports", "Beijing", "China"),
    Airport("KUL", "Kuala Lumpur Airport", "Kuala Lumpur", "Malaysia"),
    Airport("CGK", "Soekarno-Hatta Airport", "Jakarta", "Indonesia"),
    Airport("MNL", "Ninoy Aquino Airport", "Manila", "Philippines"),
    Airport("DEL", "Indira Gandhi Airport", "New Delhi", "India"),
    Airport("BOM", "Chhatrapati Shivaji Airport", "Mumbai", "India"),
    Airport("DXB", "Dubai Airport", "Dubai", "United Arab Emirates"),
    Airport("DOH", "Hamad Airport", "Doha", "Qatar"),
    Airport("HAN", "Noi Bai Airport", "Hanoi", "Vietnam"),
    Airport("SGN", "Tan Son Nhat Airport", "Ho Chi Minh City", "Vietnam"),
    Airport("TPE", "Taoyuan Airport", "Taipei", "Taiwan"),
    # Oceania
    Airport("SYD", "Sydney Airport", "Sydney", "Australia"),
    Airport("MEL", "Melbourne Airport", "Melbourne", "Australia"),
    Airport("BNE", "Brisbane Airport", "Brisbane", "Australia"),
    Airport("PER", "Perth Airport", "Perth", "Australia"),
    Airport("AKL", "Auckland Airport", "Auckland", "New Zealand"),
    Airport("CHC", "Christchurch Airport", "Christchurch", "New Zealand"),
    # South America
    Airport("GRU", "Guarulhos Airport", "São Paulo", "Brazil"),
    Airport("SAO", "All São Paulo Airports", "São Paulo", "Brazil"),
    Airport("GIG", "Galeão Airport", "Rio de Janeiro", "Brazil"),
    Airport("RIO", "All Rio de Janeiro Airports", "Rio de Janeiro", "Brazil"),
    Airport("EZE", "Ministro Pistarini Airport", "Buenos Aires", "Argentina"),
    Airport("BUE", "All Buenos Aires Airports", "Buenos Aires", "Argentina"),
    Airport("BOG", "El Dorado Airport", "Bogotá", "Colombia"),
    Airport("LIM", "Jorge Chávez Airport", "Lima", "Peru"),
    Airport("SCL", "Arturo Merino Benítez Airport", "Santiago", "Chile"),
    # Africa
    Airport("JNB", "O.R. Tambo Airport", "Johannesburg", "South Africa"),
    Airport("CPT", "Cape Town Airport", "Cape Town", "South Africa"),
    Airport("CAI", "Cairo Airport", "Cairo", "Egypt"),
    Airport("CMN", "Mohammed V Airport", "Casablanca", "Morocco"),
    Airport("NBO", "Jomo Kenyatta Airport", "Nairobi", "Kenya"),
    Airport("LOS", "Murtala Muhammed Airport", "Lagos", "Nigeria"),
)


def _normalize(text: str) -> str:
    return (text or "").strip().lower()


class AirportDirectory:
    """Read-only airport table answering code lookups and free-text queries."""

    def __init__(self, airports: Iterable[Airport] = AIRPORTS) -> None:
        self._airports: Tuple[Airport, ...] = tuple(airports)
        self._by_code: Dict[str, Airport] = {}
        for airport in self._airports:
            # first entry wins, same as a linear scan would
            self._by_code.setdefault(airport.code.upper(), airport)

    def __len__(self) -> int:
        return len(self._airports)

    def __iter__(self) -> Iterator[Airport]:
        return iter(self._airports)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.lookup(code) is not None

    def lookup(self, code: str) -> Optional[Airport]:
        """Return the airport for *code* (case-insensitive) or ``None``."""
        if not code:
            return None
        return self._by_code.get(code.strip().upper())

    def search(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> List[Airport]:
        """Return airports whose code, city, name or country contain *query*.

        Queries shorter than ``MIN_QUERY_LENGTH`` after stripping return an
        empty list. Matching is a literal, case-insensitive substring test,
        so characters like ``.`` or ``(`` carry no special meaning. Results
        keep table order and are capped at *limit*.
        """
        needle = _normalize(query)
        if len(needle) < MIN_QUERY_LENGTH or limit <= 0:
            return []

        matches: List[Airport] = []
        for airport in self._airports:
            if _matched_field(airport, needle) is None:
                continue
            matches.append(airport)
            if len(matches) >= limit:
                break
        logger.debug("Query %r matched %d airport(s)", query, len(matches))
        return matches

    def label(self, code: str) -> str:
        """Return ``"City, Country"`` for *code*, or the bare code if unknown."""
        airport = self.lookup(code)
        if airport is None:
            return (code or "").strip().upper()
        return f"{airport.city}, {airport.country}"


def _matched_field(airport: Airport, needle: str) -> Optional[str]:
    """Name of the first field containing *needle*, checked code-first."""
    for field_name in ("code", "city", "name", "country"):
        if needle in getattr(airport, field_name).lower():
            return field_name
    return None


@lru_cache()
def default_directory() -> AirportDirectory:
    """Return the shared directory built from the bundled table."""
    return AirportDirectory()


__all__ = [
    "AIRPORTS",
    "AirportDirectory",
    "default_directory",
    "MIN_QUERY_LENGTH",
    "DEFAULT_SEARCH_LIMIT",
]
