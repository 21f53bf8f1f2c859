"""Static airport and city-code coordinates used to place offers on a map."""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Mapping, Optional, Tuple

from .models import Coordinate

# (latitude, longitude); city codes point at the city centre
AIRPORT_COORDINATES: Dict[str, Tuple[float, float]] = {
    # Europe
    "LHR": (51.4700, -0.4543),
    "LON": (51.5074, -0.1278),
    "CDG": (49.0097, 2.5479),
    "PAR": (48.8566, 2.3522),
    "AMS": (52.3105, 4.7683),
    "FRA": (50.0379, 8.5622),
    "MAD": (40.4719, -3.5626),
    "BCN": (41.2974, 2.0833),
    "FCO": (41.8003, 12.2389),
    "MXP": (45.6301, 8.7231),
    "VCE": (45.5053, 12.3519),
    "MUC": (48.3537, 11.7750),
    "ZRH": (47.4582, 8.5556),
    "VIE": (48.1103, 16.5697),
    "CPH": (55.6180, 12.6508),
    "ARN": (59.6519, 17.9186),
    "OSL": (60.1939, 11.1004),
    "HEL": (60.3183, 24.9633),
    "DUB": (53.4213, -6.2700),
    "LIS": (38.7742, -9.1342),
    "ATH": (37.9364, 23.9445),
    "IST": (41.2753, 28.7519),
    "PRG": (50.1008, 14.2632),
    "BUD": (47.4298, 19.2610),
    "WAW": (52.1657, 20.9671),
    # North America
    "JFK": (40.6413, -73.7781),
    "NYC": (40.7128, -74.0060),
    "LAX": (33.9416, -118.4085),
    "ORD": (41.9742, -87.9073),
    "CHI": (41.8781, -87.6298),
    "SFO": (37.6213, -122.3790),
    "MIA": (25.7959, -80.2870),
    "DFW": (32.8998, -97.0403),
    "SEA": (47.4502, -122.3088),
    "LAS": (36.0840, -115.1537),
    "BOS": (42.3656, -71.0096),
    "IAD": (38.9531, -77.4565),
    "WAS": (38.9072, -77.0369),
    "ATL": (33.6407, -84.4277),
    "DEN": (39.8561, -104.6737),
    "PHX": (33.4352, -112.0080),
    "YYZ": (43.6777, -79.6248),
    "YVR": (49.1939, -123.1844),
    "YUL": (45.4707, -73.7408),
    "MEX": (19.4361, -99.0719),
    "CUN": (21.0365, -86.8771),
    # Asia
    "BKK": (13.6900, 100.7501),
    "NRT": (35.7720, 140.3929),
    "TOK": (35.6762, 139.6503),
    "HND": (35.5494, 139.7798),
    "ICN": (37.4602, 126.4407),
    "SEL": (37.5665, 126.9780),
    "SIN": (1.3644, 103.9915),
    "HKG": (22.3080, 113.9185),
    "PVG": (31.1443, 121.8083),
    "SHA": (31.2304, 121.4737),
    "PEK": (40.0799, 116.6031),
    "BJS": (39.9042, 116.4074),
    "KUL": (2.7456, 101.7072),
    "CGK": (-6.1256, 106.6559),
    "MNL": (14.5086, 121.0194),
    "DEL": (28.5562, 77.1000),
    "BOM": (19.0896, 72.8656),
    "DXB": (25.2532, 55.3657),
    "DOH": (25.2731, 51.6080),
    "HAN": (21.2187, 105.8042),
    "SGN": (10.8188, 106.6519),
    "TPE": (25.0797, 121.2342),
    # Oceania
    "SYD": (-33.9399, 151.1753),
    "MEL": (-37.6690, 144.8410),
    "BNE": (-27.3942, 153.1218),
    "PER": (-31.9385, 115.9672),
    "AKL": (-37.0082, 174.7850),
    "CHC": (-43.4894, 172.5320),
    # South America
    "GRU": (-23.4283, -46.4752),
    "SAO": (-23.5505, -46.6333),
    "GIG": (-22.8099, -43.2505),
    "RIO": (-22.9068, -43.1729),
    "EZE": (-34.8222, -58.5358),
    "BUE": (-34.6037, -58.3816),
    "BOG": (4.7016, -74.1469),
    "LIM": (-12.0219, -77.1143),
    "SCL": (-33.3930, -70.7858),
    # Africa
    "JNB": (-26.1392, 28.2460),
    "CPT": (-33.9690, 18.5970),
    "CAI": (30.1219, 31.4056),
    "CMN": (33.3670, -7.5900),
    "NBO": (-1.3192, 36.9278),
    "LOS": (6.5774, 3.3213),
}


class CoordinateResolver:
    """Exact, case-insensitive code -> coordinate lookup.

    A miss returns ``None``. Callers must drop such offers before fitting a
    viewport instead of placing them at (0, 0).
    """

    def __init__(
        self, table: Mapping[str, Tuple[float, float]] = AIRPORT_COORDINATES
    ) -> None:
        self._table: Dict[str, Coordinate] = {
            code.upper(): Coordinate(latitude=lat, longitude=lng)
            for code, (lat, lng) in table.items()
        }

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.resolve(code) is not None

    def resolve(self, code: str) -> Optional[Coordinate]:
        if not code:
            return None
        return self._table.get(code.strip().upper())


@lru_cache()
def default_resolver() -> CoordinateResolver:
    return CoordinateResolver()


__all__ = ["AIRPORT_COORDINATES", "CoordinateResolver", "default_resolver"]
