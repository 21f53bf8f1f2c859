"""Bounded, deduplicated history of submitted searches.

Entries are keyed on ``(destination, region)`` and kept most-recent-first.
Once a search resolves, its entry is enriched with the cheapest price,
cheapest origin and result count. Persistence is best-effort: read and write
failures are logged and never reach the caller.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, List, Optional, Set, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from .schemas import EnrichmentStats, RecentSearch, Region, SearchRequest
from .storage import (
    Failed,
    KeyValueStore,
    Ok,
    Result,
    delete_payload,
    read_payload,
    write_payload,
)

STORAGE_KEY = "trip-scanner-recent-searches"
MAX_RECENT_SEARCHES = 5

logger = logging.getLogger(__name__)

_HISTORY = TypeAdapter(List[RecentSearch])


def now_ms() -> int:
    return int(time.time() * 1000)


def encode_history(searches: Iterable[RecentSearch]) -> str:
    """Serialize *searches* to the persisted JSON layout (camelCase keys)."""
    return _HISTORY.dump_json(
        list(searches), by_alias=True, exclude_none=True
    ).decode("utf-8")


def decode_history(payload: str) -> Result[List[RecentSearch]]:
    try:
        return Ok(_HISTORY.validate_json(payload))
    except ValidationError as exc:
        return Failed(
            f"corrupt history payload ({exc.error_count()} validation errors)"
        )


def normalize_history(
    searches: Iterable[RecentSearch], capacity: int
) -> List[RecentSearch]:
    """Drop repeated keys (first occurrence wins) and cap the list."""
    seen: Set[Tuple[str, Region]] = set()
    kept: List[RecentSearch] = []
    for search in searches:
        if search.key in seen:
            continue
        seen.add(search.key)
        kept.append(search)
    return kept[:capacity]


class RecentSearchStore:
    """Recent searches backed by a key-value store.

    The store starts empty; call :meth:`restore` once at startup to load the
    persisted history.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        key: str = STORAGE_KEY,
        capacity: int = MAX_RECENT_SEARCHES,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be greater than 0")
        self.backend = backend
        self.key = key
        self.capacity = capacity
        self._clock = clock
        self._searches: List[RecentSearch] = []

    @property
    def searches(self) -> Tuple[RecentSearch, ...]:
        return tuple(self._searches)

    def __len__(self) -> int:
        return len(self._searches)

    def get(
        self, destination: str, region: Union[Region, str]
    ) -> Optional[RecentSearch]:
        key = _entry_key(destination, region)
        if key is None:
            return None
        for search in self._searches:
            if search.key == key:
                return search
        return None

    # ──────────────────────────────────────────────────────────

    def restore(self) -> List[RecentSearch]:
        """Load persisted history; unreadable or corrupt state means empty."""
        result = self.load()
        if isinstance(result, Failed):
            logger.warning("Failed to load recent searches: %s", result.reason)
            self._searches = []
        else:
            self._searches = normalize_history(result.value, self.capacity)
        logger.info("Restored %d recent search(es)", len(self._searches))
        return list(self._searches)

    def load(self) -> Result[List[RecentSearch]]:
        raw = read_payload(self.backend, self.key)
        if isinstance(raw, Failed):
            return raw
        if raw.value is None:
            return Ok([])
        return decode_history(raw.value)

    def record(self, search: SearchRequest) -> List[RecentSearch]:
        """Put *search* at the front, replacing any entry with the same key."""
        entry = RecentSearch(
            destination=search.destination,
            region=search.region,
            max_results=search.max_results,
            departure_date=search.departure_date,
            return_date=search.return_date,
            timestamp=self._clock(),
        )
        remaining = [s for s in self._searches if s.key != entry.key]
        self._searches = [entry, *remaining][: self.capacity]
        logger.info(
            "Recorded search %s from %s", entry.destination, entry.region.value
        )
        self._report(self.save())
        return list(self._searches)

    def enrich(
        self,
        destination: str,
        region: Union[Region, str],
        stats: EnrichmentStats,
    ) -> List[RecentSearch]:
        """Attach *stats* to the matching entry.

        Nothing is written when the entry already holds the same values.
        Unknown keys are ignored; enrichment never creates an entry.
        """
        key = _entry_key(destination, region)
        if key is None:
            logger.debug("Ignoring enrichment for unknown region %r", region)
            return list(self._searches)

        for index, search in enumerate(self._searches):
            if search.key != key:
                continue
            if search.has_results(stats):
                logger.debug("Search %s/%s already enriched", *key)
                break
            self._searches[index] = search.with_results(stats)
            self._report(self.save())
            break
        else:
            logger.debug("No recent search for %s/%s", *key)
        return list(self._searches)

    def clear(self) -> None:
        self._searches = []
        self._report(delete_payload(self.backend, self.key))

    def save(self) -> Result[None]:
        return write_payload(
            self.backend, self.key, encode_history(self._searches)
        )

    def _report(self, result: Result[None]) -> None:
        if isinstance(result, Failed):
            logger.warning("Recent searches not persisted: %s", result.reason)


def _entry_key(
    destination: str, region: Union[Region, str]
) -> Optional[Tuple[str, Region]]:
    tag = Region.parse(region)
    if tag is None or not destination:
        return None
    return (destination.strip().upper(), tag)


__all__ = [
    "STORAGE_KEY",
    "MAX_RECENT_SEARCHES",
    "RecentSearchStore",
    "encode_history",
    "decode_history",
    "normalize_history",
    "now_ms",
]
