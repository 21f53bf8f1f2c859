import json
import logging
from datetime import date
from itertools import count
from unittest.mock import Mock

import pytest

from trip_scanner.recent_searches import (
    STORAGE_KEY,
    RecentSearchStore,
    decode_history,
    encode_history,
)
from trip_scanner.schemas import (
    EnrichmentStats,
    Price,
    RecentSearch,
    Region,
    SearchRequest,
)
from trip_scanner.storage import Failed, MemoryKeyValueStore, SQLiteKeyValueStore


def make_store(backend=None, **kwargs):
    ticks = count(1_700_000_000_000, 1000)
    return RecentSearchStore(
        backend if backend is not None else MemoryKeyValueStore(),
        clock=lambda: next(ticks),
        **kwargs,
    )


def make_stats(amount=412.5, origin="WAW", results=12, currency="EUR"):
    return EnrichmentStats(
        cheapest_price=Price(amount=amount, currency=currency),
        cheapest_origin=origin,
        results_count=results,
    )


def test_record_prepends_and_persists():
    backend = MemoryKeyValueStore()
    store = make_store(backend)

    store.record(SearchRequest(destination="bkk", region="EUROPE"))
    updated = store.record(SearchRequest(destination="NRT", region="ASIA"))

    assert [s.destination for s in updated] == ["NRT", "BKK"]
    assert updated[0].timestamp > updated[1].timestamp
    assert not updated[0].is_enriched

    persisted = json.loads(backend.get(STORAGE_KEY))
    assert persisted[0] == {
        "destination": "NRT",
        "region": "ASIA",
        "maxResults": 10,
        "timestamp": updated[0].timestamp,
    }


def test_record_replaces_same_destination_and_region():
    store = make_store()
    store.record(SearchRequest(destination="BKK", region="EUROPE", max_results=10))
    store.record(SearchRequest(destination="BKK", region="ASIA"))
    updated = store.record(
        SearchRequest(
            destination="BKK",
            region="EUROPE",
            max_results=20,
            departure_date=date(2025, 3, 1),
        )
    )

    assert [(s.destination, s.region) for s in updated] == [
        ("BKK", Region.EUROPE),
        ("BKK", Region.ASIA),
    ]
    assert updated[0].max_results == 20
    assert updated[0].departure_date == date(2025, 3, 1)


def test_record_never_exceeds_capacity():
    store = make_store()
    destinations = ["BKK", "NRT", "SYD", "JFK", "CDG", "LHR", "DXB"]
    for code in destinations:
        updated = store.record(SearchRequest(destination=code))
        assert len(updated) <= 5
        assert len({s.key for s in updated}) == len(updated)

    assert [s.destination for s in store.searches] == ["DXB", "LHR", "CDG", "JFK", "SYD"]


def test_custom_capacity():
    store = make_store(capacity=2)
    for code in ["BKK", "NRT", "SYD"]:
        store.record(SearchRequest(destination=code))
    assert [s.destination for s in store.searches] == ["SYD", "NRT"]

    with pytest.raises(ValueError):
        make_store(capacity=0)


def test_enrich_merges_stats_in_place():
    store = make_store()
    store.record(SearchRequest(destination="BKK", region="EUROPE"))
    store.record(SearchRequest(destination="NRT", region="EUROPE"))

    updated = store.enrich("BKK", "EUROPE", make_stats())

    assert [s.destination for s in updated] == ["NRT", "BKK"]
    entry = store.get("bkk", Region.EUROPE)
    assert entry.is_enriched
    assert entry.cheapest_price == Price(amount=412.5, currency="EUR")
    assert entry.cheapest_origin == "WAW"
    assert entry.results_count == 12


def test_enrich_twice_writes_once():
    backend = Mock(wraps=MemoryKeyValueStore())
    store = make_store(backend)
    store.record(SearchRequest(destination="BKK"))
    assert backend.set.call_count == 1

    first = store.enrich("BKK", Region.EUROPE, make_stats())
    assert backend.set.call_count == 2

    second = store.enrich("BKK", Region.EUROPE, make_stats())
    assert backend.set.call_count == 2
    assert first == second


def test_enrich_with_changed_values_writes_again():
    backend = Mock(wraps=MemoryKeyValueStore())
    store = make_store(backend)
    store.record(SearchRequest(destination="BKK"))
    store.enrich("BKK", "EUROPE", make_stats())
    store.enrich("BKK", "EUROPE", make_stats(results=13))

    assert backend.set.call_count == 3
    assert store.get("BKK", "EUROPE").results_count == 13


@pytest.mark.parametrize(
    "destination, region",
    [("SYD", "EUROPE"), ("BKK", "ASIA"), ("BKK", "MARS"), ("", "EUROPE")],
)
def test_enrich_without_match_is_noop(destination, region):
    backend = Mock(wraps=MemoryKeyValueStore())
    store = make_store(backend)
    store.record(SearchRequest(destination="BKK", region="EUROPE"))
    before = store.searches

    store.enrich(destination, region, make_stats())

    assert store.searches == before
    assert len(store) == 1
    assert backend.set.call_count == 1


def test_record_after_enrich_starts_pending_again():
    store = make_store()
    store.record(SearchRequest(destination="BKK"))
    store.enrich("BKK", "EUROPE", make_stats())
    store.record(SearchRequest(destination="BKK"))
    assert not store.get("BKK", "EUROPE").is_enriched


def test_clear_removes_persisted_state():
    backend = MemoryKeyValueStore()
    store = make_store(backend)
    store.record(SearchRequest(destination="BKK"))

    store.clear()

    assert store.searches == ()
    assert backend.get(STORAGE_KEY) is None


def test_restore_round_trip(tmp_path):
    backend = SQLiteKeyValueStore(str(tmp_path / "history.db"))
    store = make_store(backend)
    store.record(
        SearchRequest(
            destination="BKK",
            region="ASIA",
            max_results=25,
            departure_date=date(2025, 1, 10),
            return_date=date(2025, 1, 20),
        )
    )
    store.record(SearchRequest(destination="CDG"))
    store.enrich("BKK", "ASIA", make_stats())

    restored = make_store(backend)
    assert restored.restore() == list(store.searches)
    assert restored.get("BKK", "ASIA").return_date == date(2025, 1, 20)


def test_restore_with_no_state_is_empty():
    store = make_store()
    assert store.restore() == []


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "null",
        '{"destination": "BKK"}',
        '[{"destination": "BKK", "region": "MARS", "maxResults": 10, "timestamp": 1}]',
        '[{"destination": "BKK"}]',
        '[{"destination": "BKK", "region": "ASIA", "maxResults": 10, "timestamp": 1000000000000000000}]',
        '[{"destination": "BKK", "region": "ASIA", "maxResults": 10, "timestamp": -5}]',
    ],
)
def test_restore_corrupt_payload_starts_empty(payload, caplog):
    backend = MemoryKeyValueStore({STORAGE_KEY: payload})
    store = make_store(backend)
    caplog.set_level(logging.WARNING)

    assert store.restore() == []
    assert any("Failed to load" in r.getMessage() for r in caplog.records)


def test_restore_normalizes_duplicates_and_capacity():
    entries = [
        {"destination": code, "region": "EUROPE", "maxResults": 10, "timestamp": ts}
        for ts, code in enumerate(["BKK", "BKK", "NRT", "SYD", "JFK", "CDG", "LHR"])
    ]
    backend = MemoryKeyValueStore({STORAGE_KEY: json.dumps(entries)})
    store = make_store(backend)

    restored = store.restore()

    assert [s.destination for s in restored] == ["BKK", "NRT", "SYD", "JFK", "CDG"]
    assert restored[0].timestamp == 0


def test_backend_failures_never_propagate(caplog):
    backend = Mock()
    backend.get.side_effect = OSError("storage unavailable")
    backend.set.side_effect = OSError("storage unavailable")
    backend.delete.side_effect = OSError("storage unavailable")
    store = make_store(backend)
    caplog.set_level(logging.WARNING)

    assert store.restore() == []
    updated = store.record(SearchRequest(destination="BKK"))
    assert [s.destination for s in updated] == ["BKK"]
    store.enrich("BKK", "EUROPE", make_stats())
    assert store.get("BKK", "EUROPE").is_enriched
    store.clear()
    assert store.searches == ()

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 4


def test_load_reports_failure_reason():
    backend = MemoryKeyValueStore({STORAGE_KEY: "garbage"})
    result = make_store(backend).load()
    assert isinstance(result, Failed)
    assert "corrupt" in result.reason


def test_encode_uses_persisted_layout():
    entry = RecentSearch(
        destination="BKK",
        region=Region.EUROPE,
        max_results=10,
        timestamp=5,
        cheapest_price=Price(amount=99.0, currency="EUR"),
        cheapest_origin="WAW",
        results_count=3,
    )
    payload = json.loads(encode_history([entry]))
    assert payload == [
        {
            "destination": "BKK",
            "region": "EUROPE",
            "maxResults": 10,
            "timestamp": 5,
            "cheapestPrice": {"amount": 99.0, "currency": "EUR"},
            "cheapestOrigin": "WAW",
            "resultsCount": 3,
        }
    ]
    assert decode_history(json.dumps(payload)).value == [entry]
