"""
Tests for the event registry and the shipped catalog.
"""
import datetime as dt

import pytest

from eventtrip.data import ALL_EVENTS, EventFilter, EventRegistry, event_registry


def test_catalog_sessions_match_their_venue_city():
    for event in ALL_EVENTS:
        venues = {v.venue_id: v for v in event.venues}
        for session in event.sessions:
            assert venues[session.venue_id].city_id == session.city_id


def test_world_cup_has_sixteen_cities_and_venues():
    event = event_registry.find_event_by_id("fifa-world-cup-2026")
    assert event is not None
    assert event.multi_city
    assert len(event.cities) == 16
    assert len(event.venues) == 16


def test_search_without_criteria_returns_everything():
    assert event_registry.search() == event_registry.get_all_events()


def test_search_by_name_is_case_insensitive_substring():
    results = event_registry.search(EventFilter(name="world CUP"))
    assert [e.event_id for e in results] == ["fifa-world-cup-2026"]


def test_search_by_city_name():
    assert event_registry.search(EventFilter(city="toronto"))
    assert event_registry.search(EventFilter(city="paris")) == []


def test_search_by_category():
    assert event_registry.search(EventFilter(category="sports"))
    assert event_registry.search(EventFilter(category="music")) == []


def test_date_range_overlap_is_inclusive():
    assert event_registry.search(EventFilter(date_from=dt.date(2026, 7, 19), date_to=dt.date(2026, 8, 1)))
    assert event_registry.search(EventFilter(date_from=dt.date(2026, 5, 1), date_to=dt.date(2026, 6, 11)))
    assert event_registry.search(EventFilter(date_from=dt.date(2026, 7, 20))) == []
    assert event_registry.search(EventFilter(date_to=dt.date(2026, 6, 10))) == []


def test_free_text_search_covers_tags():
    assert event_registry.search_events("soccer")
    assert event_registry.search_events("opera") == []


def test_lookup_helpers():
    assert event_registry.find_event_by_slug("fifa-world-cup-2026") is not None
    assert event_registry.find_event_by_id("missing") is None
    assert event_registry.is_multi_city_event("fifa-world-cup-2026")
    assert not event_registry.is_multi_city_event("missing")
    assert len(event_registry.get_cities_for_event("fifa-world-cup-2026")) == 16
    assert event_registry.get_cities_for_event("missing") == []
    assert event_registry.find_events_by_city("Monterrey")


def test_sessions_for_city_are_sorted_by_date():
    event = event_registry.find_event_by_id("fifa-world-cup-2026")
    sessions = EventRegistry.get_sessions_for_city(event, "nyc")
    dates = [s.date for s in sessions]
    assert dates == sorted(dates)
    assert sessions[-1].session_id == "wc26-final"


def test_upcoming_events_and_sessions_respect_today():
    assert event_registry.get_upcoming_events(today=dt.date(2026, 1, 1))
    assert event_registry.get_upcoming_events(today=dt.date(2027, 1, 1)) == []

    event = event_registry.find_event_by_id("fifa-world-cup-2026")
    upcoming = EventRegistry.get_upcoming_sessions(event, "nyc", today=dt.date(2026, 7, 1))
    assert all(s.date >= dt.date(2026, 7, 1) for s in upcoming)
    assert upcoming[-1].session_id == "wc26-final"


def test_registry_rejects_duplicate_event_ids(two_city_event):
    with pytest.raises(ValueError):
        EventRegistry([two_city_event, two_city_event])
