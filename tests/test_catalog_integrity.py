"""
Tests for the referential checks run when a catalog event is built.
"""
import pytest

from eventtrip.schemas.event import Session, UniversalEvent, Venue
from eventtrip.utils.exceptions import CatalogIntegrityError


def _rebuild(event: UniversalEvent, **changes) -> UniversalEvent:
    data = event.model_dump()
    data.update(changes)
    return UniversalEvent(**data)


def test_valid_event_builds(two_city_event):
    assert two_city_event.city("lax").iata_code == "LAX"
    assert two_city_event.venue("sofi").city_id == "lax"
    assert two_city_event.session("final").venue_id == "metlife"


def test_session_city_must_match_venue_city(two_city_event):
    sessions = [s.model_dump() for s in two_city_event.sessions]
    sessions.append(Session(session_id="bad", venue_id="sofi", city_id="nyc", date="2026-07-01").model_dump())

    with pytest.raises(CatalogIntegrityError) as exc_info:
        _rebuild(two_city_event, sessions=sessions)
    assert any("bad" in err for err in exc_info.value.context["errors"])


def test_session_must_reference_known_venue(two_city_event):
    sessions = [Session(session_id="x", venue_id="nowhere", city_id="nyc", date="2026-07-01").model_dump()]
    with pytest.raises(CatalogIntegrityError):
        _rebuild(two_city_event, sessions=sessions)


def test_venue_must_reference_known_city(two_city_event):
    venues = [v.model_dump() for v in two_city_event.venues]
    venues.append(Venue(venue_id="wembley", name="Wembley", city_id="lon").model_dump())
    with pytest.raises(CatalogIntegrityError):
        _rebuild(two_city_event, venues=venues)


def test_duplicate_session_ids_rejected(two_city_event):
    sessions = [s.model_dump() for s in two_city_event.sessions]
    sessions.append(dict(sessions[0]))
    with pytest.raises(CatalogIntegrityError):
        _rebuild(two_city_event, sessions=sessions)


def test_duplicate_city_ids_rejected(two_city_event):
    cities = [c.model_dump() for c in two_city_event.cities]
    cities.append(dict(cities[0]))
    with pytest.raises(CatalogIntegrityError):
        _rebuild(two_city_event, cities=cities)


def test_end_date_before_start_date_rejected(two_city_event):
    with pytest.raises(CatalogIntegrityError):
        _rebuild(two_city_event, start_date="2026-08-01", end_date="2026-07-01")
