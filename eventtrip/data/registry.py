"""
Event registry: read-only query layer over the static event catalog.

Every function here is a pure lookup. Nothing in the catalog is mutated at
request time, so the module-level ``event_registry`` is shared freely across
concurrent requests.
"""

import datetime as dt
from typing import Iterable, List, Optional

from pydantic import BaseModel

from eventtrip.schemas.event import EventCategory, EventCity, Session, UniversalEvent
from eventtrip.utils.logger import get_logger

from .events.world_cup_2026 import WORLD_CUP_2026

logger = get_logger(__name__)


class EventFilter(BaseModel):
    """Search criteria. Every criterion is optional; absent criteria match everything."""
    name: Optional[str] = None
    city: Optional[str] = None
    category: Optional[EventCategory] = None
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    query: Optional[str] = None


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


class EventRegistry:
    """Search and filter API over a fixed list of catalog events."""

    def __init__(self, events: Iterable[UniversalEvent]):
        self._events: List[UniversalEvent] = list(events)
        ids = [e.event_id for e in self._events]
        if len(set(ids)) != len(ids):
            raise ValueError("event_id values must be unique across the catalog")

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_all_events(self) -> List[UniversalEvent]:
        return list(self._events)

    def find_event_by_id(self, event_id: str) -> Optional[UniversalEvent]:
        return next((e for e in self._events if e.event_id == event_id), None)

    def find_event_by_slug(self, slug: str) -> Optional[UniversalEvent]:
        return next((e for e in self._events if e.slug == slug), None)

    def find_events_by_category(self, category: EventCategory) -> List[UniversalEvent]:
        return [e for e in self._events if e.category == category]

    def find_events_by_city(self, city_name: str) -> List[UniversalEvent]:
        q = city_name.lower().strip()
        return [e for e in self._events if any(_contains(c.name, q) for c in e.cities)]

    def is_multi_city_event(self, event_id: str) -> bool:
        event = self.find_event_by_id(event_id)
        return event is not None and event.multi_city

    def get_cities_for_event(self, event_id: str) -> List[EventCity]:
        event = self.find_event_by_id(event_id)
        return list(event.cities) if event else []

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, criteria: Optional[EventFilter] = None) -> List[UniversalEvent]:
        """
        Filter the catalog.

        Name and city criteria are case-insensitive substring matches; the
        date range matches any event whose [start_date, end_date] overlaps it,
        bounds inclusive. Returns an empty list when nothing matches.

        Args:
            criteria: Filter to apply (None returns the whole catalog)

        Returns:
            Matching events in catalog order
        """
        criteria = criteria or EventFilter()
        results = [e for e in self._events if self._matches(e, criteria)]
        logger.info(
            "registry_search",
            criteria=criteria.model_dump(exclude_none=True),
            results=len(results),
        )
        return results

    def search_events(self, query: str) -> List[UniversalEvent]:
        """Free-text search over name, slug, tags, description and city names."""
        return self.search(EventFilter(query=query))

    def get_upcoming_events(self, limit: Optional[int] = None, today: Optional[dt.date] = None) -> List[UniversalEvent]:
        today = today or dt.date.today()
        upcoming = sorted(
            (e for e in self._events if e.end_date >= today),
            key=lambda e: e.start_date,
        )
        return upcoming[:limit] if limit else upcoming

    @staticmethod
    def _matches(event: UniversalEvent, criteria: EventFilter) -> bool:
        if criteria.name and not _contains(event.name, criteria.name.lower().strip()):
            return False

        if criteria.city:
            q = criteria.city.lower().strip()
            if not any(_contains(c.name, q) for c in event.cities):
                return False

        if criteria.category and event.category != criteria.category:
            return False

        if criteria.date_from and event.end_date < criteria.date_from:
            return False
        if criteria.date_to and event.start_date > criteria.date_to:
            return False

        if criteria.query:
            q = criteria.query.lower().strip()
            if not (
                _contains(event.name, q)
                or _contains(event.slug, q)
                or _contains(event.description, q)
                or any(_contains(t, q) for t in event.tags)
                or any(_contains(c.name, q) for c in event.cities)
            ):
                return False

        return True

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @staticmethod
    def get_sessions_for_city(event: UniversalEvent, city_id: str) -> List[Session]:
        """Sessions held in one city, in date order."""
        return sorted(
            (s for s in event.sessions if s.city_id == city_id),
            key=lambda s: (s.date, s.time or ""),
        )

    @staticmethod
    def get_upcoming_sessions(
        event: UniversalEvent,
        city_id: Optional[str] = None,
        today: Optional[dt.date] = None,
    ) -> List[Session]:
        today = today or dt.date.today()
        sessions = [
            s for s in event.sessions
            if s.date >= today and (city_id is None or s.city_id == city_id)
        ]
        return sorted(sessions, key=lambda s: (s.date, s.time or ""))


# Add new catalog events here as they are created
ALL_EVENTS: List[UniversalEvent] = [
    WORLD_CUP_2026,
]

# Global registry instance
event_registry = EventRegistry(ALL_EVENTS)
