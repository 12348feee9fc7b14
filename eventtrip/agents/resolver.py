"""
City resolver for multi-city events.

A multi-city event cannot anchor an itinerary until the caller picks one city
and one session. The resolver is stateless: the pending state is the
``CitySelection`` payload handed back to the caller, and the follow-up call
carries the event id together with the chosen ``(city_id, session_id)`` pair.

    AWAITING_SELECTION --(valid city/session)--> RESOLVED
    AWAITING_SELECTION --(invalid pair)--------> AWAITING_SELECTION  (InvalidSelection)
"""

from typing import Optional

from eventtrip.data.registry import EventRegistry, event_registry
from eventtrip.schemas.event import UniversalEvent
from eventtrip.schemas.itinerary import (
    CityOption,
    CitySelection,
    EventType,
    ResolvedOccurrence,
    SessionOption,
)
from eventtrip.utils.exceptions import EventNotFound, InvalidSelection
from eventtrip.utils.logger import get_logger

logger = get_logger(__name__)

_EVENT_TYPES = {
    "sports": "sports",
    "music": "music",
    "festival": "festivals",
}


def event_type_for_category(category: str) -> EventType:
    """Map a catalog category onto the itinerary event type (festivals is the catch-all)."""
    return _EVENT_TYPES.get(category, "festivals")


def build_city_selection(event: UniversalEvent) -> CitySelection:
    """
    Build the awaiting-selection payload for a multi-city event.

    Args:
        event: Catalog event flagged multi_city

    Returns:
        CitySelection listing, per city, its sessions sorted by date and its IATA code
    """
    cities = [
        CityOption(
            city_id=city.city_id,
            name=city.name,
            country=city.country,
            iata_code=city.iata_code,
            sessions=[
                SessionOption(
                    session_id=s.session_id,
                    date=s.date,
                    time=s.time,
                    round=s.round,
                    description=s.description,
                )
                for s in EventRegistry.get_sessions_for_city(event, city.city_id)
            ],
        )
        for city in event.cities
    ]

    return CitySelection(
        event_id=event.event_id,
        event_name=event.name,
        event_description=event.description,
        start_date=event.start_date,
        end_date=event.end_date,
        cities=cities,
        message=(
            f"{event.name} spans {len(cities)} cities. "
            "Which city and match date would you like to attend?"
        ),
    )


class CityResolver:
    """Turns a catalog event plus a city/session choice into a ResolvedOccurrence."""

    def __init__(self, registry: EventRegistry = None):
        self.registry = registry or event_registry

    def get_event(self, event_id: str) -> UniversalEvent:
        event = self.registry.find_event_by_id(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    def pending_selection(self, event_id: str) -> CitySelection:
        """Enter AWAITING_SELECTION for a multi-city event."""
        event = self.get_event(event_id)
        if not event.multi_city:
            raise InvalidSelection(
                f"{event.name} is held in a single city; no selection is needed",
                context={"event_id": event_id},
            )
        logger.info("selection_pending", event_id=event.event_id, cities=len(event.cities))
        return build_city_selection(event)

    def resolve(
        self,
        event_id: str,
        city_id: str,
        session_id: str,
        ticket_url: Optional[str] = None,
    ) -> ResolvedOccurrence:
        """
        Validate a city/session choice and emit the resolved occurrence.

        Resolving the same pair twice yields equal occurrences; nothing is
        recorded between calls.

        Raises:
            EventNotFound: event_id is not in the catalog
            InvalidSelection: the session is not part of the event, or is not
                held in the chosen city. ``selection`` on the error carries the
                still-pending city list.
        """
        event = self.get_event(event_id)
        city = event.city(city_id)
        session = event.session(session_id)

        problem = None
        if city is None:
            problem = f"City '{city_id}' is not a host city of {event.name}"
        elif session is None:
            problem = f"Session '{session_id}' is not part of {event.name}"
        elif session.city_id != city.city_id:
            problem = f"Session '{session_id}' is held in '{session.city_id}', not '{city_id}'"

        if problem:
            logger.warning(
                "selection_rejected",
                event_id=event_id,
                city_id=city_id,
                session_id=session_id,
                reason=problem,
            )
            selection = build_city_selection(event) if event.multi_city else None
            raise InvalidSelection(
                problem,
                selection=selection,
                context={"event_id": event_id, "city_id": city_id, "session_id": session_id},
            )

        venue = event.venue(session.venue_id)
        occurrence = ResolvedOccurrence(
            event_name=event.name,
            event_date=session.date,
            venue=venue.name,
            city=city.name,
            country=city.country,
            event_type=event_type_for_category(event.category),
            ticket_url=ticket_url,
            event_id=event.event_id,
            session_id=session.session_id,
            city_id=city.city_id,
            iata_code=city.iata_code,
            country_code=city.country_code,
            time=session.time,
            round=session.round,
            description=session.description,
            venue_capacity=venue.capacity,
        )
        logger.info(
            "selection_resolved",
            event_id=event_id,
            session_id=session.session_id,
            city=city.name,
            date=session.date.isoformat(),
        )
        return occurrence

    def resolve_single_city(self, event_id: str, ticket_url: Optional[str] = None) -> ResolvedOccurrence:
        """Build the occurrence of a single-city event from its one venue and start date."""
        event = self.get_event(event_id)
        if event.multi_city:
            raise InvalidSelection(
                f"{event.name} spans several cities; choose a city and session first",
                selection=build_city_selection(event),
                context={"event_id": event_id},
            )

        city = event.cities[0]
        venue = next((v for v in event.venues if v.city_id == city.city_id), None)
        session = EventRegistry.get_sessions_for_city(event, city.city_id)
        first = session[0] if session else None

        return ResolvedOccurrence(
            event_name=event.name,
            event_date=first.date if first else event.start_date,
            venue=venue.name if venue else city.name,
            city=city.name,
            country=city.country,
            event_type=event_type_for_category(event.category),
            ticket_url=ticket_url,
            event_id=event.event_id,
            session_id=first.session_id if first else None,
            city_id=city.city_id,
            iata_code=city.iata_code,
            country_code=city.country_code,
            time=first.time if first else None,
            round=first.round if first else None,
            description=first.description if first else None,
            venue_capacity=venue.capacity if venue else None,
        )


# Global instance
city_resolver = CityResolver()
