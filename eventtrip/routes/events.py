"""
API routes for the event catalog and city selection
"""
import datetime as dt
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from eventtrip.agents.resolver import CityResolver, city_resolver
from eventtrip.data.registry import EventFilter, EventRegistry, event_registry
from eventtrip.schemas import CitySelection, CitySelectionRequest, ResolvedOccurrence, UniversalEvent
from eventtrip.schemas.event import EventCategory
from eventtrip.utils.exceptions import EventNotFound, InvalidSelection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


def get_registry() -> EventRegistry:
    return event_registry


def get_resolver() -> CityResolver:
    return city_resolver


def selection_error(e: InvalidSelection) -> HTTPException:
    """422 carrying the still-pending city list so the caller can resubmit"""
    detail = {"error": "invalid_selection", "message": e.message}
    if e.selection is not None:
        detail["selection"] = e.selection.model_dump(mode="json")
    return HTTPException(status_code=422, detail=detail)


@router.get("", response_model=List[UniversalEvent])
async def list_events(
    q: Optional[str] = Query(default=None, description="Free-text search"),
    name: Optional[str] = None,
    city: Optional[str] = None,
    category: Optional[EventCategory] = None,
    date_from: Optional[dt.date] = None,
    date_to: Optional[dt.date] = None,
    registry: EventRegistry = Depends(get_registry),
):
    """Search the catalog; every filter is optional"""
    criteria = EventFilter(
        name=name,
        city=city,
        category=category,
        date_from=date_from,
        date_to=date_to,
        query=q,
    )
    return registry.search(criteria)


@router.get("/{event_id}", response_model=UniversalEvent)
async def get_event(event_id: str, registry: EventRegistry = Depends(get_registry)):
    """Get one catalog event"""
    event = registry.find_event_by_id(event_id) or registry.find_event_by_slug(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail=f"Event not found: {event_id}")
    return event


@router.get("/{event_id}/cities", response_model=CitySelection)
async def get_city_selection(event_id: str, resolver: CityResolver = Depends(get_resolver)):
    """City-selection payload for a multi-city event"""
    try:
        return resolver.pending_selection(event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidSelection as e:
        raise selection_error(e)


@router.post("/{event_id}/selection", response_model=ResolvedOccurrence)
async def select_city(
    event_id: str,
    selection: CitySelectionRequest,
    resolver: CityResolver = Depends(get_resolver),
):
    """Resolve a city/session choice into a single occurrence"""
    try:
        return resolver.resolve(event_id, selection.city_id, selection.session_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidSelection as e:
        raise selection_error(e)
