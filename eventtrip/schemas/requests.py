"""
Pydantic schemas for API request bodies
"""
import datetime as dt
from typing import List, Optional

from pydantic import Field

from .itinerary import CamelModel


class BuildItineraryRequest(CamelModel):
    """Request body for building an itinerary (camelCase on the wire)."""
    location: Optional[str] = Field(default=None, description="Destination for trips without an event")
    event_name: Optional[str] = None
    event_date: Optional[dt.date] = None
    event_venue: Optional[str] = None
    event_city: Optional[str] = None
    event_country: Optional[str] = None
    event_type: Optional[str] = Field(default=None, description="sports | music | festivals")
    ticket_url: Optional[str] = None

    # Catalog-driven requests
    event_id: Optional[str] = None
    city_id: Optional[str] = None
    session_id: Optional[str] = None

    days: int = Field(..., description="Trip length in days (1-30)", examples=[5])
    budget: str = Field(default="mid-range", description="budget | mid-range | luxury")
    group_size: int = 1
    group_type: Optional[str] = None
    trip_type: Optional[str] = None
    origin: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    optimize: bool = False
    team: Optional[str] = None
    match_ids: List[str] = []


class CitySelectionRequest(CamelModel):
    """Request body for choosing a city and session of a multi-city event"""
    city_id: str = Field(..., examples=["nyc"])
    session_id: str = Field(..., examples=["wc26-final"])
