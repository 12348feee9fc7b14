"""
Pydantic schemas for the itinerary contract.

Field names are snake_case in Python and serialized in camelCase, which is
what the web client reads.
"""
import datetime as dt
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


EventType = Literal["sports", "music", "festivals"]
BudgetLevel = Literal["budget", "mid", "luxury"]
GroupType = Literal["solo", "couple", "family", "group"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============================================================================
# RESOLUTION
# ============================================================================

class ResolvedOccurrence(CamelModel):
    """A single concrete occurrence of an event: one date, one venue, one city."""
    event_name: str
    event_date: dt.date
    venue: str
    city: str
    country: str
    event_type: EventType = "festivals"
    ticket_url: Optional[str] = None

    # Present when resolved from the catalog
    event_id: Optional[str] = None
    session_id: Optional[str] = None
    city_id: Optional[str] = None
    iata_code: Optional[str] = None
    country_code: Optional[str] = None
    time: Optional[str] = None
    round: Optional[str] = None
    description: Optional[str] = None
    venue_capacity: Optional[int] = None


class SessionOption(BaseModel):
    session_id: str
    date: dt.date
    time: Optional[str] = None
    round: Optional[str] = None
    description: Optional[str] = None


class CityOption(BaseModel):
    city_id: str
    name: str
    country: str
    iata_code: Optional[str] = None
    sessions: List[SessionOption] = []


class CitySelection(BaseModel):
    """Pending city/session choice for a multi-city event (snake_case on the wire)."""
    intent: Literal["city_selection_required"] = "city_selection_required"
    state: Literal["AWAITING_SELECTION"] = "AWAITING_SELECTION"
    event_id: str
    event_name: str
    event_description: Optional[str] = None
    start_date: dt.date
    end_date: dt.date
    cities: List[CityOption]
    message: str


# ============================================================================
# REQUEST
# ============================================================================

class ItineraryRequest(CamelModel):
    """Validated input to the Itinerary Assembler."""
    days: int
    budget_level: BudgetLevel = "mid"
    group_size: int = 1
    group_type: Optional[GroupType] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    # Destination-only trips
    location: Optional[str] = None

    # Event-anchored trips
    occurrence: Optional[ResolvedOccurrence] = None

    trip_type: Optional[str] = None
    origin: Optional[str] = None
    team: Optional[str] = None
    match_ids: List[str] = []
    optimize: bool = False

    @property
    def is_event_anchored(self) -> bool:
        return self.occurrence is not None

    @property
    def destination(self) -> str:
        if self.occurrence is not None:
            return self.occurrence.city
        return self.location or ""


# ============================================================================
# DAY BLOCKS
# ============================================================================

class EventDetails(CamelModel):
    doors: Optional[str] = None
    start_time: Optional[str] = None
    duration: Optional[str] = None
    ticket_url: Optional[str] = None


class TimeBlock(CamelModel):
    kind: Literal["time"] = "time"
    is_event_block: Literal[False] = False
    time: str = ""
    activities: str = ""
    location: str = ""
    cost: str = "N/A"


class EventBlock(CamelModel):
    kind: Literal["event"] = "event"
    is_event_block: Literal[True] = True
    time: str = ""
    activities: str = ""
    location: str = ""
    cost: str = "N/A"
    event_details: EventDetails = EventDetails()


DayBlock = Annotated[Union[TimeBlock, EventBlock], Field(discriminator="kind")]

SLOTS = ("morning", "afternoon", "evening")


class DayPlan(CamelModel):
    day: int
    date: Optional[dt.date] = None
    city: str = ""
    theme: str = ""
    is_event_day: bool = False
    label: str = ""
    morning: DayBlock = TimeBlock()
    afternoon: DayBlock = TimeBlock()
    evening: DayBlock = TimeBlock()
    meals_and_dining: List[Union[str, Dict[str, Any]]] = []
    tips: List[str] = []

    def blocks(self) -> List[DayBlock]:
        return [getattr(self, slot) for slot in SLOTS]


# ============================================================================
# ITINERARY
# ============================================================================

class TripSummary(CamelModel):
    total_days: int
    cities: List[str] = []
    venues: List[str] = []
    highlights: List[str] = []


class BudgetBreakdownDisplay(CamelModel):
    accommodation: str = "N/A"
    transport: str = "N/A"
    food: str = "N/A"
    event: str = "N/A"
    activities: str = "N/A"


class BudgetBlock(CamelModel):
    total_budget: str = "N/A"
    breakdown: BudgetBreakdownDisplay = BudgetBreakdownDisplay()
    daily_average: str = "N/A"
    event_day_cost: str = "N/A"
    source: Literal["authoritative", "generated"] = "generated"
    extras: Dict[str, str] = {}


class EventAnchor(CamelModel):
    event_name: str
    event_date: dt.date
    venue: str
    event_type: EventType
    city: str = ""
    country: str = ""
    event_day: Optional[int] = None


class ContentWarning(CamelModel):
    """Non-fatal discrepancy between what was requested and what was generated."""
    code: Literal["partial_content"] = "partial_content"
    field: str
    message: str
    requested: Optional[int] = None
    returned: Optional[int] = None


class ItineraryMetadata(CamelModel):
    generated_at: str
    is_event_anchored: bool
    requested_days: int
    returned_days: int
    budget_source: Literal["authoritative", "generated"]
    budget_level: BudgetLevel
    group_size: int
    group_type: Optional[GroupType] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class ItineraryData(CamelModel):
    """Complete itinerary returned to the caller; every field is populated."""
    overview: str
    trip_summary: TripSummary
    budget: BudgetBlock
    days: List[DayPlan]
    accommodations: List[Dict[str, Any]] = []
    flights: List[Dict[str, Any]] = []
    local_tips: Dict[str, Any] = {}
    event_anchor: Optional[EventAnchor] = None
    warnings: List[ContentWarning] = []
    metadata: ItineraryMetadata

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
