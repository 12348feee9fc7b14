"""
Pydantic schemas for the event trip planner
"""
from .event import EventCity, Venue, Session, PricingConfig, UniversalEvent
from .itinerary import (
    BudgetBlock,
    CitySelection,
    ContentWarning,
    DayPlan,
    EventAnchor,
    EventBlock,
    ItineraryData,
    ItineraryRequest,
    ResolvedOccurrence,
    TimeBlock,
)
from .requests import BuildItineraryRequest, CitySelectionRequest

__all__ = [
    # Catalog models
    "EventCity",
    "Venue",
    "Session",
    "PricingConfig",
    "UniversalEvent",
    # Itinerary contract
    "BudgetBlock",
    "CitySelection",
    "ContentWarning",
    "DayPlan",
    "EventAnchor",
    "EventBlock",
    "ItineraryData",
    "ItineraryRequest",
    "ResolvedOccurrence",
    "TimeBlock",
    # API request models
    "BuildItineraryRequest",
    "CitySelectionRequest",
]
