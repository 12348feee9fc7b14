"""
Pydantic schemas for the multi-city event catalog.

A UniversalEvent owns its cities, venues and sessions. Records are built once
when the catalog module is imported and are never mutated at request time.
"""
import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from eventtrip.utils.exceptions import CatalogIntegrityError


EventCategory = Literal["sports", "music", "festival", "conference", "other"]
BudgetLevel = Literal["budget", "mid", "luxury"]
TripPattern = Literal["single_day", "weekend", "week", "extended"]


class Coordinates(BaseModel):
    lat: float
    lng: float


class EventCity(BaseModel):
    """Host city of an event. Identity is city_id, unique within one event."""
    city_id: str
    name: str
    country: str
    country_code: str = Field(..., description="ISO 3166-1 alpha-2")
    iata_code: Optional[str] = Field(default=None, description="Nearest major airport")
    timezone: str = Field(..., description="IANA timezone name")
    coordinates: Optional[Coordinates] = None


class Venue(BaseModel):
    venue_id: str
    name: str
    city_id: str
    capacity: Optional[int] = None
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class Session(BaseModel):
    """One concrete occurrence (a match, a show) inside an event."""
    session_id: str
    venue_id: str
    city_id: str
    date: dt.date
    time: Optional[str] = Field(default=None, description="Local start time HH:MM")
    round: Optional[str] = None
    description: Optional[str] = None


class TripPatternDefaults(BaseModel):
    days_before_event: int = 2
    days_after_event: int = 2
    recommended_trip_length: int = 5
    pattern: TripPattern = "week"


class BaseDailyBudget(BaseModel):
    budget: float
    mid: float
    luxury: float
    currency: str = "USD"

    def for_level(self, level: BudgetLevel) -> float:
        return getattr(self, level)


class PricingConfig(BaseModel):
    demand_multiplier: float = Field(1.0, description="1.0 = normal demand")
    price_surge_factor: float = Field(1.0, description="Applied to accommodation on event days")
    booking_lead_days: int = Field(60, description="Recommended advance-booking lead time")
    base_daily_budget: BaseDailyBudget


class TrademarkInfo(BaseModel):
    is_trademarked: bool = False
    owner: Optional[str] = None
    disclaimer: Optional[str] = None


class UniversalEvent(BaseModel):
    """Catalog record for an event spanning one or many cities, venues and sessions."""
    event_id: str
    name: str
    slug: str
    category: EventCategory
    multi_city: bool = False
    cities: List[EventCity]
    venues: List[Venue]
    sessions: List[Session] = []
    start_date: dt.date
    end_date: dt.date
    default_trip_pattern: TripPatternDefaults = TripPatternDefaults()
    pricing: PricingConfig

    description: Optional[str] = None
    official_url: Optional[str] = None
    tags: List[str] = []
    trademark: Optional[TrademarkInfo] = None
    source: Optional[str] = None
    is_recurring: bool = False
    recurrence_month: Optional[int] = None

    @model_validator(mode="after")
    def check_references(self) -> "UniversalEvent":
        """Enforce the referential invariants between cities, venues and sessions."""
        errors = []

        city_ids = [c.city_id for c in self.cities]
        if len(set(city_ids)) != len(city_ids):
            errors.append("duplicate city_id")

        venues: Dict[str, Venue] = {}
        for venue in self.venues:
            if venue.venue_id in venues:
                errors.append(f"duplicate venue_id {venue.venue_id}")
            venues[venue.venue_id] = venue
            if venue.city_id not in city_ids:
                errors.append(f"venue {venue.venue_id} references unknown city {venue.city_id}")

        seen_sessions = set()
        for session in self.sessions:
            if session.session_id in seen_sessions:
                errors.append(f"duplicate session_id {session.session_id}")
            seen_sessions.add(session.session_id)
            venue = venues.get(session.venue_id)
            if venue is None:
                errors.append(f"session {session.session_id} references unknown venue {session.venue_id}")
            elif venue.city_id != session.city_id:
                errors.append(
                    f"session {session.session_id} is in {session.city_id} "
                    f"but venue {venue.venue_id} is in {venue.city_id}"
                )

        if self.end_date < self.start_date:
            errors.append("end_date precedes start_date")

        if errors:
            raise CatalogIntegrityError(
                f"Event {self.event_id} failed integrity checks",
                context={"errors": errors},
            )
        return self

    def city(self, city_id: str) -> Optional[EventCity]:
        return next((c for c in self.cities if c.city_id == city_id), None)

    def venue(self, venue_id: str) -> Optional[Venue]:
        return next((v for v in self.venues if v.venue_id == venue_id), None)

    def session(self, session_id: str) -> Optional[Session]:
        return next((s for s in self.sessions if s.session_id == session_id), None)
