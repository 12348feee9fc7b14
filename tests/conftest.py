"""
Shared fixtures and test doubles.
"""
import asyncio
import datetime as dt
from typing import Any, Dict, List, Optional

import pytest

from eventtrip.schemas.event import (
    BaseDailyBudget,
    EventCity,
    PricingConfig,
    Session,
    UniversalEvent,
    Venue,
)
from eventtrip.schemas.itinerary import ItineraryRequest, ResolvedOccurrence
from eventtrip.tools.budget import BudgetBreakdown


def make_days(dates: List[str], city: str = "New York") -> List[Dict[str, Any]]:
    return [
        {
            "day": i + 1,
            "date": date,
            "city": city,
            "theme": f"Theme {i + 1}",
            "morning": {"time": "9:00 AM - 12:00 PM", "activities": f"Museum {i + 1}", "location": "Midtown", "cost": "$25"},
            "afternoon": {"time": "12:00 PM - 6:00 PM", "activities": f"Park {i + 1}", "location": "Central Park", "cost": "$0"},
            "evening": {"time": "6:00 PM - 11:00 PM", "activities": f"Dinner {i + 1}", "location": "SoHo", "cost": "$60"},
            "mealsAndDining": ["Bagels"],
            "tips": ["Take the subway"],
        }
        for i, date in enumerate(dates)
    ]


def make_generated(dates: List[str], **overrides) -> Dict[str, Any]:
    content = {
        "overview": "A trip built around the final.",
        "tripSummary": {"totalDays": len(dates), "cities": ["New York"], "highlights": ["The final"]},
        "budget": {
            "totalBudget": "$3,000",
            "breakdown": {"accommodation": "$1,200", "transport": "$600"},
            "dailyAverage": "$600",
        },
        "days": make_days(dates),
        "accommodations": [{"name": "Hotel Near Stadium", "price": "$300"}],
        "flights": [{"airline": "Example Air", "price": "$450"}],
        "localTips": {"transport": "NJ Transit runs to the stadium"},
    }
    content.update(overrides)
    return content


class FakeGenerator:
    """Content generator returning canned content; records every call."""

    def __init__(self, content: Optional[Dict[str, Any]] = None, error: Exception = None, delay: float = 0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    async def generate(self, system_prompt: str, brief: str) -> Dict[str, Any]:
        self.calls.append(brief)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.content


class FakePricing:
    """Pricing estimator returning a fixed breakdown (or None); records every call."""

    def __init__(self, breakdown: Optional[BudgetBreakdown] = None, error: Exception = None):
        self.breakdown = breakdown
        self.error = error
        self.calls = 0

    async def estimate(self, request, start_date, end_date):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.breakdown


@pytest.fixture
def breakdown() -> BudgetBreakdown:
    return BudgetBreakdown(
        accommodation=1400,
        transport=800,
        food=600,
        event_tickets=1200,
        activities=400,
        total=4400,
        per_day_average=1000,
        currency="USD",
        extras={"insurance": 120},
    )


@pytest.fixture
def occurrence() -> ResolvedOccurrence:
    return ResolvedOccurrence(
        event_name="Test Cup Final",
        event_date=dt.date(2026, 7, 19),
        venue="MetLife Stadium",
        city="New York",
        country="United States",
        event_type="sports",
        time="18:00",
        country_code="US",
        iata_code="JFK",
    )


@pytest.fixture
def event_request(occurrence) -> ItineraryRequest:
    return ItineraryRequest(
        days=5,
        budget_level="mid",
        group_size=2,
        group_type="couple",
        start_date=dt.date(2026, 7, 17),
        end_date=dt.date(2026, 7, 21),
        occurrence=occurrence,
    )


@pytest.fixture
def two_city_event() -> UniversalEvent:
    return UniversalEvent(
        event_id="test-cup",
        name="Test Cup",
        slug="test-cup",
        category="sports",
        multi_city=True,
        cities=[
            EventCity(city_id="nyc", name="New York", country="United States", country_code="US",
                      iata_code="JFK", timezone="America/New_York"),
            EventCity(city_id="lax", name="Los Angeles", country="United States", country_code="US",
                      iata_code="LAX", timezone="America/Los_Angeles"),
        ],
        venues=[
            Venue(venue_id="metlife", name="MetLife Stadium", city_id="nyc", capacity=82500),
            Venue(venue_id="sofi", name="SoFi Stadium", city_id="lax", capacity=70240),
        ],
        sessions=[
            Session(session_id="final", venue_id="metlife", city_id="nyc", date="2026-07-19",
                    time="18:00", round="Final"),
            Session(session_id="semi", venue_id="sofi", city_id="lax", date="2026-07-15",
                    time="18:00", round="Semi Final"),
            Session(session_id="group", venue_id="sofi", city_id="lax", date="2026-06-13",
                    round="Group Stage"),
        ],
        start_date="2026-06-13",
        end_date="2026-07-19",
        pricing=PricingConfig(
            demand_multiplier=2.0,
            price_surge_factor=1.5,
            booking_lead_days=90,
            base_daily_budget=BaseDailyBudget(budget=100, mid=200, luxury=500),
        ),
    )
