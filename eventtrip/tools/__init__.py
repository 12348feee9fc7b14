"""
Tools package for the event trip planner.

This package contains utility functions for:
- Day-phase classification around the event date
- Budget allocation and pricing estimates
- Booking link generation
- Calendar export functionality
"""

from .day_phase import DayPhase, classify_window, default_window, trip_window
from .budget import (
    BudgetAllocator,
    BudgetBreakdown,
    CatalogPricingEstimator,
    PricingChain,
    budget_allocator,
    format_money,
)
from .links import build_flight_link, build_hotel_link
from .calendar import export_calendar

__all__ = [
    "DayPhase",
    "classify_window",
    "default_window",
    "trip_window",
    "BudgetAllocator",
    "BudgetBreakdown",
    "CatalogPricingEstimator",
    "PricingChain",
    "budget_allocator",
    "format_money",
    "build_flight_link",
    "build_hotel_link",
    "export_calendar",
]
