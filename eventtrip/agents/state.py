"""
State schema for the LangGraph itinerary workflow.

The state flows through the brief, generate, price and reconcile nodes.
Generate and price run in parallel, so each writes only its own keys;
``warnings`` is merged from every node that appends to it.
"""

import datetime as dt
import operator
from typing import Annotated, Any, Dict, List, Optional, TypedDict

from eventtrip.schemas.event import UniversalEvent
from eventtrip.schemas.itinerary import ContentWarning, ItineraryData, ItineraryRequest
from eventtrip.tools.budget import BudgetBreakdown
from eventtrip.tools.day_phase import DayPhase


class ItineraryState(TypedDict, total=False):
    """
    Request-scoped state for one itinerary build.

    - brief: populates start_date, end_date, phases, catalog_event, brief
    - generate: populates generated
    - price: populates authoritative_budget
    - reconcile: populates itinerary
    """
    # Input
    request: ItineraryRequest

    # Brief output
    start_date: Optional[dt.date]
    end_date: Optional[dt.date]
    phases: List[DayPhase]
    catalog_event: Optional[UniversalEvent]
    brief: str

    # Generate output
    generated: Dict[str, Any]

    # Price output
    authoritative_budget: Optional[BudgetBreakdown]

    # Reconcile output
    itinerary: ItineraryData

    warnings: Annotated[List[ContentWarning], operator.add]
