"""
Budget allocation tools.

This module computes the category-level cost breakdown of a trip and
reconciles it with whatever budget the content generator wrote. Numbers from
a pricing estimator are authoritative; generated numbers are placeholders.
"""

import asyncio
import datetime as dt
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Protocol

from pydantic import BaseModel

from eventtrip.data.registry import EventRegistry, event_registry
from eventtrip.schemas.itinerary import BudgetBlock, BudgetBreakdownDisplay, ItineraryRequest
from eventtrip.utils.config import settings

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

BUDGET_MULTIPLIERS = {
    "budget": 0.6,
    "mid": 1.0,
    "luxury": 2.2,
}

CATEGORY_SPLITS = {
    "accommodation": 0.35,
    "transport": 0.20,
    "food": 0.15,
    "event_tickets": 0.20,
    "activities": 0.10,
}

TICKET_COST_MULTIPLIERS = {
    "sports": 1.5,
    "music": 1.0,
    "festival": 0.8,
    "conference": 2.0,
}

INSURANCE_RATE = 0.03
ESIM_COST = 15


class BudgetBreakdown(BaseModel):
    """Authoritative breakdown from a pricing estimator. Amounts are numbers in ``currency``."""
    accommodation: float
    transport: float
    food: float
    event_tickets: float
    activities: float
    total: float
    per_day_average: float
    currency: str = "USD"
    extras: Dict[str, float] = {}

    @property
    def category_sum(self) -> float:
        return self.accommodation + self.transport + self.food + self.event_tickets + self.activities


def format_money(amount: float, currency: str = "USD") -> str:
    """Display format for an amount, e.g. ``USD 1,250``."""
    return f"{currency} {amount:,.0f}"


def split_estimate(total: float, ticket_multiplier: float = 1.0) -> Dict[str, int]:
    """
    Split a trip-cost estimate across the five budget categories.

    Args:
        total: Estimated trip cost
        ticket_multiplier: Weight applied to the event-ticket share

    Returns:
        Rounded amount per category
    """
    split = {category: round(total * share) for category, share in CATEGORY_SPLITS.items()}
    split["event_tickets"] = round(total * CATEGORY_SPLITS["event_tickets"] * ticket_multiplier)
    return split


# ============================================================================
# PRICING ESTIMATORS
# ============================================================================

class PricingEstimator(Protocol):
    """Upstream pricing collaborator. Returning None means no authoritative numbers."""

    async def estimate(
        self,
        request: ItineraryRequest,
        start_date: Optional[dt.date],
        end_date: Optional[dt.date],
    ) -> Optional[BudgetBreakdown]:
        ...


class CatalogPricingEstimator:
    """
    Deterministic estimator driven by the catalog's pricing hints.

    surged daily rate = base tier rate x demand multiplier x surge factor
    trip cost         = surged rate x nights x tier multiplier

    Accommodation scales with rooms (two travellers per room); every other
    category scales with the group size. Travel-protection extras are listed
    separately and never counted in ``total``.
    """

    def __init__(self, registry: EventRegistry = None):
        self.registry = registry or event_registry

    async def estimate(
        self,
        request: ItineraryRequest,
        start_date: Optional[dt.date],
        end_date: Optional[dt.date],
    ) -> Optional[BudgetBreakdown]:
        occurrence = request.occurrence
        if occurrence is None or not occurrence.event_id:
            return None

        event = self.registry.find_event_by_id(occurrence.event_id)
        if event is None:
            logger.warning(f"No catalog pricing for event {occurrence.event_id}")
            return None

        pricing = event.pricing
        base = pricing.base_daily_budget
        level = request.budget_level

        if start_date and end_date:
            nights = max((end_date - start_date).days, 1)
        else:
            nights = max(request.days - 1, 1)

        surged_rate = base.for_level(level) * pricing.demand_multiplier * pricing.price_surge_factor
        tier = BUDGET_MULTIPLIERS[level]
        trip_cost = surged_rate * nights * tier

        split = split_estimate(trip_cost, TICKET_COST_MULTIPLIERS.get(event.category, 1.0))
        rooms = math.ceil(request.group_size / 2)
        travellers = request.group_size

        categories = {
            "accommodation": split["accommodation"] * rooms,
            "transport": split["transport"] * travellers,
            "food": split["food"] * travellers,
            "event_tickets": split["event_tickets"] * travellers,
            "activities": split["activities"] * travellers,
        }

        extras = {}
        if self._is_international(request):
            extras["insurance"] = round(trip_cost * INSURANCE_RATE) * travellers
            extras["esim"] = ESIM_COST * travellers

        breakdown = BudgetBreakdown(
            **categories,
            total=sum(categories.values()),
            per_day_average=round(surged_rate * tier) * travellers,
            currency=base.currency,
            extras=extras,
        )
        logger.info(
            f"Catalog pricing for {event.event_id}: {nights} nights, {level}, "
            f"group of {travellers} -> {format_money(breakdown.total, breakdown.currency)}"
        )
        return breakdown

    @staticmethod
    def _is_international(request: ItineraryRequest) -> bool:
        # Unknown origin counts as international
        occurrence = request.occurrence
        if not request.origin:
            return True
        origin = request.origin.strip().lower()
        return origin not in {
            occurrence.country.lower(),
            (occurrence.country_code or "").lower(),
        }


class PricingChain:
    """
    Ordered fallback over several estimators.

    Each estimator is tried in turn and the first non-None breakdown wins.
    Failures and timeouts count as "no breakdown" and move on to the next one.
    """

    def __init__(self, estimators: List[PricingEstimator], timeout: Optional[float] = None):
        self.estimators = list(estimators)
        self.timeout = settings.pricing_timeout_seconds if timeout is None else timeout

    async def estimate(
        self,
        request: ItineraryRequest,
        start_date: Optional[dt.date],
        end_date: Optional[dt.date],
    ) -> Optional[BudgetBreakdown]:
        for estimator in self.estimators:
            name = type(estimator).__name__
            try:
                result = await asyncio.wait_for(
                    estimator.estimate(request, start_date, end_date),
                    timeout=self.timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Pricing estimator {name} timed out after {self.timeout}s")
                continue
            except Exception as e:
                logger.warning(f"Pricing estimator {name} failed: {e}")
                continue

            if result is not None:
                logger.info(f"Authoritative budget from {name}")
                return result

        logger.info("No authoritative budget available")
        return None


# ============================================================================
# ALLOCATOR
# ============================================================================

def _display(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str):
        return value.strip() or NOT_AVAILABLE
    return str(value)


class BudgetAllocator:
    """Builds the itinerary budget block."""

    def allocate(
        self,
        generated: Optional[Mapping[str, Any]] = None,
        authoritative: Optional[BudgetBreakdown] = None,
    ) -> BudgetBlock:
        """
        Produce the budget block for an itinerary.

        An authoritative breakdown always wins: its five categories and
        per-day average are formatted for display and the generated budget is
        discarded. Without one, the generated budget passes through and every
        missing field reads "N/A".

        Args:
            generated: Budget object written by the content generator (camelCase keys)
            authoritative: Breakdown from a pricing estimator

        Returns:
            BudgetBlock with every field populated
        """
        if authoritative is not None:
            return self._from_authoritative(authoritative)
        return self._from_generated(generated or {})

    @staticmethod
    def _from_authoritative(b: BudgetBreakdown) -> BudgetBlock:
        def money(amount: float) -> str:
            return format_money(amount, b.currency)

        return BudgetBlock(
            total_budget=money(b.total),
            breakdown=BudgetBreakdownDisplay(
                accommodation=money(b.accommodation),
                transport=money(b.transport),
                food=money(b.food),
                event=money(b.event_tickets),
                activities=money(b.activities),
            ),
            daily_average=money(b.per_day_average),
            event_day_cost=money(b.event_tickets + b.per_day_average),
            source="authoritative",
            extras={name: money(amount) for name, amount in b.extras.items()},
        )

    @staticmethod
    def _from_generated(generated: Mapping[str, Any]) -> BudgetBlock:
        breakdown = generated.get("breakdown") or {}
        if not isinstance(breakdown, Mapping):
            breakdown = {}

        daily_average = _display(generated.get("dailyAverage"))
        return BudgetBlock(
            total_budget=_display(generated.get("totalBudget")),
            breakdown=BudgetBreakdownDisplay(
                accommodation=_display(breakdown.get("accommodation")),
                transport=_display(breakdown.get("transport")),
                food=_display(breakdown.get("food")),
                event=_display(breakdown.get("event", breakdown.get("eventTickets"))),
                activities=_display(breakdown.get("activities")),
            ),
            daily_average=daily_average,
            event_day_cost=daily_average,
            source="generated",
        )


# Global instance
budget_allocator = BudgetAllocator()
