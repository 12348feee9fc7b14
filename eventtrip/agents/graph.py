"""
LangGraph workflow for itinerary assembly.

    brief ──┬── generate ──┬── reconcile ── END
            └── price ─────┘

The generate and price nodes run concurrently; reconcile waits for both.
Generation is bounded by ``settings.generation_timeout_seconds`` and called
exactly once. Any generation failure aborts the run, so no partial itinerary
ever leaves the graph. Pricing failures only mean "no authoritative budget".
"""

import asyncio
import datetime as dt
import logging
from typing import Optional

from langgraph.graph import END, StateGraph

from eventtrip.data.registry import EventRegistry, event_registry
from eventtrip.schemas.itinerary import (
    ContentWarning,
    EventAnchor,
    ItineraryData,
    ItineraryMetadata,
)
from eventtrip.tools.budget import PricingEstimator, budget_allocator, format_money
from eventtrip.tools.day_phase import classify_window, event_day_index, trip_window
from eventtrip.utils.config import settings
from eventtrip.utils.exceptions import GenerationFailed

from .content import SYSTEM_PROMPT, ContentGenerator, build_brief
from .reconcile import backfill, sanitize_days
from .state import ItineraryState

logger = logging.getLogger(__name__)


def create_itinerary_graph(
    generator: ContentGenerator,
    pricing: Optional[PricingEstimator] = None,
    registry: EventRegistry = None,
    generation_timeout: Optional[float] = None,
):
    """
    Create the LangGraph workflow for one itinerary build.

    Args:
        generator: Content-generation collaborator
        pricing: Pricing collaborator (None means generated budgets only)
        registry: Catalog used to look up pricing hints for the brief
        generation_timeout: Wall-clock ceiling for generation in seconds

    Returns:
        Compiled LangGraph application
    """
    registry = registry or event_registry
    timeout = settings.generation_timeout_seconds if generation_timeout is None else generation_timeout

    async def brief_node(state: ItineraryState) -> dict:
        request = state["request"]
        occurrence = request.occurrence
        event_date = occurrence.event_date if occurrence is not None else None

        catalog_event = None
        if occurrence is not None and occurrence.event_id:
            catalog_event = registry.find_event_by_id(occurrence.event_id)
        days_before = catalog_event.default_trip_pattern.days_before_event if catalog_event is not None else None

        start_date, end_date = trip_window(
            request.days, event_date, request.start_date, request.end_date, days_before=days_before
        )
        phases = classify_window(event_date, start_date, end_date, days=request.days)

        warnings = []
        if start_date and end_date:
            span = (end_date - start_date).days + 1
            if span != request.days:
                warnings.append(
                    ContentWarning(
                        field="dates",
                        message=(
                            f"Trip window {start_date} to {end_date} covers {span} days "
                            f"but {request.days} were requested"
                        ),
                        requested=request.days,
                        returned=span,
                    )
                )

        logger.info(f"Brief ready: {request.days} days in {request.destination}, window {start_date}..{end_date}")
        return {
            "start_date": start_date,
            "end_date": end_date,
            "phases": phases,
            "catalog_event": catalog_event,
            "brief": build_brief(request, phases, catalog_event),
            "warnings": warnings,
        }

    async def generate_node(state: ItineraryState) -> dict:
        logger.info("Invoking content generator")
        started = dt.datetime.now()
        try:
            generated = await asyncio.wait_for(
                generator.generate(SYSTEM_PROMPT, state["brief"]),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Content generation timed out after {timeout}s")
            raise GenerationFailed("Content generation timed out", cause=e, context={"timeout": timeout}) from e
        except GenerationFailed:
            raise
        except Exception as e:
            logger.error(f"Content generation failed: {e}")
            raise GenerationFailed("Content generation failed", cause=e) from e

        if not isinstance(generated, dict):
            raise GenerationFailed("Generated content is not a JSON object")

        elapsed = (dt.datetime.now() - started).total_seconds()
        logger.info(f"Content generated in {elapsed:.2f}s")
        return {"generated": generated}

    async def price_node(state: ItineraryState) -> dict:
        if pricing is None:
            return {"authoritative_budget": None}
        try:
            breakdown = await asyncio.wait_for(
                pricing.estimate(state["request"], state["start_date"], state["end_date"]),
                timeout=settings.pricing_timeout_seconds,
            )
        except Exception as e:
            logger.warning(f"Pricing unavailable, using generated budget: {e}")
            breakdown = None
        return {"authoritative_budget": breakdown}

    async def reconcile_node(state: ItineraryState) -> dict:
        request = state["request"]
        generated = state["generated"]
        authoritative = state.get("authoritative_budget")
        phases = state["phases"]
        warnings = []

        generated_budget = generated.get("budget")
        if authoritative is None and not isinstance(generated_budget, dict):
            warnings.append(ContentWarning(field="budget", message="budget was not generated; N/A used"))
            generated_budget = None
        budget = budget_allocator.allocate(generated_budget, authoritative)

        event_cost = "N/A"
        if authoritative is not None:
            event_cost = format_money(authoritative.event_tickets, authoritative.currency)

        raw_days = generated.get("days")
        days, day_warnings = sanitize_days(raw_days, phases, request, event_cost)
        fields, field_warnings = backfill(generated, request, state["start_date"], state["end_date"])
        warnings += day_warnings + field_warnings

        occurrence = request.occurrence
        event_anchor = None
        if occurrence is not None:
            event_anchor = EventAnchor(
                event_name=occurrence.event_name,
                event_date=occurrence.event_date,
                venue=occurrence.venue,
                event_type=occurrence.event_type,
                city=occurrence.city,
                country=occurrence.country,
                event_day=event_day_index(phases),
            )

        metadata = ItineraryMetadata(
            generated_at=dt.datetime.now(dt.timezone.utc).isoformat(),
            is_event_anchored=request.is_event_anchored,
            requested_days=request.days,
            returned_days=len(raw_days) if isinstance(raw_days, list) else 0,
            budget_source=budget.source,
            budget_level=request.budget_level,
            group_size=request.group_size,
            group_type=request.group_type,
            start_date=state["start_date"],
            end_date=state["end_date"],
        )

        itinerary = ItineraryData(
            budget=budget,
            days=days,
            event_anchor=event_anchor,
            warnings=state.get("warnings", []) + warnings,
            metadata=metadata,
            **fields,
        )
        if itinerary.has_warnings:
            logger.info(f"Itinerary assembled with {len(itinerary.warnings)} warnings")
        return {"itinerary": itinerary, "warnings": warnings}

    logger.info("Creating LangGraph workflow for itinerary assembly")
    workflow = StateGraph(ItineraryState)

    workflow.add_node("brief", brief_node)
    workflow.add_node("generate", generate_node)
    workflow.add_node("price", price_node)
    workflow.add_node("reconcile", reconcile_node)

    # brief fans out; reconcile waits for both branches
    workflow.set_entry_point("brief")
    workflow.add_edge("brief", "generate")
    workflow.add_edge("brief", "price")
    workflow.add_edge(["generate", "price"], "reconcile")
    workflow.add_edge("reconcile", END)

    return workflow.compile()
