"""
Itinerary Assembler: top-level orchestrator of an itinerary build.

The assembler validates the request, then runs the itinerary graph, which
invokes the content generator once, consults the pricing estimator in
parallel and reconciles both into a single ItineraryData.
"""

import logging
from typing import List, Optional, Tuple

from eventtrip.data.registry import EventRegistry, event_registry
from eventtrip.schemas.itinerary import ItineraryData, ItineraryRequest, ResolvedOccurrence
from eventtrip.schemas.requests import BuildItineraryRequest
from eventtrip.tools.budget import CatalogPricingEstimator, PricingChain, PricingEstimator
from eventtrip.utils.config import settings
from eventtrip.utils.exceptions import EventTripError, GenerationFailed, InvalidRequest

from .content import ContentGenerator, LLMContentGenerator
from .graph import create_itinerary_graph

logger = logging.getLogger(__name__)

BUDGET_LEVELS = {
    "budget": "budget",
    "mid": "mid",
    "mid-range": "mid",
    "midrange": "mid",
    "moderate": "mid",
    "luxury": "luxury",
}

GROUP_TYPES = ("solo", "couple", "family", "group")

EVENT_TYPES = {
    "sports": "sports",
    "sport": "sports",
    "music": "music",
    "concert": "music",
    "festival": "festivals",
    "festivals": "festivals",
}


def check_request(request: ItineraryRequest, require_destination: bool = True) -> Tuple[bool, List[str]]:
    """
    Check an itinerary request before any external call is made.

    Args:
        request: Request to check
        require_destination: False while a catalog event is still to be resolved

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if request.days < 1 or request.days > settings.max_trip_days:
        errors.append(f"days must be between 1 and {settings.max_trip_days}")

    if request.group_size < 1:
        errors.append("groupSize must be at least 1")

    if require_destination and request.occurrence is None and not (request.location or "").strip():
        errors.append("Either event details (eventName, eventDate) or location is required")

    if request.start_date and request.end_date and request.end_date < request.start_date:
        errors.append("endDate must be on or after startDate")

    return len(errors) == 0, errors


def validate_request(request: ItineraryRequest, require_destination: bool = True) -> None:
    """
    Raises:
        InvalidRequest: request is malformed; validation_errors lists every problem
    """
    is_valid, errors = check_request(request, require_destination)
    if not is_valid:
        logger.warning(f"Rejected itinerary request: {errors}")
        raise InvalidRequest("; ".join(errors), validation_errors=errors)


def to_itinerary_request(
    body: BuildItineraryRequest,
    occurrence: Optional[ResolvedOccurrence] = None,
) -> ItineraryRequest:
    """
    Map an inbound build request onto an ItineraryRequest.

    A request is event-anchored when a resolved occurrence is passed in, or
    when the body names both the event and its date. The venue is optional;
    the city falls back to ``location``.

    Raises:
        InvalidRequest: budget or group type is not recognised
    """
    budget_level = BUDGET_LEVELS.get(body.budget.strip().lower())
    if budget_level is None:
        raise InvalidRequest(
            f"Unknown budget level: {body.budget}",
            validation_errors=["budget must be budget, mid-range or luxury"],
        )

    group_type = None
    if body.group_type:
        group_type = body.group_type.strip().lower()
        if group_type not in GROUP_TYPES:
            raise InvalidRequest(
                f"Unknown group type: {body.group_type}",
                validation_errors=["groupType must be solo, couple, family or group"],
            )

    if occurrence is None and body.event_name and body.event_date:
        city = body.event_city or body.location or ""
        occurrence = ResolvedOccurrence(
            event_name=body.event_name,
            event_date=body.event_date,
            venue=body.event_venue or city,
            city=city,
            country=body.event_country or "",
            event_type=EVENT_TYPES.get((body.event_type or "").strip().lower(), "festivals"),
            ticket_url=body.ticket_url,
        )
    elif occurrence is not None and body.ticket_url and not occurrence.ticket_url:
        occurrence = occurrence.model_copy(update={"ticket_url": body.ticket_url})

    return ItineraryRequest(
        days=body.days,
        budget_level=budget_level,
        group_size=body.group_size,
        group_type=group_type,
        start_date=body.start_date,
        end_date=body.end_date,
        location=body.location,
        occurrence=occurrence,
        trip_type=body.trip_type,
        origin=body.origin,
        team=body.team,
        match_ids=body.match_ids,
        optimize=body.optimize,
    )


class ItineraryAssembler:
    """
    Builds itineraries from validated requests.

    Holds no per-request state: the graph's state lives only for the
    duration of one ``assemble`` call, so one assembler serves concurrent
    requests.
    """

    def __init__(
        self,
        generator: ContentGenerator = None,
        pricing: Optional[PricingEstimator] = None,
        registry: EventRegistry = None,
        generation_timeout: Optional[float] = None,
    ):
        self.registry = registry or event_registry
        self.generator = generator or LLMContentGenerator()
        if pricing is None:
            pricing = PricingChain([CatalogPricingEstimator(self.registry)])
        self.pricing = pricing
        self.graph = create_itinerary_graph(
            self.generator,
            self.pricing,
            registry=self.registry,
            generation_timeout=generation_timeout,
        )

    async def assemble(self, request: ItineraryRequest) -> ItineraryData:
        """
        Assemble an itinerary.

        Args:
            request: Itinerary request

        Returns:
            Fully populated ItineraryData with exactly ``request.days`` days

        Raises:
            InvalidRequest: request failed validation (nothing external was called)
            GenerationFailed: content could not be generated or parsed
        """
        validate_request(request)

        logger.info(
            f"Assembling {request.days}-day itinerary for {request.destination} "
            f"(event-anchored: {request.is_event_anchored})"
        )
        try:
            result = await self.graph.ainvoke({"request": request, "warnings": []})
        except EventTripError:
            raise
        except Exception as e:
            logger.error(f"Itinerary assembly failed: {e}")
            raise GenerationFailed("Could not build itinerary", cause=e) from e

        itinerary = result["itinerary"]
        logger.info(f"Itinerary ready: {len(itinerary.days)} days, budget source {itinerary.budget.source}")
        return itinerary
