"""
API routes for itinerary building and export
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response

from eventtrip.agents.assembler import ItineraryAssembler, to_itinerary_request, validate_request
from eventtrip.agents.resolver import CityResolver
from eventtrip.schemas import BuildItineraryRequest, ItineraryData, ResolvedOccurrence
from eventtrip.tools.calendar import export_calendar
from eventtrip.utils.exceptions import EventNotFound, GenerationFailed, InvalidRequest, InvalidSelection
from eventtrip.utils.logger import bind_build_context

from .events import get_resolver, selection_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/itinerary", tags=["itinerary"])

_assembler: Optional[ItineraryAssembler] = None


def get_assembler() -> ItineraryAssembler:
    """Shared assembler, created on first request"""
    global _assembler
    if _assembler is None:
        _assembler = ItineraryAssembler()
    return _assembler


@router.post("")
async def build_itinerary(
    body: BuildItineraryRequest,
    assembler: ItineraryAssembler = Depends(get_assembler),
    resolver: CityResolver = Depends(get_resolver),
):
    """
    Build an itinerary.

    Catalog events (``eventId``) that span several cities need ``cityId`` and
    ``sessionId``; without them the response is the city-selection payload
    and the caller resubmits with a choice.
    """
    bind_build_context(event_id=body.event_id, city_id=body.city_id, session_id=body.session_id, days=body.days)
    try:
        occurrence: Optional[ResolvedOccurrence] = None
        if body.event_id:
            # reject malformed requests before offering or resolving a city
            validate_request(to_itinerary_request(body), require_destination=False)
            event = resolver.get_event(body.event_id)
            if event.multi_city:
                if not (body.city_id and body.session_id):
                    selection = resolver.pending_selection(body.event_id)
                    return JSONResponse(content=selection.model_dump(mode="json"))
                occurrence = resolver.resolve(body.event_id, body.city_id, body.session_id, body.ticket_url)
            else:
                occurrence = resolver.resolve_single_city(body.event_id, body.ticket_url)

        request = to_itinerary_request(body, occurrence)
        itinerary = await assembler.assemble(request)

    except InvalidRequest as e:
        raise HTTPException(status_code=400, detail={"error": e.message, "validationErrors": e.validation_errors})
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidSelection as e:
        raise selection_error(e)
    except GenerationFailed as e:
        logger.error(f"Itinerary generation failed: {e.message} (cause: {e.cause!r})")
        raise HTTPException(
            status_code=502,
            detail={"error": "Could not build itinerary", "suggestion": "Try again in a moment."},
        )

    return JSONResponse(content=itinerary.model_dump(mode="json", by_alias=True))


@router.post("/calendar")
async def export_itinerary_calendar(itinerary: ItineraryData):
    """Download an assembled itinerary as an iCal file"""
    export = export_calendar(itinerary)
    return Response(
        content=export["ical_data"],
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{export["download_filename"]}"'},
    )
