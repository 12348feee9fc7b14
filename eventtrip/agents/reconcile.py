"""
Reconciliation of generated content with the requested trip.

Generated content is best-effort: it may return too many or too few days,
leave out top-level fields, or write budget figures that disagree with the
pricing estimator. These helpers turn it into a fully populated itinerary
and record every discrepancy as a ContentWarning.
"""

import datetime as dt
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from eventtrip.schemas.itinerary import (
    DayPlan,
    EventBlock,
    EventDetails,
    ContentWarning,
    ItineraryRequest,
    ResolvedOccurrence,
    TimeBlock,
    TripSummary,
)
from eventtrip.tools.day_phase import DayPhase
from eventtrip.tools.links import default_accommodation_entry, default_flight_entry

logger = logging.getLogger(__name__)

DOORS_LEAD = dt.timedelta(minutes=90)

EVENT_DURATIONS = {
    "sports": "2-3 hours",
    "music": "3 hours",
    "festivals": "All day",
}

PLACEHOLDER_SLOTS = {
    "morning": ("9:00 AM - 12:00 PM", "Free morning to explore {city}"),
    "afternoon": ("12:00 PM - 6:00 PM", "Free afternoon in {city}"),
    "evening": ("6:00 PM - 11:00 PM", "Dinner and evening at leisure in {city}"),
}


# ============================================================================
# DAY BLOCKS
# ============================================================================

def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip() or default
    if isinstance(value, list):
        return ", ".join(str(v) for v in value if v) or default
    return str(value)


def _meal(value: Any):
    if isinstance(value, Mapping):
        return dict(value)
    return _text(value)


def _text_list(value: Any, default: List[str]) -> List[str]:
    """A generated list of strings; a lone scalar counts as a one-item list."""
    if value in (None, "", [], {}):
        return list(default)
    if not isinstance(value, list):
        value = [value]
    return [_text(v) for v in value if v not in (None, "")]


def parse_time_block(raw: Any) -> TimeBlock:
    """Read one generated slot. Anything that is not an object becomes the activity text."""
    if isinstance(raw, Mapping):
        return TimeBlock(
            time=_text(raw.get("time")),
            activities=_text(raw.get("activities", raw.get("activity"))),
            location=_text(raw.get("location")),
            cost=_text(raw.get("cost"), "N/A"),
        )
    return TimeBlock(activities=_text(raw))


def placeholder_block(slot: str, city: str) -> TimeBlock:
    time, activities = PLACEHOLDER_SLOTS[slot]
    return TimeBlock(time=time, activities=activities.format(city=city or "the city"))


def event_slot(start_time: Optional[str]) -> str:
    """Slot that holds the event: morning before noon, afternoon before 17:00, else evening."""
    if not start_time:
        return "evening"
    try:
        hour = int(start_time.split(":")[0])
    except (ValueError, IndexError):
        return "evening"
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def build_event_block(occurrence: ResolvedOccurrence, cost: str = "N/A") -> EventBlock:
    """The day block for the event itself; doors open 90 minutes before the start."""
    doors = "TBA"
    start = occurrence.time or "TBA"
    if occurrence.time:
        try:
            start_dt = dt.datetime.strptime(occurrence.time, "%H:%M")
            doors = (start_dt - DOORS_LEAD).strftime("%H:%M")
        except ValueError:
            logger.warning(f"Unparseable session time: {occurrence.time}")

    activities = f"{occurrence.event_name} at {occurrence.venue}"
    if occurrence.description and occurrence.description != occurrence.event_name:
        activities += f" ({occurrence.description})"

    return EventBlock(
        time=occurrence.time or "Evening",
        activities=activities,
        location=f"{occurrence.venue}, {occurrence.city}",
        cost=cost,
        event_details=EventDetails(
            doors=doors,
            start_time=start,
            duration=EVENT_DURATIONS.get(occurrence.event_type, "3 hours"),
            ticket_url=occurrence.ticket_url,
        ),
    )


# ============================================================================
# DAYS
# ============================================================================

def _raw_date(raw: Mapping[str, Any]) -> Optional[dt.date]:
    value = raw.get("date")
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value)[:10]) if value else None
    except ValueError:
        return None


def _match_generated_days(
    generated: List[Any],
    phases: List[DayPhase],
) -> Tuple[List[Optional[Mapping[str, Any]]], int, int]:
    """
    Pair each trip day with a generated day.

    A generated day whose date falls on a trip day is matched by date; the
    rest are matched by position. Trip days left without a match get None.

    Returns:
        (matched, unmatched, unused): one entry per trip day, the number of
        trip days with no generated content and the number of generated
        entries that were never placed
    """
    raw_days = [d for d in generated if isinstance(d, Mapping)]
    by_date: Dict[dt.date, int] = {}
    for position, raw in enumerate(raw_days):
        date = _raw_date(raw)
        if date is not None and date not in by_date:
            by_date[date] = position

    window_dates = {p.date for p in phases if p.date is not None}
    dated = {pos for date, pos in by_date.items() if date in window_dates}
    used = set()
    matched: List[Optional[Mapping[str, Any]]] = []

    for offset, phase in enumerate(phases):
        position = by_date.get(phase.date) if phase.date is not None else None
        if position is None or position in used:
            position = offset if offset < len(raw_days) and offset not in used and offset not in dated else None
        if position is None:
            matched.append(None)
            continue
        used.add(position)
        matched.append(raw_days[position])

    unmatched = sum(1 for m in matched if m is None)
    unused = len(generated) - len(used)
    return matched, unmatched, unused


def sanitize_days(
    generated: Any,
    phases: List[DayPhase],
    request: ItineraryRequest,
    event_cost: str = "N/A",
) -> Tuple[List[DayPlan], List[ContentWarning]]:
    """
    Build exactly ``request.days`` DayPlans from the generated days.

    Missing days are padded with placeholder blocks and extra days are
    dropped. A warning records how many were requested and returned whenever
    the counts differ or any trip day or generated day went unmatched, for
    example when the generated dates are shifted off the window. Phase
    labels and dates come from the classifier, never from the generator.
    The event day gets an EventBlock in the slot matching the session start
    time.

    Args:
        generated: The generator's "days" value
        phases: One DayPhase per requested day
        request: Validated request
        event_cost: Display cost for the event block

    Returns:
        (days, warnings)
    """
    warnings = []
    generated_days = generated if isinstance(generated, list) else []
    returned = len(generated_days)
    matched, unmatched, unused = _match_generated_days(generated_days, phases)

    if returned != request.days or unmatched or unused:
        if returned != request.days:
            action = "padded with placeholder days" if returned < request.days else "truncated"
            message = f"Requested {request.days} days but the generator returned {returned}; itinerary {action}"
        else:
            message = f"Requested {request.days} days and the generator returned {returned}"
        if unmatched or unused:
            message += f"; {unmatched} trip days padded, {unused} generated days dropped"
        logger.warning(message)
        warnings.append(
            ContentWarning(field="days", message=message, requested=request.days, returned=returned)
        )

    city = request.destination
    days = []
    for phase, raw in zip(phases, matched):
        raw = raw or {}
        day_city = _text(raw.get("city"), city)
        slots = {
            slot: parse_time_block(raw[slot]) if raw.get(slot) else placeholder_block(slot, day_city)
            for slot in ("morning", "afternoon", "evening")
        }

        if phase.is_event_day and request.occurrence is not None:
            slots[event_slot(request.occurrence.time)] = build_event_block(request.occurrence, event_cost)

        meals = raw.get("mealsAndDining", raw.get("meals", []))
        tips = raw.get("tips", [])
        days.append(
            DayPlan(
                day=phase.index,
                date=phase.date,
                city=day_city,
                theme=_text(raw.get("theme"), phase.label),
                is_event_day=phase.is_event_day,
                label=phase.label,
                meals_and_dining=[_meal(m) for m in meals] if isinstance(meals, list) else [_text(meals)],
                tips=[_text(t) for t in tips] if isinstance(tips, list) else [_text(tips)],
                **slots,
            )
        )

    return days, warnings


# ============================================================================
# TOP-LEVEL FIELDS
# ============================================================================

def backfill(
    generated: Mapping[str, Any],
    request: ItineraryRequest,
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
) -> Tuple[Dict[str, Any], List[ContentWarning]]:
    """
    Fill every top-level field the generator left out.

    Defaults:
        overview        one-line summary of the trip
        tripSummary     requested length, destination city, event venue
        accommodations  hotel search link for the trip window
        flights         flight search link for the trip window
        localTips       empty object

    Returns:
        (fields, warnings) where fields holds overview, trip_summary,
        accommodations, flights and local_tips
    """
    warnings = []
    occurrence = request.occurrence
    city = request.destination

    def missing(name: str) -> bool:
        value = generated.get(name)
        if value in (None, "", [], {}):
            warnings.append(
                ContentWarning(field=name, message=f"{name} was not generated; default used")
            )
            return True
        return False

    if missing("overview"):
        if occurrence is not None:
            overview = f"A {request.days}-day trip to {city} built around {occurrence.event_name}."
        else:
            overview = f"A {request.days}-day trip to {city}."
    else:
        overview = _text(generated["overview"])

    venues = [occurrence.venue] if occurrence is not None else []
    summary_raw = generated.get("tripSummary")
    if missing("tripSummary") or not isinstance(summary_raw, Mapping):
        summary_raw = {}
    trip_summary = TripSummary(
        total_days=request.days,
        cities=_text_list(summary_raw.get("cities"), [city]),
        venues=_text_list(summary_raw.get("venues"), venues),
        highlights=_text_list(summary_raw.get("highlights"), []),
    )

    def entries(name: str) -> List[Dict[str, Any]]:
        """Generated booking entries; empty when the field is absent or unusable."""
        if missing(name):
            return []
        value = generated[name]
        kept = [dict(e) for e in value if isinstance(e, Mapping)] if isinstance(value, list) else []
        if not kept:
            warnings.append(
                ContentWarning(field=name, message=f"{name} had no usable entries; default used")
            )
        return kept

    accommodations = entries("accommodations") or [
        default_accommodation_entry(city, start_date, end_date, request.group_size)
    ]

    iata = occurrence.iata_code if occurrence is not None else None
    flights = entries("flights") or [default_flight_entry(request.origin, city, iata, start_date, end_date)]

    local_tips = {} if missing("localTips") else generated["localTips"]
    if not isinstance(local_tips, Mapping):
        local_tips = {"general": _text(local_tips)}

    fields = {
        "overview": overview,
        "trip_summary": trip_summary,
        "accommodations": accommodations,
        "flights": flights,
        "local_tips": dict(local_tips),
    }
    return fields, warnings
