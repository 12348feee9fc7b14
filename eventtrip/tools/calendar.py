"""
Calendar export tools.

This module turns an assembled itinerary into iCal data for the download and
print stage. The itinerary is passed in explicitly; nothing is stored.
"""

import datetime as dt
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from eventtrip.schemas.itinerary import SLOTS, DayPlan, EventBlock, ItineraryData

logger = logging.getLogger(__name__)

# Slot windows used when a block's time text has no clock time in it
SLOT_HOURS = {
    "morning": ((9, 0), (12, 0)),
    "afternoon": ((13, 0), (17, 0)),
    "evening": ((18, 0), (22, 0)),
}

EVENT_LENGTH = dt.timedelta(hours=3)

_CLOCK = re.compile(r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])?")


def _parse_clock(text: Optional[str]) -> List[Tuple[int, int]]:
    """All HH:MM times in a string, converted to 24h."""
    times = []
    for hour, minute, meridiem in _CLOCK.findall(text or ""):
        h, m = int(hour), int(minute)
        if meridiem:
            if meridiem.lower() == "pm" and h < 12:
                h += 12
            elif meridiem.lower() == "am" and h == 12:
                h = 0
        if 0 <= h < 24 and 0 <= m < 60:
            times.append((h, m))
    return times


def _block_window(date: dt.date, slot: str, block) -> Tuple[dt.datetime, dt.datetime]:
    default_start, default_end = SLOT_HOURS[slot]

    if isinstance(block, EventBlock):
        times = _parse_clock(block.event_details.start_time) or _parse_clock(block.time)
        if times:
            start = dt.datetime.combine(date, dt.time(*times[0]))
            return start, start + EVENT_LENGTH
    else:
        times = _parse_clock(block.time)
        if len(times) >= 2:
            start = dt.datetime.combine(date, dt.time(*times[0]))
            end = dt.datetime.combine(date, dt.time(*times[1]))
            if end > start:
                return start, end
        elif times:
            start = dt.datetime.combine(date, dt.time(*times[0]))
            return start, start + dt.timedelta(hours=3)

    return (
        dt.datetime.combine(date, dt.time(*default_start)),
        dt.datetime.combine(date, dt.time(*default_end)),
    )


def _build_event_description(day: DayPlan, block) -> str:
    """
    Build event description from a day block.

    Args:
        day: DayPlan the block belongs to
        block: TimeBlock or EventBlock

    Returns:
        Event description string
    """
    parts = []

    if day.label:
        parts.append(f"Day {day.day} ({day.label})")

    if isinstance(block, EventBlock):
        details = block.event_details
        if details.doors:
            parts.append(f"Doors: {details.doors}")
        if details.duration:
            parts.append(f"Duration: {details.duration}")
        if details.ticket_url:
            parts.append(f"Tickets: {details.ticket_url}")

    if block.cost and block.cost != "N/A":
        parts.append(f"Cost: {block.cost}")

    return "\n".join(parts)


def export_calendar(itinerary: ItineraryData) -> Dict[str, Any]:
    """
    Generate calendar export data in iCal format.

    Creates one calendar event per filled day slot. Days without a date
    (undated destination trips) are skipped.

    Args:
        itinerary: Assembled itinerary

    Returns:
        Dictionary with iCal data and metadata
    """
    events = []

    for day in itinerary.days:
        if day.date is None:
            continue

        for slot in SLOTS:
            block = getattr(day, slot)
            if not block.activities:
                continue

            start_dt, end_dt = _block_window(day.date, slot, block)
            events.append({
                "summary": block.activities.splitlines()[0][:120],
                "location": ", ".join(part for part in (block.location, day.city) if part),
                "description": _build_event_description(day, block),
                "start": start_dt,
                "end": end_dt,
                "is_event": isinstance(block, EventBlock),
            })

    title = _calendar_title(itinerary)
    ical_string = _generate_ical_string(events, title)

    result = {
        "format": "ical",
        "events_count": len(events),
        "ical_data": ical_string,
        "download_filename": f"{re.sub(r'[^A-Za-z0-9]+', '_', title).strip('_').lower()}.ics",
    }

    logger.info(f"Generated calendar export with {len(events)} events")
    return result


def _calendar_title(itinerary: ItineraryData) -> str:
    if itinerary.event_anchor is not None:
        return f"{itinerary.event_anchor.event_name} trip"
    cities = [c for c in itinerary.trip_summary.cities if c]
    return f"Trip to {cities[0]}" if cities else "Trip"


def _escape(text: str) -> str:
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def _generate_ical_string(events: List[Dict[str, Any]], title: str) -> str:
    """
    Generate iCal format string from events.

    Args:
        events: List of event dictionaries
        title: Calendar name

    Returns:
        iCal format string
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//EventTrip Planner//EN",
        f"X-WR-CALNAME:{_escape(title)}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]

    for index, event in enumerate(events):
        start_ical = event["start"].strftime("%Y%m%dT%H%M%S")
        end_ical = event["end"].strftime("%Y%m%dT%H%M%S")

        lines.extend([
            "BEGIN:VEVENT",
            f"DTSTART:{start_ical}",
            f"DTEND:{end_ical}",
            f"SUMMARY:{_escape(event['summary'])}",
            f"LOCATION:{_escape(event['location'])}",
            f"DESCRIPTION:{_escape(event['description'])}",
            f"UID:{start_ical}-{index}@eventtrip",
            "STATUS:CONFIRMED",
            "SEQUENCE:0",
        ])
        if event["is_event"]:
            lines.append("CATEGORIES:EVENT")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")

    return "\r\n".join(lines)
