"""
Day-phase classification tools.

This module labels each day of a trip window relative to the event date:
pre-event, the event day itself, or post-event.
"""

import datetime as dt
import logging
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel

from eventtrip.utils.config import settings
from eventtrip.utils.exceptions import InvalidRequest

logger = logging.getLogger(__name__)

Phase = Literal["before", "event", "after", "outside", "destination"]

EVENT_DAY_LABEL = "Event Day"


class DayPhase(BaseModel):
    """Phase of one trip day. ``date`` is None for undated destination trips."""
    index: int
    date: Optional[dt.date] = None
    phase: Phase
    is_event_day: bool = False
    label: str


class PhaseCounts(BaseModel):
    before: int = 0
    event: int = 0
    after: int = 0


def _plural(n: int, unit: str = "day") -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def phase_label(date: dt.date, event_date: dt.date) -> str:
    """Label a calendar date relative to the event date."""
    offset = (date - event_date).days
    if offset == 0:
        return EVENT_DAY_LABEL
    if offset < 0:
        return f"{_plural(-offset)} before"
    return f"{_plural(offset)} after"


def default_window(
    event_date: dt.date,
    days: int,
    days_before: Optional[int] = None,
) -> Tuple[dt.date, dt.date]:
    """
    Default trip window around an event when the caller gave no dates.

    The pattern is ``days_before`` pre-event days, the event day, then
    whatever remains as post-event days. Short trips shrink the post-event
    segment first, then the pre-event segment; no segment goes below zero.

        days=5 -> 2 before, event, 2 after
        days=2 -> 1 before, event
        days=1 -> event only

    Args:
        event_date: Date of the resolved occurrence
        days: Requested trip length (>= 1)
        days_before: Preferred pre-event days (defaults to settings)

    Returns:
        (start_date, end_date), both inclusive
    """
    if days < 1:
        raise InvalidRequest("Trip must be at least 1 day", validation_errors=["days must be >= 1"])

    preferred = settings.default_days_before_event if days_before is None else days_before
    before = max(0, min(preferred, days - 1))
    start = event_date - dt.timedelta(days=before)
    end = start + dt.timedelta(days=days - 1)
    return start, end


def trip_window(
    days: int,
    event_date: Optional[dt.date] = None,
    start_date: Optional[dt.date] = None,
    end_date: Optional[dt.date] = None,
    days_before: Optional[int] = None,
) -> Tuple[Optional[dt.date], Optional[dt.date]]:
    """
    Work out the trip window from whatever dates the caller supplied.

    - both dates given: used as-is (the span may differ from ``days``)
    - only start_date: end = start + days - 1
    - only end_date: start = end - (days - 1)
    - neither, with an event date: ``default_window`` with ``days_before``
      pre-event days (the event's own trip pattern when it has one)
    - neither, no event: (None, None)

    Raises:
        InvalidRequest: end_date precedes start_date
    """
    span = dt.timedelta(days=days - 1)

    if start_date and end_date:
        if end_date < start_date:
            raise InvalidRequest(
                "End date must be on or after start date",
                validation_errors=["endDate precedes startDate"],
                context={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )
        return start_date, end_date
    if start_date:
        return start_date, start_date + span
    if end_date:
        return end_date - span, end_date
    if event_date:
        return default_window(event_date, days, days_before)
    return None, None


def classify_window(
    event_date: Optional[dt.date],
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
    days: Optional[int] = None,
) -> List[DayPhase]:
    """
    Label every day of a trip.

    Enumerates each calendar day of [start_date, end_date] in order. A day is
    the event day iff its date equals event_date, so at most one day is ever
    marked and none is when the event falls outside the window.

    When ``days`` is longer than the window, the extra days continue the
    calendar past end_date with phase "outside"; they are never the event
    day. When ``days`` is shorter, the list is cut to ``days`` entries.

    Args:
        event_date: Anchor date (None for destination-only trips)
        start_date: First day of the window (None when undated)
        end_date: Last day of the window (None when undated)
        days: Number of entries to return (defaults to the window length)

    Returns:
        One DayPhase per trip day, 1-indexed
    """
    if start_date is None or end_date is None:
        count = days or 0
        return [
            DayPhase(index=i, phase="destination", label=f"Day {i}")
            for i in range(1, count + 1)
        ]

    window_len = (end_date - start_date).days + 1
    count = window_len if days is None else days

    phases = []
    for offset in range(count):
        date = start_date + dt.timedelta(days=offset)
        index = offset + 1

        if offset >= window_len:
            phases.append(DayPhase(index=index, date=date, phase="outside", label=f"Day {index}"))
            continue

        if event_date is None:
            phases.append(DayPhase(index=index, date=date, phase="destination", label=f"Day {index}"))
            continue

        if date == event_date:
            phase = "event"
        elif date < event_date:
            phase = "before"
        else:
            phase = "after"

        phases.append(
            DayPhase(
                index=index,
                date=date,
                phase=phase,
                is_event_day=phase == "event",
                label=phase_label(date, event_date),
            )
        )

    if event_date is not None and not any(p.is_event_day for p in phases):
        logger.info(f"Event date {event_date} falls outside trip window {start_date}..{end_date}")

    return phases


def count_phases(phases: List[DayPhase]) -> PhaseCounts:
    """How many days fall in each phase."""
    return PhaseCounts(
        before=sum(1 for p in phases if p.phase == "before"),
        event=sum(1 for p in phases if p.phase == "event"),
        after=sum(1 for p in phases if p.phase == "after"),
    )


def event_day_index(phases: List[DayPhase]) -> Optional[int]:
    """1-based index of the event day, or None when the event is not in the window."""
    return next((p.index for p in phases if p.is_event_day), None)
