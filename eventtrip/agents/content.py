"""
Content generation for itinerary day plans.

The assembler hands a natural-language brief to a content generator and gets
back a JSON object shaped like ``ItineraryData``. The generator is an opaque
collaborator: the LLM-backed implementation lives here and tests swap in
their own.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Protocol

from langchain_core.messages import HumanMessage, SystemMessage

from eventtrip.schemas.event import UniversalEvent
from eventtrip.schemas.itinerary import ItineraryRequest
from eventtrip.tools.day_phase import DayPhase
from eventtrip.utils.exceptions import GenerationFailed

from .llm_config import LLMProvider, llm_provider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an event-led travel planner. Events are the centerpiece of the trip;
the destination is context. Create detailed itineraries with real place names.

Output ONLY valid JSON matching this schema:
{
  "overview": "string",
  "tripSummary": {"totalDays": number, "cities": ["string"], "venues": ["string"], "highlights": ["string"]},
  "budget": {
    "totalBudget": "string",
    "breakdown": {"accommodation": "string", "transport": "string", "food": "string", "event": "string", "activities": "string"},
    "dailyAverage": "string"
  },
  "days": [
    {
      "day": number,
      "date": "YYYY-MM-DD",
      "city": "string",
      "theme": "string",
      "morning": {"time": "9:00 AM - 12:00 PM", "activities": "string", "location": "string", "cost": "string"},
      "afternoon": {"time": "12:00 PM - 6:00 PM", "activities": "string", "location": "string", "cost": "string"},
      "evening": {"time": "6:00 PM - 11:00 PM", "activities": "string", "location": "string", "cost": "string"},
      "mealsAndDining": ["string"],
      "tips": ["string"]
    }
  ],
  "accommodations": [{"name": "string", "type": "string", "price": "string", "bookingUrl": "string"}],
  "flights": [{"airline": "string", "route": "string", "price": "string", "bookingUrl": "string"}],
  "localTips": {"transport": "string", "safety": "string", "etiquette": "string"}
}

IMPORTANT: Return ONLY the JSON object, no additional text or explanation.
"""

EVENT_TIMELINE_RULES = """EVENT TIMELINE RULES:
- Before the event: low-energy activities near the venue or hotel, early nights.
- Event day: light morning, venue-area exploration and a pre-event meal, then the event itself.
  Do not schedule anything that conflicts with the event.
- After the event: recovery, iconic city experiences, broader exploration."""


class ContentGenerator(Protocol):
    """Opaque text-generation collaborator. One call, one structured response."""

    async def generate(self, system_prompt: str, brief: str) -> Dict[str, Any]:
        ...


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences around a JSON payload."""
    text = text.strip()
    if not text.startswith("```"):
        return text

    json_lines = []
    for line in text.split("\n"):
        if line.startswith("```"):
            continue
        json_lines.append(line)
    return "\n".join(json_lines).strip()


def parse_generated_content(text: str) -> Dict[str, Any]:
    """
    Parse the generator's raw text into a dict.

    Raises:
        GenerationFailed: text is not a JSON object
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise GenerationFailed("Generated content is not valid JSON", cause=e) from e

    if not isinstance(data, dict):
        raise GenerationFailed(
            "Generated content is not a JSON object",
            context={"type": type(data).__name__},
        )
    return data


class LLMContentGenerator:
    """Content generator backed by the configured LangChain chat model."""

    def __init__(self, provider: LLMProvider = None):
        self.provider = provider or llm_provider

    async def generate(self, system_prompt: str, brief: str) -> Dict[str, Any]:
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=brief),
        ]

        try:
            model = self.provider.get_model()
            response = await model.ainvoke(messages)
        except Exception as e:
            raise GenerationFailed("Content generator is unreachable", cause=e) from e

        content = response.content if isinstance(response.content, str) else str(response.content)
        logger.debug(f"LLM response length: {len(content)} chars")
        return parse_generated_content(content)


# ============================================================================
# BRIEF
# ============================================================================

def _phase_line(phase: DayPhase, request: ItineraryRequest) -> str:
    date = f" ({phase.date.isoformat()})" if phase.date else ""
    occurrence = request.occurrence

    if phase.phase == "event":
        return (
            f"Day {phase.index}{date}: EVENT DAY - {occurrence.event_name} at "
            f"{occurrence.venue} (main focus)"
        )
    if phase.phase == "before":
        return f"Day {phase.index}{date}: BEFORE EVENT ({phase.label}) - arrival, light exploration near the venue"
    if phase.phase == "after":
        return f"Day {phase.index}{date}: AFTER EVENT ({phase.label}) - recovery, iconic city experiences"
    return f"Day {phase.index}{date}: explore {request.destination}"


def build_brief(
    request: ItineraryRequest,
    phases: List[DayPhase],
    event: Optional[UniversalEvent] = None,
) -> str:
    """
    Build the natural-language brief for the content generator.

    Args:
        request: Validated itinerary request
        phases: Day-phase classification of the trip window
        event: Catalog record of the event, when the occurrence came from the catalog

    Returns:
        Brief text
    """
    occurrence = request.occurrence
    group = request.group_type or "solo"
    lines = [
        f"Create a {request.days}-day itinerary for {request.destination}.",
        "",
        "TRAVELER PROFILE:",
        f"- Group: {group} ({request.group_size} {'person' if request.group_size == 1 else 'people'})",
        f"- Budget tier: {request.budget_level}",
        f"- Travel style: {request.trip_type or 'balanced'}",
    ]
    if request.origin:
        lines.append(f"- Travelling from: {request.origin}")
    if request.team:
        lines.append(f"- Supporting: {request.team}")

    if occurrence is not None:
        lines += [
            "",
            "EVENT DETAILS:",
            f"- Event: {occurrence.event_name}",
            f"- Type: {occurrence.event_type}",
            f"- Date: {occurrence.event_date.isoformat()}" + (f" at {occurrence.time}" if occurrence.time else ""),
            f"- Venue: {occurrence.venue}, {occurrence.city}, {occurrence.country}",
        ]
        if occurrence.round or occurrence.description:
            lines.append(f"- Session: {occurrence.description or occurrence.round}")
        if occurrence.venue_capacity:
            lines.append(f"- Venue capacity: {occurrence.venue_capacity:,} (expect crowds and transit delays)")
        if event is not None:
            lines.append(
                f"- Hotel prices run about {event.pricing.price_surge_factor:g}x normal around the event"
            )
            lines.append(f"- Book accommodation at least {event.pricing.booking_lead_days} days ahead")

    if request.match_ids:
        sessions = {s.session_id: s for s in event.sessions} if event is not None else {}
        matches = []
        for match_id in request.match_ids:
            session = sessions.get(match_id)
            if session is None:
                matches.append(match_id)
            else:
                matches.append(f"{session.description or session.round or match_id} ({session.date.isoformat()})")
        lines.append(f"- Matches of interest: {'; '.join(matches)}")
    if request.optimize:
        lines.append("- Keep travel between cities and venues to a minimum")

    lines += ["", "TRIP STRUCTURE:"]
    lines += [_phase_line(phase, request) for phase in phases]

    if occurrence is not None:
        lines += ["", EVENT_TIMELINE_RULES]

    lines += [
        "",
        f"Return exactly {request.days} day entries in the \"days\" array, numbered 1 to {request.days}.",
    ]
    return "\n".join(lines)
