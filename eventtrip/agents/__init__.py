"""
Agents package for event-anchored itinerary planning.

This package contains the city resolver, the LLM configuration, the content
generator and the LangGraph workflow that assembles itineraries.
"""

from .state import ItineraryState
from .llm_config import llm_provider, LLMProvider
from .resolver import CityResolver, build_city_selection, city_resolver
from .content import ContentGenerator, LLMContentGenerator
from .graph import create_itinerary_graph
from .assembler import ItineraryAssembler, to_itinerary_request, validate_request

__all__ = [
    "ItineraryState",
    "llm_provider",
    "LLMProvider",
    "CityResolver",
    "build_city_selection",
    "city_resolver",
    "ContentGenerator",
    "LLMContentGenerator",
    "create_itinerary_graph",
    "ItineraryAssembler",
    "to_itinerary_request",
    "validate_request",
]
