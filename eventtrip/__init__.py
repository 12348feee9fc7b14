"""Event-anchored itinerary planning service."""

__version__ = "1.0.0"
