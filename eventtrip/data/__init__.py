"""Static event catalog and its query layer."""

from .registry import ALL_EVENTS, EventFilter, EventRegistry, event_registry

__all__ = ["ALL_EVENTS", "EventFilter", "EventRegistry", "event_registry"]
