"""
Custom exception classes for error categorization in the event trip planner.
"""

from typing import Any, List, Optional


class EventTripError(Exception):
    """Base exception for all event trip planner errors."""

    def __init__(self, message: str, context: dict = None):
        """
        Initialize exception with message and optional context.

        Args:
            message: Error message
            context: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class TransientError(EventTripError):
    """
    Exception for transient errors that may succeed if the caller tries again.

    Examples:
        - Content generation timeouts
        - Temporary LLM provider unavailability
    """
    pass


class PermanentError(EventTripError):
    """
    Exception for permanent errors that will fail the same way on resubmission.

    Examples:
        - Malformed itinerary requests
        - Unknown event identifiers
        - Inconsistent city/session selections
    """
    pass


class InvalidRequest(PermanentError):
    """Itinerary request is malformed or missing required fields."""

    def __init__(self, message: str, validation_errors: list = None, context: dict = None):
        """
        Initialize validation error.

        Args:
            message: Error message
            validation_errors: List of specific validation errors
            context: Additional error context
        """
        super().__init__(message, context)
        self.validation_errors: List[str] = validation_errors or []


class EventNotFound(PermanentError):
    """No catalog event matches the requested identifier."""

    def __init__(self, event_id: str, context: dict = None):
        super().__init__(f"Event not found: {event_id}", context)
        self.event_id = event_id


class InvalidSelection(PermanentError):
    """
    City/session pair does not identify a session of the event.

    The interaction stays in the awaiting-selection state; ``selection`` holds
    the pending city list so the caller can resubmit.
    """

    def __init__(self, message: str, selection: Any = None, context: dict = None):
        super().__init__(message, context)
        self.selection = selection


class CatalogIntegrityError(PermanentError):
    """A catalog event references venues, cities or sessions it does not own."""
    pass


class GenerationFailed(TransientError):
    """
    Content generation was unreachable, timed out or returned unparsable content.

    ``cause`` is kept for diagnostics only and is never shown to end users.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None, context: dict = None):
        super().__init__(message, context)
        self.cause = cause
