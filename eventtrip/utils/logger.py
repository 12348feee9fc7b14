"""
Structured logging for EventTrip.

Modules that emit structured events (catalog lookups, city selection, app
lifecycle) log through ``get_logger``; the rest use stdlib loggers, which
share the same stdout handler. Fields bound with ``bind_build_context`` are
attached to every structured event emitted while one itinerary request is
being handled.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .config import settings

SERVICE_NAME = "eventtrip"

# Client libraries used for generation log every HTTP round trip at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "botocore", "urllib3")


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def add_service(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the service and deployment environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def configure_logging(log_level: str = "INFO") -> None:
    """
    Route stdlib logging and structlog to stdout.

    DEBUG renders human-readable console lines; every other level renders
    one JSON object per line.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        add_service,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if log_level.upper() == "DEBUG":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_build_context(**fields: Any) -> None:
    """
    Start a fresh logging context for one itinerary request.

    None values are dropped so free-form requests don't log empty catalog ids.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**{k: v for k, v in fields.items() if v is not None})


configure_logging(settings.log_level)
