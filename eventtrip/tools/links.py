"""
Booking link generation tools.

This module builds search links for flights and hotels. They are the default
``flights`` and ``accommodations`` entries of an itinerary when the content
generator does not supply any.
"""

import datetime as dt
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


def build_flight_link(
    origin: Optional[str],
    destination: str,
    start_date: Optional[dt.date] = None,
    return_date: Optional[dt.date] = None,
) -> str:
    """
    Generate a Google Flights search link.

    Args:
        origin: Origin city or airport code (None searches from anywhere)
        destination: Destination city or airport code
        start_date: Outbound date
        return_date: Optional return date

    Returns:
        URL string for flight search
    """
    query = f"Flights to {destination}"
    if origin:
        query = f"Flights from {origin} to {destination}"
    if start_date:
        query += f" on {start_date.isoformat()}"
    if return_date:
        query += f" returning {return_date.isoformat()}"

    url = f"https://www.google.com/travel/flights?{urlencode({'q': query})}"
    logger.debug(f"Generated flight link: {url}")
    return url


def build_hotel_link(
    city: str,
    check_in: Optional[dt.date] = None,
    nights: int = 1,
    guests: int = 1,
) -> str:
    """
    Generate a Google Hotels search link.

    Args:
        city: Destination city
        check_in: Check-in date
        nights: Number of nights
        guests: Total guests

    Returns:
        URL string for hotel search
    """
    query = f"Hotels in {city}"
    if check_in:
        check_out = check_in + dt.timedelta(days=max(nights, 1))
        query += f" from {check_in.isoformat()} to {check_out.isoformat()}"
    query += f" for {guests} guest{'s' if guests != 1 else ''}"

    url = f"https://www.google.com/travel/hotels?{urlencode({'q': query})}"
    logger.debug(f"Generated hotel link: {url}")
    return url


def default_flight_entry(
    origin: Optional[str],
    destination: str,
    iata_code: Optional[str],
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
) -> Dict[str, Any]:
    """Placeholder flight entry pointing at a search for the trip window."""
    target = iata_code or destination
    return {
        "airline": "Search flights",
        "route": f"{origin or 'Your city'} → {target}",
        "price": "N/A",
        "bookingUrl": build_flight_link(origin, target, start_date, end_date),
    }


def default_accommodation_entry(
    city: str,
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
    guests: int,
) -> Dict[str, Any]:
    """Placeholder accommodation entry pointing at a hotel search for the trip window."""
    nights = (end_date - start_date).days if start_date and end_date else 1
    return {
        "name": f"Hotels in {city}",
        "type": "Search",
        "price": "N/A",
        "bookingUrl": build_hotel_link(city, start_date, nights, guests),
    }
