"""
FIFA World Cup 2026 catalog record.

16 host cities across the USA, Canada and Mexico. Sessions cover the opening
match, the final and key dates per city; the full match schedule is added as
FIFA releases it.
"""
from eventtrip.schemas.event import (
    BaseDailyBudget,
    Coordinates,
    EventCity,
    PricingConfig,
    Session,
    TrademarkInfo,
    TripPatternDefaults,
    UniversalEvent,
    Venue,
)

# city_id, name, country, country_code, iata_code, timezone, lat, lng
_CITIES = [
    ("nyc", "New York / New Jersey", "United States", "US", "JFK", "America/New_York", 40.8135, -74.0745),
    ("lax", "Los Angeles", "United States", "US", "LAX", "America/Los_Angeles", 33.9534, -118.3390),
    ("dfw", "Dallas", "United States", "US", "DFW", "America/Chicago", 32.7479, -97.0929),
    ("mia", "Miami", "United States", "US", "MIA", "America/New_York", 25.9580, -80.2389),
    ("atl", "Atlanta", "United States", "US", "ATL", "America/New_York", 33.7554, -84.4010),
    ("sea", "Seattle", "United States", "US", "SEA", "America/Los_Angeles", 47.5952, -122.3316),
    ("sfo", "San Francisco", "United States", "US", "SFO", "America/Los_Angeles", 37.4032, -121.9698),
    ("bos", "Boston", "United States", "US", "BOS", "America/New_York", 42.0909, -71.2643),
    ("hou", "Houston", "United States", "US", "IAH", "America/Chicago", 29.6847, -95.4107),
    ("kci", "Kansas City", "United States", "US", "MCI", "America/Chicago", 39.0489, -94.4839),
    ("phl", "Philadelphia", "United States", "US", "PHL", "America/New_York", 39.9007, -75.1675),
    ("yyz", "Toronto", "Canada", "CA", "YYZ", "America/Toronto", 43.6532, -79.3832),
    ("yvr", "Vancouver", "Canada", "CA", "YVR", "America/Vancouver", 49.2827, -123.1207),
    ("mex", "Mexico City", "Mexico", "MX", "MEX", "America/Mexico_City", 19.4284, -99.1277),
    ("gdl", "Guadalajara", "Mexico", "MX", "GDL", "America/Mexico_City", 20.5881, -103.3439),
    ("mty", "Monterrey", "Mexico", "MX", "MTY", "America/Monterrey", 25.6866, -100.3161),
]

# venue_id, name, city_id, capacity, address
_VENUES = [
    ("metlife", "MetLife Stadium", "nyc", 82500, "East Rutherford, NJ"),
    ("sofi", "SoFi Stadium", "lax", 70240, "Inglewood, CA"),
    ("attstadium", "AT&T Stadium", "dfw", 80000, "Arlington, TX"),
    ("hardrock", "Hard Rock Stadium", "mia", 65326, "Miami Gardens, FL"),
    ("mercedesbenz", "Mercedes-Benz Stadium", "atl", 71000, "Atlanta, GA"),
    ("lumen", "Lumen Field", "sea", 69000, "Seattle, WA"),
    ("levis", "Levi's Stadium", "sfo", 68500, "Santa Clara, CA"),
    ("gillette", "Gillette Stadium", "bos", 65878, "Foxborough, MA"),
    ("nrg", "NRG Stadium", "hou", 72220, "Houston, TX"),
    ("arrowhead", "Arrowhead Stadium", "kci", 76416, "Kansas City, MO"),
    ("lincoln", "Lincoln Financial Field", "phl", 69796, "Philadelphia, PA"),
    ("bmo", "BMO Field", "yyz", 30000, "Toronto, ON"),
    ("bcplace", "BC Place", "yvr", 54500, "Vancouver, BC"),
    ("azteca", "Estadio Azteca", "mex", 87523, "Mexico City"),
    ("akron", "Estadio Akron", "gdl", 49850, "Guadalajara"),
    ("bbva", "Estadio BBVA", "mty", 53500, "Monterrey"),
]

_VENUE_BY_CITY = {city_id: venue_id for venue_id, _, city_id, _, _ in _VENUES}

# session_id, city_id, date, time, description, round
_KNOCKOUT_SESSIONS = [
    ("wc26-opening", "mex", "2026-06-11", "19:00", "Opening Match", "Group Stage"),
    ("wc26-final", "nyc", "2026-07-19", "18:00", "FIFA World Cup Final", "Final"),
    ("wc26-sf1", "dfw", "2026-07-14", "18:00", "Semi Final 1", "Semi Final"),
    ("wc26-sf2", "lax", "2026-07-15", "18:00", "Semi Final 2", "Semi Final"),
    ("wc26-qf1", "nyc", "2026-07-04", None, "Quarter Final 1", "Quarter Final"),
    ("wc26-qf2", "lax", "2026-07-05", None, "Quarter Final 2", "Quarter Final"),
    ("wc26-qf3", "dfw", "2026-07-05", None, "Quarter Final 3", "Quarter Final"),
    ("wc26-qf4", "mia", "2026-07-06", None, "Quarter Final 4", "Quarter Final"),
    ("wc26-r16-nyc", "nyc", "2026-06-30", None, "Round of 32", "Round of 32"),
]

# Group stage match days per city
_GROUP_STAGE_DATES = {
    "nyc": ["2026-06-14", "2026-06-18", "2026-06-22"],
    "lax": ["2026-06-13", "2026-06-17", "2026-06-21"],
    "dfw": ["2026-06-12", "2026-06-16", "2026-06-20"],
    "mia": ["2026-06-13", "2026-06-17", "2026-06-21"],
    "atl": ["2026-06-14", "2026-06-18", "2026-06-22"],
    "sea": ["2026-06-15", "2026-06-19", "2026-06-23"],
    "sfo": ["2026-06-12", "2026-06-16", "2026-06-20"],
    "bos": ["2026-06-14", "2026-06-18", "2026-06-22"],
    "hou": ["2026-06-13", "2026-06-17", "2026-06-21"],
    "kci": ["2026-06-15", "2026-06-19", "2026-06-23"],
    "phl": ["2026-06-12", "2026-06-16", "2026-06-20"],
    "yyz": ["2026-06-13", "2026-06-17", "2026-06-21"],
    "yvr": ["2026-06-14", "2026-06-18", "2026-06-22"],
    "mex": ["2026-06-11", "2026-06-15", "2026-06-19"],
    "gdl": ["2026-06-12", "2026-06-16", "2026-06-20"],
    "mty": ["2026-06-13", "2026-06-17", "2026-06-21"],
}


def _sessions():
    sessions = [
        Session(
            session_id=session_id,
            venue_id=_VENUE_BY_CITY[city_id],
            city_id=city_id,
            date=date,
            time=time,
            description=description,
            round=round_name,
        )
        for session_id, city_id, date, time, description, round_name in _KNOCKOUT_SESSIONS
    ]
    for city_id, dates in _GROUP_STAGE_DATES.items():
        for index, date in enumerate(dates, start=1):
            description = "Opening Match" if date == "2026-06-11" else "Group Stage Match"
            sessions.append(
                Session(
                    session_id=f"wc26-gs-{city_id}-{index}",
                    venue_id=_VENUE_BY_CITY[city_id],
                    city_id=city_id,
                    date=date,
                    description=description,
                    round="Group Stage",
                )
            )
    return sessions


WORLD_CUP_2026 = UniversalEvent(
    event_id="fifa-world-cup-2026",
    name="FIFA World Cup 2026",
    slug="fifa-world-cup-2026",
    category="sports",
    multi_city=True,
    cities=[
        EventCity(
            city_id=city_id,
            name=name,
            country=country,
            country_code=country_code,
            iata_code=iata,
            timezone=tz,
            coordinates=Coordinates(lat=lat, lng=lng),
        )
        for city_id, name, country, country_code, iata, tz, lat, lng in _CITIES
    ],
    venues=[
        Venue(venue_id=venue_id, name=name, city_id=city_id, capacity=capacity, address=address)
        for venue_id, name, city_id, capacity, address in _VENUES
    ],
    sessions=_sessions(),
    start_date="2026-06-11",
    end_date="2026-07-19",
    default_trip_pattern=TripPatternDefaults(
        days_before_event=2,
        days_after_event=2,
        recommended_trip_length=5,
        pattern="week",
    ),
    pricing=PricingConfig(
        demand_multiplier=2.5,
        price_surge_factor=1.8,
        booking_lead_days=120,
        base_daily_budget=BaseDailyBudget(budget=120, mid=250, luxury=600, currency="USD"),
    ),
    description=(
        "The 2026 FIFA World Cup is the first to feature 48 teams, hosted across 16 cities "
        "in the USA, Canada, and Mexico. From the opening match in Mexico City to the Final "
        "at MetLife Stadium in New York, this is the biggest sporting event on the planet."
    ),
    official_url="https://www.fifa.com/fifaplus/en/tournaments/mens/worldcup/canadamexicousa2026",
    tags=["football", "soccer", "world cup", "FIFA", "sports", "USA", "Canada", "Mexico", "2026"],
    trademark=TrademarkInfo(
        is_trademarked=True,
        owner="FIFA (Fédération Internationale de Football Association)",
        disclaimer="Not affiliated with or endorsed by FIFA. FIFA World Cup is a trademark of FIFA.",
    ),
    source="FIFA Official",
    is_recurring=True,
    recurrence_month=6,
)
