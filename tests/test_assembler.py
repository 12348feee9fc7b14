"""
Tests for the itinerary assembler.
"""
import asyncio
import datetime as dt

import pytest

from eventtrip.agents.assembler import ItineraryAssembler, to_itinerary_request, validate_request
from eventtrip.agents.content import build_brief, parse_generated_content, strip_code_fences
from eventtrip.agents.reconcile import event_slot
from eventtrip.agents.resolver import CityResolver
from eventtrip.data.registry import EventRegistry
from eventtrip.schemas.event import TripPatternDefaults
from eventtrip.schemas.itinerary import EventBlock, ItineraryRequest, TimeBlock
from eventtrip.schemas.requests import BuildItineraryRequest
from eventtrip.utils.exceptions import GenerationFailed, InvalidRequest

from tests.conftest import FakeGenerator, FakePricing, make_generated

WINDOW = ["2026-07-17", "2026-07-18", "2026-07-19", "2026-07-20", "2026-07-21"]


def assemble(request, generator, pricing=None, **kwargs):
    assembler = ItineraryAssembler(generator=generator, pricing=pricing or FakePricing(), **kwargs)
    return asyncio.run(assembler.assemble(request))


def test_event_anchored_itinerary(event_request, breakdown):
    generator = FakeGenerator(make_generated(WINDOW))
    itinerary = assemble(event_request, generator, FakePricing(breakdown))

    assert len(generator.calls) == 1
    assert len(itinerary.days) == 5
    assert [d.label for d in itinerary.days] == [
        "2 days before", "1 day before", "Event Day", "1 day after", "2 days after",
    ]
    event_days = [d for d in itinerary.days if d.is_event_day]
    assert len(event_days) == 1
    assert event_days[0].date == dt.date(2026, 7, 19)

    # 18:00 session -> evening slot
    assert isinstance(event_days[0].evening, EventBlock)
    assert event_days[0].evening.event_details.doors == "16:30"
    assert event_days[0].evening.event_details.duration == "2-3 hours"
    assert isinstance(event_days[0].morning, TimeBlock)
    assert all(not isinstance(b, EventBlock) for d in itinerary.days if not d.is_event_day for b in d.blocks())

    assert itinerary.budget.source == "authoritative"
    assert itinerary.budget.total_budget == "USD 4,400"
    assert itinerary.event_anchor.event_name == "Test Cup Final"
    assert itinerary.event_anchor.event_day == 3
    assert itinerary.warnings == []
    assert itinerary.metadata.requested_days == itinerary.metadata.returned_days == 5


def test_brief_carries_event_facts(event_request):
    generator = FakeGenerator(make_generated(WINDOW))
    assemble(event_request, generator)

    brief = generator.calls[0]
    assert "Test Cup Final" in brief
    assert "MetLife Stadium" in brief
    assert "EVENT DAY" in brief
    assert "couple (2 people)" in brief
    assert "exactly 5 day entries" in brief


def test_brief_lists_matches_of_interest(event_request, two_city_event):
    request = event_request.model_copy(update={"match_ids": ["semi", "r32-99"], "optimize": True})
    brief = build_brief(request, [], two_city_event)

    assert "Matches of interest: Semi Final (2026-07-15); r32-99" in brief
    assert "Keep travel between cities and venues to a minimum" in brief


def test_days_zero_rejected_before_any_call(occurrence):
    generator = FakeGenerator(make_generated(WINDOW))
    pricing = FakePricing()

    with pytest.raises(InvalidRequest):
        assemble(ItineraryRequest(days=0, occurrence=occurrence), generator, pricing)

    assert generator.calls == []
    assert pricing.calls == 0


@pytest.mark.parametrize("request_kwargs", [
    {"days": 31, "location": "Paris"},
    {"days": 3},
    {"days": 3, "location": "   "},
    {"days": 3, "location": "Paris", "group_size": 0},
    {"days": 3, "location": "Paris", "start_date": dt.date(2026, 7, 5), "end_date": dt.date(2026, 7, 1)},
])
def test_invalid_requests(request_kwargs):
    with pytest.raises(InvalidRequest) as exc_info:
        validate_request(ItineraryRequest(**request_kwargs))
    assert exc_info.value.validation_errors


def test_generation_timeout_fails_whole_request(event_request):
    generator = FakeGenerator(make_generated(WINDOW), delay=1)

    with pytest.raises(GenerationFailed) as exc_info:
        assemble(event_request, generator, generation_timeout=0.01)
    assert exc_info.value.cause is not None


def test_generator_error_becomes_generation_failed(event_request):
    generator = FakeGenerator(error=ConnectionError("unreachable"))

    with pytest.raises(GenerationFailed) as exc_info:
        assemble(event_request, generator)
    assert isinstance(exc_info.value.cause, ConnectionError)


def test_pricing_absent_uses_generated_budget(event_request):
    itinerary = assemble(event_request, FakeGenerator(make_generated(WINDOW)), FakePricing(None))

    assert itinerary.budget.source == "generated"
    assert itinerary.budget.total_budget == "$3,000"
    assert itinerary.budget.breakdown.food == "N/A"
    assert itinerary.budget.event_day_cost == "$600"
    assert itinerary.overview
    assert len(itinerary.days) == 5


def test_pricing_failure_is_swallowed(event_request):
    pricing = FakePricing(error=RuntimeError("pricing down"))
    itinerary = assemble(event_request, FakeGenerator(make_generated(WINDOW)), pricing)
    assert itinerary.budget.source == "generated"


def test_short_generation_is_padded_with_warning(event_request):
    itinerary = assemble(event_request, FakeGenerator(make_generated(WINDOW[:3])))

    assert len(itinerary.days) == 5
    assert itinerary.has_warnings
    warning = next(w for w in itinerary.warnings if w.field == "days")
    assert (warning.requested, warning.returned) == (5, 3)
    assert itinerary.metadata.returned_days == 3
    assert itinerary.days[4].morning.activities.startswith("Free morning")


def test_long_generation_is_truncated_with_warning(event_request):
    extra = WINDOW + ["2026-07-22", "2026-07-23"]
    itinerary = assemble(event_request, FakeGenerator(make_generated(extra)))

    assert len(itinerary.days) == 5
    assert any(w.field == "days" and w.returned == 7 for w in itinerary.warnings)


def test_days_matched_by_date_when_present(event_request):
    content = make_generated(WINDOW)
    content["days"] = list(reversed(content["days"]))
    itinerary = assemble(event_request, FakeGenerator(content))

    assert itinerary.days[0].morning.activities == "Museum 1"
    assert itinerary.days[4].morning.activities == "Museum 5"


def test_days_matched_by_index_without_dates(event_request):
    content = make_generated(WINDOW)
    for day in content["days"]:
        del day["date"]
    itinerary = assemble(event_request, FakeGenerator(content))

    assert [d.date for d in itinerary.days] == [dt.date.fromisoformat(d) for d in WINDOW]
    assert itinerary.days[1].afternoon.activities == "Park 2"


def test_missing_fields_are_backfilled(event_request):
    content = {"days": make_generated(WINDOW)["days"]}
    itinerary = assemble(event_request, FakeGenerator(content))

    assert "Test Cup Final" in itinerary.overview
    assert itinerary.trip_summary.total_days == 5
    assert itinerary.trip_summary.venues == ["MetLife Stadium"]
    assert itinerary.flights[0]["bookingUrl"].startswith("https://www.google.com/travel/flights")
    assert itinerary.accommodations[0]["bookingUrl"].startswith("https://www.google.com/travel/hotels")
    assert itinerary.local_tips == {}
    assert {"overview", "tripSummary", "accommodations", "flights", "localTips", "budget"} <= {
        w.field for w in itinerary.warnings
    }


def test_event_outside_window_has_no_event_block(occurrence):
    request = ItineraryRequest(
        days=3,
        occurrence=occurrence,
        start_date=dt.date(2026, 7, 1),
        end_date=dt.date(2026, 7, 3),
    )
    itinerary = assemble(request, FakeGenerator(make_generated(["2026-07-01", "2026-07-02", "2026-07-03"])))

    assert not any(d.is_event_day for d in itinerary.days)
    assert all(not isinstance(b, EventBlock) for d in itinerary.days for b in d.blocks())
    assert itinerary.event_anchor is not None
    assert itinerary.event_anchor.event_day is None


def test_default_window_when_dates_absent(occurrence):
    request = ItineraryRequest(days=2, occurrence=occurrence)
    itinerary = assemble(request, FakeGenerator(make_generated(["2026-07-18", "2026-07-19"])))

    assert [d.label for d in itinerary.days] == ["1 day before", "Event Day"]
    assert itinerary.metadata.start_date == dt.date(2026, 7, 18)


def test_destination_trip_has_no_event_anchor():
    request = ItineraryRequest(days=2, location="Lisbon")
    itinerary = assemble(request, FakeGenerator(make_generated(["2026-09-01", "2026-09-02"])))

    assert itinerary.event_anchor is None
    assert not itinerary.metadata.is_event_anchored
    assert [d.label for d in itinerary.days] == ["Day 1", "Day 2"]


def test_window_shorter_than_days_warns(occurrence):
    request = ItineraryRequest(
        days=4,
        occurrence=occurrence,
        start_date=dt.date(2026, 7, 18),
        end_date=dt.date(2026, 7, 19),
    )
    itinerary = assemble(request, FakeGenerator(make_generated(["2026-07-18", "2026-07-19", "2026-07-20", "2026-07-21"])))

    assert len(itinerary.days) == 4
    assert sum(d.is_event_day for d in itinerary.days) == 1
    assert any(w.field == "dates" for w in itinerary.warnings)


@pytest.mark.parametrize("time,slot", [("10:00", "morning"), ("14:30", "afternoon"), ("20:00", "evening"), (None, "evening")])
def test_event_slot(time, slot):
    assert event_slot(time) == slot


def test_to_itinerary_request_maps_inbound_fields():
    body = BuildItineraryRequest(
        eventName="Test Cup Final",
        eventDate="2026-07-19",
        eventCity="New York",
        eventType="sports",
        days=5,
        budget="Mid-Range",
        groupSize=2,
        groupType="Couple",
    )
    request = to_itinerary_request(body)

    assert request.is_event_anchored
    assert request.budget_level == "mid"
    assert request.group_type == "couple"
    assert request.occurrence.venue == "New York"
    assert request.occurrence.event_type == "sports"


def test_to_itinerary_request_without_event_is_destination_trip():
    request = to_itinerary_request(BuildItineraryRequest(location="Lisbon", days=3, budget="luxury"))
    assert not request.is_event_anchored
    assert request.destination == "Lisbon"


def test_to_itinerary_request_rejects_unknown_budget():
    with pytest.raises(InvalidRequest):
        to_itinerary_request(BuildItineraryRequest(location="Lisbon", days=3, budget="platinum"))


def test_parse_generated_content_strips_fences():
    assert parse_generated_content('```json\n{"overview": "x"}\n```') == {"overview": "x"}
    assert strip_code_fences('{"a": 1}') == '{"a": 1}'


def test_parse_generated_content_rejects_garbage():
    with pytest.raises(GenerationFailed):
        parse_generated_content("Sorry, I cannot help with that.")
    with pytest.raises(GenerationFailed):
        parse_generated_content("[1, 2, 3]")


def test_shifted_dates_warn_even_when_counts_match(event_request):
    shifted = ["2026-07-18", "2026-07-19", "2026-07-20", "2026-07-21", "2026-07-22"]
    itinerary = assemble(event_request, FakeGenerator(make_generated(shifted)))

    assert len(itinerary.days) == 5
    assert itinerary.days[0].morning.activities.startswith("Free morning")
    warning = next(w for w in itinerary.warnings if w.field == "days")
    assert (warning.requested, warning.returned) == (5, 5)
    assert "1 trip days padded" in warning.message
    assert "1 generated days dropped" in warning.message


def test_scalar_summary_fields_are_wrapped(event_request):
    summary = {"cities": "New York", "venues": "MetLife Stadium", "highlights": "The final"}
    itinerary = assemble(event_request, FakeGenerator(make_generated(WINDOW, tripSummary=summary)))

    assert itinerary.trip_summary.cities == ["New York"]
    assert itinerary.trip_summary.venues == ["MetLife Stadium"]
    assert itinerary.trip_summary.highlights == ["The final"]


def test_unusable_booking_entries_fall_back_to_links(event_request):
    content = make_generated(WINDOW, accommodations={"name": "Hotel"}, flights=["Example Air"])
    itinerary = assemble(event_request, FakeGenerator(content))

    assert itinerary.accommodations[0]["bookingUrl"].startswith("https://www.google.com/travel/hotels")
    assert itinerary.flights[0]["bookingUrl"].startswith("https://www.google.com/travel/flights")
    assert {"accommodations", "flights"} <= {w.field for w in itinerary.warnings}


def test_odd_meal_entries_are_normalized(event_request):
    content = make_generated(WINDOW)
    content["days"][0]["mealsAndDining"] = [1, ["Bagels", "Coffee"], {"name": "Katz's"}]
    itinerary = assemble(event_request, FakeGenerator(content))

    assert itinerary.days[0].meals_and_dining == ["1", "Bagels, Coffee", {"name": "Katz's"}]


def test_default_window_follows_catalog_trip_pattern(two_city_event):
    event = two_city_event.model_copy(
        update={"default_trip_pattern": TripPatternDefaults(days_before_event=1, days_after_event=3)}
    )
    registry = EventRegistry([event])
    occurrence = CityResolver(registry).resolve("test-cup", "nyc", "final")
    request = ItineraryRequest(days=5, occurrence=occurrence)
    dates = ["2026-07-18", "2026-07-19", "2026-07-20", "2026-07-21", "2026-07-22"]

    itinerary = assemble(request, FakeGenerator(make_generated(dates)), registry=registry)

    assert itinerary.metadata.start_date == dt.date(2026, 7, 18)
    assert itinerary.metadata.end_date == dt.date(2026, 7, 22)
    assert [d.label for d in itinerary.days] == [
        "1 day before", "Event Day", "1 day after", "2 days after", "3 days after",
    ]
