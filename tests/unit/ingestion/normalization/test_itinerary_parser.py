"""
Unit tests for the itinerary_parser module.

Tests for day-by-day plan extraction.
"""

from travel_content.ingestion.normalization.dates import DateNormalizer
from travel_content.ingestion.normalization.itinerary_parser import (
    looks_like_itinerary,
    parse_daily_plans,
    parse_item,
)

SAMPLE_ITINERARY = """Paris in Three Days
Overview of the trip.

Day 1: Arrival in Paris
- 10:00 AM - Arrive at Charles de Gaulle Airport
- Visit Eiffel Tower (2 hours)

Day Two - Montmartre
* 9am Sacré-Cœur
* Lunch in Montmartre

Day 3
- Louvre Museum (half day)
"""


class TestLooksLikeItinerary:
    """Tests for looks_like_itinerary."""

    def test_keyword(self):
        """Itinerary keywords are enough."""
        assert looks_like_itinerary("Our travel plan for Japan")

    def test_two_day_mentions(self):
        """Two distinct day numbers count as an itinerary."""
        assert looks_like_itinerary("Day 2 is Kyoto, Day 3 is Nara")

    def test_single_day_mention(self):
        """A lone day mention does not."""
        assert not looks_like_itinerary("Open every day 9 to 5")
        assert not looks_like_itinerary(None)


class TestParseItem:
    """Tests for parse_item."""

    def test_time_activity_duration(self):
        """Leading time and trailing duration are split off."""
        item = parse_item("- 2:30 PM - Boat tour (90 mins)", DateNormalizer())
        assert item.time == "14:30"
        assert item.activity == "Boat tour"
        assert item.duration == "90 minutes"

    def test_plain_activity(self):
        """Lines without time or duration keep their text."""
        item = parse_item("Free afternoon", DateNormalizer())
        assert item.activity == "Free afternoon"
        assert item.time is None
        assert item.duration is None

    def test_empty_line(self):
        """Bullets without text give None."""
        assert parse_item("- ", DateNormalizer()) is None


class TestParseDailyPlans:
    """Tests for parse_daily_plans."""

    def test_days_and_titles(self):
        """Numeric and spelled-out day headers start plans."""
        plans = parse_daily_plans(SAMPLE_ITINERARY)
        assert [plan.day for plan in plans] == [1, 2, 3]
        assert plans[0].title == "Arrival in Paris"
        assert plans[1].title == "Montmartre"
        assert plans[2].title is None

    def test_items(self):
        """Items carry times and durations."""
        plans = parse_daily_plans(SAMPLE_ITINERARY)
        first, second = plans[0].items
        assert first.time == "10:00"
        assert first.activity == "Arrive at Charles de Gaulle Airport"
        assert second.activity == "Visit Eiffel Tower"
        assert second.duration == "2 hours"
        assert plans[1].items[0].time == "09:00"
        assert plans[2].items[0].duration == "0.5 days"

    def test_text_before_first_day_is_ignored(self):
        """The preamble does not produce items."""
        plans = parse_daily_plans(SAMPLE_ITINERARY)
        activities = [item.activity for plan in plans for item in plan.items]
        assert "Overview of the trip." not in activities

    def test_no_days(self):
        """Text without headers gives no plans."""
        assert parse_daily_plans("Just a paragraph.") == []
        assert parse_daily_plans("") == []
