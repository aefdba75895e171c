"""
Unit tests for the validation module.

Tests for ContentValidator rules per content variant.
"""

import pytest

from travel_content.ingestion.validation import ContentValidator, ValidationIssue
from travel_content.schemas.content import (
    Coordinates,
    DailyPlan,
    Price,
    PriceRange,
)


@pytest.fixture
def validator():
    return ContentValidator()


def _fields(issues):
    return [issue.field for issue in issues]


class TestValidationIssue:
    """Tests for ValidationIssue formatting."""

    def test_str(self):
        """Issues render as '<id>: <field> - <message>'."""
        issue = ValidationIssue("dest-1", "coordinates.lat", "must be between -90 and 90")
        assert str(issue) == "dest-1: coordinates.lat - must be between -90 and 90"


class TestDestination:
    """Tests for destination rules."""

    def test_valid(self, validator, create_destination, sample_coordinates):
        """A destination with code and coordinates is valid."""
        assert validator.is_valid(create_destination(coordinates=sample_coordinates))

    def test_latitude_out_of_range(self, validator, create_destination):
        """Latitude 91 is reported."""
        issues = validator.validate(create_destination(coordinates=Coordinates(lat=91, lng=0)))
        assert _fields(issues) == ["coordinates.lat"]

    def test_boundary_coordinates(self, validator, create_destination):
        """Latitude 45 and longitude 90 are fine."""
        issues = validator.validate(create_destination(coordinates=Coordinates(lat=45, lng=90)))
        assert issues == []

    def test_longitude_out_of_range(self, validator, create_destination):
        """Longitude beyond 180 is reported."""
        issues = validator.validate(create_destination(coordinates=Coordinates(lat=0, lng=-181)))
        assert _fields(issues) == ["coordinates.lng"]

    def test_unknown_country(self, validator, create_destination):
        """'Unknown' and full names are not country codes."""
        assert _fields(validator.validate(create_destination(country="Unknown"))) == ["country"]
        assert _fields(validator.validate(create_destination(country="France"))) == ["country"]

    def test_blank_name(self, validator, create_destination):
        """Whitespace-only names are missing."""
        issues = validator.validate(create_destination(name="  "))
        assert _fields(issues) == ["name"]
        assert issues[0].message == "is required"


class TestActivity:
    """Tests for activity rules."""

    def test_valid(self, validator, create_activity):
        """The default activity is valid."""
        assert validator.validate(create_activity()) == []

    def test_negative_price_and_bad_currency(self, validator, create_activity):
        """Negative amounts and non-ISO currencies are reported."""
        activity = create_activity(price=Price(amount=-5, currency="US"))
        assert _fields(validator.validate(activity)) == ["price.amount", "price.currency"]

    @pytest.mark.parametrize("duration", ["2 hours", "90 minutes", "0.5 days", "1 day"])
    def test_duration_formats(self, validator, create_activity, duration):
        """Canonical durations pass."""
        assert validator.validate(create_activity(duration=duration)) == []

    def test_bad_duration(self, validator, create_activity):
        """Free text durations are reported."""
        assert _fields(validator.validate(create_activity(duration="a while"))) == ["duration"]

    def test_rating_range(self, validator, create_activity):
        """Ratings above five are reported."""
        assert _fields(validator.validate(create_activity(rating=5.5))) == ["rating"]


class TestAccommodation:
    """Tests for accommodation rules."""

    def test_valid(self, validator, create_accommodation):
        """The default accommodation is valid."""
        assert validator.validate(create_accommodation()) == []

    def test_missing_country(self, validator, create_accommodation):
        """An address without country is reported."""
        accommodation = create_accommodation()
        accommodation = accommodation.model_copy(
            update={"address": accommodation.address.model_copy(update={"country": None})}
        )
        assert _fields(validator.validate(accommodation)) == ["address.country"]

    def test_inverted_price_range(self, validator, create_accommodation):
        """min above max is reported."""
        price_range = PriceRange(
            min=Price(amount=200, currency="EUR"), max=Price(amount=100, currency="EUR")
        )
        issues = validator.validate(create_accommodation(price_range=price_range))
        assert _fields(issues) == ["priceRange"]


class TestOtherVariants:
    """Tests for transportation, itinerary and generic rules."""

    def test_transportation_price(self, validator, create_transportation):
        """Transportation prices are checked."""
        assert validator.validate(create_transportation()) == []
        transport = create_transportation(price=Price(amount=-1, currency="EUR"))
        assert _fields(validator.validate(transport)) == ["price.amount"]

    def test_itinerary_valid(self, validator, create_itinerary):
        """The default itinerary is valid."""
        assert validator.validate(create_itinerary()) == []

    def test_itinerary_without_days(self, validator, create_itinerary):
        """Itineraries need at least one day."""
        assert _fields(validator.validate(create_itinerary(daily_plans=[]))) == ["dailyPlans"]

    def test_itinerary_day_numbers(self, validator, create_itinerary):
        """Day numbers start at one."""
        issues = validator.validate(create_itinerary(daily_plans=[DailyPlan(day=0)]))
        assert _fields(issues) == ["dailyPlans[0].day"]

    def test_itinerary_dates_reversed(self, validator, create_itinerary):
        """End before start is reported."""
        itinerary = create_itinerary(
            start_date="2024-05-20T00:00:00Z", end_date="2024-05-15T00:00:00Z"
        )
        assert _fields(validator.validate(itinerary)) == ["endDate"]

    def test_generic_title(self, validator, create_generic):
        """Generic records need a title."""
        assert validator.validate(create_generic()) == []
        assert _fields(validator.validate(create_generic(title=""))) == ["title"]
