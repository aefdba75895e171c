"""
Unit tests for the content schema.

Tests for RawContent, the NormalizedContent variants and their wire format.
"""

import pytest
from pydantic import ValidationError

from travel_content.schemas.content import (
    ContentType,
    NormalizedActivity,
    NormalizedGeneric,
    Price,
    PriceRange,
    RawContent,
    RawMetadata,
    parse_normalized_content,
)


class TestRawContent:
    """Tests for RawContent construction."""

    def test_requires_url_or_file_path(self):
        """RawContent without any origin is rejected."""
        with pytest.raises(ValidationError):
            RawContent(id="raw-1", content_type="html", raw_text="text")

    def test_file_path_is_enough(self):
        """A document with only a file path is accepted."""
        raw = RawContent(id="doc-1", file_path="/tmp/trip.pdf", content_type="pdf_text")
        assert raw.source == "/tmp/trip.pdf"

    def test_source_prefers_url(self, create_raw_content):
        """source returns the URL when both origins are set."""
        raw = create_raw_content(file_path="/tmp/page.html")
        assert raw.source == "https://test.com/page"

    def test_camel_case_input(self):
        """Wire names are accepted on input."""
        raw = RawContent.model_validate(
            {
                "id": "web-1",
                "sourceUrl": "https://example.com",
                "contentType": "html",
                "rawText": "Hello",
            }
        )
        assert raw.source_url == "https://example.com"
        assert raw.raw_text == "Hello"

    def test_unknown_metadata_keys_are_dropped(self):
        """Only recognized metadata hints are kept."""
        metadata = RawMetadata.model_validate({"title": "Paris", "tracking_id": "x"})
        assert metadata.title == "Paris"
        assert not hasattr(metadata, "tracking_id")

    def test_numeric_price_hint_becomes_text(self):
        """Numeric price hints are coerced to strings."""
        metadata = RawMetadata(price=45)
        assert metadata.price == "45"


class TestNormalizedContent:
    """Tests for the normalized variants."""

    def test_discriminated_parse(self, create_activity):
        """parse_normalized_content builds the variant named by type."""
        activity = create_activity()
        parsed = parse_normalized_content(activity.model_dump())
        assert isinstance(parsed, NormalizedActivity)
        assert parsed.type == ContentType.ACTIVITY.value

    def test_to_dict_uses_camel_case(self, create_itinerary):
        """to_dict produces camelCase keys and omits unset fields."""
        data = create_itinerary().to_dict()
        assert data["type"] == "itinerary"
        assert "dailyPlans" in data
        assert data["durationDays"] == 3
        assert "totalPrice" not in data

    def test_confidence_bounds(self, create_generic):
        """Confidence outside [0, 1] is rejected."""
        with pytest.raises(ValidationError):
            create_generic(confidence=1.5)

    def test_with_tags_returns_copy(self, create_generic):
        """with_tags leaves the original untouched and clamps confidence."""
        generic = create_generic()
        tagged = generic.with_tags(["practical_info"], confidence=2.0)
        assert generic.tags is None
        assert tagged.tags == ["practical_info"]
        assert tagged.confidence == 1.0
        assert isinstance(tagged, NormalizedGeneric)

    def test_content_is_frozen(self, create_generic):
        """Normalized records are immutable."""
        generic = create_generic()
        with pytest.raises(ValidationError):
            generic.title = "Changed"


class TestPrice:
    """Tests for Price and PriceRange."""

    def test_currency_is_upper_cased(self):
        """Currency codes are normalized to upper case."""
        assert Price(amount=10, currency="eur").currency == "EUR"

    def test_inverted_range_is_constructible(self):
        """min > max is left for the validator to report."""
        price_range = PriceRange(
            min=Price(amount=200, currency="USD"), max=Price(amount=100, currency="USD")
        )
        assert price_range.min.amount > price_range.max.amount
