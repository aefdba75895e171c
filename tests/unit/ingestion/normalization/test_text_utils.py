"""
Unit tests for the text_utils module.

Tests for tokenization and the text assembled from content items.
"""

from travel_content.ingestion.deduplication import salient_text
from travel_content.ingestion.normalization.text_utils import (
    collapse_whitespace,
    content_text,
    tokenize,
)


class TestTokenize:
    """Tests for tokenize and collapse_whitespace."""

    def test_punctuation_dropped(self):
        """Punctuation is stripped and text lower-cased."""
        assert tokenize("Paris, France!") == ["paris", "france"]

    def test_min_length(self):
        """Tokens shorter than min_length are skipped."""
        assert tokenize("a to Rome", min_length=3) == ["rome"]

    def test_collapse_whitespace(self):
        """Runs of whitespace become one space."""
        assert collapse_whitespace("  Old \n town\t") == "Old town"


class TestContentText:
    """Tests for content_text in descriptive and identifying form."""

    def test_destination_country_only_when_identifying(self, create_destination):
        """The country code identifies a destination but is not descriptive text."""
        destination = create_destination()
        assert content_text(destination) == (
            "Paris The capital of France, famous for art and food."
        )
        assert content_text(destination, identifying=True) == (
            "Paris The capital of France, famous for art and food. FR"
        )

    def test_accommodation_amenities_vs_city(self, create_accommodation):
        """Descriptive text lists amenities; identifying text uses the city."""
        hotel = create_accommodation()
        assert content_text(hotel) == (
            "Hotel Lumen A quiet hotel near the old town. boutique hotel wifi breakfast"
        )
        assert content_text(hotel, identifying=True) == (
            "Hotel Lumen A quiet hotel near the old town. boutique hotel Lisbon"
        )

    def test_transportation_endpoints_when_identifying(self, create_transportation):
        """Route endpoints are appended only in identifying form."""
        train = create_transportation(description="Fast train.")
        assert content_text(train) == "Fast train. train SNCF Rail"
        assert content_text(train, identifying=True) == (
            "Fast train. train SNCF Rail Paris Lyon"
        )

    def test_missing_endpoints_skipped(self, create_transportation):
        """Absent departure and arrival leave no gaps."""
        train = create_transportation(description="Fast train.", departure=None, arrival=None)
        assert content_text(train, identifying=True) == "Fast train. train SNCF Rail"

    def test_generic_same_in_both_forms(self, create_generic):
        """Variants without place fields give the same text either way."""
        note = create_generic(text="Pack light.")
        assert content_text(note) == content_text(note, identifying=True)

    def test_deduplication_uses_identifying_form(self, create_transportation):
        """Deduplication hashes the identifying text."""
        train = create_transportation()
        assert salient_text(train) == content_text(train, identifying=True)
