"""
Unit tests for the entities module.

Tests for EntityRecognizer and the taxonomy-backed gazetteer.
"""

import pytest

from travel_content.ingestion.normalization.entities import (
    EntityRecognizer,
    Gazetteer,
    TaxonomyGazetteer,
)
from travel_content.schemas.content import RawMetadata


class StaticGazetteer:
    """Minimal gazetteer for tests."""

    def is_location(self, term):
        return term.lower() in {"atlantis", "el dorado"}

    def is_activity_type(self, term):
        return term.lower() == "treasure hunting"

    def is_amenity(self, term):
        return False


@pytest.fixture
def recognizer():
    return EntityRecognizer()


class TestTaxonomyGazetteer:
    """Tests for the default gazetteer."""

    def test_locations(self):
        """Cities, countries and continents are locations."""
        gazetteer = TaxonomyGazetteer()
        assert gazetteer.is_location("Paris")
        assert gazetteer.is_location("japan")
        assert gazetteer.is_location("Europe")
        assert not gazetteer.is_location("Breakfast")

    def test_extra_locations(self):
        """Extra locations extend the static list."""
        gazetteer = TaxonomyGazetteer(extra_locations=["Hallstatt"])
        assert gazetteer.is_location("hallstatt")

    def test_activity_types_and_amenities(self):
        """Activity keywords and amenity keywords come from the taxonomy."""
        gazetteer = TaxonomyGazetteer()
        assert gazetteer.is_activity_type("snorkeling")
        assert gazetteer.is_amenity("wifi")
        assert gazetteer.is_amenity("room_service")
        assert not gazetteer.is_amenity("snorkeling")

    def test_satisfies_protocol(self):
        """TaxonomyGazetteer is a Gazetteer."""
        assert isinstance(TaxonomyGazetteer(), Gazetteer)


class TestExtractEntities:
    """Tests for extract_entities."""

    def test_locations_and_activity_types(self, recognizer):
        """Known places and activity keywords are found."""
        entities = recognizer.extract_entities("Go diving near Bali")
        assert entities.locations == ["Bali"]
        assert entities.activity_types == ["diving"]

    def test_longest_location_wins(self, recognizer):
        """'Visit New York City' yields 'New York'."""
        entities = recognizer.extract_entities("Visit New York City in autumn")
        assert entities.locations == ["New York"]

    def test_country_from_location(self, recognizer):
        """A country among the locations sets the country code."""
        entities = recognizer.extract_entities("Street food tours across Thailand and Bangkok")
        assert entities.country == "TH"

    def test_amenities(self, recognizer):
        """Amenity phrases are recognized, bigrams included."""
        entities = recognizer.extract_entities("Rooms with wifi, a pool and room service")
        assert entities.amenities == ["wifi", "pool", "room service"]

    def test_name_from_metadata(self, recognizer):
        """The metadata title wins over the first line."""
        entities = recognizer.extract_entities(
            "Welcome!\nSome text", RawMetadata(title="Harbour Kayak Tour")
        )
        assert entities.name == "Harbour Kayak Tour"

    def test_name_from_first_line(self, recognizer):
        """Without a title the first reasonable line is the name."""
        entities = recognizer.extract_entities("Sunset Cruise:\nSail around the bay.")
        assert entities.name == "Sunset Cruise"

    def test_address(self, recognizer):
        """Address lines are parsed into an Address."""
        entities = recognizer.extract_entities("Address: 10 Downing Street, London, UK")
        assert entities.address.country == "GB"
        assert entities.address.city == "London"

    def test_empty_text(self, recognizer):
        """Empty text yields empty entities."""
        entities = recognizer.extract_entities("")
        assert entities.locations == []
        assert entities.name is None

    def test_custom_gazetteer(self):
        """Any Gazetteer implementation can back the recognizer."""
        recognizer = EntityRecognizer(gazetteer=StaticGazetteer())
        entities = recognizer.extract_entities("Expeditions to El Dorado and Paris")
        assert entities.locations == ["El Dorado"]
