"""
Unit tests for the taxonomy module.

Tests for TravelTaxonomy lookups and keyword matching.
"""

import pytest

from travel_content.schemas.taxonomy import (
    TravelTaxonomy,
    get_taxonomy,
    keyword_in_text,
    load_taxonomy,
)


@pytest.fixture
def taxonomy():
    return get_taxonomy()


class TestLoadTaxonomy:
    """Tests for loading the bundled taxonomy."""

    def test_eight_top_level_categories(self, taxonomy):
        """The asset has the eight content categories."""
        assert [root.id for root in taxonomy.roots] == [
            "destination",
            "activity",
            "accommodation",
            "transportation",
            "dining",
            "shopping",
            "practical_info",
            "itinerary",
        ]

    def test_load_is_cached(self):
        """load_taxonomy returns the same dict on repeated calls."""
        assert load_taxonomy() is load_taxonomy()


class TestLookup:
    """Tests for node resolution."""

    def test_get_node_by_id(self, taxonomy):
        """A bare id resolves to the first node with that id."""
        node = taxonomy.get_node("water_sports")
        assert node.dotted_path == "activity.outdoor_adventure.water_sports"

    def test_get_node_by_partial_path(self, taxonomy):
        """A dotted suffix disambiguates repeated ids."""
        node = taxonomy.get_node("relaxation.beach")
        assert node.path == ("activity", "relaxation", "beach")

    def test_get_node_unknown(self, taxonomy):
        """Unknown ids resolve to None."""
        assert taxonomy.get_node("space_travel") is None
        assert taxonomy.get_category_path("space_travel") == []

    def test_category_path_and_parents(self, taxonomy):
        """Paths run from the top-level category down to the node."""
        assert taxonomy.get_category_path("train") == ["transportation", "ground", "train"]
        assert taxonomy.get_parent_categories("train") == ["transportation", "ground"]

    def test_category_keywords_include_children(self, taxonomy):
        """Keywords of a group include those of its children."""
        keywords = taxonomy.get_category_keywords("outdoor_adventure")
        assert "scuba" in keywords
        assert "diving" in keywords

    def test_iter_nodes_by_kind(self, taxonomy):
        """iter_nodes filters on kind."""
        continents = [node.id for node in taxonomy.iter_nodes(kind="continent")]
        assert "europe" in continents
        assert "water_sports" not in continents


class TestMatchCategories:
    """Tests for match_categories."""

    def test_best_match_first(self, taxonomy):
        """Matches are sorted by confidence, best first."""
        matches = taxonomy.match_categories("scuba diving and snorkeling", threshold=0.1)
        assert matches[0].category == "activity.outdoor_adventure.water_sports"
        confidences = [m.confidence for m in matches]
        assert confidences == sorted(confidences, reverse=True)

    def test_threshold_filters(self, taxonomy):
        """Nothing below the threshold is returned."""
        matches = taxonomy.match_categories("scuba", threshold=0.9)
        assert matches == []

    def test_custom_tree(self):
        """A taxonomy can be built from any dict of the same shape."""
        custom = TravelTaxonomy(
            {
                "version": "test",
                "categories": [
                    {
                        "id": "activity",
                        "name": "Activity",
                        "children": [
                            {"id": "caving", "name": "Caving", "keywords": ["cave", "spelunking"]}
                        ],
                    }
                ],
            }
        )
        matches = custom.match_categories("guided cave tour")
        assert matches == []
        matches = custom.match_categories("caving in a cave")
        assert matches[0].category == "activity.caving"
        assert matches[0].confidence == pytest.approx(0.75)


class TestKeywordInText:
    """Tests for whole-word keyword lookup."""

    def test_whole_word(self):
        """Keywords match whole words only."""
        assert keyword_in_text("art", "art gallery tour")
        assert not keyword_in_text("art", "start here")

    def test_multi_word_and_hyphen(self):
        """Phrases and hyphenated terms are matched literally."""
        assert keyword_in_text("walking tour", "a walking tour of rome")
        assert keyword_in_text("all-inclusive", "an all-inclusive resort")
