"""
Unit tests for the confidence module.

Tests for the five evidence factors and their explanation.
"""

import pytest

from travel_content.schemas.tagging import (
    ContentCategory,
    ContentTag,
    TagAttributes,
    TagEntities,
)
from travel_content.tagging.confidence import ConfidenceScorer


@pytest.fixture
def scorer():
    return ConfidenceScorer()


def _tag(category=ContentCategory.ACTIVITY, **kwargs):
    kwargs.setdefault("confidence", 0.5)
    return ContentTag(category=category, **kwargs)


class TestFactors:
    """Tests for the individual factor scores."""

    def test_keyword_share(self, scorer, create_activity):
        """Half of the tag keywords in the text gives half the weight."""
        tag = _tag(keywords=["scuba", "snorkeling"])
        assert scorer.keyword_score(tag, create_activity()) == pytest.approx(0.15)

    def test_no_keywords(self, scorer, create_activity):
        """Tags without keywords score zero for keywords."""
        assert scorer.keyword_score(_tag(), create_activity()) == 0.0

    def test_entities_for_transportation(self, scorer, create_transportation):
        """Locations and a provider each add 0.1."""
        tag = _tag(
            ContentCategory.TRANSPORTATION,
            entities=TagEntities(locations=["Paris"], organizations=["SNCF Rail"]),
        )
        assert scorer.entity_score(tag, create_transportation()) == pytest.approx(0.2)

    def test_entities_need_location_fields(self, scorer, create_activity):
        """An activity without location name gets no location credit."""
        tag = _tag(entities=TagEntities(locations=["Paris"]))
        assert scorer.entity_score(tag, create_activity()) == 0.0
        assert scorer.entity_score(tag, create_activity(location_name="Nice")) == pytest.approx(0.1)

    def test_category(self, scorer, create_activity):
        """Exact match, related category, unrelated category."""
        activity = create_activity()
        assert scorer.category_score(_tag(), activity) == pytest.approx(0.2)
        assert scorer.category_score(_tag(ContentCategory.DINING), activity) == pytest.approx(0.1)
        assert scorer.category_score(_tag(ContentCategory.TRANSPORTATION), activity) == 0.0

    @pytest.mark.parametrize(
        "path, expected",
        [
            ([], 0.0),
            (["activity"], 0.05),
            (["activity", "sightseeing"], 0.10),
            (["activity", "sightseeing", "city_tour"], 0.15),
            (["a", "b", "c", "d"], 0.15),
        ],
    )
    def test_hierarchy_depth(self, scorer, path, expected):
        """Deeper paths score higher, capped at three levels."""
        assert scorer.hierarchy_score(_tag(hierarchical_path=path)) == pytest.approx(expected)

    def test_attributes(self, scorer):
        """Each filled attribute adds a fifth of the weight."""
        assert scorer.attribute_score(_tag()) == 0.0
        partial = _tag(attributes=TagAttributes(duration="quick", season=["summer"]))
        assert scorer.attribute_score(partial) == pytest.approx(0.06)


class TestCalculate:
    """Tests for combined scoring."""

    def test_full_evidence(self, scorer, create_transportation):
        """Every factor at its maximum gives 1.0."""
        tag = _tag(
            ContentCategory.TRANSPORTATION,
            keywords=["rail"],
            entities=TagEntities(locations=["Paris"], organizations=["SNCF Rail"]),
            attributes=TagAttributes(
                price_range="moderate",
                duration="quick",
                difficulty="easy",
                suitability=["business"],
                season=["summer"],
            ),
            hierarchical_path=["transportation", "ground", "train"],
        )
        assert scorer.calculate_confidence(tag, create_transportation()) == pytest.approx(1.0)

    def test_weak_evidence_scores_low(self, scorer, create_generic):
        """There is no floor."""
        tag = _tag(ContentCategory.SHOPPING)
        assert scorer.calculate_confidence(tag, create_generic()) == 0.0

    def test_batch(self, scorer, create_activity):
        """Batch scoring returns rescored copies."""
        tags = [_tag(hierarchical_path=["activity"]), _tag(ContentCategory.DINING)]
        rescored = scorer.calculate_batch_confidence(tags, create_activity())
        assert [t.confidence for t in rescored] == pytest.approx([0.25, 0.1])
        assert tags[0].confidence == 0.5


class TestExplain:
    """Tests for explain_confidence."""

    def test_breakdown_and_boost(self, scorer, create_itinerary):
        """Itineraries are boosted by 1.2."""
        tag = _tag(ContentCategory.ITINERARY, hierarchical_path=["itinerary"])
        explanation = scorer.explain_confidence(tag, create_itinerary())

        assert set(explanation.breakdown) == {
            "keyword_match",
            "entity_match",
            "category_match",
            "hierarchy_depth",
            "attribute_completeness",
        }
        assert explanation.content_type_boost == 1.2
        assert explanation.total_score == pytest.approx(0.25 * 1.2)
        assert "Final score: 0.30" in explanation.explanation
