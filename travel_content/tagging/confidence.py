"""
Confidence scoring for content tags.

An explainable evidence score built from five capped factors:

    keyword match        0.30  share of the tag's keywords present in the text
    entity match         0.20  location / organization evidence on both sides
    category fit         0.20  tag category equals (or relates to) the content type
    hierarchy depth      0.15  deeper taxonomy paths are more specific
    attribute coverage   0.15  share of the five tag attributes filled

There is no floor: a tag with weak evidence scores low.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from travel_content.ingestion.normalization.text_utils import content_text
from travel_content.schemas.content import (
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedTransportation,
)
from travel_content.schemas.tagging import ContentTag
from travel_content.schemas.taxonomy import keyword_in_text

KEYWORD_WEIGHT = 0.3
ENTITY_WEIGHT = 0.2
CATEGORY_WEIGHT = 0.2
HIERARCHY_SCORES = {1: 0.05, 2: 0.10}
HIERARCHY_MAX = 0.15
ATTRIBUTE_WEIGHT = 0.15
ATTRIBUTE_COUNT = 5

# Tag category -> content types that earn partial category credit
RELATED_TYPES: Dict[str, List[str]] = {
    "destination": ["generic"],
    "practical_info": ["generic"],
    "activity": ["itinerary", "destination"],
    "transportation": ["itinerary"],
    "dining": ["activity", "destination"],
    "shopping": ["activity", "destination"],
    "itinerary": ["activity"],
}

# Multiplier reported by explain_confidence
CONTENT_TYPE_BOOST = {
    "destination": 1.1,
    "accommodation": 1.1,
    "activity": 1.0,
    "transportation": 1.0,
    "itinerary": 1.2,
    "generic": 0.8,
}


@dataclass
class ConfidenceExplanation:
    total_score: float
    breakdown: Dict[str, float]
    content_type_boost: float
    explanation: str


class ConfidenceScorer:
    """Score how well the evidence in a content item supports a tag."""

    def calculate_confidence(self, tag: ContentTag, content: NormalizedContent) -> float:
        """Sum of the five factors, capped at 1.0."""
        return min(1.0, sum(self._breakdown(tag, content).values()))

    def calculate_batch_confidence(
        self, tags: List[ContentTag], content: NormalizedContent
    ) -> List[ContentTag]:
        """Copies of ``tags`` with the evidence score as their confidence."""
        return [
            tag.model_copy(update={"confidence": self.calculate_confidence(tag, content)})
            for tag in tags
        ]

    def explain_confidence(
        self, tag: ContentTag, content: NormalizedContent
    ) -> ConfidenceExplanation:
        """Factor breakdown plus the content-type boosted score."""
        breakdown = self._breakdown(tag, content)
        boost = CONTENT_TYPE_BOOST.get(content.type, 1.0)
        raw_score = sum(breakdown.values())
        total = raw_score * boost
        return ConfidenceExplanation(
            total_score=total,
            breakdown=breakdown,
            content_type_boost=boost,
            explanation=(
                f"Base score: {raw_score:.2f}, Content type boost: {boost}, "
                f"Final score: {total:.2f}"
            ),
        )

    # -------------------------------------------------------------------------
    # Factors
    # -------------------------------------------------------------------------

    def _breakdown(self, tag: ContentTag, content: NormalizedContent) -> Dict[str, float]:
        return {
            "keyword_match": self.keyword_score(tag, content),
            "entity_match": self.entity_score(tag, content),
            "category_match": self.category_score(tag, content),
            "hierarchy_depth": self.hierarchy_score(tag),
            "attribute_completeness": self.attribute_score(tag),
        }

    @staticmethod
    def keyword_score(tag: ContentTag, content: NormalizedContent) -> float:
        if not tag.keywords:
            return 0.0
        text = content_text(content).lower()
        matched = sum(1 for keyword in tag.keywords if keyword_in_text(keyword, text))
        return matched / len(tag.keywords) * KEYWORD_WEIGHT

    @staticmethod
    def entity_score(tag: ContentTag, content: NormalizedContent) -> float:
        score = 0.0
        if tag.entities.locations and _has_location_fields(content):
            score += 0.1
        if tag.entities.organizations and isinstance(content, NormalizedTransportation):
            if content.provider:
                score += 0.1
        return min(ENTITY_WEIGHT, score)

    @staticmethod
    def category_score(tag: ContentTag, content: NormalizedContent) -> float:
        if tag.category == content.type:
            return CATEGORY_WEIGHT
        if content.type in RELATED_TYPES.get(tag.category, []):
            return CATEGORY_WEIGHT / 2
        return 0.0

    @staticmethod
    def hierarchy_score(tag: ContentTag) -> float:
        depth = len(tag.hierarchical_path)
        if depth >= 3:
            return HIERARCHY_MAX
        return HIERARCHY_SCORES.get(depth, 0.0)

    @staticmethod
    def attribute_score(tag: ContentTag) -> float:
        attributes = tag.attributes
        filled = sum(
            1
            for value in (
                attributes.price_range,
                attributes.duration,
                attributes.difficulty,
                attributes.suitability,
                attributes.season,
            )
            if value
        )
        return filled / ATTRIBUTE_COUNT * ATTRIBUTE_WEIGHT


def _has_location_fields(content: NormalizedContent) -> bool:
    if isinstance(content, NormalizedDestination):
        return True
    if isinstance(content, NormalizedActivity):
        return bool(content.location_name)
    if isinstance(content, NormalizedAccommodation):
        return bool(content.address.city or content.address.country)
    if isinstance(content, NormalizedTransportation):
        return content.departure is not None or content.arrival is not None
    return False
