"""
Content Tagger.

Deterministic, rule- and keyword-driven tagging of NormalizedContent against
the travel taxonomy:

1. Extract keywords and entities from the item's text
2. Apply the rule function for the item's type
3. Add keyword-derived tags from taxonomy matching (deduplicated by
   category + subcategories, rule tags win)
4. Recompute confidence as ``min(1, max(rule confidence, evidence score))``
5. Split into accepted tags and suggestions; nothing is dropped
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple, assert_never

from travel_content.configs.config import Config
from travel_content.ingestion.normalization.dates import DateNormalizer
from travel_content.ingestion.normalization.location_parser import UNKNOWN_COUNTRY
from travel_content.ingestion.normalization.text_utils import content_text
from travel_content.schemas.content import (
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
    TransportMode,
)
from travel_content.schemas.tagging import (
    ContentCategory,
    ContentTag,
    TagAttributes,
    TagConfidence,
    TagEntities,
    TagResult,
)
from travel_content.schemas.taxonomy import (
    TaxonomyNode,
    TravelTaxonomy,
    get_taxonomy,
    keyword_in_text,
)
from travel_content.tagging.confidence import ConfidenceScorer
from travel_content.tagging.entity_tagger import EntityTagger, TaggedEntities
from travel_content.tagging.keyword_extractor import KeywordExtractor

logger = logging.getLogger(__name__)

GEO_BOOST = 0.1
EXACT_TYPE_CONFIDENCE = 0.9
FALLBACK_CONFIDENCE = 0.5
MAX_KEYWORD_TAGS = 5

# Transport mode -> taxonomy node id
MODE_TO_NODE = {
    TransportMode.FLIGHT.value: "commercial_flight",
    TransportMode.TRAIN.value: "train",
    TransportMode.BUS.value: "bus",
    TransportMode.CAR_RENTAL.value: "car",
    TransportMode.TAXI.value: "car",
    TransportMode.FERRY.value: "ferry",
    TransportMode.WALK.value: "walking",
}
MODE_CONFIDENCE = 0.8

# Amenity group -> suitability label
AMENITY_SUITABILITY = {
    "business": "business",
    "family": "families",
    "accessibility": "accessible",
}

SEASON_PATTERNS = {
    "spring": re.compile(r"\bspring\b", re.IGNORECASE),
    "summer": re.compile(r"\bsummer\b", re.IGNORECASE),
    "autumn": re.compile(r"\b(?:autumn|fall foliage)\b", re.IGNORECASE),
    "winter": re.compile(r"\bwinter\b", re.IGNORECASE),
    "year_round": re.compile(r"\b(?:year[\s-]round|all year)\b", re.IGNORECASE),
}

DIFFICULTY_PATTERNS = [
    ("challenging", re.compile(r"\b(?:challenging|difficult|strenuous|advanced|demanding)\b", re.I)),
    ("moderate", re.compile(r"\b(?:moderate|intermediate)\b", re.I)),
    ("easy", re.compile(r"\b(?:easy|beginner|gentle|relaxed)\b", re.I)),
]


# ============================================================================
# ATTRIBUTE HELPERS
# ============================================================================


def categorize_duration(duration: Optional[str]) -> Optional[str]:
    """Bucket a duration: quick (<=2h), half_day (<=4h), full_day, multi_day (>=2 days)."""
    parsed = DateNormalizer.normalize_duration(duration)
    if parsed is None:
        return None
    if parsed.unit in ("days", "weeks") and parsed.to_hours() >= 48:
        return "multi_day"
    hours = parsed.to_hours()
    if hours <= 2:
        return "quick"
    if hours <= 4:
        return "half_day"
    return "full_day"


def categorize_price(amount: Optional[float]) -> Optional[str]:
    """Bucket an amount: budget (<50), moderate (<150), expensive (<500), luxury."""
    if amount is None:
        return None
    if amount < 50:
        return "budget"
    if amount < 150:
        return "moderate"
    if amount < 500:
        return "expensive"
    return "luxury"


def detect_seasons(text: str) -> List[str]:
    return [season for season, pattern in SEASON_PATTERNS.items() if pattern.search(text)]


def detect_difficulty(text: str) -> Optional[str]:
    for level, pattern in DIFFICULTY_PATTERNS:
        if pattern.search(text):
            return level
    return None


def primary_category(content: NormalizedContent) -> ContentCategory:
    """Top-level category implied by the content type."""
    if isinstance(content, NormalizedDestination):
        return ContentCategory.DESTINATION
    elif isinstance(content, NormalizedActivity):
        return ContentCategory.ACTIVITY
    elif isinstance(content, NormalizedAccommodation):
        return ContentCategory.ACCOMMODATION
    elif isinstance(content, NormalizedTransportation):
        return ContentCategory.TRANSPORTATION
    elif isinstance(content, NormalizedItinerary):
        return ContentCategory.ITINERARY
    elif isinstance(content, NormalizedGeneric):
        return ContentCategory.PRACTICAL_INFO
    else:
        assert_never(content)


# ============================================================================
# TAGGER
# ============================================================================


class ContentTagger:
    """
    Tag normalized content with taxonomy categories.

    Example:
        >>> tagger = ContentTagger()
        >>> result = tagger.tag_content(activity)
        >>> [tag.path for tag in result.tags]
        ['activity.outdoor_adventure.water_sports']
    """

    def __init__(
        self,
        taxonomy: Optional[TravelTaxonomy] = None,
        keyword_extractor: Optional[KeywordExtractor] = None,
        entity_tagger: Optional[EntityTagger] = None,
        confidence_scorer: Optional[ConfidenceScorer] = None,
        confidence_threshold: Optional[float] = None,
    ):
        tagging_cfg = Config.get_tagging_config()
        self.taxonomy = taxonomy or get_taxonomy()
        self.keyword_extractor = keyword_extractor or KeywordExtractor()
        self.entity_tagger = entity_tagger or EntityTagger()
        self.confidence_scorer = confidence_scorer or ConfidenceScorer()
        self.confidence_threshold = (
            confidence_threshold
            if confidence_threshold is not None
            else float(tagging_cfg.get("confidence_threshold", 0.5))
        )
        self.keyword_match_threshold = float(tagging_cfg.get("keyword_match_threshold", 0.15))
        self.default_tag_confidence = float(tagging_cfg.get("default_tag_confidence", 0.3))

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def tag_content(self, content: NormalizedContent) -> TagResult:
        """Tag one content item."""
        text = content_text(content)
        keywords = self.keyword_extractor.extract(text)
        keywords += [
            k for k in self.keyword_extractor.extract_travel_keywords(text) if k not in keywords
        ]
        entities = self.entity_tagger.extract_entities(text, content)

        rule_tags = self._apply_rules(content, text.lower(), keywords, entities)
        keyword_tags = self._keyword_tags(keywords)
        merged = self._merge_tags(rule_tags, keyword_tags)

        rescored = [
            tag.model_copy(
                update={
                    "confidence": min(
                        1.0,
                        max(tag.confidence, self.confidence_scorer.calculate_confidence(tag, content)),
                    )
                }
            )
            for tag in merged
        ]

        accepted = [t for t in rescored if t.confidence >= self.confidence_threshold]
        suggested = [t for t in rescored if t.confidence < self.confidence_threshold]
        logger.debug(
            "Tagged %s: %d tags, %d suggestions", content.id, len(accepted), len(suggested)
        )

        return TagResult(
            primary_category=primary_category(content),
            tags=accepted,
            suggested_tags=suggested,
            confidence=TagConfidence(
                overall=_mean([t.confidence for t in accepted]),
                by_category=_mean_by_category(accepted),
            ),
        )

    async def tag_content_batch(self, contents: Sequence[NormalizedContent]) -> List[TagResult]:
        """Tag items concurrently; results keep input order."""
        return list(
            await asyncio.gather(
                *(asyncio.to_thread(self.tag_content, content) for content in contents)
            )
        )

    def attach_tags(self, content: NormalizedContent) -> Tuple[NormalizedContent, TagResult]:
        """Tag ``content`` and return a copy carrying the accepted tag paths."""
        result = self.tag_content(content)
        return content.with_tags([tag.path for tag in result.tags]), result

    # ========================================================================
    # RULES
    # ========================================================================

    def _apply_rules(
        self,
        content: NormalizedContent,
        text: str,
        keywords: List[str],
        entities: TaggedEntities,
    ) -> List[ContentTag]:
        if isinstance(content, NormalizedDestination):
            tags = self._tag_destination(content, text)
        elif isinstance(content, NormalizedActivity):
            tags = self._tag_activity(content, text, keywords, entities)
        elif isinstance(content, NormalizedAccommodation):
            tags = self._tag_accommodation(content, text, keywords, entities)
        elif isinstance(content, NormalizedTransportation):
            tags = self._tag_transportation(content)
        elif isinstance(content, NormalizedItinerary):
            tags = self._tag_itinerary(content, text)
        elif isinstance(content, NormalizedGeneric):
            tags = [
                ContentTag(
                    category=ContentCategory.PRACTICAL_INFO,
                    confidence=self.default_tag_confidence,
                    hierarchical_path=[ContentCategory.PRACTICAL_INFO.value],
                )
            ]
        else:
            assert_never(content)

        tag_entities = TagEntities(
            locations=entities.locations,
            attractions=entities.attractions,
            organizations=entities.organizations,
        )
        return [tag.model_copy(update={"entities": tag_entities}) for tag in tags]

    def _tag_destination(self, dest: NormalizedDestination, text: str) -> List[ContentTag]:
        path = [ContentCategory.DESTINATION.value]
        keywords: List[str] = []
        confidence = 0.7

        root = self.taxonomy.get_node(ContentCategory.DESTINATION.value)
        for node in self.taxonomy.iter_nodes(root, kind="type"):
            score = _match_score(node, text)
            if score > 0:
                path.append(node.id)
                keywords = node.terms
                confidence = 0.7 + score * 0.3
                break
        else:
            # No type keyword; fall back to the broadest hints
            if any(keyword_in_text(w, text) for w in ("beach", "coast", "sea")):
                path.append("beach")
                keywords = ["beach", "coastal", "seaside"]
                confidence = 0.65
            elif any(keyword_in_text(w, text) for w in ("city", "urban", "capital")):
                path.append("city")
                keywords = ["city", "urban", "metropolitan"]
                confidence = 0.65

        if dest.country != UNKNOWN_COUNTRY or dest.region:
            confidence = min(1.0, confidence + GEO_BOOST)

        return [
            ContentTag(
                category=ContentCategory.DESTINATION,
                subcategories=path[1:],
                keywords=keywords,
                attributes=TagAttributes(season=detect_seasons(text)),
                confidence=confidence,
                hierarchical_path=path,
            )
        ]

    def _tag_activity(
        self,
        activity: NormalizedActivity,
        text: str,
        keywords: List[str],
        entities: TaggedEntities,
    ) -> List[ContentTag]:
        attributes = TagAttributes(
            duration=categorize_duration(activity.duration),
            price_range=categorize_price(activity.price.amount if activity.price else None),
            difficulty=detect_difficulty(text),
            season=detect_seasons(text),
        )

        tags = []
        root = self.taxonomy.get_node(ContentCategory.ACTIVITY.value)
        for node in self.taxonomy.iter_nodes(root, kind="subcategory"):
            score = _match_score(node, text)
            if score > 0:
                tags.append(
                    ContentTag(
                        category=ContentCategory.ACTIVITY,
                        subcategories=list(node.path[1:]),
                        keywords=node.terms,
                        attributes=attributes,
                        confidence=self._with_geo_boost(0.6 + score * 0.4, entities),
                        hierarchical_path=list(node.path),
                    )
                )

        if not tags:
            tags.append(
                ContentTag(
                    category=ContentCategory.ACTIVITY,
                    keywords=keywords,
                    attributes=attributes,
                    confidence=FALLBACK_CONFIDENCE,
                    hierarchical_path=[ContentCategory.ACTIVITY.value],
                )
            )
        return tags

    def _tag_accommodation(
        self,
        accommodation: NormalizedAccommodation,
        text: str,
        keywords: List[str],
        entities: TaggedEntities,
    ) -> List[ContentTag]:
        attributes = TagAttributes(
            price_range=categorize_price(
                accommodation.price_range.min.amount if accommodation.price_range else None
            ),
            suitability=self._amenity_suitability(accommodation.amenities),
            season=detect_seasons(text),
        )
        declared_type = _slug(accommodation.accommodation_type)

        tags = []
        root = self.taxonomy.get_node(ContentCategory.ACCOMMODATION.value)
        for node in self.taxonomy.iter_nodes(root, kind="subtype"):
            score = _match_score(node, text)
            is_type_match = bool(declared_type) and declared_type in (node.id, _slug(node.name))
            if score > 0 or is_type_match:
                confidence = (
                    EXACT_TYPE_CONFIDENCE
                    if is_type_match
                    else self._with_geo_boost(0.6 + score * 0.4, entities)
                )
                tags.append(
                    ContentTag(
                        category=ContentCategory.ACCOMMODATION,
                        subcategories=list(node.path[1:]),
                        keywords=node.terms,
                        attributes=attributes,
                        confidence=confidence,
                        hierarchical_path=list(node.path),
                    )
                )

        if not tags:
            tags.append(
                ContentTag(
                    category=ContentCategory.ACCOMMODATION,
                    keywords=keywords,
                    attributes=attributes,
                    confidence=FALLBACK_CONFIDENCE,
                    hierarchical_path=[ContentCategory.ACCOMMODATION.value],
                )
            )
        return tags

    def _tag_transportation(self, transport: NormalizedTransportation) -> List[ContentTag]:
        node_id = MODE_TO_NODE.get(transport.mode)
        root = self.taxonomy.get_node(ContentCategory.TRANSPORTATION.value)
        node = next((n for n in self.taxonomy.iter_nodes(root) if n.id == node_id), None)
        if node is None:
            return [
                ContentTag(
                    category=ContentCategory.TRANSPORTATION,
                    confidence=FALLBACK_CONFIDENCE,
                    hierarchical_path=[ContentCategory.TRANSPORTATION.value],
                )
            ]
        return [
            ContentTag(
                category=ContentCategory.TRANSPORTATION,
                subcategories=list(node.path[1:]),
                keywords=node.terms,
                attributes=TagAttributes(
                    price_range=categorize_price(
                        transport.price.amount if transport.price else None
                    )
                ),
                confidence=MODE_CONFIDENCE,
                hierarchical_path=list(node.path),
            )
        ]

    def _tag_itinerary(self, itinerary: NormalizedItinerary, text: str) -> List[ContentTag]:
        days = itinerary.duration_days or len(itinerary.daily_plans) or None
        root = self.taxonomy.get_node(ContentCategory.ITINERARY.value)
        node, confidence = None, FALLBACK_CONFIDENCE

        if days:
            if days == 1:
                node_id = "day_trip"
            elif days <= 3:
                node_id = "weekend_getaway"
            elif days <= 14:
                node_id = "multi_day_trip"
            else:
                node_id = "extended_journey"
            node = self.taxonomy.get_node(f"itinerary.{node_id}")
            confidence = 0.75
        else:
            for candidate in self.taxonomy.iter_nodes(root, kind="type"):
                score = _match_score(candidate, text)
                if score > 0:
                    node, confidence = candidate, 0.6 + score * 0.4
                    break

        path = list(node.path) if node else [ContentCategory.ITINERARY.value]
        return [
            ContentTag(
                category=ContentCategory.ITINERARY,
                subcategories=path[1:],
                keywords=node.terms if node else [],
                attributes=TagAttributes(
                    duration=_trip_duration(days),
                    price_range=categorize_price(
                        itinerary.total_price.amount if itinerary.total_price else None
                    ),
                    season=detect_seasons(text),
                ),
                confidence=confidence,
                hierarchical_path=path,
            )
        ]

    # ========================================================================
    # KEYWORD TAGS & MERGING
    # ========================================================================

    def _keyword_tags(self, keywords: List[str]) -> List[ContentTag]:
        if not keywords:
            return []

        tags = []
        matches = self.taxonomy.match_categories(
            " ".join(keywords), threshold=self.keyword_match_threshold
        )
        for match in matches[:MAX_KEYWORD_TAGS]:
            node = self.taxonomy.get_node(match.category)
            if node is None:
                continue
            tags.append(
                ContentTag(
                    category=ContentCategory(node.path[0]),
                    subcategories=list(node.path[1:]),
                    keywords=[k for k in keywords if k in node.terms],
                    confidence=match.confidence,
                    hierarchical_path=list(node.path),
                )
            )
        return tags

    @staticmethod
    def _merge_tags(rule_tags: List[ContentTag], extra_tags: List[ContentTag]) -> List[ContentTag]:
        merged = list(rule_tags)
        seen = {tag.key for tag in merged}
        for tag in extra_tags:
            if tag.key not in seen:
                merged.append(tag)
                seen.add(tag.key)
        return merged

    @staticmethod
    def _with_geo_boost(confidence: float, entities: TaggedEntities) -> float:
        if entities.locations:
            return min(1.0, confidence + GEO_BOOST)
        return confidence

    def _amenity_suitability(self, amenities: List[str]) -> List[str]:
        suitability = []
        lowered = [a.lower().replace("_", " ") for a in amenities]
        for group_id, label in AMENITY_SUITABILITY.items():
            node = self.taxonomy.get_node(f"accommodation.amenities.{group_id}")
            if node and any(a in node.terms for a in lowered):
                suitability.append(label)
        return suitability


def _match_score(node: TaxonomyNode, text: str) -> float:
    """Share of the node's keywords and synonyms found in ``text`` (lower-cased)."""
    terms = node.terms
    if not terms:
        return 0.0
    return sum(1 for term in terms if keyword_in_text(term, text)) / len(terms)


def _trip_duration(days: Optional[int]) -> Optional[str]:
    if not days:
        return None
    return "multi_day" if days >= 2 else "full_day"


def _slug(value: Optional[str]) -> str:
    return re.sub(r"[\s/-]+", "_", value.strip().lower()) if value else ""


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _mean_by_category(tags: List[ContentTag]) -> Dict[str, float]:
    grouped: Dict[str, List[float]] = {}
    for tag in tags:
        grouped.setdefault(tag.category, []).append(tag.confidence)
    return {category: _mean(values) for category, values in grouped.items()}
