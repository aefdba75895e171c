# travel_content/schemas/tagging.py
"""
Tag models produced by the ContentTagger.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import Field

from travel_content.schemas.base import TravelModel


class ContentCategory(str, Enum):
    """Top-level categories of the travel taxonomy."""

    DESTINATION = "destination"
    ACTIVITY = "activity"
    ACCOMMODATION = "accommodation"
    TRANSPORTATION = "transportation"
    DINING = "dining"
    SHOPPING = "shopping"
    PRACTICAL_INFO = "practical_info"
    ITINERARY = "itinerary"


class TagEntities(TravelModel):
    locations: List[str] = Field(default_factory=list)
    attractions: List[str] = Field(default_factory=list)
    organizations: List[str] = Field(default_factory=list)


class TagAttributes(TravelModel):
    """Descriptive attributes derived while tagging."""

    price_range: Optional[str] = None  # budget / moderate / expensive / luxury
    duration: Optional[str] = None  # quick / half_day / full_day / multi_day
    difficulty: Optional[str] = None
    suitability: List[str] = Field(default_factory=list)
    season: List[str] = Field(default_factory=list)


class ContentTag(TravelModel):
    """
    A single taxonomy tag with its evidence and confidence.
    """

    category: ContentCategory
    subcategories: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    entities: TagEntities = Field(default_factory=TagEntities)
    attributes: TagAttributes = Field(default_factory=TagAttributes)
    confidence: float = Field(ge=0.0, le=1.0)
    hierarchical_path: List[str] = Field(default_factory=list)

    @property
    def path(self) -> str:
        """Dotted path, e.g. ``activity.outdoor_adventure.water_sports``."""
        return ".".join(self.hierarchical_path)

    @property
    def key(self) -> Tuple[str, Tuple[str, ...]]:
        """Identity used when merging tags from different sources."""
        return (self.category, tuple(self.subcategories))


class TagConfidence(TravelModel):
    overall: float = 0.0
    by_category: Dict[str, float] = Field(default_factory=dict)


class TagResult(TravelModel):
    """
    Outcome of tagging one content item.

    ``tags`` hold accepted tags; lower-confidence tags are kept as
    ``suggested_tags`` rather than dropped.
    """

    primary_category: ContentCategory
    tags: List[ContentTag] = Field(default_factory=list)
    suggested_tags: List[ContentTag] = Field(default_factory=list)
    confidence: TagConfidence = Field(default_factory=TagConfidence)
