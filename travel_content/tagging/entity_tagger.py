"""
Entity tagging.

Combines structured fields of a NormalizedContent item (country, region,
city, location name, provider) with regex families over its text for
locations, attractions, organizations and dates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, assert_never

from travel_content.ingestion.normalization.entities import EntityRecognizer, Gazetteer
from travel_content.ingestion.normalization.location_parser import UNKNOWN_COUNTRY
from travel_content.schemas.content import (
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
)

_MONTHS = (
    "January|February|March|April|May|June|July|August|September|October|November|December"
)

LOCATION_PATTERNS = [
    re.compile(r"\b(?:Mount|Mt\.|Lake|River|Bay|Ocean|Sea|Island|Peninsula|Valley|Desert)\s+[A-Z][a-z]+"),
    re.compile(r"\b[A-Z][a-z]+\s+(?:City|Town|Village|Port|Bay|Beach|Park)\b"),
]

ATTRACTION_PATTERNS = [
    re.compile(
        r"\b(?:Eiffel Tower|Colosseum|Statue of Liberty|Big Ben|Sydney Opera House|Taj Mahal"
        r"|Sagrada Familia|Machu Picchu|Great Wall|Louvre)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:Museum|Gallery|Exhibition|Centre|Center)\s+(?:of\s+|for\s+)?[A-Z][a-z]+"),
    re.compile(
        r"\b(?:National Park|State Park|Nature Reserve|Wildlife Sanctuary|Botanical Garden)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:Cathedral|Church|Temple|Mosque|Shrine|Abbey|Monastery)\s+(?:of\s+|de\s+)?[A-Z][a-z]+"),
]

ORGANIZATION_PATTERNS = [
    re.compile(r"\b[A-Z][a-z]+\s+(?:Airlines|Airways)\b"),
    re.compile(r"\b(?:Hotel|Resort|Inn|Lodge)\s+[A-Z][a-z]+"),
    re.compile(r"\b[A-Z][a-z]+\s+(?:Tours|Travel|Adventures|Expeditions)\b"),
    re.compile(r"\b[A-Z][a-z]+\s+(?:Railways|Rail|Coaches|Cruises|Ferries)\b"),
]

DATE_PATTERNS = [
    re.compile(rf"\b(?:{_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}\b", re.IGNORECASE),
    re.compile(rf"\b\d{{1,2}}\s+(?:{_MONTHS})\s+\d{{4}}\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    re.compile(r"\b(?:today|tomorrow|yesterday|next week|last week|this month|next month)\b", re.IGNORECASE),
]

_LEADING_ARTICLE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)

# Static parent chain (country, continent) for well-known places
LOCATION_HIERARCHY = {
    "paris": ["France", "Europe"],
    "london": ["United Kingdom", "Europe"],
    "rome": ["Italy", "Europe"],
    "barcelona": ["Spain", "Europe"],
    "berlin": ["Germany", "Europe"],
    "amsterdam": ["Netherlands", "Europe"],
    "tokyo": ["Japan", "Asia"],
    "kyoto": ["Japan", "Asia"],
    "bangkok": ["Thailand", "Asia"],
    "bali": ["Indonesia", "Asia"],
    "new york": ["United States", "North America"],
    "san francisco": ["United States", "North America"],
    "cancun": ["Mexico", "North America"],
    "rio de janeiro": ["Brazil", "South America"],
    "cape town": ["South Africa", "Africa"],
    "marrakech": ["Morocco", "Africa"],
    "sydney": ["Australia", "Oceania"],
    "auckland": ["New Zealand", "Oceania"],
}


@dataclass
class TaggedEntities:
    """Entities found while tagging; every list is de-duplicated."""

    locations: List[str] = field(default_factory=list)
    attractions: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)


def _clean(entity: str) -> str:
    return _LEADING_ARTICLE.sub("", " ".join(entity.split()))


def _dedupe(values: List[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


class EntityTagger:
    """Extract locations, attractions, organizations and dates for tagging."""

    def __init__(self, gazetteer: Optional[Gazetteer] = None):
        self.recognizer = EntityRecognizer(gazetteer=gazetteer)

    def extract_entities(
        self, text: str, content: Optional[NormalizedContent] = None
    ) -> TaggedEntities:
        entities = TaggedEntities()
        if content is not None:
            self._from_structured_content(content, entities)

        if text:
            entities.locations += self._extract_locations(text)
            entities.attractions += self._match_all(ATTRACTION_PATTERNS, text)
            entities.organizations += self._match_all(ORGANIZATION_PATTERNS, text)
            entities.dates += [m.group(0) for p in DATE_PATTERNS for m in p.finditer(text)]

        return TaggedEntities(
            locations=_dedupe(entities.locations),
            attractions=_dedupe(entities.attractions),
            organizations=_dedupe(entities.organizations),
            dates=_dedupe(entities.dates),
        )

    def get_location_hierarchy(self, location: str) -> List[str]:
        """Country and continent above a well-known place, or [] if unknown."""
        return list(LOCATION_HIERARCHY.get(location.strip().lower(), []))

    @staticmethod
    def _from_structured_content(content: NormalizedContent, entities: TaggedEntities) -> None:
        if isinstance(content, NormalizedDestination):
            if content.country and content.country != UNKNOWN_COUNTRY:
                entities.locations.append(content.country)
            if content.region:
                entities.locations.append(content.region)
            if content.address and content.address.city:
                entities.locations.append(content.address.city)
        elif isinstance(content, NormalizedActivity):
            if content.location_name:
                entities.locations.append(content.location_name)
        elif isinstance(content, NormalizedAccommodation):
            if content.address.city:
                entities.locations.append(content.address.city)
            if content.address.country:
                entities.locations.append(content.address.country)
        elif isinstance(content, NormalizedTransportation):
            if content.provider:
                entities.organizations.append(content.provider)
            for endpoint in (content.departure, content.arrival):
                if endpoint is not None:
                    entities.locations.append(endpoint.location)
        elif isinstance(content, (NormalizedItinerary, NormalizedGeneric)):
            pass
        else:
            assert_never(content)

    def _extract_locations(self, text: str) -> List[str]:
        return self.recognizer.find_locations(text) + self._match_all(LOCATION_PATTERNS, text)

    @staticmethod
    def _match_all(patterns: List[re.Pattern], text: str) -> List[str]:
        return [_clean(m.group(0)) for pattern in patterns for m in pattern.finditer(text)]
