"""
Entity Recognizer.

Extracts candidate location names, activity types, amenities and an address
from free text. Capitalized phrases are location candidates and lower-case
words/bigrams are activity or amenity candidates; every candidate is kept only
if the gazetteer knows it. This is pattern matching, not NLP: terms the
gazetteer does not list are missed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Protocol, runtime_checkable

from travel_content.ingestion.normalization.location_parser import (
    COUNTRY_NAME_TO_CODE,
    LocationParser,
    find_country_in_text,
    normalize_country,
)
from travel_content.ingestion.normalization.text_utils import STOP_WORDS, tokenize
from travel_content.schemas.content import Address, RawMetadata
from travel_content.schemas.taxonomy import TravelTaxonomy, get_taxonomy

logger = logging.getLogger(__name__)

_CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][\w'’-]*(?:\s+(?:de|of|la|del|the)?\s*[A-Z][\w'’-]*){0,3}")

# Well-known cities; countries and continents come from the country table and taxonomy
DEFAULT_LOCATIONS = [
    "Paris", "London", "Tokyo", "New York", "Rome", "Berlin", "Madrid",
    "Amsterdam", "Vienna", "Prague", "Barcelona", "Lisbon", "Athens",
    "Dublin", "Edinburgh", "Venice", "Florence", "Milan", "Munich",
    "Budapest", "Copenhagen", "Stockholm", "Oslo", "Reykjavik", "Istanbul",
    "Dubai", "Cairo", "Marrakech", "Cape Town", "Nairobi", "Bangkok",
    "Singapore", "Hong Kong", "Seoul", "Kyoto", "Osaka", "Beijing",
    "Shanghai", "Bali", "Hanoi", "Sydney", "Melbourne", "Auckland",
    "Los Angeles", "San Francisco", "Chicago", "Miami", "Las Vegas",
    "Toronto", "Vancouver", "Montreal", "Mexico City", "Cancun",
    "Rio de Janeiro", "Buenos Aires", "Lima", "Cusco", "Santiago",
    "Mediterranean", "Caribbean", "Scandinavia", "Patagonia", "Alps",
]


@runtime_checkable
class Gazetteer(Protocol):
    """Lookup capability backing the EntityRecognizer."""

    def is_location(self, term: str) -> bool: ...

    def is_activity_type(self, term: str) -> bool: ...

    def is_amenity(self, term: str) -> bool: ...


class TaxonomyGazetteer:
    """
    Gazetteer built from static lists and the travel taxonomy.

    Locations: well-known cities, country names and continent names.
    Activity types: every keyword/synonym under the ``activity`` category.
    Amenities: every keyword of the accommodation amenity groups.
    """

    def __init__(
        self,
        taxonomy: TravelTaxonomy | None = None,
        extra_locations: Iterable[str] = (),
    ):
        taxonomy = taxonomy or get_taxonomy()

        self._locations = {loc.lower() for loc in DEFAULT_LOCATIONS}
        self._locations.update(name for name in COUNTRY_NAME_TO_CODE if len(name) > 2)
        self._locations.update(
            node.name.lower() for node in taxonomy.iter_nodes(kind="continent")
        )
        self._locations.update(loc.lower() for loc in extra_locations)

        self._activity_types: set[str] = set()
        activity_root = taxonomy.get_node("activity")
        if activity_root is not None:
            for node in taxonomy.iter_nodes(activity_root, kind="subcategory"):
                self._activity_types.update(node.terms)
                self._activity_types.add(node.id.replace("_", " "))

        self._amenities: set[str] = set()
        for node in taxonomy.iter_nodes(kind="amenity_group"):
            self._amenities.update(node.terms)

    def is_location(self, term: str) -> bool:
        return term.strip().lower() in self._locations

    def is_activity_type(self, term: str) -> bool:
        return term.strip().lower() in self._activity_types

    def is_amenity(self, term: str) -> bool:
        return term.strip().lower().replace("_", " ") in self._amenities


@dataclass
class ExtractedEntities:
    """Partial fields recovered from free text."""

    name: str | None = None
    locations: list[str] = field(default_factory=list)
    activity_types: list[str] = field(default_factory=list)
    amenities: list[str] = field(default_factory=list)
    country: str | None = None
    address: Address | None = None


def _unique(items: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


class EntityRecognizer:
    """
    Extract candidate entities from text using a pluggable Gazetteer.

    Example:
        >>> recognizer = EntityRecognizer()
        >>> recognizer.extract_entities("Go diving near Bali").locations
        ['Bali']
    """

    def __init__(
        self,
        gazetteer: Gazetteer | None = None,
        location_parser: LocationParser | None = None,
    ):
        self.gazetteer = gazetteer or TaxonomyGazetteer()
        self.location_parser = location_parser or LocationParser()

    def extract_entities(
        self, text: str | None, context: RawMetadata | None = None
    ) -> ExtractedEntities:
        """
        Extract locations, activity types, amenities, country and address.

        Args:
            text: Free text to scan
            context: Metadata of the raw item; its title becomes the name

        Returns:
            ExtractedEntities with whatever could be recognized
        """
        result = ExtractedEntities()
        if not text:
            if context and context.title:
                result.name = context.title.strip()
            return result

        result.name = (context.title.strip() if context and context.title else None) or (
            self._guess_name(text)
        )
        result.locations = self.find_locations(text)

        lower_terms = self._lowercase_candidates(text)
        result.activity_types = _unique(
            t for t in lower_terms if self.gazetteer.is_activity_type(t)
        )
        result.amenities = _unique(t for t in lower_terms if self.gazetteer.is_amenity(t))

        for location in result.locations:
            code = normalize_country(location)
            if code:
                result.country = code
                break
        else:
            result.country = find_country_in_text(text)

        result.address = self.extract_address(text)

        logger.debug(
            "Recognized %d locations, %d activity types, %d amenities",
            len(result.locations),
            len(result.activity_types),
            len(result.amenities),
        )
        return result

    def extract_address(self, text: str | None) -> Address | None:
        """Find and parse an address line, or None when nothing address-like is present."""
        address_text = self.location_parser.find_address_text(text)
        if not address_text:
            return None
        return self.location_parser.parse_address(address_text)

    def find_locations(self, text: str) -> list[str]:
        """Known locations among capitalized phrases, in order of appearance."""
        locations: list[str] = []
        for match in _CAPITALIZED_PHRASE.finditer(text):
            words = match.group(0).split()
            # Longest known sub-phrase first: "Visit New York City" -> "New York"
            start = 0
            while start < len(words):
                for end in range(len(words), start, -1):
                    candidate = " ".join(words[start:end])
                    if self.gazetteer.is_location(candidate):
                        locations.append(candidate)
                        start = end
                        break
                else:
                    start += 1
        return _unique(locations)

    @staticmethod
    def _lowercase_candidates(text: str) -> list[str]:
        tokens = tokenize(text)
        candidates = [t for t in tokens if t not in STOP_WORDS and len(t) > 2]
        candidates.extend(f"{a} {b}" for a, b in zip(tokens, tokens[1:]))
        return candidates

    @staticmethod
    def _guess_name(text: str) -> str | None:
        for line in text.splitlines():
            line = line.strip()
            if 3 <= len(line) <= 100:
                return line.rstrip(".:")
        return None
