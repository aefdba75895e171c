"""Tokenization and text assembly helpers shared by deduplication, keyword extraction and tagging."""

from __future__ import annotations

import re
from typing import List, Optional, assert_never

from travel_content.schemas.content import (
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
)

# Common English stop words
STOP_WORDS = frozenset(
    [
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
        "to", "was", "will", "with", "this", "these", "they",
        "but", "if", "or", "because", "what", "which",
        "can", "could", "may", "might", "must", "shall", "should", "would",
        "i", "you", "she", "we", "them", "their", "our",
    ]
)

_NON_WORD = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")


def tokenize(text: str, min_length: int = 1) -> list[str]:
    """
    Lower-case, replace punctuation with spaces and split on whitespace.

    Hyphens are kept inside tokens ("hop-on"); tokens shorter than
    ``min_length`` characters are dropped.
    """
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [
        token.strip("-")
        for token in _WHITESPACE.split(cleaned)
        if len(token.strip("-")) >= min_length
    ]


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def content_text(content: NormalizedContent, identifying: bool = False) -> str:
    """
    Join the text fields of a content item: name/title, description and text
    first, then type-specific fields (activity type, transport mode...).

    With ``identifying`` the place fields that tell two records apart
    (destination country, accommodation city, route endpoints) are included
    and amenities are left out; this is the text duplicate detection hashes.
    """
    parts: List[Optional[str]] = []

    if isinstance(content, NormalizedDestination):
        parts += [content.name, content.description]
        if identifying:
            parts.append(content.country)
        parts.append(content.region)
    elif isinstance(content, NormalizedActivity):
        parts += [content.name, content.description, content.activity_type, content.location_name]
    elif isinstance(content, NormalizedAccommodation):
        parts += [content.name, content.description, content.accommodation_type]
        if identifying:
            parts.append(content.address.city)
        else:
            parts += content.amenities
    elif isinstance(content, NormalizedTransportation):
        parts += [content.description, content.mode, content.provider]
        if identifying:
            parts += [
                content.departure.location if content.departure else None,
                content.arrival.location if content.arrival else None,
            ]
    elif isinstance(content, NormalizedItinerary):
        parts += [content.title, content.description]
        for plan in content.daily_plans:
            parts.append(plan.title)
            parts.extend(item.activity for item in plan.items)
    elif isinstance(content, NormalizedGeneric):
        parts += [content.title, content.text]
    else:
        assert_never(content)

    return " ".join(str(part) for part in parts if part)
