"""
Keyword extraction for travel content tagging.

Frequency-based: unigrams plus bigrams/trigrams that repeat at least twice,
ranked by ``frequency * weight`` with longer phrases weighted higher.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional

from travel_content.ingestion.normalization.text_utils import STOP_WORDS, tokenize

MIN_TOKEN_LENGTH = 3
MIN_PHRASE_FREQUENCY = 2

# n-gram size -> relevance weight
NGRAM_WEIGHTS = {1: 1.0, 2: 1.5, 3: 2.0}

TRAVEL_PATTERNS = [
    re.compile(r"\b(hotel|hostel|resort|motel|lodge|b&b|guesthouse)\b", re.IGNORECASE),
    re.compile(r"\b(flight|airline|airport|terminal)\b", re.IGNORECASE),
    re.compile(r"\b(tour|excursion|trip|journey|travel|vacation|holiday)\b", re.IGNORECASE),
    re.compile(r"\b(beach|mountain|city|island|desert|forest|lake|river)\b", re.IGNORECASE),
    re.compile(r"\b(restaurant|cafe|bar|dining|cuisine|food)\b", re.IGNORECASE),
    re.compile(r"\b(museum|gallery|monument|landmark|attraction)\b", re.IGNORECASE),
    re.compile(r"\b(activity|adventure|experience|sightseeing)\b", re.IGNORECASE),
    re.compile(r"\b(transport|transportation|bus|train|taxi|car|bike)\b", re.IGNORECASE),
]


@dataclass(frozen=True)
class ExtractedKeyword:
    term: str
    frequency: int
    relevance: float


class KeywordExtractor:
    """
    Extract ranked keywords from free text.

    Example:
        >>> extractor = KeywordExtractor()
        >>> extractor.extract("Coral reef diving. Coral reef snorkeling.")[:2]
        ['coral reef', 'coral']
    """

    def __init__(self, stop_words: Optional[Iterable[str]] = None):
        self.stop_words = set(STOP_WORDS if stop_words is None else stop_words)

    def extract(self, text: str, limit: int = 20) -> List[str]:
        """Top ``limit`` keyword terms, most relevant first."""
        return [keyword.term for keyword in self.extract_with_details(text, limit)]

    def extract_with_details(self, text: str, limit: int = 30) -> List[ExtractedKeyword]:
        """Top ``limit`` keywords with their frequency and relevance."""
        if not text or not text.strip():
            return []

        tokens = [
            token
            for token in tokenize(text, min_length=MIN_TOKEN_LENGTH)
            if token not in self.stop_words
        ]
        return self._rank(tokens)[:limit]

    def extract_travel_keywords(self, text: str) -> List[str]:
        """Domain words (lodging, flights, tours, terrain, dining...) in order of appearance."""
        if not text:
            return []
        found: List[str] = []
        for pattern in TRAVEL_PATTERNS:
            for match in pattern.findall(text):
                term = match.lower()
                if term not in found:
                    found.append(term)
        return found

    def add_stop_words(self, words: Iterable[str]) -> None:
        self.stop_words.update(word.lower() for word in words)

    def remove_stop_words(self, words: Iterable[str]) -> None:
        for word in words:
            self.stop_words.discard(word.lower())

    @staticmethod
    def _rank(tokens: List[str]) -> List[ExtractedKeyword]:
        keywords: List[ExtractedKeyword] = []
        for size, weight in NGRAM_WEIGHTS.items():
            counts = Counter(
                " ".join(tokens[i : i + size]) for i in range(len(tokens) - size + 1)
            )
            for term, frequency in counts.items():
                if size > 1 and frequency < MIN_PHRASE_FREQUENCY:
                    continue
                keywords.append(ExtractedKeyword(term, frequency, frequency * weight))

        # Stable sort keeps first-seen order among equal relevance
        return sorted(keywords, key=lambda k: k.relevance, reverse=True)
