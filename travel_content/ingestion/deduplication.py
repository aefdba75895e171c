"""
Content deduplication.

Two tiers, checked in order:

1. Exact: SHA-256 of the lower-cased, trimmed salient text. A hit is a
   duplicate with similarity 1.0 and MinHash is never computed.
2. Near-duplicate: 3-word shingles of the same text, a 128-value MinHash
   signature, and a linear scan over every stored signature. The fraction
   of positions with equal minima estimates Jaccard similarity.

The MinHash uses a simple multiplicative string hash seeded with the
function index rather than independent universal hashes. Estimates are
biased on adversarial input; the 0.8 default threshold is tuned for this
hash, so changing the hash means re-deriving the threshold.

The indices are plain dicts owned by one Deduplicator instance and grow
until ``remove_content`` or ``clear`` is called.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from travel_content.ingestion.normalization.text_utils import (
    STOP_WORDS,
    content_text,
    tokenize,
)
from travel_content.schemas.content import NormalizedContent

logger = logging.getLogger(__name__)

NUM_HASH_FUNCTIONS = 128
SHINGLE_SIZE = 3
DEFAULT_SIMILARITY_THRESHOLD = 0.8

Signature = Tuple[int, ...]


@dataclass
class DeduplicationResult:
    """Outcome of a duplicate check."""

    is_duplicate: bool
    similarity_score: float = 0.0
    matched_content_id: Optional[str] = None


# ============================================================================
# TEXT AND HASHING HELPERS
# ============================================================================


def salient_text(content: NormalizedContent) -> str:
    """Identifying text of a content item: base fields, then place fields."""
    return content_text(content, identifying=True)


def content_hash(text: str) -> str:
    """SHA-256 hex digest of the lower-cased, trimmed text."""
    return hashlib.sha256(text.strip().lower().encode("utf-8")).hexdigest()


def shingles(text: str, size: int = SHINGLE_SIZE) -> set[str]:
    """
    Word shingles of ``size`` tokens.

    Stop words and punctuation are dropped first, so inserting either does
    not change the shingle set. Fewer than ``size`` tokens give one shingle.
    """
    tokens = [t for t in tokenize(text) if t and t not in STOP_WORDS]
    if not tokens:
        return set()
    if len(tokens) < size:
        return {" ".join(tokens)}
    return {" ".join(tokens[i : i + size]) for i in range(len(tokens) - size + 1)}


def _seeded_hash(value: str, seed: int) -> int:
    """``h = h * 31 + ord(c)`` over the string, truncated to signed 32 bits."""
    h = seed
    for char in value:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


def minhash_signature(
    shingle_set: set[str], num_hashes: int = NUM_HASH_FUNCTIONS
) -> Optional[Signature]:
    """Minimum seeded hash per function index, or None for an empty set."""
    if not shingle_set:
        return None
    return tuple(
        min(_seeded_hash(shingle, seed) for shingle in shingle_set) for seed in range(num_hashes)
    )


def signature_similarity(a: Signature, b: Signature) -> float:
    """Fraction of positions where the two signatures agree."""
    if len(a) != len(b) or not a:
        return 0.0
    return sum(1 for x, y in zip(a, b) if x == y) / len(a)


# ============================================================================
# DEDUPLICATOR
# ============================================================================


class Deduplicator:
    """
    Two-tier duplicate detector with an in-memory index.

    Only non-duplicates are stored. ``check_and_store_duplicate`` is not
    locked: callers running it from several threads can let two
    near-identical items in at once. The pipeline calls it from the event
    loop only, so within one batch chunk the first item to finish its
    transform is kept.

    Example:
        >>> dedup = Deduplicator(similarity_threshold=0.8)
        >>> dedup.check_and_store_duplicate(first).is_duplicate
        False
        >>> dedup.check_and_store_duplicate(copy_of_first).similarity_score
        1.0
    """

    def __init__(self, similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        if not 0.0 <= similarity_threshold <= 1.0:
            raise ValueError(
                f"similarity_threshold must be between 0 and 1, got {similarity_threshold}"
            )
        self.similarity_threshold = similarity_threshold
        self._hash_to_id: Dict[str, str] = {}
        self._id_to_hash: Dict[str, str] = {}
        self._signatures: Dict[str, Optional[Signature]] = {}

    def check_duplicate(
        self, content: NormalizedContent, threshold: Optional[float] = None
    ) -> DeduplicationResult:
        """
        Check ``content`` against the index without storing it.

        Args:
            content: Normalized item to check
            threshold: Overrides the instance similarity threshold

        Returns:
            DeduplicationResult with the best match when it is a duplicate
        """
        threshold = self.similarity_threshold if threshold is None else threshold
        text = salient_text(content)

        exact_match = self._hash_to_id.get(content_hash(text))
        if exact_match is not None:
            logger.debug("Exact duplicate of %s: %s", exact_match, content.id)
            return DeduplicationResult(True, 1.0, exact_match)

        signature = minhash_signature(shingles(text))
        if signature is None:
            return DeduplicationResult(False)

        best_id, best_score = None, 0.0
        for stored_id, stored in self._signatures.items():
            if stored is None:
                continue
            score = signature_similarity(signature, stored)
            if score > best_score:
                best_id, best_score = stored_id, score

        if best_id is not None and best_score >= threshold:
            logger.debug(
                "Near duplicate of %s (similarity %.2f): %s", best_id, best_score, content.id
            )
            return DeduplicationResult(True, best_score, best_id)
        return DeduplicationResult(False, best_score)

    def store(self, content: NormalizedContent) -> None:
        """Add ``content`` to both indices (replacing an earlier entry with the same id)."""
        if content.id in self._id_to_hash:
            self.remove_content(content.id)

        text = salient_text(content)
        digest = content_hash(text)
        self._hash_to_id[digest] = content.id
        self._id_to_hash[content.id] = digest
        self._signatures[content.id] = minhash_signature(shingles(text))

    def check_and_store_duplicate(
        self, content: NormalizedContent, threshold: Optional[float] = None
    ) -> DeduplicationResult:
        """Check ``content`` and store it only when it is not a duplicate."""
        result = self.check_duplicate(content, threshold)
        if not result.is_duplicate:
            self.store(content)
        return result

    def remove_content(self, content_id: str) -> bool:
        """Remove one item from both indices. Returns False if it was not stored."""
        digest = self._id_to_hash.pop(content_id, None)
        if digest is None:
            return False
        if self._hash_to_id.get(digest) == content_id:
            del self._hash_to_id[digest]
        self._signatures.pop(content_id, None)
        return True

    def clear(self) -> None:
        """Forget everything."""
        self._hash_to_id.clear()
        self._id_to_hash.clear()
        self._signatures.clear()

    def get_stats(self) -> Dict[str, int]:
        return {
            "total_content": len(self._signatures),
            "unique_hashes": len(self._hash_to_id),
        }

    def __len__(self) -> int:
        return len(self._signatures)
