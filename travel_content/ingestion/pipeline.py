"""
Normalization Pipeline.

Runs RawContent through a fixed per-item workflow:
1. Transform with the transformer registered for the source type
2. Deduplication check (if enabled)
3. Validation (if enabled; advisory, content is kept)
4. Accumulate into a NormalizationResult

Nothing here is fatal for a batch: unsupported input and transform failures
become error strings and processing continues with the next item.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from travel_content.configs.config import Config
from travel_content.configs.settings import get_settings
from travel_content.ingestion.deduplication import Deduplicator
from travel_content.ingestion.transformers import (
    BaseContentTransformer,
    DocumentContentTransformer,
    WebContentTransformer,
)
from travel_content.ingestion.validation import ContentValidator
from travel_content.schemas.content import (
    ContentType,
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedItinerary,
    RawContent,
)

# ============================================================================
# ENUMS & DATA CLASSES
# ============================================================================


class SourceType(str, Enum):
    """Where raw content came from; selects the transformer."""

    WEB = "web"
    DOCUMENT = "document"


@dataclass
class NormalizationOptions:
    """
    Per-call pipeline options.
    """

    enable_deduplication: bool = False
    deduplication_threshold: float = 0.8
    validate_output: bool = False
    batch_size: int = 10

    def __post_init__(self):
        if not 0.0 <= self.deduplication_threshold <= 1.0:
            raise ValueError(
                f"deduplication_threshold must be between 0 and 1, got {self.deduplication_threshold}"
            )
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")


@dataclass
class NormalizationResult:
    """
    Outcome of normalizing one item or a batch.

    Duplicates are not errors: they are only counted.
    """

    content: List[NormalizedContent] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    duplicates_removed: int = 0

    @classmethod
    def merge(cls, results: Iterable["NormalizationResult"]) -> "NormalizationResult":
        """Concatenate results, preserving their order."""
        merged = cls()
        for result in results:
            merged.content.extend(result.content)
            merged.errors.extend(result.errors)
            merged.duplicates_removed += result.duplicates_removed
        return merged

    def to_dict(self) -> Dict:
        return {
            "content": [item.to_dict() for item in self.content],
            "errors": list(self.errors),
            "duplicatesRemoved": self.duplicates_removed,
        }


@dataclass
class ContentByType:
    """A batch result split into the lists downstream consumers route on."""

    destinations: List[NormalizedDestination] = field(default_factory=list)
    activities: List[NormalizedActivity] = field(default_factory=list)
    accommodations: List[NormalizedAccommodation] = field(default_factory=list)
    itineraries: List[NormalizedItinerary] = field(default_factory=list)


# ============================================================================
# PIPELINE
# ============================================================================


class NormalizationPipeline:
    """
    Turns RawContent into typed, optionally deduplicated and validated records.

    The Deduplicator is injected (or created per pipeline) and its index
    lives as long as the pipeline; call ``clear_deduplication_index`` between
    unrelated runs.

    Example:
        >>> pipeline = NormalizationPipeline()
        >>> result = asyncio.run(pipeline.normalize(raw, SourceType.WEB))
        >>> result.content[0].type
        'activity'
    """

    def __init__(
        self,
        deduplicator: Optional[Deduplicator] = None,
        transformers: Optional[Dict[SourceType, BaseContentTransformer]] = None,
        validator: Optional[ContentValidator] = None,
    ):
        settings = get_settings()
        self.deduplicator = deduplicator or Deduplicator(settings.DEDUPLICATION_THRESHOLD)
        self.transformers = transformers or {
            SourceType.WEB: WebContentTransformer(
                default_currency=settings.DEFAULT_CURRENCY,
                default_locale=settings.DEFAULT_LOCALE,
            ),
            SourceType.DOCUMENT: DocumentContentTransformer(
                default_currency=settings.DEFAULT_CURRENCY,
                default_locale=settings.DEFAULT_LOCALE,
            ),
        }
        self.validator = validator or ContentValidator()
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        return logging.getLogger("pipeline.normalization")

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    async def normalize(
        self,
        raw: RawContent,
        source_type: SourceType | str,
        options: Optional[NormalizationOptions] = None,
    ) -> NormalizationResult:
        """
        Normalize a single item.

        Args:
            raw: Raw content to normalize
            source_type: Selects the transformer (web or document)
            options: Pipeline options; defaults to Config.default_options()

        Returns:
            NormalizationResult with at most one content item
        """
        options = options or Config.default_options()
        try:
            source_type = SourceType(source_type)
        except ValueError:
            self.logger.warning(f"Unsupported source type '{source_type}' for {raw.id}")
            return NormalizationResult(
                errors=[f"Unsupported source type '{source_type}' ({raw.id})"]
            )

        # Transformers are CPU-bound and synchronous
        content, error = await asyncio.to_thread(self._transform, raw, source_type)
        if content is None:
            return NormalizationResult(errors=[error] if error else [])

        # No await between check and store: see Deduplicator for the race this avoids
        return self._accept(content, options)

    async def normalize_batch(
        self,
        items: Sequence[RawContent],
        source_type: SourceType | str,
        options: Optional[NormalizationOptions] = None,
    ) -> NormalizationResult:
        """
        Normalize items in chunks of ``options.batch_size``.

        Items within a chunk run concurrently; chunks run one after another,
        so results from an earlier chunk always precede a later chunk's.
        """
        options = options or Config.default_options()
        results: List[NormalizationResult] = []
        total_chunks = (len(items) + options.batch_size - 1) // options.batch_size

        for chunk_index, start in enumerate(range(0, len(items), options.batch_size), start=1):
            chunk = items[start : start + options.batch_size]
            chunk_results = await asyncio.gather(
                *(self.normalize(raw, source_type, options) for raw in chunk)
            )
            results.extend(chunk_results)
            self.logger.debug(
                f"Processed chunk {chunk_index}/{total_chunks} ({len(chunk)} items)"
            )

        merged = NormalizationResult.merge(results)
        self.logger.info(
            f"Normalized {len(merged.content)}/{len(items)} items "
            f"({merged.duplicates_removed} duplicates removed, {len(merged.errors)} errors)"
        )
        return merged

    @staticmethod
    def get_content_by_type(result: NormalizationResult) -> ContentByType:
        """Group destinations, activities, accommodations and itineraries."""
        grouped = ContentByType()
        for item in result.content:
            if item.type == ContentType.DESTINATION.value:
                grouped.destinations.append(item)
            elif item.type == ContentType.ACTIVITY.value:
                grouped.activities.append(item)
            elif item.type == ContentType.ACCOMMODATION.value:
                grouped.accommodations.append(item)
            elif item.type == ContentType.ITINERARY.value:
                grouped.itineraries.append(item)
        return grouped

    def clear_deduplication_index(self) -> None:
        self.deduplicator.clear()

    # ========================================================================
    # STEPS
    # ========================================================================

    def _transform(
        self, raw: RawContent, source_type: SourceType
    ) -> Tuple[Optional[NormalizedContent], Optional[str]]:
        transformer = self.transformers.get(source_type)
        try:
            content = transformer.transform(raw) if transformer else None
        except Exception as e:
            self.logger.warning(f"Failed to transform {raw.id}: {e}", exc_info=True)
            return None, f"Failed to transform {raw.id}: {e}"

        if content is None:
            return None, (
                f"Unsupported content type '{raw.content_type}' "
                f"for source '{source_type.value}' ({raw.id})"
            )
        self.logger.debug(f"Transformed {raw.id} into {content.type} {content.id}")
        return content, None

    def _accept(
        self, content: NormalizedContent, options: NormalizationOptions
    ) -> NormalizationResult:
        if options.enable_deduplication:
            dedup = self.deduplicator.check_and_store_duplicate(
                content, options.deduplication_threshold
            )
            if dedup.is_duplicate:
                self.logger.debug(
                    f"Dropping {content.id}: duplicate of {dedup.matched_content_id} "
                    f"(similarity {dedup.similarity_score:.2f})"
                )
                return NormalizationResult(duplicates_removed=1)

        errors: List[str] = []
        if options.validate_output:
            errors = [str(issue) for issue in self.validator.validate(content)]
            if errors:
                self.logger.debug(f"{content.id} has {len(errors)} validation issues")

        return NormalizationResult(content=[content], errors=errors)
