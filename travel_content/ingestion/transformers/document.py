"""
Document content transformer.

Handles text extracted from PDF and DOCX files. Documents are usually
itineraries; anything else becomes a generic record unless the metadata
names a variant.
"""

from __future__ import annotations

from travel_content.ingestion.normalization.entities import ExtractedEntities
from travel_content.ingestion.normalization.itinerary_parser import looks_like_itinerary
from travel_content.ingestion.transformers.base import BaseContentTransformer
from travel_content.schemas.content import ContentType, RawContent, RawContentType


def document_title(text: str | None) -> str | None:
    """First line that is plausibly a title (more than 5 and under 100 chars)."""
    if not text:
        return None
    for line in text.splitlines():
        line = line.strip()
        if 5 < len(line) < 100:
            return line
    return None


class DocumentContentTransformer(BaseContentTransformer):
    """Transformer for ``pdf_text`` and ``docx_text`` raw content."""

    supported_content_types = frozenset({RawContentType.PDF_TEXT, RawContentType.DOCX_TEXT})

    def detect_content_type(self, raw: RawContent) -> ContentType:
        hinted = self._content_type_hint(raw)
        if hinted is not None:
            return hinted
        if looks_like_itinerary(raw.raw_text):
            return ContentType.ITINERARY
        return ContentType.GENERIC

    def _title(self, raw: RawContent, entities: ExtractedEntities, fallback: str) -> str:
        return raw.metadata.title or document_title(raw.raw_text) or fallback
