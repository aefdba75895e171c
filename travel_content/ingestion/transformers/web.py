"""
Web content transformer.

Turns scraped HTML text into any NormalizedContent variant. The variant comes
from the metadata ``content_type`` hint, then the ``page_type`` hint, then
keyword heuristics over the page text.
"""

from __future__ import annotations

import logging
import re

from travel_content.ingestion.transformers.base import BaseContentTransformer
from travel_content.schemas.content import ContentType, RawContent, RawContentType

logger = logging.getLogger(__name__)

PAGE_TYPE_TO_CONTENT_TYPE = {
    "destination": ContentType.DESTINATION,
    "city": ContentType.DESTINATION,
    "guide": ContentType.DESTINATION,
    "activity": ContentType.ACTIVITY,
    "tour": ContentType.ACTIVITY,
    "experience": ContentType.ACTIVITY,
    "attraction": ContentType.ACTIVITY,
    "hotel": ContentType.ACCOMMODATION,
    "accommodation": ContentType.ACCOMMODATION,
    "lodging": ContentType.ACCOMMODATION,
    "rental": ContentType.ACCOMMODATION,
    "transport": ContentType.TRANSPORTATION,
    "transportation": ContentType.TRANSPORTATION,
    "flight": ContentType.TRANSPORTATION,
    "train": ContentType.TRANSPORTATION,
    "itinerary": ContentType.ITINERARY,
}

_CHECK_IN = re.compile(r"check[-\s]?in")
_CHECK_OUT = re.compile(r"check[-\s]?out")
_TRANSPORT_HINT = re.compile(r"\b(?:flights?|trains?|bus|ferry|departs?|departure|boarding)\b")


class WebContentTransformer(BaseContentTransformer):
    """
    Transformer for ``html`` raw content.

    Example:
        >>> transformer = WebContentTransformer()
        >>> transformer.transform(raw).type
        'accommodation'
    """

    supported_content_types = frozenset({RawContentType.HTML})

    def detect_content_type(self, raw: RawContent) -> ContentType:
        hinted = self._content_type_hint(raw)
        if hinted is not None:
            return hinted

        page_type = (raw.metadata.page_type or "").strip().lower()
        if page_type in PAGE_TYPE_TO_CONTENT_TYPE:
            return PAGE_TYPE_TO_CONTENT_TYPE[page_type]

        text = raw.raw_text.lower()
        if _CHECK_IN.search(text) and _CHECK_OUT.search(text):
            return ContentType.ACCOMMODATION
        if "duration" in text and "book now" in text:
            return ContentType.ACTIVITY
        if "things to do" in text and "getting there" in text:
            return ContentType.DESTINATION
        if ("day 1" in text and "day 2" in text) or "itinerary" in text:
            return ContentType.ITINERARY
        if ("departure" in text and "arrival" in text) or (
            _TRANSPORT_HINT.search(text) and re.search(r"\bfrom\s+\w+.*\bto\s+\w+", text)
        ):
            return ContentType.TRANSPORTATION

        logger.debug("No content type signal for %s, using generic", raw.id)
        return ContentType.GENERIC
