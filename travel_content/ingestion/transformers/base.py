"""
Base transformer.

Holds the per-variant record builders shared by the web and document
transformers. Subclasses decide which raw content types they accept and how
the target variant is inferred.

Every builder merges, in priority order:
1. identity/provenance fields taken from the RawContent
2. metadata hints when present
3. EntityRecognizer output as a fallback
4. field-specific regex extraction over the raw text
Fields that cannot be normalized are omitted rather than set to garbage.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import assert_never

from travel_content.ingestion.errors import TransformationError
from travel_content.ingestion.normalization.currency import PriceNormalizer
from travel_content.ingestion.normalization.dates import DateNormalizer, Duration
from travel_content.ingestion.normalization.entities import (
    EntityRecognizer,
    ExtractedEntities,
)
from travel_content.ingestion.normalization.itinerary_parser import parse_daily_plans
from travel_content.ingestion.normalization.location_parser import (
    UNKNOWN_COUNTRY,
    LocationParser,
    normalize_country,
)
from travel_content.ingestion.normalization.text_utils import collapse_whitespace
from travel_content.schemas.content import (
    Address,
    ContentType,
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
    OperatingHours,
    Price,
    RawContent,
    RawContentType,
    TransportEndpoint,
    TransportMode,
)

logger = logging.getLogger(__name__)

# Fixed checklist behind the completeness confidence score
IMPORTANT_FIELDS = ("title", "description", "price", "rating", "address", "coordinates")

_TIME = r"\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?)?"
_DURATION_TEXT = re.compile(
    r"\d+(?:\.\d+)?\s*-?\s*(?:hours?|hrs?|days?|minutes?|mins?)\b|\b(?:half|full)[\s-]day\b",
    re.IGNORECASE,
)
_CHECK_IN = re.compile(rf"check[-\s]?in(?:\s+(?:time|from))?\s*:?\s*({_TIME})", re.IGNORECASE)
_CHECK_OUT = re.compile(rf"check[-\s]?out(?:\s+(?:time|by|until))?\s*:?\s*({_TIME})", re.IGNORECASE)
_OPERATING_HOURS = re.compile(
    r"\b(monday|tuesday|wednesday|thursday|friday|saturday|sunday|daily|weekdays|weekends)"
    rf"\s*:\s*({_TIME})\s*[-–]\s*({_TIME})",
    re.IGNORECASE,
)
_ROUTE = re.compile(
    r"\bfrom\s+([A-Z][\w'’-]*(?:\s+[A-Z][\w'’-]*)*)\s+to\s+([A-Z][\w'’-]*(?:\s+[A-Z][\w'’-]*)*)"
)
_DEPARTURE_TIME = re.compile(rf"\bdepart(?:s|ure|ing)?\s*(?:at|:)?\s*({_TIME})", re.IGNORECASE)
_ARRIVAL_TIME = re.compile(rf"\barriv(?:es|al|ing)?\s*(?:at|:)?\s*({_TIME})", re.IGNORECASE)
_PROVIDER = re.compile(
    r"\b((?:[A-Z][\w&]*\s+)+(?:Airlines|Airways|Air|Rail|Railways|Ferries|Lines|Coaches|Express))\b"
)

# Checked in order; the first matching mode wins
TRANSPORT_MODE_PATTERNS = [
    (TransportMode.FLIGHT, re.compile(r"\b(?:flights?|airlines?|airways|plane|airport)\b", re.I)),
    (TransportMode.TRAIN, re.compile(r"\b(?:trains?|rail|railways?|metro|subway)\b", re.I)),
    (TransportMode.FERRY, re.compile(r"\b(?:ferry|ferries|boat|cruise|catamaran)\b", re.I)),
    (TransportMode.BUS, re.compile(r"\b(?:bus|buses|coach|shuttle)\b", re.I)),
    (TransportMode.CAR_RENTAL, re.compile(r"\b(?:car\s+rental|rental\s+car|rent\s+a\s+car|car\s+hire)\b", re.I)),
    (TransportMode.TAXI, re.compile(r"\b(?:taxi|cab|private\s+transfer|rideshare)\b", re.I)),
    (TransportMode.WALK, re.compile(r"\b(?:walk|walking|on\s+foot)\b", re.I)),
]


def summarize(text: str | None, limit: int = 300) -> str | None:
    """First paragraph of ``text``, cut at a sentence boundary within ``limit`` chars."""
    if not text or not text.strip():
        return None
    paragraph = collapse_whitespace(re.split(r"\n\s*\n", text.strip(), maxsplit=1)[0])
    if len(paragraph) <= limit:
        return paragraph
    cut = paragraph[:limit]
    sentence_end = cut.rfind(". ")
    return cut[: sentence_end + 1] if sentence_end > 0 else cut.rstrip() + "..."


def completeness(**populated: bool) -> float:
    """Fraction of IMPORTANT_FIELDS that are populated."""
    unknown = set(populated) - set(IMPORTANT_FIELDS)
    if unknown:
        raise ValueError(f"Not on the completeness checklist: {sorted(unknown)}")
    return sum(1 for name in IMPORTANT_FIELDS if populated.get(name)) / len(IMPORTANT_FIELDS)


class BaseContentTransformer(ABC):
    """
    Abstract base for content transformers.

    Subclasses implement ``supports``-filtering via ``supported_content_types``
    and ``detect_content_type``; ``transform`` returns None for raw content
    they do not handle.
    """

    supported_content_types: frozenset[RawContentType] = frozenset()

    def __init__(
        self,
        date_normalizer: DateNormalizer | None = None,
        entity_recognizer: EntityRecognizer | None = None,
        location_parser: LocationParser | None = None,
        default_currency: str = "USD",
        default_locale: str = "en-US",
    ):
        self.date_normalizer = date_normalizer or DateNormalizer(default_locale)
        self.location_parser = location_parser or LocationParser()
        self.entity_recognizer = entity_recognizer or EntityRecognizer(
            location_parser=self.location_parser
        )
        self.default_currency = default_currency
        self.default_locale = default_locale

    def supports(self, raw: RawContent) -> bool:
        return raw.content_type in self.supported_content_types

    @abstractmethod
    def detect_content_type(self, raw: RawContent) -> ContentType:
        """Infer which NormalizedContent variant ``raw`` should become."""
        pass

    def transform(self, raw: RawContent) -> NormalizedContent | None:
        """
        Turn one RawContent item into a NormalizedContent variant.

        Returns:
            The normalized record, or None when the raw content type is not
            handled by this transformer

        Raises:
            TransformationError: A builder failed on supported input
        """
        if not self.supports(raw):
            return None

        content_type = self.detect_content_type(raw)
        logger.debug("Detected content type %s for %s", content_type.value, raw.id)
        entities = self.entity_recognizer.extract_entities(raw.raw_text, raw.metadata)

        try:
            if content_type is ContentType.DESTINATION:
                return self._to_destination(raw, entities)
            elif content_type is ContentType.ACTIVITY:
                return self._to_activity(raw, entities)
            elif content_type is ContentType.ACCOMMODATION:
                return self._to_accommodation(raw, entities)
            elif content_type is ContentType.TRANSPORTATION:
                return self._to_transportation(raw, entities)
            elif content_type is ContentType.ITINERARY:
                return self._to_itinerary(raw, entities)
            elif content_type is ContentType.GENERIC:
                return self._to_generic(raw, entities)
            else:
                assert_never(content_type)
        except (ValueError, TypeError) as e:
            raise TransformationError(raw.id, f"could not build {content_type.value}: {e}") from e

    # -------------------------------------------------------------------------
    # Shared helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _content_type_hint(raw: RawContent) -> ContentType | None:
        hint = (raw.metadata.content_type or "").strip().lower()
        try:
            return ContentType(hint) if hint else None
        except ValueError:
            logger.debug("Ignoring unknown content type hint %r on %s", hint, raw.id)
            return None

    @staticmethod
    def _provenance(raw: RawContent) -> dict:
        return {
            "source": raw.source,
            "original_content_type": raw.content_type,
            "extraction_date": raw.extracted_date,
        }

    def _title(self, raw: RawContent, entities: ExtractedEntities, fallback: str) -> str:
        return raw.metadata.title or entities.name or fallback

    def _description(self, raw: RawContent) -> str | None:
        return raw.metadata.description or summarize(raw.raw_text)

    def _price(self, hint: str | None, text: str) -> Price | None:
        source = hint or self._price_text(text)
        if not source:
            return None
        return PriceNormalizer.normalize_price(source, self.default_currency, self.default_locale)

    @staticmethod
    def _price_text(text: str) -> str | None:
        return PriceNormalizer.find_price_text(text)

    def _duration(self, hint: str | None, text: str) -> str | None:
        source = hint
        if not source:
            match = _DURATION_TEXT.search(text)
            source = match.group(0) if match else None
        duration = self.date_normalizer.normalize_duration(source)
        if duration is None:
            return None
        if duration.unit == "weeks":
            duration = Duration(duration.value * 7, "days")
        return str(duration)

    def _time_after(self, pattern: re.Pattern, text: str) -> str | None:
        match = pattern.search(text)
        return self.date_normalizer.normalize_time(match.group(1)) if match else None

    def _operating_hours(self, text: str) -> list[OperatingHours]:
        hours = []
        for day, opens, closes in _OPERATING_HOURS.findall(text):
            open_time = self.date_normalizer.normalize_time(opens)
            close_time = self.date_normalizer.normalize_time(closes)
            if open_time and close_time:
                hours.append(OperatingHours(day=day.lower(), open=open_time, close=close_time))
        return hours

    def _address(
        self, raw: RawContent, entities: ExtractedEntities, country: str | None
    ) -> Address | None:
        if raw.metadata.address:
            address = self.location_parser.parse_address(
                raw.metadata.address, known_country_code=country
            )
        else:
            address = entities.address
        if address is None:
            return None
        if not address.country and country:
            address = address.model_copy(update={"country": country})
        return address

    @staticmethod
    def _country(raw: RawContent, entities: ExtractedEntities) -> str | None:
        return normalize_country(raw.metadata.country) or entities.country

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    def _to_destination(self, raw: RawContent, entities: ExtractedEntities) -> NormalizedDestination:
        md = raw.metadata
        country = self._country(raw, entities)
        address = self._address(raw, entities, country)
        description = self._description(raw)

        return NormalizedDestination(
            **self._provenance(raw),
            name=self._title(raw, entities, "Unknown Destination"),
            description=description,
            country=country or UNKNOWN_COUNTRY,
            region=md.region,
            coordinates=md.coordinates,
            address=address,
            confidence=completeness(
                title=bool(md.title),
                description=bool(description),
                rating=md.rating is not None,
                address=address is not None,
                coordinates=md.coordinates is not None,
            ),
        )

    def _to_activity(self, raw: RawContent, entities: ExtractedEntities) -> NormalizedActivity:
        md = raw.metadata
        text = raw.raw_text
        price = self._price(md.price, text)
        description = self._description(raw)

        return NormalizedActivity(
            **self._provenance(raw),
            name=self._title(raw, entities, "Unknown Activity"),
            description=description,
            activity_type=entities.activity_types[0] if entities.activity_types else None,
            location_name=entities.locations[0] if entities.locations else None,
            price=price,
            duration=self._duration(md.duration, text),
            rating=md.rating,
            operating_hours=self._operating_hours(text),
            confidence=completeness(
                title=bool(md.title),
                description=bool(description),
                price=price is not None,
                rating=md.rating is not None,
                address=entities.address is not None,
                coordinates=md.coordinates is not None,
            ),
        )

    def _to_accommodation(
        self, raw: RawContent, entities: ExtractedEntities
    ) -> NormalizedAccommodation:
        md = raw.metadata
        text = raw.raw_text
        country = self._country(raw, entities)
        address = self._address(raw, entities, country) or Address(country=country)
        price_range = PriceNormalizer.extract_price_range(
            md.price_range or md.price or text, self.default_currency, self.default_locale
        )
        amenities = [a.strip().lower() for a in md.amenities if a.strip()] or entities.amenities
        description = self._description(raw)

        return NormalizedAccommodation(
            **self._provenance(raw),
            name=self._title(raw, entities, "Unknown Accommodation"),
            description=description,
            accommodation_type=md.accommodation_type,
            address=address,
            price_range=price_range,
            check_in_time=self._time_after(_CHECK_IN, text),
            check_out_time=self._time_after(_CHECK_OUT, text),
            rating=md.rating,
            amenities=amenities,
            confidence=completeness(
                title=bool(md.title),
                description=bool(description),
                price=price_range is not None or bool(md.price),
                rating=md.rating is not None,
                address=bool(md.address) or entities.address is not None,
                coordinates=md.coordinates is not None,
            ),
        )

    def _to_transportation(
        self, raw: RawContent, entities: ExtractedEntities
    ) -> NormalizedTransportation:
        md = raw.metadata
        text = raw.raw_text

        mode = TransportMode.OTHER
        for candidate, pattern in TRANSPORT_MODE_PATTERNS:
            if pattern.search(f"{md.title or ''} {text}"):
                mode = candidate
                break

        departure = arrival = None
        route = _ROUTE.search(text)
        if route:
            departure = TransportEndpoint(
                location=route.group(1).strip(), time=self._time_after(_DEPARTURE_TIME, text)
            )
            arrival = TransportEndpoint(
                location=route.group(2).strip(), time=self._time_after(_ARRIVAL_TIME, text)
            )

        provider_match = _PROVIDER.search(f"{md.title or ''}\n{text}")
        price = self._price(md.price, text)
        description = self._description(raw)

        return NormalizedTransportation(
            **self._provenance(raw),
            mode=mode,
            departure=departure,
            arrival=arrival,
            provider=provider_match.group(1).strip() if provider_match else md.title,
            price=price,
            description=description,
            confidence=completeness(
                title=bool(md.title),
                description=bool(description),
                price=price is not None,
                rating=md.rating is not None,
                address=route is not None,
                coordinates=md.coordinates is not None,
            ),
        )

    def _to_itinerary(self, raw: RawContent, entities: ExtractedEntities) -> NormalizedItinerary:
        text = raw.raw_text
        plans = parse_daily_plans(text, self.date_normalizer)
        ranges = self.date_normalizer.extract_date_range(text, self.default_locale)

        return NormalizedItinerary(
            **self._provenance(raw),
            title=self._title(raw, entities, "Travel Itinerary"),
            description=raw.metadata.description,
            daily_plans=plans,
            start_date=ranges[0].start if ranges else None,
            end_date=ranges[0].end if ranges else None,
            total_price=self._total_price(raw),
            duration_days=len(plans) or None,
        )

    def _to_generic(self, raw: RawContent, entities: ExtractedEntities) -> NormalizedGeneric:
        return NormalizedGeneric(
            **self._provenance(raw),
            title=self._title(raw, entities, "Untitled"),
            text=raw.raw_text,
        )

    def _total_price(self, raw: RawContent) -> Price | None:
        for line in raw.raw_text.splitlines():
            if re.search(r"\btotal\b", line, re.IGNORECASE):
                price_text = self._price_text(line)
                if price_text:
                    price = PriceNormalizer.normalize_price(
                        f"{price_text} total", self.default_currency, self.default_locale
                    )
                    if price:
                        return price
        return None
