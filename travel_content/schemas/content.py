# travel_content/schemas/content.py
"""
Canonical content schema for the travel content pipeline.

RawContent is what scrapers and document parsers hand us: raw text plus a
typed bag of metadata hints. NormalizedContent is the discriminated union the
transformers produce, one variant per ``type``:

- destination, activity, accommodation, transportation, itinerary, generic

Range constraints that the validator reports on (coordinates, ratings,
negative prices, price range ordering) are deliberately not enforced here so
that validation can observe and report them instead of failing construction.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, TypeAdapter, field_validator, model_validator

from travel_content.schemas.base import TravelModel, _utc_now

# ============================================================================
# ENUMS
# ============================================================================


class RawContentType(str, Enum):
    """Format of the raw text handed to the pipeline."""

    HTML = "html"
    PDF_TEXT = "pdf_text"
    DOCX_TEXT = "docx_text"


class ContentType(str, Enum):
    """Discriminator values of the normalized content union."""

    DESTINATION = "destination"
    ACTIVITY = "activity"
    ACCOMMODATION = "accommodation"
    TRANSPORTATION = "transportation"
    ITINERARY = "itinerary"
    GENERIC = "generic"


class PriceType(str, Enum):
    """What a price covers."""

    PER_PERSON = "per_person"
    PER_GROUP = "per_group"
    TOTAL = "total"


class TransportMode(str, Enum):
    """Supported transportation modes."""

    FLIGHT = "flight"
    TRAIN = "train"
    BUS = "bus"
    CAR_RENTAL = "car_rental"
    TAXI = "taxi"
    FERRY = "ferry"
    WALK = "walk"
    OTHER = "other"


# ============================================================================
# VALUE OBJECTS
# ============================================================================


class Coordinates(TravelModel):
    """
    Geographic coordinates.

    Ranges are checked by the validator, not on construction.
    """

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class Address(TravelModel):
    """Postal address, every part optional."""

    model_config = ConfigDict(frozen=True)

    street: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = Field(
        default=None, description="ISO 3166-1 alpha-2 country code"
    )


class Price(TravelModel):
    """
    A single price in its original currency.
    """

    model_config = ConfigDict(frozen=True)

    amount: float
    currency: str = Field(description="ISO 4217 currency code")
    price_type: Optional[PriceType] = None

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        """Currency codes are always upper-case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class PriceRange(TravelModel):
    """
    Minimum and maximum price.

    ``min.amount <= max.amount`` is not enforced here; ContentValidator
    reports inverted ranges.
    """

    model_config = ConfigDict(frozen=True)

    min: Price
    max: Price


class OperatingHours(TravelModel):
    """Opening hours for one day (or ``daily``)."""

    model_config = ConfigDict(frozen=True)

    day: str
    open: str
    close: str


class TransportEndpoint(TravelModel):
    """Departure or arrival point of a transportation leg."""

    model_config = ConfigDict(frozen=True)

    location: str
    time: Optional[str] = None


class ItineraryItem(TravelModel):
    """One scheduled entry within a day."""

    model_config = ConfigDict(frozen=True)

    activity: str
    time: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = None


class DailyPlan(TravelModel):
    """A single itinerary day."""

    model_config = ConfigDict(frozen=True)

    day: int
    title: Optional[str] = None
    items: List[ItineraryItem] = Field(default_factory=list)


# ============================================================================
# RAW CONTENT
# ============================================================================


class RawMetadata(TravelModel):
    """
    Recognized metadata hints attached to raw content.

    Only the keys below are kept; anything else a scraper sends is dropped.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    content_type: Optional[str] = None
    page_type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[str] = None
    price_range: Optional[str] = None
    duration: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    images: List[str] = Field(default_factory=list)
    country: Optional[str] = None
    region: Optional[str] = None
    address: Optional[str] = None
    accommodation_type: Optional[str] = None
    rating: Optional[float] = None
    reviews_count: Optional[int] = None
    amenities: List[str] = Field(default_factory=list)
    booking_url: Optional[str] = None

    @field_validator("price", "price_range", "duration", mode="before")
    @classmethod
    def coerce_to_text(cls, v):
        """Numeric hints are kept as text so the normalizers see one shape."""
        if v is None or isinstance(v, str):
            return v
        return str(v)


class RawContent(TravelModel):
    """
    Loosely-structured content as extracted by a scraper or document parser.

    Read-only input: the pipeline never mutates it.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "web-1",
                "sourceUrl": "https://example.com/paris",
                "contentType": "html",
                "rawText": "Paris is the capital of France...",
                "metadata": {"title": "Paris", "country": "France"},
                "extractedDate": "2024-01-01T00:00:00Z",
            }
        },
    )

    id: str = Field(min_length=1)
    source_url: Optional[str] = None
    file_path: Optional[str] = None
    content_type: RawContentType
    raw_text: str = ""
    metadata: RawMetadata = Field(default_factory=RawMetadata)
    extracted_date: datetime = Field(default_factory=_utc_now)

    @model_validator(mode="after")
    def require_origin(self):
        if not self.source_url and not self.file_path:
            raise ValueError("RawContent needs either source_url or file_path")
        return self

    @property
    def source(self) -> str:
        """Where this content came from (URL preferred over file path)."""
        return self.source_url or self.file_path or self.id


# ============================================================================
# NORMALIZED CONTENT
# ============================================================================


class NormalizedContentBase(TravelModel):
    """
    Fields shared by every normalized content variant.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1)
    source: str = Field(min_length=1)
    original_content_type: RawContentType
    extraction_date: datetime
    processing_date: datetime = Field(default_factory=_utc_now)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    tags: Optional[List[str]] = None

    def with_tags(self, tags: List[str], confidence: Optional[float] = None):
        """Return a copy with tags (and optionally a new confidence) attached."""
        update = {"tags": list(tags)}
        if confidence is not None:
            update["confidence"] = max(0.0, min(1.0, confidence))
        return self.model_copy(update=update)


class NormalizedDestination(NormalizedContentBase):
    type: Literal["destination"] = "destination"

    name: str
    description: Optional[str] = None
    country: str = Field(
        default="Unknown", description="ISO 3166-1 alpha-2 code or 'Unknown'"
    )
    region: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    address: Optional[Address] = None


class NormalizedActivity(NormalizedContentBase):
    type: Literal["activity"] = "activity"

    name: str
    description: Optional[str] = None
    activity_type: Optional[str] = None
    location_name: Optional[str] = None
    price: Optional[Price] = None
    duration: Optional[str] = Field(
        default=None, description="e.g. '2 hours', '0.5 days'"
    )
    rating: Optional[float] = None
    operating_hours: List[OperatingHours] = Field(default_factory=list)


class NormalizedAccommodation(NormalizedContentBase):
    type: Literal["accommodation"] = "accommodation"

    name: str
    description: Optional[str] = None
    accommodation_type: Optional[str] = None
    address: Address = Field(default_factory=Address)
    price_range: Optional[PriceRange] = None
    check_in_time: Optional[str] = Field(default=None, description="HH:MM")
    check_out_time: Optional[str] = Field(default=None, description="HH:MM")
    rating: Optional[float] = None
    amenities: List[str] = Field(default_factory=list)


class NormalizedTransportation(NormalizedContentBase):
    type: Literal["transportation"] = "transportation"

    mode: TransportMode = TransportMode.OTHER
    departure: Optional[TransportEndpoint] = None
    arrival: Optional[TransportEndpoint] = None
    provider: Optional[str] = None
    price: Optional[Price] = None
    description: Optional[str] = None


class NormalizedItinerary(NormalizedContentBase):
    type: Literal["itinerary"] = "itinerary"

    title: str
    description: Optional[str] = None
    daily_plans: List[DailyPlan] = Field(default_factory=list)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    total_price: Optional[Price] = None
    duration_days: Optional[int] = None


class NormalizedGeneric(NormalizedContentBase):
    type: Literal["generic"] = "generic"

    title: str
    text: str = ""


NormalizedContent = Annotated[
    Union[
        NormalizedDestination,
        NormalizedActivity,
        NormalizedAccommodation,
        NormalizedTransportation,
        NormalizedItinerary,
        NormalizedGeneric,
    ],
    Field(discriminator="type"),
]

_NORMALIZED_CONTENT_ADAPTER = TypeAdapter(NormalizedContent)


def parse_normalized_content(data: dict) -> NormalizedContent:
    """Build the right NormalizedContent variant from a dict keyed on ``type``."""
    return _NORMALIZED_CONTENT_ADAPTER.validate_python(data)
