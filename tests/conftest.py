"""
Shared pytest fixtures for the travel content test suite.

Provides factory fixtures for RawContent and every NormalizedContent variant.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

import pytest

from travel_content.schemas.content import (
    Address,
    Coordinates,
    DailyPlan,
    ItineraryItem,
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
    Price,
    RawContent,
    RawContentType,
    RawMetadata,
    TransportEndpoint,
    TransportMode,
)

EXTRACTED_AT = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _provenance(**kwargs) -> dict:
    defaults = {
        "id": str(uuid.uuid4()),
        "source": "https://test.com/page",
        "original_content_type": RawContentType.HTML,
        "extraction_date": EXTRACTED_AT,
    }
    defaults.update(kwargs)
    return defaults


@pytest.fixture
def create_raw_content():
    """
    Return a function that creates RawContent objects with sensible defaults.

    Metadata may be passed as a dict of hints.

    Example:
        raw = create_raw_content(raw_text="Check-in: 3 PM", metadata={"title": "Hotel Lumen"})
    """

    def _create_raw_content(
        raw_text: str = "",
        metadata: Optional[dict] = None,
        content_type: RawContentType = RawContentType.HTML,
        **kwargs,
    ) -> RawContent:
        defaults = {
            "id": f"raw-{uuid.uuid4().hex[:8]}",
            "source_url": "https://test.com/page",
            "content_type": content_type,
            "raw_text": raw_text,
            "metadata": RawMetadata(**(metadata or {})),
            "extracted_date": EXTRACTED_AT,
        }
        defaults.update(kwargs)
        return RawContent(**defaults)

    return _create_raw_content


@pytest.fixture
def create_destination():
    """Return a factory for NormalizedDestination objects."""

    def _create_destination(name: str = "Paris", **kwargs) -> NormalizedDestination:
        defaults = _provenance(
            name=name,
            description="The capital of France, famous for art and food.",
            country="FR",
        )
        defaults.update(kwargs)
        return NormalizedDestination(**defaults)

    return _create_destination


@pytest.fixture
def create_activity():
    """Return a factory for NormalizedActivity objects."""

    def _create_activity(name: str = "Scuba Diving Adventure", **kwargs) -> NormalizedActivity:
        defaults = _provenance(
            name=name,
            description="Explore coral reefs with certified scuba diving instructors.",
            price=Price(amount=120.0, currency="USD", price_type="per_person"),
            duration="3 hours",
            rating=4.7,
        )
        defaults.update(kwargs)
        return NormalizedActivity(**defaults)

    return _create_activity


@pytest.fixture
def create_accommodation():
    """Return a factory for NormalizedAccommodation objects."""

    def _create_accommodation(
        name: str = "Hotel Lumen", **kwargs
    ) -> NormalizedAccommodation:
        defaults = _provenance(
            name=name,
            description="A quiet hotel near the old town.",
            accommodation_type="boutique hotel",
            address=Address(street="12 Main Street", city="Lisbon", country="PT"),
            rating=4.2,
            amenities=["wifi", "breakfast"],
        )
        defaults.update(kwargs)
        return NormalizedAccommodation(**defaults)

    return _create_accommodation


@pytest.fixture
def create_transportation():
    """Return a factory for NormalizedTransportation objects."""

    def _create_transportation(**kwargs) -> NormalizedTransportation:
        defaults = _provenance(
            mode=TransportMode.TRAIN,
            departure=TransportEndpoint(location="Paris", time="08:15"),
            arrival=TransportEndpoint(location="Lyon", time="10:20"),
            provider="SNCF Rail",
            price=Price(amount=59.0, currency="EUR"),
            description="High-speed train from Paris to Lyon.",
        )
        defaults.update(kwargs)
        return NormalizedTransportation(**defaults)

    return _create_transportation


@pytest.fixture
def create_itinerary():
    """Return a factory for NormalizedItinerary objects."""

    def _create_itinerary(title: str = "Three Days in Rome", **kwargs) -> NormalizedItinerary:
        defaults = _provenance(
            title=title,
            original_content_type=RawContentType.PDF_TEXT,
            daily_plans=[
                DailyPlan(
                    day=1,
                    title="Ancient Rome",
                    items=[ItineraryItem(activity="Visit the Colosseum", time="09:00")],
                ),
                DailyPlan(day=2, title="Vatican", items=[ItineraryItem(activity="Vatican Museums")]),
                DailyPlan(day=3, title="Trastevere", items=[ItineraryItem(activity="Food tour")]),
            ],
            start_date="2024-05-15T00:00:00Z",
            end_date="2024-05-17T00:00:00Z",
            duration_days=3,
        )
        defaults.update(kwargs)
        return NormalizedItinerary(**defaults)

    return _create_itinerary


@pytest.fixture
def create_generic():
    """Return a factory for NormalizedGeneric objects."""

    def _create_generic(title: str = "Travel Notes", **kwargs) -> NormalizedGeneric:
        defaults = _provenance(title=title, text="Some notes about packing and plugs.")
        defaults.update(kwargs)
        return NormalizedGeneric(**defaults)

    return _create_generic


@pytest.fixture
def sample_coordinates():
    """Coordinates of central Paris."""
    return Coordinates(lat=48.8566, lng=2.3522)
