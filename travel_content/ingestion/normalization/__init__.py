"""Field normalizers: dates, prices, addresses, entities and itinerary text."""

from travel_content.ingestion.normalization.currency import PriceNormalizer
from travel_content.ingestion.normalization.dates import DateNormalizer
from travel_content.ingestion.normalization.entities import (
    EntityRecognizer,
    Gazetteer,
    TaxonomyGazetteer,
)
from travel_content.ingestion.normalization.location_parser import LocationParser

__all__ = [
    "DateNormalizer",
    "EntityRecognizer",
    "Gazetteer",
    "LocationParser",
    "PriceNormalizer",
    "TaxonomyGazetteer",
]
