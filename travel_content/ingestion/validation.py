"""
Content validation.

Type-specific checks over NormalizedContent. Validation is advisory: the
pipeline reports issues next to the content instead of dropping it, so the
models deliberately accept out-of-range values for this module to find.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, assert_never

from travel_content.ingestion.normalization.location_parser import UNKNOWN_COUNTRY
from travel_content.schemas.content import (
    NormalizedAccommodation,
    NormalizedActivity,
    NormalizedContent,
    NormalizedDestination,
    NormalizedGeneric,
    NormalizedItinerary,
    NormalizedTransportation,
    Price,
)

CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")
COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")
DURATION_FORMAT = re.compile(r"^\d+(?:\.\d+)?\s+(?:hours?|minutes?|days?)$")
MAX_RATING = 5.0


@dataclass(frozen=True)
class ValidationIssue:
    """One failed check on one field."""

    content_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.content_id}: {self.field} - {self.message}"


class ContentValidator:
    """
    Validate normalized content per variant.

    Rules:
        destination: name, real country code, lat in [-90, 90], lng in [-180, 180]
        activity: name, price >= 0 with a 3-letter currency,
            duration "NUMBER hours|minutes|days", rating in [0, 5]
        accommodation: name, a country, price range min <= max, rating in [0, 5]
        transportation: price >= 0 with a 3-letter currency
        itinerary: title, at least one daily plan, start <= end, day numbers >= 1
        generic: title
    """

    def validate(self, content: NormalizedContent) -> List[ValidationIssue]:
        """Return every issue found; an empty list means the item is valid."""
        if isinstance(content, NormalizedDestination):
            issues = self._validate_destination(content)
        elif isinstance(content, NormalizedActivity):
            issues = self._validate_activity(content)
        elif isinstance(content, NormalizedAccommodation):
            issues = self._validate_accommodation(content)
        elif isinstance(content, NormalizedTransportation):
            issues = self._validate_price(content.id, "price", content.price)
        elif isinstance(content, NormalizedItinerary):
            issues = self._validate_itinerary(content)
        elif isinstance(content, NormalizedGeneric):
            issues = self._require(content.id, "title", content.title)
        else:
            assert_never(content)
        return issues

    def is_valid(self, content: NormalizedContent) -> bool:
        return not self.validate(content)

    # -------------------------------------------------------------------------
    # Per-variant rules
    # -------------------------------------------------------------------------

    def _validate_destination(self, content: NormalizedDestination) -> List[ValidationIssue]:
        issues = self._require(content.id, "name", content.name)

        if content.country == UNKNOWN_COUNTRY or not COUNTRY_CODE.match(content.country or ""):
            issues.append(
                ValidationIssue(content.id, "country", "must be an ISO 3166-1 alpha-2 code")
            )

        if content.coordinates is not None:
            if not -90.0 <= content.coordinates.lat <= 90.0:
                issues.append(
                    ValidationIssue(content.id, "coordinates.lat", "must be between -90 and 90")
                )
            if not -180.0 <= content.coordinates.lng <= 180.0:
                issues.append(
                    ValidationIssue(content.id, "coordinates.lng", "must be between -180 and 180")
                )
        return issues

    def _validate_activity(self, content: NormalizedActivity) -> List[ValidationIssue]:
        issues = self._require(content.id, "name", content.name)
        issues += self._validate_price(content.id, "price", content.price)

        if content.duration is not None and not DURATION_FORMAT.match(content.duration):
            issues.append(
                ValidationIssue(
                    content.id, "duration", "must look like 'NUMBER hours|minutes|days'"
                )
            )
        issues += self._validate_rating(content.id, content.rating)
        return issues

    def _validate_accommodation(self, content: NormalizedAccommodation) -> List[ValidationIssue]:
        issues = self._require(content.id, "name", content.name)
        issues += self._require(content.id, "address.country", content.address.country)

        price_range = content.price_range
        if price_range is not None:
            issues += self._validate_price(content.id, "priceRange.min", price_range.min)
            issues += self._validate_price(content.id, "priceRange.max", price_range.max)
            if price_range.min.amount > price_range.max.amount:
                issues.append(
                    ValidationIssue(
                        content.id, "priceRange", "min amount must not exceed max amount"
                    )
                )
        issues += self._validate_rating(content.id, content.rating)
        return issues

    def _validate_itinerary(self, content: NormalizedItinerary) -> List[ValidationIssue]:
        issues = self._require(content.id, "title", content.title)

        if not content.daily_plans:
            issues.append(
                ValidationIssue(content.id, "dailyPlans", "must contain at least one day")
            )
        for index, plan in enumerate(content.daily_plans):
            if plan.day < 1:
                issues.append(
                    ValidationIssue(content.id, f"dailyPlans[{index}].day", "must be at least 1")
                )

        # ISO-8601 UTC strings of one format compare correctly as text
        if content.start_date and content.end_date and content.start_date > content.end_date:
            issues.append(
                ValidationIssue(content.id, "endDate", "must not be before startDate")
            )
        issues += self._validate_price(content.id, "totalPrice", content.total_price)
        return issues

    # -------------------------------------------------------------------------
    # Shared checks
    # -------------------------------------------------------------------------

    @staticmethod
    def _require(content_id: str, field: str, value: Optional[str]) -> List[ValidationIssue]:
        if value is None or not str(value).strip():
            return [ValidationIssue(content_id, field, "is required")]
        return []

    @staticmethod
    def _validate_price(
        content_id: str, field: str, price: Optional[Price]
    ) -> List[ValidationIssue]:
        if price is None:
            return []
        issues = []
        if price.amount < 0:
            issues.append(ValidationIssue(content_id, f"{field}.amount", "must not be negative"))
        if not CURRENCY_CODE.match(price.currency):
            issues.append(
                ValidationIssue(content_id, f"{field}.currency", "must be a 3-letter ISO code")
            )
        return issues

    @staticmethod
    def _validate_rating(content_id: str, rating: Optional[float]) -> List[ValidationIssue]:
        if rating is not None and not 0.0 <= rating <= MAX_RATING:
            return [ValidationIssue(content_id, "rating", f"must be between 0 and {MAX_RATING:g}")]
        return []
