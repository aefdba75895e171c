"""
Location Parser.

Maps country names to ISO 3166-1 alpha-2 codes and splits combined address
strings into structured Address components. Pure text processing: no
geocoding or other network calls.
"""

from __future__ import annotations

import logging
import re

from travel_content.schemas.content import Address

logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY = "Unknown"

# Country name -> ISO 3166-1 alpha-2 code
COUNTRY_NAME_TO_CODE: dict[str, str] = {
    "united states": "US",
    "united states of america": "US",
    "usa": "US",
    "us": "US",
    "america": "US",
    "united kingdom": "GB",
    "great britain": "GB",
    "uk": "GB",
    "england": "GB",
    "scotland": "GB",
    "wales": "GB",
    "france": "FR",
    "germany": "DE",
    "deutschland": "DE",
    "italy": "IT",
    "italia": "IT",
    "spain": "ES",
    "españa": "ES",
    "espana": "ES",
    "portugal": "PT",
    "netherlands": "NL",
    "holland": "NL",
    "belgium": "BE",
    "switzerland": "CH",
    "austria": "AT",
    "ireland": "IE",
    "greece": "GR",
    "turkey": "TR",
    "croatia": "HR",
    "czech republic": "CZ",
    "czechia": "CZ",
    "poland": "PL",
    "hungary": "HU",
    "romania": "RO",
    "sweden": "SE",
    "norway": "NO",
    "denmark": "DK",
    "finland": "FI",
    "iceland": "IS",
    "japan": "JP",
    "china": "CN",
    "south korea": "KR",
    "korea": "KR",
    "india": "IN",
    "thailand": "TH",
    "vietnam": "VN",
    "indonesia": "ID",
    "malaysia": "MY",
    "singapore": "SG",
    "philippines": "PH",
    "australia": "AU",
    "new zealand": "NZ",
    "canada": "CA",
    "mexico": "MX",
    "brazil": "BR",
    "argentina": "AR",
    "chile": "CL",
    "colombia": "CO",
    "peru": "PE",
    "egypt": "EG",
    "morocco": "MA",
    "south africa": "ZA",
    "kenya": "KE",
    "united arab emirates": "AE",
    "uae": "AE",
    "israel": "IL",
}

_KNOWN_CODES = frozenset(COUNTRY_NAME_TO_CODE.values())

# Postal code regex patterns per country code
POSTAL_CODE_PATTERNS: dict[str, re.Pattern] = {
    "US": re.compile(r"\b(\d{5}(?:-\d{4})?)\b"),
    "GB": re.compile(r"\b([A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2})\b", re.IGNORECASE),
    "FR": re.compile(r"\b(\d{5})\b"),
    "DE": re.compile(r"\b(\d{5})\b"),
    "IT": re.compile(r"\b(\d{5})\b"),
    "ES": re.compile(r"\b(\d{5})\b"),
    "NL": re.compile(r"\b(\d{4}\s?[A-Z]{2})\b", re.IGNORECASE),
    "PT": re.compile(r"\b(\d{4}-\d{3})\b"),
    "CA": re.compile(r"\b([A-Z]\d[A-Z]\s?\d[A-Z]\d)\b", re.IGNORECASE),
    "JP": re.compile(r"\b(\d{3}-\d{4})\b"),
    "AU": re.compile(r"\b(\d{4})\b"),
    "CH": re.compile(r"\b(\d{4})\b"),
}

# Fallback: general 4-6 digit postal code
POSTAL_CODE_FALLBACK = re.compile(r"\b(\d{4,6})\b")

# "Address: 12 Rue de Rivoli, 75001 Paris, France"
_ADDRESS_LABEL = re.compile(r"(?:address|located at|location)\s*:\s*([^\n]+)", re.IGNORECASE)
_STREET_LINE = re.compile(
    r"\b(\d{1,5}[A-Za-z]?,?\s+(?:[A-Z][\w'.-]*\s+){0,4}"
    r"(?:Street|St\.?|Avenue|Ave\.?|Road|Rd\.?|Boulevard|Blvd\.?|Lane|Way|Drive|Square|Place)"
    r"\b[^\n]*)"
)


def normalize_country(value: str | None) -> str | None:
    """
    Resolve a country name or code to ISO 3166-1 alpha-2.

    Example:
        >>> normalize_country("United States")
        'US'
        >>> normalize_country("fr")
        'FR'
    """
    if not value:
        return None
    cleaned = value.strip().lower().rstrip(".")
    if len(cleaned) == 2 and cleaned.upper() in _KNOWN_CODES:
        return cleaned.upper()
    return COUNTRY_NAME_TO_CODE.get(cleaned)


def find_country_in_text(text: str | None) -> str | None:
    """First country name mentioned in free text, longest names winning."""
    if not text:
        return None
    lower = text.lower()
    for name in sorted(COUNTRY_NAME_TO_CODE, key=len, reverse=True):
        # Two-letter names are too ambiguous in running text
        if len(name) <= 2:
            continue
        if re.search(rf"\b{re.escape(name)}\b", lower):
            return COUNTRY_NAME_TO_CODE[name]
    return None


class LocationParser:
    """
    Parse combined address strings into Address components.
    """

    def parse_address(
        self,
        raw: str | None,
        known_city: str | None = None,
        known_country_code: str | None = None,
    ) -> Address:
        """
        Parse a combined address string into structured components.

        Segments are split on ``;`` when present, otherwise on ``,``:
            ``"12 Rue de Rivoli, 75001 Paris, France"``
        """
        if not raw or not raw.strip():
            return Address(city=known_city, country=known_country_code)

        if ";" in raw:
            parts = [p.strip() for p in raw.split(";") if p.strip()]
        else:
            parts = [p.strip() for p in raw.split(",") if p.strip()]

        # --- Country (last segment) ---
        country_code = known_country_code
        if parts:
            detected = normalize_country(parts[-1])
            if detected:
                country_code = detected
                parts = parts[:-1]

        # --- Postal code ---
        postal_code = self._extract_postal_code(" ".join(parts), country_code)

        # --- City (segment before the country) ---
        city = known_city
        if not city and len(parts) >= 2:
            candidate = parts[-1]
            if postal_code and postal_code in candidate:
                candidate = candidate.replace(postal_code, "").strip()
            city = candidate or None

        # --- Street (everything else) ---
        street_parts = []
        for part in parts:
            if city and part == city:
                continue
            if postal_code and postal_code in part:
                remainder = part.replace(postal_code, "").strip()
                if remainder and remainder != city:
                    street_parts.append(remainder)
                continue
            street_parts.append(part)

        return Address(
            street=", ".join(street_parts) or None,
            city=city,
            postal_code=postal_code,
            country=country_code.upper() if country_code else None,
        )

    @staticmethod
    def find_address_text(text: str | None) -> str | None:
        """Pull a single-line address out of free text, if one is labelled or looks like a street."""
        if not text:
            return None
        match = _ADDRESS_LABEL.search(text) or _STREET_LINE.search(text)
        if not match:
            return None
        return match.group(1).strip().rstrip(".")

    @staticmethod
    def _extract_postal_code(text: str, country_code: str | None = None) -> str | None:
        """Extract postal code from text using country-aware patterns."""
        if not text:
            return None

        if country_code:
            pattern = POSTAL_CODE_PATTERNS.get(country_code.upper())
            if pattern:
                match = pattern.search(text)
                if match:
                    return match.group(1)

        match = POSTAL_CODE_FALLBACK.search(text)
        return match.group(1) if match else None
