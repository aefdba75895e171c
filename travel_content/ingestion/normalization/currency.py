"""
Price Normalizer.

Parses price strings into Price(amount, currency, price_type) without any
conversion: amounts stay in their original currency, rounded to that
currency's canonical number of decimal places.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from travel_content.schemas.content import Price, PriceRange, PriceType

logger = logging.getLogger(__name__)

# Digits with optional grouping/decimal separators, always ending on a digit
_AMOUNT = r"(\d(?:[\d.,]*\d)?)"
_RANGE_SEPARATOR = r"\s*(?:[-–]|to)\s*"


class PriceNormalizer:
    """
    Parse price strings and identify currency.

    Does NOT convert currencies - keeps original values.

    Example:
        >>> PriceNormalizer.normalize_price("$1,234.56")
        Price(amount=1234.56, currency='USD', price_type='per_person')
        >>> PriceNormalizer.normalize_price("1.234,56 EUR").amount
        1234.56
    """

    # ISO 4217 code -> canonical decimal places
    CURRENCY_DECIMALS = {
        "USD": 2, "EUR": 2, "GBP": 2, "JPY": 0, "CNY": 2, "AUD": 2,
        "CAD": 2, "CHF": 2, "SEK": 2, "NZD": 2, "KRW": 0, "SGD": 2,
        "NOK": 2, "MXN": 2, "INR": 2, "RUB": 2, "ZAR": 2, "TRY": 2,
        "BRL": 2, "TWD": 2, "DKK": 2, "PLN": 2, "THB": 2, "IDR": 0,
        "HUF": 0, "CZK": 2, "ILS": 2, "CLP": 0, "PHP": 2, "AED": 2,
        "COP": 0, "SAR": 2, "MYR": 2, "RON": 2, "HKD": 2, "VND": 0,
        "ISK": 0,
    }

    # Currency symbol -> candidate codes; first entry is the documented default
    SYMBOL_TO_CODES = {
        "$": ["USD", "CAD", "AUD", "NZD", "SGD", "MXN", "CLP", "COP"],
        "¥": ["JPY", "CNY"],
        "￥": ["JPY", "CNY"],
        "kr": ["SEK", "NOK", "DKK"],
        "US$": ["USD"],
        "A$": ["AUD"],
        "C$": ["CAD"],
        "NZ$": ["NZD"],
        "S$": ["SGD"],
        "HK$": ["HKD"],
        "NT$": ["TWD"],
        "R$": ["BRL"],
        "€": ["EUR"],
        "£": ["GBP"],
        "₹": ["INR"],
        "₽": ["RUB"],
        "₺": ["TRY"],
        "฿": ["THB"],
        "₱": ["PHP"],
        "₪": ["ILS"],
        "₩": ["KRW"],
        "₫": ["VND"],
        "zł": ["PLN"],
        "Kč": ["CZK"],
        "Ft": ["HUF"],
        "Rp": ["IDR"],
        "RM": ["MYR"],
        "lei": ["RON"],
        "Fr": ["CHF"],
        "R": ["ZAR"],
    }

    # Locale -> currency used to resolve ambiguous symbols
    LOCALE_TO_CURRENCY = {
        "en-US": "USD",
        "en-CA": "CAD",
        "fr-CA": "CAD",
        "en-AU": "AUD",
        "en-NZ": "NZD",
        "en-SG": "SGD",
        "es-MX": "MXN",
        "es-CL": "CLP",
        "es-CO": "COP",
        "ja-JP": "JPY",
        "ja": "JPY",
        "zh-CN": "CNY",
        "zh": "CNY",
        "sv-SE": "SEK",
        "sv": "SEK",
        "nb-NO": "NOK",
        "no": "NOK",
        "da-DK": "DKK",
        "da": "DKK",
    }

    # Languages that write 1.234,56
    COMMA_DECIMAL_LANGUAGES = {
        "de", "fr", "es", "it", "nl", "pt", "da", "sv", "nb", "no", "fi",
        "pl", "cs", "ro", "tr", "ru", "id", "hu",
    }

    # Currency name patterns for text without symbol or code
    CURRENCY_PATTERNS = {
        "EUR": [r"\beuros?\b"],
        "GBP": [r"\bpounds?\b", r"\bsterling\b"],
        "USD": [r"\bdollars?\b"],
        "JPY": [r"\byen\b"],
        "CHF": [r"\bfrancs?\b"],
    }

    FREE_INDICATORS = [
        "free",
        "gratis",
        "gratuit",
        "gratuito",
        "kostenlos",
        "無料",
        "no charge",
        "complimentary",
    ]

    _SYMBOL_RE = "|".join(
        re.escape(s) for s in sorted(SYMBOL_TO_CODES, key=len, reverse=True)
    )

    # Ordered: symbol before amount, amount before symbol, code before, code after
    PRICE_PATTERNS = [
        ("symbol", re.compile(rf"(?<![A-Za-z])({_SYMBOL_RE})\s*{_AMOUNT}")),
        ("symbol", re.compile(rf"{_AMOUNT}\s*({_SYMBOL_RE})(?![A-Za-z])")),
        ("code", re.compile(rf"\b([A-Z]{{3}})\s*{_AMOUNT}")),
        ("code", re.compile(rf"{_AMOUNT}\s*([A-Z]{{3}})\b")),
    ]

    RANGE_PATTERNS = [
        (
            "symbol",
            re.compile(
                rf"(?<![A-Za-z])({_SYMBOL_RE})\s*{_AMOUNT}{_RANGE_SEPARATOR}"
                rf"(?:{_SYMBOL_RE})?\s*{_AMOUNT}"
            ),
        ),
        ("code", re.compile(rf"\b([A-Z]{{3}})\s*{_AMOUNT}{_RANGE_SEPARATOR}{_AMOUNT}")),
        (
            "code",
            re.compile(rf"{_AMOUNT}{_RANGE_SEPARATOR}{_AMOUNT}\s*([A-Z]{{3}})\b"),
        ),
        (
            "symbol",
            re.compile(
                rf"{_AMOUNT}\s*(?:{_SYMBOL_RE})?{_RANGE_SEPARATOR}{_AMOUNT}\s*"
                rf"({_SYMBOL_RE})(?![A-Za-z])"
            ),
        ),
    ]

    PRICE_TYPE_PATTERNS = [
        (PriceType.PER_GROUP, re.compile(r"\bper\s+(?:group|couple|party|room)\b|/\s*group\b", re.I)),
        (PriceType.TOTAL, re.compile(r"\b(?:total|in\s+total|all[\s-]+in)\b", re.I)),
        (PriceType.PER_PERSON, re.compile(r"\b(?:per\s+(?:person|adult|pax)|pp|p\.p\.|each)\b|/\s*person\b", re.I)),
    ]

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @classmethod
    def normalize_price(
        cls,
        text: str | None,
        default_currency: str = "USD",
        locale: str | None = None,
    ) -> Price | None:
        """
        Parse a price string into a Price.

        Handles various formats:
        - "$100" -> (100, USD)
        - "€50.99 per person" -> (50.99, EUR, per_person)
        - "100 USD" / "USD 100" -> (100, USD)
        - "1.234,56 EUR" -> (1234.56, EUR)
        - "¥1500" with locale "zh-CN" -> (1500, CNY)
        - "Free" -> (0, default currency)

        Args:
            text: Price string to parse
            default_currency: Currency used when none is detected
            locale: Locale hint for ambiguous symbols and decimal separators

        Returns:
            Price, or None if no amount was found or the currency is unknown
        """
        if not text or not text.strip():
            return None

        cleaned = text.strip()
        default_currency = default_currency.upper()

        if cls._is_free(cleaned) and not re.search(r"\d", cleaned):
            if not cls.is_supported_currency(default_currency):
                return None
            return Price(amount=0.0, currency=default_currency, price_type=PriceType.PER_PERSON)

        extraction = cls._extract_currency_and_amount(cleaned, locale)
        if extraction is None:
            return None

        raw_amount, currency = extraction
        return cls._build_price(
            raw_amount,
            currency or cls.detect_currency_name(cleaned) or default_currency,
            locale,
            cls.detect_price_type(cleaned),
        )

    @classmethod
    def extract_price_range(
        cls,
        text: str | None,
        default_currency: str = "USD",
        locale: str | None = None,
    ) -> PriceRange | None:
        """
        Parse "X-Y currency" / "X to Y currency" phrasings.

        The bounds are returned in the order written; ``min <= max`` is not
        checked here (ContentValidator reports inverted ranges).
        """
        if not text:
            return None

        default_currency = default_currency.upper()
        price_type = cls.detect_price_type(text)

        for kind, pattern in cls.RANGE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue

            marker, (low, high) = cls._split_groups(match)
            currency = (
                cls._resolve_symbol(marker, locale)
                if kind == "symbol"
                else marker.upper()
            )
            low_price = cls._build_price(low, currency or default_currency, locale, price_type)
            high_price = cls._build_price(high, currency or default_currency, locale, price_type)
            if low_price is None or high_price is None:
                return None
            return PriceRange(min=low_price, max=high_price)

        return None

    @classmethod
    def find_price_text(cls, text: str | None) -> str | None:
        """
        Locate the first price-looking fragment in free text.

        The fragment includes a directly following qualifier such as
        "per person" so the price type survives.
        """
        if not text:
            return None

        best: re.Match | None = None
        for kind, pattern in cls.PRICE_PATTERNS:
            for match in pattern.finditer(text):
                marker, _ = cls._split_groups(match)
                if kind == "code" and not cls.is_supported_currency(marker):
                    continue
                if best is None or match.start() < best.start():
                    best = match
                break

        if best is None:
            return None

        tail = re.match(
            r"\s*(?:per\s+\w+|pp|p\.p\.|total|/\s*\w+)", text[best.end():], re.I
        )
        return best.group(0) + (tail.group(0) if tail else "")

    @classmethod
    def is_supported_currency(cls, code: str | None) -> bool:
        return bool(code) and code.upper() in cls.CURRENCY_DECIMALS

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        return cls.CURRENCY_DECIMALS.get(code.upper(), 2)

    @classmethod
    def detect_price_type(cls, text: str) -> PriceType:
        """Qualifier found anywhere in the text, defaulting to per person."""
        for price_type, pattern in cls.PRICE_TYPE_PATTERNS:
            if pattern.search(text):
                return price_type
        return PriceType.PER_PERSON

    @classmethod
    def detect_currency_name(cls, text: str) -> str:
        """Currency from a spelled-out name ("50 euros"), or ""."""
        lower = text.lower()
        for code, patterns in cls.CURRENCY_PATTERNS.items():
            for pattern in patterns:
                if re.search(pattern, lower):
                    return code
        return ""

    @classmethod
    def parse_amount(cls, raw: str, locale: str | None = None) -> Decimal | None:
        """
        Parse a grouped amount, telling European from standard notation.

        - "1,234.56" -> 1234.56
        - "1.234,56" -> 1234.56
        - "12,50"    -> 12.50
        - "1.234.567" -> 1234567
        - "1.234"    -> 1.234, or 1234 for comma-decimal locales
        """
        value = raw.strip()
        comma_decimal = cls._is_comma_decimal_locale(locale)

        if "," in value and "." in value:
            if value.rfind(",") > value.rfind("."):
                value = value.replace(".", "").replace(",", ".")
            else:
                value = value.replace(",", "")
        elif "," in value:
            if re.fullmatch(r"\d{1,3}(?:,\d{3})+", value) and not (
                comma_decimal and value.count(",") == 1
            ):
                value = value.replace(",", "")
            elif value.count(",") == 1:
                value = value.replace(",", ".")
            else:
                return None
        elif "." in value:
            if re.fullmatch(r"\d{1,3}(?:\.\d{3}){2,}", value) or (
                comma_decimal and re.fullmatch(r"\d{1,3}\.\d{3}", value)
            ):
                value = value.replace(".", "")
            elif value.count(".") > 1:
                return None

        try:
            return Decimal(value)
        except InvalidOperation:
            return None

    @classmethod
    def format_price(cls, price: Price, include_symbol: bool = True) -> str:
        """
        Format a price for display.

        Args:
            price: Price to format
            include_symbol: Whether to use the currency symbol when unambiguous

        Returns:
            Formatted price string, e.g. "€50.5" or "1500 JPY"
        """
        places = cls.get_decimal_places(price.currency)
        amount_str = f"{price.amount:.{places}f}"
        if "." in amount_str:
            amount_str = amount_str.rstrip("0").rstrip(".")

        symbol = ""
        if include_symbol:
            for sym, codes in cls.SYMBOL_TO_CODES.items():
                if codes == [price.currency]:
                    symbol = sym
                    break

        if symbol:
            if price.currency in ["EUR", "CHF", "SEK", "PLN", "CZK", "HUF", "RON"]:
                return f"{amount_str}{symbol}"
            return f"{symbol}{amount_str}"
        return f"{amount_str} {price.currency}"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @classmethod
    def _extract_currency_and_amount(
        cls, text: str, locale: str | None
    ) -> tuple[str, str] | None:
        """Return (raw amount, currency code or "") from the first matching pattern."""
        for kind, pattern in cls.PRICE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue

            marker, (raw_amount,) = cls._split_groups(match)
            if kind == "symbol":
                return raw_amount, cls._resolve_symbol(marker, locale)
            return raw_amount, marker.upper()

        # Last resort: a bare number
        match = re.search(_AMOUNT, text)
        if match:
            return match.group(1), ""
        return None

    @staticmethod
    def _split_groups(match: re.Match) -> tuple[str, list[str]]:
        """The groups holding digits are amounts, the remaining one is the currency."""
        amounts = [g for g in match.groups() if g and g[0].isdigit()]
        marker = next(g for g in match.groups() if g and not g[0].isdigit())
        return marker, amounts

    @classmethod
    def _resolve_symbol(cls, symbol: str, locale: str | None) -> str:
        """Resolve a currency symbol, using the locale table for ambiguous ones."""
        candidates = cls.SYMBOL_TO_CODES.get(symbol, [])
        if not candidates:
            return ""
        if len(candidates) > 1 and locale:
            hinted = cls._currency_for_locale(locale)
            if hinted in candidates:
                return hinted
        return candidates[0]

    @classmethod
    def _currency_for_locale(cls, locale: str) -> str | None:
        normalized = locale.replace("_", "-")
        for key, code in cls.LOCALE_TO_CURRENCY.items():
            if key.lower() == normalized.lower():
                return code
        return cls.LOCALE_TO_CURRENCY.get(normalized.split("-")[0].lower())

    @classmethod
    def _is_comma_decimal_locale(cls, locale: str | None) -> bool:
        if not locale:
            return False
        return locale.replace("_", "-").split("-")[0].lower() in cls.COMMA_DECIMAL_LANGUAGES

    @classmethod
    def _build_price(
        cls,
        raw_amount: str,
        currency: str,
        locale: str | None,
        price_type: PriceType | None,
    ) -> Price | None:
        currency = currency.upper()
        if not cls.is_supported_currency(currency):
            logger.debug("Unsupported currency %r", currency)
            return None

        amount = cls.parse_amount(raw_amount, locale)
        if amount is None:
            logger.debug("Could not parse amount %r", raw_amount)
            return None

        try:
            rounded = cls._round(amount, currency)
        except InvalidOperation:
            # More significant digits than the decimal context holds
            logger.debug("Amount %r out of range", raw_amount)
            return None

        return Price(
            amount=rounded,
            currency=currency,
            price_type=price_type,
        )

    @classmethod
    def _round(cls, amount: Decimal, currency: str) -> float:
        quantum = Decimal(1).scaleb(-cls.get_decimal_places(currency))
        return float(amount.quantize(quantum, rounding=ROUND_HALF_UP))

    @classmethod
    def _is_free(cls, text: str) -> bool:
        """Check if price text indicates no charge."""
        lower = text.lower()
        return any(indicator in lower for indicator in cls.FREE_INDICATORS)
