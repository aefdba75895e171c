"""
Date Normalizer.

Parses absolute, relative and locale-specific date, time and duration
strings into canonical values:

- dates      -> ``YYYY-MM-DDTHH:MM:SSZ`` (UTC)
- times      -> ``HH:MM``
- durations  -> Duration(value, unit)

Every public method returns None when it cannot make sense of the input;
nothing here raises on bad text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# =============================================================================
# LOCALE DATA
# =============================================================================

# Month names per language: index 0 is January. Each entry lists every
# accepted spelling (full name first, then abbreviations).
MONTH_NAMES: dict[str, list[list[str]]] = {
    "en": [
        ["january", "jan"], ["february", "feb"], ["march", "mar"],
        ["april", "apr"], ["may"], ["june", "jun"], ["july", "jul"],
        ["august", "aug"], ["september", "sept", "sep"], ["october", "oct"],
        ["november", "nov"], ["december", "dec"],
    ],
    "fr": [
        ["janvier", "janv"], ["février", "fevrier", "févr", "fevr"], ["mars"],
        ["avril", "avr"], ["mai"], ["juin"], ["juillet", "juil"],
        ["août", "aout"], ["septembre", "sept"], ["octobre", "oct"],
        ["novembre", "nov"], ["décembre", "decembre", "déc", "dec"],
    ],
    "de": [
        ["januar", "jan"], ["februar", "feb"], ["märz", "maerz", "mär"],
        ["april", "apr"], ["mai"], ["juni", "jun"], ["juli", "jul"],
        ["august", "aug"], ["september", "sep"], ["oktober", "okt"],
        ["november", "nov"], ["dezember", "dez"],
    ],
    "es": [
        ["enero", "ene"], ["febrero", "feb"], ["marzo", "mar"],
        ["abril", "abr"], ["mayo", "may"], ["junio", "jun"], ["julio", "jul"],
        ["agosto", "ago"], ["septiembre", "setiembre", "sep", "sept"],
        ["octubre", "oct"], ["noviembre", "nov"], ["diciembre", "dic"],
    ],
    "it": [
        ["gennaio", "gen"], ["febbraio", "feb"], ["marzo", "mar"],
        ["aprile", "apr"], ["maggio", "mag"], ["giugno", "giu"],
        ["luglio", "lug"], ["agosto", "ago"], ["settembre", "set"],
        ["ottobre", "ott"], ["novembre", "nov"], ["dicembre", "dic"],
    ],
}

SUPPORTED_LOCALES = ("en-US", "en-GB", "fr", "de", "es", "it", "ja", "zh-CN")

# Locales that write numeric dates month first (03/15/2024)
MONTH_FIRST_LOCALES = {"en-us", "en-ph", "en-ca"}

# Absolute formats tried in step (c). Numeric day/month pairs are ordered
# per locale by _common_formats().
_DAY_FIRST_NUMERIC = ["dd/MM/yyyy", "dd-MM-yyyy", "dd.MM.yyyy"]
_MONTH_FIRST_NUMERIC = ["MM/dd/yyyy", "MM-dd-yyyy"]
_OTHER_COMMON_FORMATS = [
    "yyyy/MM/dd",
    "dd MMM yyyy",
    "dd MMMM yyyy",
    "MMM dd, yyyy",
    "MMMM dd, yyyy",
    "yyyy-MM-dd HH:mm:ss",
    "dd/MM/yyyy HH:mm",
    "MM/dd/yyyy HH:mm",
    "dd-MM-yyyy HH:mm:ss",
    "yyyy-MM-dd'T'HH:mm:ss",
    "yyyy-MM-dd'T'HH:mm:ss.SSS'Z'",
]

# Locale-specific flexible formats tried in step (d)
FLEXIBLE_FORMATS: dict[str, list[str]] = {
    "en": ["d MMMM yyyy", "d MMMM, yyyy", "MMMM d yyyy", "MMMM d, yyyy", "d MMM yyyy"],
    "fr": ["d MMMM yyyy", "'le' d MMMM yyyy"],
    "de": ["d. MMMM yyyy", "d MMMM yyyy", "d. MMM yyyy"],
    "es": ["d 'de' MMMM 'de' yyyy", "d MMMM yyyy"],
    "it": ["d MMMM yyyy"],
    "ja": ["yyyy年M月d日", "yyyy/M/d"],
    "zh": ["yyyy年M月d日", "yyyy/M/d"],
}

_WEEKDAY_PREFIX = re.compile(
    r"^(?:mon|tue|tues|wed|thu|thur|thurs|fri|sat|sun)[a-z]*\.?,?\s+", re.IGNORECASE
)
_ORDINAL_SUFFIX = re.compile(r"(\d)(?:st|nd|rd|th|er)\b", re.IGNORECASE)
_FORMAT_TOKEN = re.compile(r"'([^']*)'|yyyy|MMMM|MMM|MM|M|dd|d|HH|mm|ss|SSS|\s+|.")

_NUMBER_WORDS = {"a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5}

_RELATIVE_IN = re.compile(r"^in\s+(\d+|a|an|one|two|three|four|five)\s+(day|week|month|year)s?$")
_RELATIVE_AGO = re.compile(r"^(\d+|a|an|one|two|three|four|five)\s+(day|week|month|year)s?\s+ago$")
_RELATIVE_NEXT_LAST = re.compile(r"^(next|last)\s+(week|month|year)$")


@dataclass(frozen=True)
class Duration:
    """A parsed duration such as ``2 hours`` or ``0.5 days``."""

    value: float
    unit: str

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}"

    def to_hours(self) -> float:
        factors = {"minutes": 1 / 60, "hours": 1, "days": 24, "weeks": 168}
        return self.value * factors.get(self.unit, 1)


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


def _language(locale: str | None) -> str:
    if not locale:
        return "en"
    return locale.replace("_", "-").split("-")[0].lower()


@lru_cache(maxsize=32)
def _month_lookup(language: str) -> dict[str, int]:
    """Spelling -> month number for a language (English always included)."""
    lookup: dict[str, int] = {}
    for lang in ("en", language):
        for index, spellings in enumerate(MONTH_NAMES.get(lang, [])):
            for spelling in spellings:
                lookup[spelling] = index + 1
    return lookup


@lru_cache(maxsize=256)
def _compile_format(fmt: str, language: str) -> re.Pattern[str]:
    """Translate a ``dd/MM/yyyy`` style format into an anchored regex."""
    month_alternatives = sorted(_month_lookup(language), key=len, reverse=True)
    month_regex = "|".join(re.escape(m) for m in month_alternatives)

    parts = []
    for match in _FORMAT_TOKEN.finditer(fmt):
        token = match.group(0)
        if match.group(1) is not None:
            parts.append(re.escape(match.group(1)))
        elif token == "yyyy":
            parts.append(r"(?P<year>\d{4})")
        elif token in ("MMMM", "MMM"):
            parts.append(rf"(?P<month_name>{month_regex})\.?")
        elif token in ("MM", "M"):
            parts.append(r"(?P<month>\d{1,2})")
        elif token in ("dd", "d"):
            parts.append(r"(?P<day>\d{1,2})")
        elif token == "HH":
            parts.append(r"(?P<hour>\d{1,2})")
        elif token == "mm":
            parts.append(r"(?P<minute>\d{2})")
        elif token == "ss":
            parts.append(r"(?P<second>\d{2})")
        elif token == "SSS":
            parts.append(r"\d{1,6}")
        elif token.isspace():
            parts.append(r"\s+")
        else:
            parts.append(re.escape(token))
    return re.compile("".join(parts), re.IGNORECASE)


def _common_formats(locale: str | None) -> list[str]:
    month_first = (locale or "").lower() in MONTH_FIRST_LOCALES
    numeric = (
        _MONTH_FIRST_NUMERIC + _DAY_FIRST_NUMERIC
        if month_first
        else _DAY_FIRST_NUMERIC + _MONTH_FIRST_NUMERIC
    )
    return ["yyyy-MM-dd"] + numeric + _OTHER_COMMON_FORMATS


def _format_utc(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(OUTPUT_FORMAT)


class DateNormalizer:
    """
    Normalize dates, times and durations found in travel content.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize_date("15 March 2024")
        '2024-03-15T00:00:00Z'
        >>> normalizer.normalize_time("2:30 PM")
        '14:30'
    """

    def __init__(self, default_locale: str = "en-US"):
        self.default_locale = default_locale

    # -------------------------------------------------------------------------
    # Dates
    # -------------------------------------------------------------------------

    def normalize_date(
        self,
        text: str | None,
        locale: str | None = None,
        reference_date: date | datetime | None = None,
    ) -> str | None:
        """
        Parse a date string into ``YYYY-MM-DDTHH:MM:SSZ``.

        Tries, in order: strict ISO-8601, relative phrases ("tomorrow",
        "in 3 days", "next week") resolved against ``reference_date``, the
        common absolute formats, then locale-specific flexible formats.

        Args:
            text: Date text to parse
            locale: Locale code such as "en-GB" or "fr"
            reference_date: Anchor for relative phrases (defaults to now, UTC)

        Returns:
            Canonical UTC timestamp string, or None if nothing matched
        """
        if not text or not text.strip():
            return None

        cleaned = text.strip()
        locale = locale or self.default_locale

        parsed = (
            self._parse_iso(cleaned)
            or self._parse_relative(cleaned, reference_date)
            or self._parse_with_formats(cleaned, _common_formats(locale), locale)
            or self._parse_with_formats(
                self._strip_decorations(cleaned),
                FLEXIBLE_FORMATS.get(_language(locale), FLEXIBLE_FORMATS["en"]),
                locale,
            )
        )
        if parsed is None:
            logger.debug("Could not normalize date %r (locale=%s)", text, locale)
            return None
        return _format_utc(parsed)

    @staticmethod
    def _parse_iso(text: str) -> datetime | None:
        if not text[:4].isdigit():
            return None
        try:
            return isoparse(text)
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def _parse_relative(
        text: str, reference_date: date | datetime | None
    ) -> datetime | None:
        if reference_date is None:
            reference_date = datetime.now(timezone.utc)
        if isinstance(reference_date, datetime):
            if reference_date.tzinfo is not None:
                reference_date = reference_date.astimezone(timezone.utc)
            base = reference_date.replace(hour=0, minute=0, second=0, microsecond=0)
        else:
            base = datetime(reference_date.year, reference_date.month, reference_date.day)

        phrase = re.sub(r"\s+", " ", text.lower())
        offset = DateNormalizer._relative_offset(phrase)
        if offset is None:
            return None
        try:
            return base + offset
        except (ValueError, OverflowError):
            # Offsets past year 9999 (or before year 1) have no date
            return None

    @staticmethod
    def _relative_offset(phrase: str) -> timedelta | relativedelta | None:
        simple = {"today": 0, "tomorrow": 1, "yesterday": -1}
        if phrase in simple:
            return timedelta(days=simple[phrase])

        match = _RELATIVE_IN.match(phrase)
        sign = 1
        if not match:
            match = _RELATIVE_AGO.match(phrase)
            sign = -1
        if match:
            raw_amount, unit = match.groups()
            amount = int(raw_amount) if raw_amount.isdigit() else _NUMBER_WORDS[raw_amount]
            return relativedelta(**{f"{unit}s": sign * amount})

        match = _RELATIVE_NEXT_LAST.match(phrase)
        if match:
            direction, unit = match.groups()
            return relativedelta(**{f"{unit}s": 1 if direction == "next" else -1})

        return None

    @staticmethod
    def _parse_with_formats(text: str, formats: list[str], locale: str) -> datetime | None:
        language = _language(locale)
        months = _month_lookup(language)

        for fmt in formats:
            match = _compile_format(fmt, language).fullmatch(text)
            if not match:
                continue

            fields = match.groupdict()
            if fields.get("month_name"):
                month = months.get(fields["month_name"].lower().rstrip("."))
            else:
                month = int(fields["month"]) if fields.get("month") else None
            if month is None:
                continue

            try:
                return datetime(
                    int(fields["year"]),
                    month,
                    int(fields.get("day") or 1),
                    int(fields.get("hour") or 0),
                    int(fields.get("minute") or 0),
                    int(fields.get("second") or 0),
                )
            except ValueError:
                # e.g. month 13 when a month-first format meets a day-first date
                continue
        return None

    @staticmethod
    def _strip_decorations(text: str) -> str:
        """Drop leading weekday names and ordinal suffixes ("Friday, 1st")."""
        text = _WEEKDAY_PREFIX.sub("", text)
        return _ORDINAL_SUFFIX.sub(r"\1", text)

    def extract_date_range(self, text: str | None, locale: str | None = None) -> list[DateRange]:
        """
        Find date range phrases in free text.

        Recognizes "May 15-20, 2024", "15-20 May 2024", "01/05/2024 - 05/05/2024"
        and "2024-05-01 to 2024-05-05". En dashes and hyphens are both accepted.

        Returns:
            Zero or more DateRange pairs, in the order found
        """
        if not text:
            return []

        locale = locale or self.default_locale
        candidates: list[tuple[int, str, str]] = []

        for match in re.finditer(
            r"\b([^\W\d_]+)\.?\s+(\d{1,2})\s*[-–]\s*(\d{1,2}),?\s+(\d{4})\b", text
        ):
            month, first, last, year = match.groups()
            candidates.append(
                (match.start(), f"{first} {month} {year}", f"{last} {month} {year}")
            )

        for match in re.finditer(
            r"\b(\d{1,2})\s*[-–]\s*(\d{1,2})\s+([^\W\d_]+)\.?,?\s+(\d{4})\b", text
        ):
            first, last, month, year = match.groups()
            candidates.append(
                (match.start(), f"{first} {month} {year}", f"{last} {month} {year}")
            )

        for match in re.finditer(
            r"\b(\d{1,2}[/.]\d{1,2}[/.]\d{4}|\d{4}-\d{2}-\d{2})\s*(?:[-–]|to)\s*"
            r"(\d{1,2}[/.]\d{1,2}[/.]\d{4}|\d{4}-\d{2}-\d{2})\b",
            text,
        ):
            candidates.append((match.start(), match.group(1), match.group(2)))

        ranges: list[DateRange] = []
        for _, start_text, end_text in sorted(candidates, key=lambda c: c[0]):
            start = self.normalize_date(start_text, locale)
            end = self.normalize_date(end_text, locale)
            if start and end:
                date_range = DateRange(start=start, end=end)
                if date_range not in ranges:
                    ranges.append(date_range)
        return ranges

    # -------------------------------------------------------------------------
    # Times & durations
    # -------------------------------------------------------------------------

    @staticmethod
    def normalize_time(text: str | None) -> str | None:
        """
        Normalize a time of day to ``HH:MM``.

        Supports 24h ("14:30"), 12h ("2:30 PM", "12am") and bare hours
        ("2PM", "14h", "14h30").
        """
        if not text:
            return None

        value = text.strip().lower()
        if value == "noon":
            return "12:00"
        if value == "midnight":
            return "00:00"

        match = re.fullmatch(r"(\d{1,2}):(\d{2})(?::\d{2})?", value)
        if match:
            hours, minutes = int(match.group(1)), int(match.group(2))
            if hours < 24 and minutes < 60:
                return f"{hours:02d}:{minutes:02d}"
            return None

        match = re.fullmatch(r"(\d{1,2})(?:[:.](\d{2}))?\s*([ap])\.?\s*m\.?", value)
        if match:
            hours = int(match.group(1))
            minutes = int(match.group(2) or 0)
            if not 1 <= hours <= 12 or minutes >= 60:
                return None
            # 12am is midnight, 12pm is noon
            hours = hours % 12
            if match.group(3) == "p":
                hours += 12
            return f"{hours:02d}:{minutes:02d}"

        match = re.fullmatch(r"(\d{1,2})(?:h(\d{2})?)?", value)
        if match:
            hours = int(match.group(1))
            minutes = int(match.group(2) or 0)
            if hours < 24 and minutes < 60:
                return f"{hours:02d}:{minutes:02d}"

        return None

    @staticmethod
    def normalize_duration(text: str | None) -> Duration | None:
        """
        Parse a duration such as "2 hours", "90 mins", "3-day" or "half day".
        """
        if not text:
            return None

        value = text.lower().strip()
        if re.search(r"\bhalf[\s-]*(?:a\s+)?day\b", value):
            return Duration(0.5, "days")
        if re.search(r"\b(?:full|all|whole)[\s-]*day\b", value):
            return Duration(1.0, "days")

        match = re.search(
            r"(\d+(?:[.,]\d+)?)\s*-?\s*"
            r"(hours?|hrs?|h|minutes?|mins?|m|days?|d|weeks?|wks?|w)\b",
            value,
        )
        if not match:
            return None

        amount = float(match.group(1).replace(",", "."))
        unit = match.group(2)
        if unit.startswith("h"):
            canonical = "hours"
        elif unit.startswith("m"):
            canonical = "minutes"
        elif unit.startswith("d"):
            canonical = "days"
        else:
            canonical = "weeks"
        return Duration(amount, canonical)
