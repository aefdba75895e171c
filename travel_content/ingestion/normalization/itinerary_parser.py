"""
Day-by-day itinerary parsing shared by the web and document transformers.

Recognizes blocks like::

    Day 1: Arrival in Paris
    - 10:00 AM - Arrive at Charles de Gaulle Airport
    - Visit Eiffel Tower (2 hours)

    Day Two - Montmartre
    ...
"""

from __future__ import annotations

import re

from travel_content.ingestion.normalization.dates import DateNormalizer
from travel_content.schemas.content import DailyPlan, ItineraryItem

WORD_TO_NUMBER = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11,
    "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
    "twenty": 20,
}

ITINERARY_KEYWORDS = [
    "itinerary",
    "day 1",
    "day one",
    "first day",
    "schedule",
    "travel plan",
    "trip overview",
]

_DAY_NUMBER = r"(\d{1,2}|" + "|".join(WORD_TO_NUMBER) + r")"
_DAY_HEADER = re.compile(
    rf"^\s*(?:#+\s*)?day\s+{_DAY_NUMBER}\b\s*[:\-–.)]?\s*(.*)$", re.IGNORECASE
)
_DAY_MENTION = re.compile(rf"\bday\s+{_DAY_NUMBER}\b", re.IGNORECASE)
_BULLET = re.compile(r"^[-•*·]\s*")
_LEADING_TIME = re.compile(
    r"^(\d{1,2}:\d{2}\s*(?:[ap]\.?\s*m\.?)?|\d{1,2}\s*[ap]\.?\s*m\.?|\d{1,2}h\d{0,2})"
    r"\s*(?:[-–:]\s*)?(.*)$",
    re.IGNORECASE,
)
_TRAILING_DURATION = re.compile(r"\s*\(([^)]*)\)\s*$")


def _day_number(token: str) -> int:
    return int(token) if token.isdigit() else WORD_TO_NUMBER[token.lower()]


def looks_like_itinerary(text: str | None) -> bool:
    """Itinerary keywords, or at least two distinct day mentions."""
    if not text:
        return False
    lower = text.lower()
    if any(keyword in lower for keyword in ITINERARY_KEYWORDS):
        return True
    days = {_day_number(m.group(1)) for m in _DAY_MENTION.finditer(text)}
    return len(days) >= 2


def parse_item(line: str, date_normalizer: DateNormalizer) -> ItineraryItem | None:
    """Parse one line into an item: optional leading time, text, optional "(duration)"."""
    line = _BULLET.sub("", line.strip())
    if not line:
        return None

    time = None
    match = _LEADING_TIME.match(line)
    if match:
        time = date_normalizer.normalize_time(match.group(1))
        if time:
            line = match.group(2).strip()

    duration = None
    match = _TRAILING_DURATION.search(line)
    if match:
        parsed = date_normalizer.normalize_duration(match.group(1))
        duration = str(parsed) if parsed else match.group(1).strip()
        line = line[: match.start()].strip()

    if not line:
        return None
    return ItineraryItem(activity=line, time=time, duration=duration)


def parse_daily_plans(
    text: str | None, date_normalizer: DateNormalizer | None = None
) -> list[DailyPlan]:
    """
    Split text into DailyPlans on "Day N" headers.

    Lines before the first header are ignored; a repeated day number starts
    a new plan with the same number.
    """
    if not text:
        return []

    date_normalizer = date_normalizer or DateNormalizer()
    plans: list[DailyPlan] = []
    current: dict | None = None

    for line in text.splitlines():
        header = _DAY_HEADER.match(line)
        if header:
            if current is not None:
                plans.append(DailyPlan(**current))
            title = header.group(2).strip() or None
            current = {"day": _day_number(header.group(1)), "title": title, "items": []}
            continue

        if current is None or not line.strip():
            continue
        item = parse_item(line, date_normalizer)
        if item is not None:
            current["items"].append(item)

    if current is not None:
        plans.append(DailyPlan(**current))
    return plans
