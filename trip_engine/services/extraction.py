"""
Rule-based trip extraction - Regex and gazetteer parsing of free text.
Used when no AI provider is configured or the AI reply is unusable.
"""
import re
import logging
from typing import Iterable, Optional, Union
from datetime import date, timedelta

from ..config import settings
from ..models.content import ParsedTrip, DEFAULT_KID_AGE, MAX_KIDS
from ..models.trip import ValidationFailure

logger = logging.getLogger(__name__)


DEFAULT_GAZETTEER = [
    "thailand", "singapore", "dubai", "bali", "maldives", "goa", "paris",
    "london", "tokyo", "sydney", "new york", "switzerland", "malaysia",
    "vietnam", "sri lanka", "nepal", "bhutan",
]

FAMILY_KEYWORDS = ("kid", "child", "family", "toddler", "baby")

MONTHS = [
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
]

DURATION_PATTERN = re.compile(r"(\d+)\s*(days?|weeks?)")
KIDS_PATTERN = re.compile(r"(\d+)\s*(kids?|child(?:ren)?)")
BUDGET_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:lakhs?|lacs?|l\b)")
ISO_DATE_PATTERN = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")
# "may" alone is too common a word, so a month needs a leading preposition
MONTH_PATTERN = re.compile(r"\b(?:in|during|this|next|coming)\s+(" + "|".join(MONTHS) + r")\b")
NEXT_MONTH_PATTERN = re.compile(r"\bnext month\b")

LAKH = 100_000
DEFAULT_DURATION_DAYS = 7
MAX_DURATION_DAYS = 365
DEFAULT_ADULTS = 2
DEFAULT_LEAD_DAYS = 30


def extract_destination(text: str, gazetteer: Optional[Iterable[str]] = None) -> Optional[str]:
    """
    Known place names first (case-insensitive substring), then the first
    capitalized word longer than two characters.
    """
    lowered = text.lower()
    for place in gazetteer if gazetteer is not None else DEFAULT_GAZETTEER:
        if place and place.lower() in lowered:
            return place.title()

    for word in text.split():
        if len(word) > 2 and word[0].isupper():
            cleaned = re.sub(r"[^a-zA-Z]", "", word)
            if cleaned:
                return cleaned
    return None


def _bounded_int(digits: str, upper: int) -> int:
    # More digits than the cap itself means over the cap
    if len(digits.lstrip("0")) > len(str(upper)):
        return upper
    return min(int(digits), upper)


def extract_duration_days(text: str) -> int:
    match = DURATION_PATTERN.search(text.lower())
    if not match:
        return DEFAULT_DURATION_DAYS
    days = _bounded_int(match.group(1), MAX_DURATION_DAYS)
    if match.group(2).startswith("week"):
        days *= 7
    return min(max(days, 1), MAX_DURATION_DAYS)


def extract_kids(text: str) -> int:
    lowered = text.lower()
    match = KIDS_PATTERN.search(lowered)
    if match:
        return _bounded_int(match.group(1), MAX_KIDS)
    if any(keyword in lowered for keyword in FAMILY_KEYWORDS):
        return 1
    return 0


def extract_budget(text: str) -> Optional[float]:
    match = BUDGET_PATTERN.search(text.lower())
    if not match:
        return None
    return float(match.group(1)) * LAKH


def extract_start_date(text: str, today: date) -> date:
    """
    Explicit ISO date, then "in <month>", then "next month",
    else DEFAULT_LEAD_DAYS from today.
    """
    lowered = text.lower()

    for candidate in ISO_DATE_PATTERN.findall(lowered):
        try:
            return date.fromisoformat(candidate)
        except ValueError:
            continue

    match = MONTH_PATTERN.search(lowered)
    if match:
        month = MONTHS.index(match.group(1)) + 1
        if month == today.month:
            return today + timedelta(days=1)
        year = today.year if month > today.month else today.year + 1
        return date(year, month, 1)

    if NEXT_MONTH_PATTERN.search(lowered):
        if today.month == 12:
            return date(today.year + 1, 1, 1)
        return date(today.year, today.month + 1, 1)

    return today + timedelta(days=DEFAULT_LEAD_DAYS)


def parse_with_regex(
    text: str,
    today: Optional[date] = None,
    gazetteer: Optional[Iterable[str]] = None
) -> Union[ParsedTrip, ValidationFailure]:
    """
    Parse a free-text trip request without AI.

    Returns:
        ParsedTrip, or ValidationFailure("destination_required")
    """
    destination = extract_destination(text or "", gazetteer)
    if not destination:
        logger.info("Rule-based parser found no destination")
        return ValidationFailure(error="destination_required")

    today = today or date.today()
    kids = extract_kids(text)

    return ParsedTrip(
        destination=destination,
        duration_days=extract_duration_days(text),
        start_date=extract_start_date(text, today),
        adults=DEFAULT_ADULTS,
        kids=kids,
        kid_ages=[DEFAULT_KID_AGE] * kids,
        budget=extract_budget(text),
        currency=settings.default_currency,
    )
