"""
Fallback Content - Deterministic trip content used whenever the AI path fails.

Everything here is static domain knowledge plus the injected lookup tables.
None of it can fail: a malformed lookup entry is ignored and the hard-coded
default is used instead.
"""
import logging
from typing import Any, Optional
from datetime import timedelta

from .advisories import is_peak_season, emergency_contacts
from .extraction import parse_with_regex, DEFAULT_DURATION_DAYS, DEFAULT_ADULTS, DEFAULT_LEAD_DAYS
from .lookups import LookupTables
from ..config import settings
from ..models.content import (
    HonestTake, PackingList, TripPlan, TripPlanContext, ParsedTrip, ParseContext
)

logger = logging.getLogger(__name__)


UNKNOWN_DESTINATION = "Unknown"
DEFAULT_BAND = "warm"
DEFAULT_KID_FRIENDLINESS = 4

TEMPERATURE_BANDS = {
    "hot": {
        "range": "32-42°C",
        "feel": "hot and often humid",
        "best_time_of_day": "Early morning (7-10am) and after sunset",
        "warning": "Midday heat is intense; plan indoor time between 12 and 4pm.",
    },
    "warm": {
        "range": "26-32°C",
        "feel": "warm",
        "best_time_of_day": "Mornings and late afternoons",
        "warning": "Keep kids hydrated and carry sunscreen for outdoor time.",
    },
    "mild": {
        "range": "15-25°C",
        "feel": "pleasant",
        "best_time_of_day": "Any time; afternoons are the warmest",
        "warning": "Evenings can get chilly; carry a light layer.",
    },
    "cold": {
        "range": "below 12°C",
        "feel": "cold",
        "best_time_of_day": "Late morning to mid-afternoon",
        "warning": "Short daylight and cold evenings; dress kids in layers.",
    },
}

DEFAULT_HIGHLIGHTS = [
    "Family-friendly parks and museums",
    "A relaxed local food walk",
    "One slow day with nothing planned",
]

THINGS_TO_KNOW = [
    "🛂 Check visa requirements",
    "💱 Carry forex card",
    "🚕 Uber available",
]

KIDS_CORE = ["Shoes", "Snacks", "Toy", "Tablet", "Water bottle", "Medicines", "Wipes"]
KIDS_BY_BAND = {
    "hot": ["Light clothes", "Swimwear", "Sun hat", "Sunscreen", "Jacket for AC"],
    "warm": ["Light clothes", "Swimwear", "Sun hat", "Sunscreen", "Jacket for AC"],
    "mild": ["Layered clothes", "Light jacket", "Sunscreen"],
    "cold": ["Thermals", "Warm jacket", "Gloves and beanie"],
}
INFANT_ITEMS = ["Diapers", "Baby food", "Foldable stroller"]

ADULTS_CORE = ["Passport", "Visa", "Insurance", "Forex", "Adapter", "Shoes", "Meds"]
ADULTS_BY_BAND = {
    "hot": ["Sunglasses", "Cardigan"],
    "warm": ["Sunglasses", "Cardigan"],
    "mild": ["Sunglasses", "Light jacket"],
    "cold": ["Warm jacket", "Thermals", "Moisturiser"],
}

INDIAN_ESSENTIALS = ["Hing", "MTR meals", "Maggi", "Pickle", "Chai", "Namkeen"]


def _string_list(value: Any, default: list[str]) -> list[str]:
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return list(value)
    return list(default)


def _place_query(context: TripPlanContext) -> str:
    return f"{context.destination} {context.country or ''}".strip()


def climate_band(destination: str, month: Optional[int], lookups: LookupTables) -> str:
    """Temperature band for a destination in a month, "warm" when unknown."""
    bands = lookups.resolve("climate", destination)
    if not isinstance(bands, dict) or month is None:
        return DEFAULT_BAND
    for band, months in bands.items():
        if band in TEMPERATURE_BANDS and isinstance(months, list) and month in months:
            return band
    return DEFAULT_BAND


def _kid_friendliness(query: str, lookups: LookupTables) -> int:
    value = lookups.resolve("kid_friendliness", query, default=DEFAULT_KID_FRIENDLINESS)
    try:
        score = int(value)
    except (TypeError, ValueError):
        return DEFAULT_KID_FRIENDLINESS
    return min(max(score, 1), 5)


def _age_warnings(kid_ages: list[int]) -> list[str]:
    if not kid_ages:
        return []
    warnings = []
    youngest = min(kid_ages)
    if youngest < 2:
        warnings.append("Infants need their own passport; check airline bassinet and baby-food rules.")
    if youngest <= 5:
        warnings.append("Build in an afternoon nap break; little ones tire quickly.")
    return warnings


def _things_to_know(context: TripPlanContext, lookups: LookupTables) -> list[str]:
    query = _place_query(context)
    things = list(THINGS_TO_KNOW)

    rate = lookups.resolve("currency_rates", query)
    if isinstance(rate, dict) and rate.get("code") and rate.get("inr_per_unit"):
        things.append(f"💱 1 {rate['code']} ≈ ₹{rate['inr_per_unit']}")

    contacts = emergency_contacts(query, lookups)
    things.append(f"🚨 Emergency: police {contacts.police}, ambulance {contacts.ambulance}")

    if context.month and is_peak_season(query, context.month, lookups):
        things.append(f"📈 {context.month_name} is peak season; book early")

    return things


def _packing_list(context: TripPlanContext, band: str) -> PackingList:
    kids: list[str] = []
    if context.kids > 0:
        kids = KIDS_BY_BAND[band] + KIDS_CORE
        if context.kid_ages and min(context.kid_ages) < 3:
            kids = kids + INFANT_ITEMS

    return PackingList(
        kids=kids,
        adults=ADULTS_CORE + ADULTS_BY_BAND[band],
        indian_essentials=list(INDIAN_ESSENTIALS),
    )


def build_fallback_trip_plan(context: TripPlanContext, lookups: LookupTables) -> TripPlan:
    """
    Build a trip_plan from the context alone.

    Seeded only by destination, month, kid ages and traveler counts, so the
    same context always yields the same plan.
    """
    query = _place_query(context)
    band = climate_band(query, context.month, lookups)
    band_info = TEMPERATURE_BANDS[band]

    warnings = [band_info["warning"]] + _age_warnings(context.kid_ages)
    if context.health_notes:
        warnings.append(f"Health notes ({context.health_notes}): carry prescriptions and a doctor's letter.")

    honest_take = HonestTake(
        weather_reality=(
            f"{context.destination} in {context.month_name} is {band_info['feel']}, "
            f"around {band_info['range']}."
        ),
        best_time_of_day=band_info["best_time_of_day"],
        kid_friendliness=_kid_friendliness(query, lookups),
        highlights=_string_list(lookups.resolve("highlights", query), DEFAULT_HIGHLIGHTS),
        warnings=warnings,
    )

    return TripPlan(
        honest_take=honest_take,
        things_to_know=_things_to_know(context, lookups),
        packing_list=_packing_list(context, band),
    )


def build_fallback_parsed_trip(context: ParseContext, lookups: LookupTables) -> ParsedTrip:
    """
    Build a parsed_trip from the request text with the rule-based parser.

    When not even a destination can be found, the placeholder destination
    keeps the payload schema-valid.
    """
    gazetteer = [place for place in lookups.entries("gazetteer") if isinstance(place, str)] or None
    today = context.resolved_today()
    result = parse_with_regex(context.text, today=today, gazetteer=gazetteer)
    if isinstance(result, ParsedTrip):
        return result

    logger.warning("No destination in request text; using placeholder destination")
    return ParsedTrip(
        destination=UNKNOWN_DESTINATION,
        duration_days=DEFAULT_DURATION_DAYS,
        start_date=today + timedelta(days=DEFAULT_LEAD_DAYS),
        adults=DEFAULT_ADULTS,
        kids=0,
        kid_ages=[],
        budget=None,
        currency=settings.default_currency,
    )
