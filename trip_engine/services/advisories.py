"""
Trip advisories - Booking timing, peak seasons and destination reference info.
"""
from typing import Optional
from pydantic import BaseModel
from enum import Enum

from .lookups import LookupTables, get_lookups


class AdviceLevel(str, Enum):
    """How urgently the traveler should act."""
    WAIT = "wait"
    GOOD = "good"
    SOON = "soon"
    URGENT = "urgent"


class FlightAdvice(BaseModel):
    title: str
    message: str
    level: AdviceLevel


class EmergencyContacts(BaseModel):
    police: str = "112"
    ambulance: str = "112"
    embassy: str = "Nearest Indian Embassy"
    embassy_phone: str = "www.mea.gov.in"


def is_peak_season(destination: str, month: int, lookups: Optional[LookupTables] = None) -> bool:
    """Whether the month (1-12) is peak season at the destination."""
    lookups = lookups or get_lookups()
    months = lookups.resolve("peak_seasons", destination, default=[])
    return isinstance(months, list) and month in months


def flight_booking_advice(days_until: int, is_peak: bool) -> FlightAdvice:
    """Advice on when to book flights, given days left before departure."""
    if days_until > 90:
        return FlightAdvice(title="Too Early", message="Check again in 2-3 weeks", level=AdviceLevel.WAIT)
    if days_until > 60:
        return FlightAdvice(title="Good Time", message="Best prices typically now", level=AdviceLevel.GOOD)
    if days_until > 30:
        if is_peak:
            return FlightAdvice(title="Book Now!", message="Peak season - prices rising!", level=AdviceLevel.URGENT)
        return FlightAdvice(title="Book Soon", message="Prices starting to rise", level=AdviceLevel.SOON)
    return FlightAdvice(title="Urgent!", message="Last minute = higher prices", level=AdviceLevel.URGENT)


def emergency_contacts(country: str, lookups: Optional[LookupTables] = None) -> EmergencyContacts:
    """Local emergency numbers and the nearest Indian mission."""
    lookups = lookups or get_lookups()
    contacts = lookups.resolve("emergency_contacts", country)
    if isinstance(contacts, dict):
        return EmergencyContacts(**{k: str(v) for k, v in contacts.items() if k in EmergencyContacts.model_fields})
    return EmergencyContacts()


def destination_image(destination: str, lookups: Optional[LookupTables] = None) -> Optional[str]:
    """Cover image URL for a destination."""
    lookups = lookups or get_lookups()
    return lookups.resolve("destination_images", destination)
