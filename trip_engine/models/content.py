"""
Generated content models - Fixed schemas for AI-authored (or fallback) payloads.
"""
from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator, model_validator
from typing import Optional
from datetime import date, timedelta
from enum import Enum


# Age assumed for a kid whose age was not stated
DEFAULT_KID_AGE = 3

# Largest party of kids a single trip can carry
MAX_KIDS = 10


def reconcile_kid_ages(kid_ages: list[int], kids: int) -> list[int]:
    """One age per kid: extra ages are dropped, missing ones default."""
    ages = [age for age in kid_ages if age >= 0][:kids]
    ages.extend([DEFAULT_KID_AGE] * (kids - len(ages)))
    return ages


class ContentKind(str, Enum):
    """Kinds of content the gateway can produce."""
    TRIP_PLAN = "trip_plan"
    PARSED_TRIP = "parsed_trip"


class HonestTake(BaseModel):
    """Candid summary of what the destination is like for a family."""
    weather_reality: str = Field(..., description="What the weather will actually feel like")
    best_time_of_day: str = Field(default="", description="When to be out and about")
    kid_friendliness: int = Field(..., ge=1, le=5, description="1 (avoid) to 5 (great)")
    highlights: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class PackingList(BaseModel):
    """Packing suggestions partitioned by who they are for."""
    kids: list[str]
    adults: list[str]
    indian_essentials: list[str]


class TripPlan(BaseModel):
    """The trip_plan payload."""
    honest_take: HonestTake
    things_to_know: list[str]
    packing_list: PackingList


class ParsedTrip(BaseModel):
    """The parsed_trip payload: structured parameters of a free-text request."""
    destination: str = Field(..., min_length=1)
    duration_days: int = Field(..., ge=1, le=365)
    start_date: date
    adults: int = Field(..., ge=1)
    kids: int = Field(..., ge=0, le=MAX_KIDS)
    kid_ages: list[int] = Field(default_factory=list)
    budget: Optional[float] = Field(None, ge=0)
    currency: str = Field(default="INR", min_length=1)

    @field_validator("kid_ages", mode="before")
    @classmethod
    def null_kid_ages(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def reconcile_kid_ages(self) -> "ParsedTrip":
        self.kid_ages = reconcile_kid_ages(self.kid_ages, self.kids)
        return self

    @computed_field
    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.duration_days - 1)


class TripPlanContext(BaseModel):
    """
    Inputs used to author a trip_plan.

    Accepts stored trips directly: num_adults / num_kids are read as
    adults / kids, and an end_date fixes duration_days.
    """
    destination: str = Field(default="your destination", min_length=1)
    country: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: int = Field(default=5, ge=1)
    adults: int = Field(
        default=2, ge=1,
        validation_alias=AliasChoices("adults", "num_adults")
    )
    kids: int = Field(
        default=0, ge=0, le=MAX_KIDS,
        validation_alias=AliasChoices("kids", "num_kids")
    )
    kid_ages: list[int] = Field(default_factory=list)
    health_notes: Optional[str] = None

    @field_validator("kid_ages", mode="before")
    @classmethod
    def null_kid_ages(cls, v):
        return [] if v is None else v

    @model_validator(mode="after")
    def reconcile_trip(self) -> "TripPlanContext":
        if self.start_date and self.end_date and self.end_date >= self.start_date:
            self.duration_days = (self.end_date - self.start_date).days + 1
        # Ages without a count mean one kid per age
        if "kids" not in self.model_fields_set and self.kid_ages:
            self.kids = min(len(self.kid_ages), MAX_KIDS)
        self.kid_ages = reconcile_kid_ages(self.kid_ages, self.kids)
        return self

    @property
    def month(self) -> Optional[int]:
        return self.start_date.month if self.start_date else None

    @property
    def month_name(self) -> str:
        return self.start_date.strftime("%B") if self.start_date else "your travel month"


class ParseContext(BaseModel):
    """Inputs used to author a parsed_trip."""
    text: str = Field(default="")
    today: Optional[date] = None

    def resolved_today(self) -> date:
        return self.today or date.today()
