"""
Trip models - The traveler composition and lifecycle stage of a trip.
"""
from pydantic import BaseModel, Field, ValidationError, model_validator
from typing import Optional, Union
from datetime import date
from enum import Enum


class TripStage(str, Enum):
    """Lifecycle stage of a trip, derived from its dates."""
    PRE_TRIP = "pre-trip"
    DURING_TRIP = "during-trip"
    POST_TRIP = "post-trip"


class ValidationFailure(BaseModel):
    """Structured result for input the caller must re-enter."""
    error: str = Field(..., description="Machine-readable error code")
    details: list[str] = Field(
        default_factory=list,
        description="Human-readable reasons"
    )


class TripComposition(BaseModel):
    """Traveler makeup of a trip."""
    num_adults: int = Field(
        default=2, ge=1,
        description="Number of adults"
    )
    num_kids: int = Field(
        default=0, ge=0,
        description="Number of kids"
    )
    kid_ages: list[int] = Field(
        default_factory=list,
        description="Age of each kid, one entry per kid"
    )

    @model_validator(mode="after")
    def check_kid_ages(self) -> "TripComposition":
        if len(self.kid_ages) != self.num_kids:
            raise ValueError(
                f"kid_ages has {len(self.kid_ages)} entries but num_kids is {self.num_kids}"
            )
        if any(age < 0 for age in self.kid_ages):
            raise ValueError("kid_ages must be non-negative")
        return self


class Trip(BaseModel):
    """A family trip as held by the record store."""
    destination: str = Field(
        ..., min_length=1,
        description="City or country being visited"
    )
    country: Optional[str] = Field(
        None,
        description="Country of the destination"
    )
    start_date: date = Field(
        ...,
        description="First day of the trip"
    )
    end_date: date = Field(
        ...,
        description="Last day of the trip (inclusive)"
    )
    num_adults: int = Field(
        default=2, ge=1,
        description="Number of adults"
    )
    num_kids: int = Field(
        default=0, ge=0,
        description="Number of kids"
    )
    kid_ages: list[int] = Field(
        default_factory=list,
        description="Age of each kid"
    )
    currency: Optional[str] = Field(
        None,
        description="Currency of the budget"
    )
    budget: Optional[float] = Field(
        None, ge=0,
        description="Total budget"
    )

    @model_validator(mode="after")
    def check_invariants(self) -> "Trip":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if len(self.kid_ages) != self.num_kids:
            raise ValueError(
                f"kid_ages has {len(self.kid_ages)} entries but num_kids is {self.num_kids}"
            )
        if any(age < 0 for age in self.kid_ages):
            raise ValueError("kid_ages must be non-negative")
        return self

    @property
    def composition(self) -> TripComposition:
        return TripComposition(
            num_adults=self.num_adults,
            num_kids=self.num_kids,
            kid_ages=list(self.kid_ages),
        )

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class StageInfo(BaseModel):
    """Stage of a trip plus the counter relevant to that stage."""
    stage: TripStage
    total_days: int = Field(..., ge=1)
    days_until: Optional[int] = None
    current_day: Optional[int] = None
    days_ago: Optional[int] = None

    def to_display_dict(self) -> dict:
        """Only the counter matching the stage is included."""
        return self.model_dump(mode="json", exclude_none=True)


def validate_trip_input(data: dict) -> Union[Trip, ValidationFailure]:
    """
    Build a Trip from raw input without raising.

    Returns:
        The Trip, or a ValidationFailure listing every violated rule
    """
    try:
        return Trip.model_validate(data)
    except ValidationError as e:
        details = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            message = err["msg"]
            details.append(f"{location}: {message}" if location else message)
        return ValidationFailure(error="invalid_trip", details=details)
