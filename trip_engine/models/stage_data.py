"""
Stage data - Per-trip progress bag keyed by lifecycle phase.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class UnknownStepError(ValueError):
    """Raised when a step id outside the fixed step vocabulary is used."""

    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__(f"Unknown step id: {step_id!r}")


# Fixed preparation sequence before departure
PRE_TRIP_STEPS = [
    {"id": "flights", "title": "Book Flights", "description": "Find best prices and book flights"},
    {"id": "hotels", "title": "Book Hotels", "description": "Family-friendly accommodations"},
    {"id": "visa-docs", "title": "Visa & Documents", "description": "Visa, passport, insurance"},
    {"id": "packing", "title": "Packing Lists", "description": "Kids & adult packing checklists"},
    {"id": "last-minute", "title": "Last Minute", "description": "Forex, SIM, offline maps"},
]

STEP_ORDER: list[str] = [step["id"] for step in PRE_TRIP_STEPS]


def check_step_id(step_id: str) -> str:
    """Return the step id, raising UnknownStepError when it is not in the vocabulary."""
    if step_id not in STEP_ORDER:
        raise UnknownStepError(step_id)
    return step_id


class PackingProgress(BaseModel):
    """Last recorded packing percentages."""
    kids: int = Field(default=0, ge=0, le=100)
    adults: int = Field(default=0, ge=0, le=100)


class PreTripData(BaseModel):
    """Preparation state before departure."""
    completed_steps: list[str] = Field(
        default_factory=list,
        description="Completed step ids, no duplicates"
    )
    flights: Optional[dict] = None
    hotels: Optional[dict] = None
    visa_status: str = "pending"
    packing_progress: PackingProgress = Field(default_factory=PackingProgress)

    @field_validator("completed_steps")
    @classmethod
    def validate_completed_steps(cls, v: list[str]) -> list[str]:
        unique = []
        for step_id in v:
            if step_id not in STEP_ORDER:
                raise ValueError(f"Unknown step id: {step_id!r}")
            if step_id not in unique:
                unique.append(step_id)
        return unique


class DuringTripData(BaseModel):
    """Notes collected while travelling."""
    daily_notes: list[dict] = Field(default_factory=list)
    memories: list[dict] = Field(default_factory=list)
    expenses: list[dict] = Field(default_factory=list)


class PostTripData(BaseModel):
    """Wrap-up after returning."""
    rating: Optional[int] = Field(None, ge=1, le=5)
    total_spent: float = Field(default=0, ge=0)
    feedback: Optional[str] = None


class StageData(BaseModel):
    """Stage bag for a single trip."""
    pre_trip: PreTripData = Field(default_factory=PreTripData)
    during_trip: DuringTripData = Field(default_factory=DuringTripData)
    post_trip: PostTripData = Field(default_factory=PostTripData)
    updated_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def default(cls) -> "StageData":
        """Fresh stage data for a newly created trip."""
        return cls()

    @property
    def completed_steps(self) -> list[str]:
        return list(self.pre_trip.completed_steps)

    def mark_step_completed(self, step_id: str, **details):
        """
        Record a step as completed.

        Args:
            step_id: One of the fixed pre-trip step ids
            details: Optional step payload, e.g. flights=... or hotels=...
        """
        check_step_id(step_id)
        if step_id not in self.pre_trip.completed_steps:
            self.pre_trip.completed_steps.append(step_id)
        for key, value in details.items():
            if key in PreTripData.model_fields and key != "completed_steps":
                setattr(self.pre_trip, key, value)
        self.updated_at = datetime.now()

    def record_packing_progress(self, kids: int, adults: int):
        """Store the latest packing percentages."""
        self.pre_trip.packing_progress = PackingProgress(kids=kids, adults=adults)
        self.updated_at = datetime.now()
