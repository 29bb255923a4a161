"""
Checklist models - Reference templates and the per-trip items built from them.
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from enum import Enum


class Phase(str, Enum):
    """Phase a checklist entry belongs to."""
    PRE_TRIP = "pre-trip"
    DURING_TRIP = "during-trip"
    POST_TRIP = "post-trip"


class ChecklistTemplate(BaseModel):
    """Immutable reference checklist content with optional kid-age bounds."""
    title: str = Field(..., min_length=1)
    phase: Phase = Field(default=Phase.PRE_TRIP)
    category: str = Field(default="general")
    kid_age_min: Optional[int] = Field(
        None, ge=0,
        description="Youngest applicable kid age (inclusive), None for unbounded"
    )
    kid_age_max: Optional[int] = Field(
        None, ge=0,
        description="Oldest applicable kid age (inclusive), None for unbounded"
    )
    sort_order: int = Field(default=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "ChecklistTemplate":
        if (
            self.kid_age_min is not None
            and self.kid_age_max is not None
            and self.kid_age_min > self.kid_age_max
        ):
            raise ValueError("kid_age_min must not exceed kid_age_max")
        return self

    @property
    def is_age_unbounded(self) -> bool:
        return self.kid_age_min is None and self.kid_age_max is None


class ChecklistItem(BaseModel):
    """A checklist entry attached to one trip."""
    title: str
    phase: Phase = Field(default=Phase.PRE_TRIP)
    category: str = Field(default="general")
    is_completed: bool = Field(default=False)
    is_template: bool = Field(
        default=False,
        description="True when created from a template rather than by the user"
    )
    sort_order: int = Field(default=0)


class PackingItem(BaseModel):
    """A packing entry attached to one trip."""
    title: str
    category: str = Field(default="general")
    is_packed: bool = Field(default=False)
    is_template: bool = Field(default=False)
    sort_order: int = Field(default=0)
