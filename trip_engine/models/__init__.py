"""Data models for the trip engine."""
from .trip import Trip, TripComposition, TripStage, StageInfo, ValidationFailure, validate_trip_input
from .checklist import Phase, ChecklistTemplate, ChecklistItem, PackingItem
from .stage_data import StageData, UnknownStepError, PRE_TRIP_STEPS, STEP_ORDER
from .content import ContentKind, TripPlan, ParsedTrip, TripPlanContext, ParseContext

__all__ = [
    "Trip",
    "TripComposition",
    "TripStage",
    "StageInfo",
    "ValidationFailure",
    "validate_trip_input",
    "Phase",
    "ChecklistTemplate",
    "ChecklistItem",
    "PackingItem",
    "StageData",
    "UnknownStepError",
    "PRE_TRIP_STEPS",
    "STEP_ORDER",
    "ContentKind",
    "TripPlan",
    "ParsedTrip",
    "TripPlanContext",
    "ParseContext",
]
