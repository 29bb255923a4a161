"""
API Routes for the trip engine.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date

from ..config import has_ai_credential
from ..models.checklist import ChecklistTemplate
from ..models.content import ContentKind
from ..models.stage_data import UnknownStepError
from ..models.trip import TripComposition, ValidationFailure, validate_trip_input
from ..services.advisories import (
    is_peak_season, flight_booking_advice, emergency_contacts, destination_image
)
from ..services.content_gateway import get_content_gateway
from ..services.parser import get_parser
from ..services.progress import aggregate_progress, packing_progress, can_complete_packing
from ..services.stages import resolve_stage
from ..services.step_gating import gate_step_statuses
from ..services.templates import match_templates, load_default_templates


router = APIRouter(prefix="/api", tags=["trip-engine"])


# Request Models

class ParseRequest(BaseModel):
    text: str


class StageRequest(BaseModel):
    start_date: date
    end_date: date
    now: Optional[date] = None

    @model_validator(mode="after")
    def check_range(self) -> "StageRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class StepStatusRequest(BaseModel):
    completed_steps: list[str] = Field(default_factory=list)
    days_until_trip: int
    step_order: Optional[list[str]] = None


class MatchRequest(BaseModel):
    composition: TripComposition
    templates: Optional[list[ChecklistTemplate]] = None


class ProgressRequest(BaseModel):
    items: list[dict] = Field(default_factory=list)


class PackingProgressRequest(BaseModel):
    kids: list[dict] = Field(default_factory=list)
    adults: list[dict] = Field(default_factory=list)
    num_kids: int = Field(default=0, ge=0)
    strategy: Optional[str] = None


# Endpoints

@router.post("/trips/parse")
async def parse_trip(request: ParseRequest):
    """Parse a free-text trip request."""
    result = await get_parser().parse(request.text, has_ai_credential())
    if isinstance(result, ValidationFailure):
        raise HTTPException(status_code=400, detail=result.model_dump())
    return result.model_dump(mode="json")


@router.post("/trips/validate")
async def validate_trip(data: dict):
    """Validate trip input before it is stored."""
    result = validate_trip_input(data)
    if isinstance(result, ValidationFailure):
        raise HTTPException(status_code=422, detail=result.model_dump())
    return {
        "trip": result.model_dump(mode="json"),
        "duration_days": result.duration_days,
    }


@router.post("/trips/stage")
async def trip_stage(request: StageRequest):
    """Resolve a trip's lifecycle stage."""
    info = resolve_stage(request.now or date.today(), request.start_date, request.end_date)
    return info.to_display_dict()


@router.post("/steps/status")
async def step_statuses(request: StepStatusRequest):
    """Availability of each pre-trip step."""
    try:
        statuses = gate_step_statuses(
            request.step_order,
            request.completed_steps,
            request.days_until_trip
        )
    except UnknownStepError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"statuses": {step_id: status.value for step_id, status in statuses.items()}}


@router.post("/checklist/match")
async def match_checklist(request: MatchRequest):
    """Checklist items applicable to a family, from given or default templates."""
    templates = request.templates if request.templates is not None else load_default_templates()
    items = match_templates(templates, request.composition)
    return {"items": [item.model_dump(mode="json") for item in items]}


@router.post("/content/{kind}")
async def generate(kind: str, context: Optional[dict] = None):
    """Generate trip_plan or parsed_trip content; always succeeds for known kinds."""
    try:
        content_kind = ContentKind(kind)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown content kind: {kind}")
    return await get_content_gateway().generate(content_kind, context or {})


@router.post("/progress")
async def progress(request: ProgressRequest):
    """Completion summary over checklist or packing items."""
    return aggregate_progress(request.items).model_dump()


@router.post("/progress/packing")
async def packing(request: PackingProgressRequest):
    """Overall packing progress across the kids and adults lists."""
    try:
        result = packing_progress(request.kids, request.adults, request.num_kids, request.strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        **result.model_dump(),
        "can_complete": can_complete_packing(result.percent),
    }


@router.get("/advisories")
async def advisories(destination: str, days_until: int, month: Optional[int] = None):
    """Booking advice and reference info for a destination."""
    peak = is_peak_season(destination, month or date.today().month)
    return {
        "is_peak_season": peak,
        "flight_advice": flight_booking_advice(days_until, peak).model_dump(),
        "emergency_contacts": emergency_contacts(destination).model_dump(),
        "image": destination_image(destination),
    }
