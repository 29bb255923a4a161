"""Services for the trip engine."""
from .stages import resolve_stage, resolve_trip_stage
from .step_gating import StepStatus, gate_step_statuses, get_step_status, next_actionable_step
from .templates import match_templates, template_applies, load_default_templates, packing_items_from_plan
from .progress import aggregate_progress, composite_progress, packing_progress, can_complete_packing
from .content_gateway import ContentGateway, generate_content, get_content_gateway
from .parser import FreeformTripParser, parse_freeform, get_parser
from .lookups import LookupTables, get_lookups

__all__ = [
    "resolve_stage",
    "resolve_trip_stage",
    "StepStatus",
    "gate_step_statuses",
    "get_step_status",
    "next_actionable_step",
    "match_templates",
    "template_applies",
    "load_default_templates",
    "packing_items_from_plan",
    "aggregate_progress",
    "composite_progress",
    "packing_progress",
    "can_complete_packing",
    "ContentGateway",
    "generate_content",
    "get_content_gateway",
    "FreeformTripParser",
    "parse_freeform",
    "get_parser",
    "LookupTables",
    "get_lookups",
]
