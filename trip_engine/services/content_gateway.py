"""
Content Gateway - AI-authored trip content with a deterministic fallback.

Every call resolves to a payload that validates against the kind's schema.
AI failures (timeouts, provider errors, non-JSON or incomplete replies) are
logged and replaced by fallback content; they never reach the caller.
"""
import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ValidationError

from .fallback import build_fallback_trip_plan, build_fallback_parsed_trip
from .llm_client import ExternalServiceError, get_llm_client
from .lookups import LookupTables, get_lookups
from ..config import settings
from ..models.content import (
    ContentKind, TripPlan, ParsedTrip, TripPlanContext, ParseContext
)

logger = logging.getLogger(__name__)


TRIP_PLAN_PROMPT = """You are a travel planning assistant for Indian families. Give an honest overview of this trip.

TRIP:
- Destination: {destination}{country}
- Month: {month_name}
- Start Date: {start_date}
- Duration: {duration_days} days
- Adults: {adults}
- Kids: {kids}
- Kid Ages: {kid_ages}
- Health Concerns: {health_notes}

Respond ONLY with valid JSON in this exact format, no markdown:
{{
  "honest_take": {{
    "weather_reality": "what the weather will really feel like",
    "best_time_of_day": "when to be out with kids",
    "kid_friendliness": 1-5,
    "highlights": ["..."],
    "warnings": ["..."]
  }},
  "things_to_know": ["..."],
  "packing_list": {{
    "kids": ["..."],
    "adults": ["..."],
    "indian_essentials": ["..."]
  }}
}}"""


PARSE_TRIP_PROMPT = """Extract trip details from this text: "{text}"

Today's date is {today}.

Return ONLY valid JSON (no markdown, no explanation):
{{
  "destination": "string (country or city name)",
  "duration_days": number (default 7 if not specified),
  "start_date": "YYYY-MM-DD" (use context clues like "March" or "next month", default to 30 days from today),
  "adults": number (default 2),
  "kids": number (default 1 if mentions kids/children/family, otherwise 0),
  "kid_ages": [array of numbers, one per kid] (estimate from context: "toddler"=2, "infant"=1, "baby"=1, "teenager"=14, default 3),
  "budget": number or null (parse "2 lakhs" as 200000, "1.5L" as 150000),
  "currency": "{currency}"
}}

If destination cannot be determined, return: {{"error": "destination_required"}}"""


# Keys that must be present before a reply is even type-checked; values may still be null
REQUIRED_KEYS = {
    ContentKind.TRIP_PLAN: {
        "honest_take": None,
        "things_to_know": None,
        "packing_list": ("kids", "adults", "indian_essentials"),
    },
    ContentKind.PARSED_TRIP: {
        "destination": None,
        "duration_days": None,
        "start_date": None,
        "adults": None,
        "kids": None,
        "kid_ages": None,
        "budget": None,
        "currency": None,
    },
}

SCHEMA_MODELS: dict[ContentKind, type[BaseModel]] = {
    ContentKind.TRIP_PLAN: TripPlan,
    ContentKind.PARSED_TRIP: ParsedTrip,
}

CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$")


@dataclass(frozen=True)
class Valid:
    """A reply that passed schema validation."""
    payload: BaseModel


@dataclass(frozen=True)
class Invalid:
    """A reply that must not reach the caller, and why."""
    reason: str


ValidationResult = Union[Valid, Invalid]


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapping the whole reply."""
    text = text.strip()
    match = CODE_FENCE_PATTERN.match(text)
    if match:
        return match.group(1).strip()
    return text


def _missing_keys(kind: ContentKind, data: dict) -> list[str]:
    missing = []
    for key, nested in REQUIRED_KEYS[kind].items():
        if key not in data:
            missing.append(key)
            continue
        if nested:
            inner = data[key]
            if not isinstance(inner, dict):
                missing.append(key)
                continue
            missing.extend(f"{key}.{sub}" for sub in nested if sub not in inner)
    return missing


def _input_keys(model: type[BaseModel], names: set) -> set[str]:
    """Every input key (field name or alias) belonging to the named fields."""
    keys = {str(name) for name in names}
    for field_name, field in model.model_fields.items():
        alias = field.validation_alias
        choices = alias.choices if isinstance(alias, AliasChoices) else []
        field_keys = {field_name} | {c for c in choices if isinstance(c, str)}
        if field_keys & keys:
            keys |= field_keys
    return keys


def validate_payload(kind: ContentKind, text: Optional[str]) -> ValidationResult:
    """
    Strictly validate a raw AI reply against the kind's schema.

    Returns:
        Valid(payload model) or Invalid(reason)
    """
    if not text or not text.strip():
        return Invalid("empty response")

    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        return Invalid(f"response is not JSON: {e.msg}")

    if not isinstance(data, dict):
        return Invalid("response is not a JSON object")
    if "error" in data:
        return Invalid(f"model reported error: {data['error']}")

    missing = _missing_keys(kind, data)
    if missing:
        return Invalid(f"missing required keys: {', '.join(missing)}")

    try:
        payload = SCHEMA_MODELS[kind].model_validate(data)
    except ValidationError as e:
        return Invalid(f"schema validation failed: {e.error_count()} error(s), first: {e.errors()[0]['msg']}")
    return Valid(payload)


class ContentGateway:
    """
    Produces trip_plan and parsed_trip payloads.

    Makes at most one completion call per request, bounded by the configured
    timeout, and substitutes fallback content for anything that goes wrong.
    """

    def __init__(
        self,
        llm: Any = None,
        lookups: Optional[LookupTables] = None,
        timeout: Optional[float] = None
    ):
        # llm: any object with `async complete(prompt) -> str`, None disables AI
        self.llm = llm
        self.lookups = lookups or get_lookups()
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds

    # Prompts

    def build_prompt(self, kind: ContentKind, context: Union[TripPlanContext, ParseContext]) -> str:
        """Deterministic prompt for a kind and its context."""
        if kind == ContentKind.TRIP_PLAN:
            return TRIP_PLAN_PROMPT.format(
                destination=context.destination,
                country=f", {context.country}" if context.country else "",
                month_name=context.month_name,
                start_date=context.start_date.isoformat() if context.start_date else "flexible",
                duration_days=context.duration_days,
                adults=context.adults,
                kids=context.kids,
                kid_ages=json.dumps(context.kid_ages),
                health_notes=context.health_notes or "None specified",
            )
        return PARSE_TRIP_PROMPT.format(
            text=context.text.replace('"', "'"),
            today=context.resolved_today().isoformat(),
            currency=settings.default_currency,
        )

    # Context handling

    def _coerce_context(self, kind: ContentKind, context: Any) -> Union[TripPlanContext, ParseContext]:
        model = TripPlanContext if kind == ContentKind.TRIP_PLAN else ParseContext
        if isinstance(context, model):
            return context
        if isinstance(context, BaseModel):
            context = context.model_dump()
        elif isinstance(context, str) and model is ParseContext:
            context = {"text": context}
        context = context or {}
        try:
            return model.model_validate(context)
        except ValidationError as e:
            if not isinstance(context, dict):
                logger.warning(f"Unusable {kind.value} context, using defaults: {e.error_count()} error(s)")
                return model()
            bad_keys = _input_keys(model, {err["loc"][0] for err in e.errors() if err["loc"]})
            logger.warning(f"Dropping invalid {kind.value} context fields: {', '.join(sorted(bad_keys))}")

        try:
            return model.model_validate({k: v for k, v in context.items() if k not in bad_keys})
        except ValidationError as e:
            logger.warning(f"Unusable {kind.value} context, using defaults: {e.error_count()} error(s)")
            return model()

    def _fallback(self, kind: ContentKind, context: Union[TripPlanContext, ParseContext]) -> BaseModel:
        if kind == ContentKind.TRIP_PLAN:
            return build_fallback_trip_plan(context, self.lookups)
        return build_fallback_parsed_trip(context, self.lookups)

    # AI call

    async def request_ai(
        self,
        kind: ContentKind,
        context: Union[TripPlanContext, ParseContext]
    ) -> ValidationResult:
        """
        Make the single completion call and validate the reply.

        Never raises; provider failures come back as Invalid.
        """
        if self.llm is None:
            return Invalid("no AI provider configured")

        prompt = self.build_prompt(kind, context)
        try:
            text = await asyncio.wait_for(self.llm.complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError:
            return Invalid(f"AI call timed out after {self.timeout}s")
        except ExternalServiceError as e:
            return Invalid(f"AI service error: {e}")
        except Exception as e:
            return Invalid(f"AI call failed: {type(e).__name__}: {e}")

        return validate_payload(kind, text)

    async def generate(self, kind: Union[ContentKind, str], context: Any = None) -> dict:
        """
        Generate content of a kind for a context.

        Args:
            kind: "trip_plan" or "parsed_trip"
            context: Dict or model with the kind's context fields

        Returns:
            JSON-ready dict conforming to the kind's schema
        """
        kind = ContentKind(kind)
        context = self._coerce_context(kind, context)

        result = await self.request_ai(kind, context)
        if isinstance(result, Valid):
            logger.info(f"Generated {kind.value} with AI")
            payload = result.payload
        else:
            logger.warning(f"Using fallback {kind.value}: {result.reason}")
            payload = self._fallback(kind, context)

        return payload.model_dump(mode="json")


# Global gateway instance
content_gateway: Optional[ContentGateway] = None


def get_content_gateway() -> ContentGateway:
    """Get or create the global content gateway."""
    global content_gateway
    if content_gateway is None:
        content_gateway = ContentGateway(llm=get_llm_client())
    return content_gateway


async def generate_content(kind: Union[ContentKind, str], context: Any = None) -> dict:
    """Generate schema-valid content; never raises for AI failures."""
    return await get_content_gateway().generate(kind, context)
