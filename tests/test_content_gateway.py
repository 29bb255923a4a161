"""Tests for the content gateway and its fallback."""
import asyncio
import json
import pytest
from datetime import date
from unittest.mock import AsyncMock

from trip_engine.models.content import ContentKind, TripPlan, TripPlanContext
from trip_engine.services.content_gateway import (
    ContentGateway,
    Invalid,
    Valid,
    strip_code_fence,
    validate_payload,
)
from trip_engine.services.fallback import INDIAN_ESSENTIALS, INFANT_ITEMS
from trip_engine.services.lookups import LookupTables


LOOKUPS = LookupTables({
    "gazetteer": ["dubai", "bali"],
    "climate": {
        "dubai": {"hot": [5, 6, 7, 8, 9], "warm": [3, 4, 10, 11], "mild": [12, 1, 2]},
        "default": {"warm": [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]},
    },
    "peak_seasons": {"dubai": [12, 1, 2, 3, 4]},
    "kid_friendliness": {"dubai": 5, "default": 4},
    "emergency_contacts": {"dubai": {"police": "999", "ambulance": "998"}},
})

DUBAI_JUNE = {
    "destination": "Dubai",
    "country": "UAE",
    "start_date": "2026-06-10",
    "duration_days": 5,
    "adults": 2,
    "kids": 1,
    "kid_ages": [4],
}

AI_PLAN = {
    "honest_take": {
        "weather_reality": "Very hot, 40°C by noon",
        "best_time_of_day": "Evenings",
        "kid_friendliness": 4,
        "highlights": ["Aquarium"],
        "warnings": ["Heat"],
    },
    "things_to_know": ["Metro is stroller friendly"],
    "packing_list": {"kids": ["Hat"], "adults": ["Sunglasses"], "indian_essentials": ["Thepla"]},
}


def _llm(reply=None, error=None):
    llm = AsyncMock()
    if error is not None:
        llm.complete.side_effect = error
    else:
        llm.complete.return_value = reply
    return llm


def _assert_complete_plan(payload):
    plan = TripPlan.model_validate(payload)
    assert plan.honest_take.weather_reality
    assert 1 <= plan.honest_take.kid_friendliness <= 5
    assert isinstance(plan.things_to_know, list)
    for key in ("kids", "adults", "indian_essentials"):
        assert isinstance(payload["packing_list"][key], list)


class TestValidatePayload:
    """Test strict validation of AI replies."""

    def test_valid_plan(self):
        result = validate_payload(ContentKind.TRIP_PLAN, json.dumps(AI_PLAN))

        assert isinstance(result, Valid)
        assert result.payload.honest_take.highlights == ["Aquarium"]

    def test_code_fenced_reply(self):
        """A reply wrapped in a markdown fence is unwrapped first."""
        text = "```json\n" + json.dumps(AI_PLAN) + "\n```"

        assert isinstance(validate_payload(ContentKind.TRIP_PLAN, text), Valid)

    def test_missing_nested_key(self):
        broken = json.loads(json.dumps(AI_PLAN))
        del broken["packing_list"]["indian_essentials"]

        result = validate_payload(ContentKind.TRIP_PLAN, json.dumps(broken))

        assert isinstance(result, Invalid)
        assert "packing_list.indian_essentials" in result.reason

    def test_not_json(self):
        result = validate_payload(ContentKind.TRIP_PLAN, "Here is your plan: enjoy Dubai!")

        assert isinstance(result, Invalid)

    def test_empty_reply(self):
        assert isinstance(validate_payload(ContentKind.TRIP_PLAN, ""), Invalid)
        assert isinstance(validate_payload(ContentKind.TRIP_PLAN, None), Invalid)

    def test_json_array_rejected(self):
        assert isinstance(validate_payload(ContentKind.TRIP_PLAN, "[1, 2]"), Invalid)

    def test_out_of_range_score(self):
        broken = json.loads(json.dumps(AI_PLAN))
        broken["honest_take"]["kid_friendliness"] = 9

        assert isinstance(validate_payload(ContentKind.TRIP_PLAN, json.dumps(broken)), Invalid)

    def test_error_reply(self):
        result = validate_payload(ContentKind.PARSED_TRIP, '{"error": "destination_required"}')

        assert isinstance(result, Invalid)
        assert "destination_required" in result.reason

    def test_parsed_trip_requires_every_key(self):
        reply = {
            "destination": "Goa",
            "duration_days": 4,
            "start_date": "2026-12-01",
            "adults": 2,
            "kids": 0,
            "kid_ages": [],
            "currency": "INR",
        }

        result = validate_payload(ContentKind.PARSED_TRIP, json.dumps(reply))

        assert isinstance(result, Invalid)
        assert "budget" in result.reason

    def test_parsed_trip_null_budget_allowed(self):
        reply = {
            "destination": "Goa",
            "duration_days": 4,
            "start_date": "2026-12-01",
            "adults": 2,
            "kids": 0,
            "kid_ages": [],
            "budget": None,
            "currency": "INR",
        }

        assert isinstance(validate_payload(ContentKind.PARSED_TRIP, json.dumps(reply)), Valid)

    def test_strip_code_fence(self):
        assert strip_code_fence("```\n{}\n```") == "{}"
        assert strip_code_fence("  {}  ") == "{}"


class TestContentGateway:
    """Test that generate always returns schema-valid content."""

    @pytest.mark.asyncio
    async def test_valid_ai_reply_is_returned(self):
        llm = _llm(reply=json.dumps(AI_PLAN))
        gateway = ContentGateway(llm=llm, lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", DUBAI_JUNE)

        assert payload["honest_take"]["weather_reality"] == "Very hot, 40°C by noon"
        assert payload["packing_list"]["indian_essentials"] == ["Thepla"]
        llm.complete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ai_exception_uses_fallback(self):
        """A failing provider still yields every required key."""
        gateway = ContentGateway(llm=_llm(error=RuntimeError("connection reset")), lookups=LOOKUPS)

        payload = await gateway.generate(ContentKind.TRIP_PLAN, DUBAI_JUNE)

        _assert_complete_plan(payload)

    @pytest.mark.asyncio
    async def test_incomplete_ai_reply_uses_fallback(self):
        broken = json.loads(json.dumps(AI_PLAN))
        del broken["packing_list"]["indian_essentials"]
        gateway = ContentGateway(llm=_llm(reply=json.dumps(broken)), lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", DUBAI_JUNE)

        assert payload["packing_list"]["indian_essentials"] == INDIAN_ESSENTIALS

    @pytest.mark.asyncio
    async def test_timeout_uses_fallback(self):
        async def slow_complete(prompt):
            await asyncio.sleep(1)
            return json.dumps(AI_PLAN)

        llm = AsyncMock()
        llm.complete.side_effect = slow_complete
        gateway = ContentGateway(llm=llm, lookups=LOOKUPS, timeout=0.01)

        payload = await gateway.generate("trip_plan", DUBAI_JUNE)

        _assert_complete_plan(payload)
        assert payload["honest_take"]["weather_reality"] != "Very hot, 40°C by noon"

    @pytest.mark.asyncio
    async def test_no_provider_uses_fallback(self):
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", DUBAI_JUNE)

        _assert_complete_plan(payload)

    @pytest.mark.asyncio
    async def test_unusable_context_still_generates(self):
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", {"kids": "many", "adults": 0})

        _assert_complete_plan(payload)

    @pytest.mark.asyncio
    async def test_stored_trip_as_context(self):
        """A Trip keeps its kid count, ages and length in the plan."""
        from trip_engine.models.trip import Trip

        trip = Trip(
            destination="Dubai",
            start_date=date(2026, 6, 10),
            end_date=date(2026, 6, 14),
            num_adults=2,
            num_kids=2,
            kid_ages=[1, 4],
        )
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", trip)

        assert payload["packing_list"]["kids"]
        assert "Diapers" in payload["packing_list"]["kids"]
        assert any("Infants" in w for w in payload["honest_take"]["warnings"])

    @pytest.mark.asyncio
    async def test_stored_trip_prompt(self):
        llm = _llm(reply=json.dumps(AI_PLAN))
        gateway = ContentGateway(llm=llm, lookups=LOOKUPS)

        await gateway.generate("trip_plan", {
            "destination": "Dubai",
            "start_date": "2026-06-10",
            "end_date": "2026-06-14",
            "num_kids": 2,
            "kid_ages": [1, 4],
        })

        prompt = llm.complete.await_args.args[0]
        assert "Kids: 2" in prompt
        assert "Kid Ages: [1, 4]" in prompt
        assert "Duration: 5 days" in prompt

    @pytest.mark.asyncio
    async def test_bad_field_keeps_rest_of_context(self):
        """Only the invalid field is dropped; the destination survives."""
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        payload = await gateway.generate("trip_plan", {
            "destination": "Dubai",
            "start_date": "2026-06-10",
            "kids": "many",
            "kid_ages": [4],
        })

        assert payload["honest_take"]["weather_reality"].startswith("Dubai in June")
        assert payload["packing_list"]["kids"]

    @pytest.mark.asyncio
    async def test_prompt_mentions_trip(self):
        llm = _llm(reply=json.dumps(AI_PLAN))
        gateway = ContentGateway(llm=llm, lookups=LOOKUPS)

        await gateway.generate("trip_plan", DUBAI_JUNE)

        prompt = llm.complete.await_args.args[0]
        assert "Dubai, UAE" in prompt
        assert "June" in prompt
        assert "[4]" in prompt

    @pytest.mark.asyncio
    async def test_parsed_trip_fallback_uses_rules(self):
        gateway = ContentGateway(llm=_llm(error=RuntimeError("down")), lookups=LOOKUPS)

        payload = await gateway.generate(
            "parsed_trip",
            {"text": "5 days in Bali with 2 kids", "today": "2026-10-19"},
        )

        assert payload["destination"] == "Bali"
        assert payload["duration_days"] == 5
        assert payload["kids"] == 2
        assert payload["kid_ages"] == [3, 3]
        assert payload["end_date"] == "2026-11-22"

    @pytest.mark.asyncio
    async def test_parsed_trip_fallback_without_destination(self):
        """Text with no place still produces a valid payload."""
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        payload = await gateway.generate("parsed_trip", "somewhere warm please")

        assert payload["destination"] == "Unknown"
        assert payload["duration_days"] == 7
        assert payload["adults"] == 2

    @pytest.mark.asyncio
    async def test_unknown_kind(self):
        gateway = ContentGateway(llm=None, lookups=LOOKUPS)

        with pytest.raises(ValueError):
            await gateway.generate("itinerary", {})


class TestTripPlanContext:
    """Test context normalization."""

    def test_stored_trip_field_names(self):
        context = TripPlanContext.model_validate({"num_adults": 3, "num_kids": 1, "kid_ages": [7]})

        assert context.adults == 3
        assert context.kids == 1

    def test_duration_from_dates(self):
        context = TripPlanContext.model_validate({"start_date": "2026-06-10", "end_date": "2026-06-16"})

        assert context.duration_days == 7

    def test_ages_without_count(self):
        context = TripPlanContext.model_validate({"kid_ages": [2, 9]})

        assert context.kids == 2

    def test_ages_reconciled_to_count(self):
        assert TripPlanContext(kids=2, kid_ages=[5]).kid_ages == [5, 3]
        assert TripPlanContext(kids=1, kid_ages=[5, 8]).kid_ages == [5]


class TestFallbackTripPlan:
    """Test the deterministic trip plan."""

    def _plan(self, **overrides):
        from trip_engine.services.fallback import build_fallback_trip_plan

        context = TripPlanContext.model_validate({**DUBAI_JUNE, **overrides})
        return build_fallback_trip_plan(context, LOOKUPS)

    def test_deterministic(self):
        assert self._plan() == self._plan()

    def test_hot_band_in_summer(self):
        plan = self._plan()

        assert "32-42°C" in plan.honest_take.weather_reality
        assert "June" in plan.honest_take.weather_reality
        assert plan.honest_take.kid_friendliness == 5

    def test_mild_band_in_winter(self):
        plan = self._plan(start_date="2026-12-20")

        assert "15-25°C" in plan.honest_take.weather_reality
        assert any("peak season" in line for line in plan.things_to_know)

    def test_no_kids_means_empty_kids_list(self):
        plan = self._plan(kids=0, kid_ages=[])

        assert plan.packing_list.kids == []
        assert plan.packing_list.adults

    def test_infant_items_for_toddlers(self):
        plan = self._plan(kid_ages=[1])

        for item in INFANT_ITEMS:
            assert item in plan.packing_list.kids

    def test_no_infant_items_for_older_kids(self):
        plan = self._plan(kid_ages=[8])

        assert "Diapers" not in plan.packing_list.kids

    def test_emergency_numbers_in_things_to_know(self):
        plan = self._plan()

        assert any("police 999" in line for line in plan.things_to_know)

    def test_health_notes_become_warning(self):
        plan = self._plan(health_notes="asthma")

        assert any("asthma" in w for w in plan.honest_take.warnings)

    def test_unknown_destination_without_date(self):
        from trip_engine.services.fallback import build_fallback_trip_plan

        plan = build_fallback_trip_plan(TripPlanContext(destination="Atlantis"), LookupTables())

        assert "26-32°C" in plan.honest_take.weather_reality
        assert plan.honest_take.kid_friendliness == 4
        assert plan.honest_take.highlights
