"""Tests for checklist template matching."""
import pytest

from trip_engine.models.checklist import ChecklistTemplate, Phase
from trip_engine.models.trip import TripComposition


def _template(title, age_min=None, age_max=None, sort_order=0):
    return ChecklistTemplate(
        title=title,
        phase=Phase.PRE_TRIP,
        kid_age_min=age_min,
        kid_age_max=age_max,
        sort_order=sort_order,
    )


def _family(*ages):
    return TripComposition(num_adults=2, num_kids=len(ages), kid_ages=list(ages))


class TestTemplateMatching:
    """Test age-bound filtering and ordering."""

    def test_unbounded_template_always_applies(self):
        """Templates without age bounds apply with or without kids."""
        from trip_engine.services.templates import match_templates

        templates = [_template("Apply for visas")]

        assert len(match_templates(templates, _family())) == 1
        assert len(match_templates(templates, _family(7))) == 1

    def test_bounded_template_matches_overlapping_ages(self):
        """A 0-3 template applies to a 2-year-old but not a 5-year-old."""
        from trip_engine.services.templates import match_templates

        stroller = [_template("Stroller", 0, 3)]

        assert [i.title for i in match_templates(stroller, _family(2))] == ["Stroller"]
        assert match_templates(stroller, _family(5)) == []

    def test_bounded_template_skipped_without_kids(self):
        """Age-bounded templates need kids on the trip."""
        from trip_engine.services.templates import match_templates

        assert match_templates([_template("Stroller", 0, 3)], _family()) == []

    def test_range_overlap_across_siblings(self):
        """Kids aged 2 and 10 overlap a 4-6 template."""
        from trip_engine.services.templates import match_templates

        items = match_templates([_template("Activity book", 4, 6)], _family(2, 10))

        assert len(items) == 1

    def test_open_upper_bound(self):
        """A template with only a minimum age applies to older kids."""
        from trip_engine.services.templates import match_templates

        teen = [_template("Phone rules", age_min=12)]

        assert len(match_templates(teen, _family(14))) == 1
        assert match_templates(teen, _family(10)) == []

    def test_open_lower_bound(self):
        """A template with only a maximum age applies to younger kids."""
        from trip_engine.services.templates import match_templates

        assert len(match_templates([_template("Nap break", age_max=5)], _family(3))) == 1

    def test_items_sorted_by_sort_order_with_stable_ties(self):
        """Items come back by sort_order; equal orders keep input order."""
        from trip_engine.services.templates import match_templates

        templates = [
            _template("third", sort_order=30),
            _template("first-a", sort_order=10),
            _template("first-b", sort_order=10),
        ]

        titles = [i.title for i in match_templates(templates, _family())]

        assert titles == ["first-a", "first-b", "third"]

    def test_items_are_fresh_template_items(self):
        """Matched items start incomplete and are tagged as template items."""
        from trip_engine.services.templates import match_templates

        item = match_templates([_template("Buy forex card")], _family())[0]

        assert item.is_template is True
        assert item.is_completed is False
        assert item.phase == Phase.PRE_TRIP

    def test_matching_is_idempotent(self):
        """Same inputs give the same items."""
        from trip_engine.services.templates import load_default_templates, match_templates

        templates = load_default_templates()
        family = _family(1, 6)

        assert match_templates(templates, family) == match_templates(templates, family)


class TestDefaultTemplates:
    """Test the packaged seed templates."""

    def test_load_default_templates(self):
        from trip_engine.services.templates import load_default_templates

        templates = load_default_templates()

        assert len(templates) > 0
        assert all(isinstance(t, ChecklistTemplate) for t in templates)

    def test_no_kids_gets_only_unbounded_templates(self):
        from trip_engine.services.templates import load_default_templates, match_templates

        templates = load_default_templates()
        items = match_templates(templates, _family())

        unbounded = [t for t in templates if t.is_age_unbounded]
        assert len(items) == len(unbounded)

    def test_infant_gets_bassinet(self):
        from trip_engine.services.templates import load_default_templates, match_templates

        titles = [i.title for i in match_templates(load_default_templates(), _family(1))]

        assert "Book bassinet seat" in titles
        assert "Agree on screen-time and phone rules" not in titles


class TestTemplateValidation:
    """Test template bounds."""

    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            _template("Broken", 5, 2)

    def test_negative_age_rejected(self):
        with pytest.raises(ValueError):
            _template("Broken", -1, 2)


class TestPackingItemsFromPlan:
    """Test seeding packing items from a trip plan."""

    def test_categories_follow_packing_list(self):
        from trip_engine.models.content import HonestTake, PackingList, TripPlan
        from trip_engine.services.templates import packing_items_from_plan

        plan = TripPlan(
            honest_take=HonestTake(weather_reality="Hot", kid_friendliness=4),
            things_to_know=[],
            packing_list=PackingList(kids=["Sun hat"], adults=["Passport"], indian_essentials=["Maggi"]),
        )

        items = packing_items_from_plan(plan)

        assert [(i.title, i.category) for i in items] == [
            ("Sun hat", "kids"),
            ("Passport", "adults"),
            ("Maggi", "indian"),
        ]
        assert all(i.is_template and not i.is_packed for i in items)
        assert [i.sort_order for i in items] == [0, 1, 2]
