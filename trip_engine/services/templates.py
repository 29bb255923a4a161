"""
Template Matcher - Picks the checklist templates that fit a family.
"""
import json
import os
import logging
from typing import Iterable, Optional

from .lookups import RESOURCES_DIR
from ..models.checklist import ChecklistTemplate, ChecklistItem, PackingItem
from ..models.content import TripPlan
from ..models.trip import TripComposition

logger = logging.getLogger(__name__)

# Bounds used when a template leaves one side of its age range open
OPEN_AGE_MIN = 0
OPEN_AGE_MAX = 18


def template_applies(template: ChecklistTemplate, composition: TripComposition) -> bool:
    """
    Whether a template is relevant to the trip's kids.

    Age-unbounded templates apply to every trip. Bounded templates apply only
    when the trip has kids and the kids' age range overlaps the template's.
    """
    if template.is_age_unbounded:
        return True
    if composition.num_kids == 0 or not composition.kid_ages:
        return False

    template_min = template.kid_age_min if template.kid_age_min is not None else OPEN_AGE_MIN
    template_max = template.kid_age_max if template.kid_age_max is not None else OPEN_AGE_MAX

    return min(composition.kid_ages) <= template_max and max(composition.kid_ages) >= template_min


def match_templates(
    templates: Iterable[ChecklistTemplate],
    composition: TripComposition
) -> list[ChecklistItem]:
    """
    Turn applicable templates into checklist items for a trip.

    Args:
        templates: Reference templates
        composition: The trip's travelers

    Returns:
        Items ordered by sort_order (ties keep input order), tagged is_template
    """
    applicable = [t for t in templates if template_applies(t, composition)]
    applicable.sort(key=lambda t: t.sort_order)

    return [
        ChecklistItem(
            title=template.title,
            phase=template.phase,
            category=template.category,
            is_completed=False,
            is_template=True,
            sort_order=template.sort_order,
        )
        for template in applicable
    ]


def load_default_templates(path: Optional[str] = None) -> list[ChecklistTemplate]:
    """Load the packaged seed templates."""
    path = path or os.path.join(RESOURCES_DIR, "checklist_templates.json")
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    templates = [ChecklistTemplate.model_validate(entry) for entry in raw]
    logger.debug(f"Loaded {len(templates)} checklist templates from {path}")
    return templates


def packing_items_from_plan(plan: TripPlan) -> list[PackingItem]:
    """Flatten a trip plan's packing list into template packing items."""
    groups = [
        ("kids", plan.packing_list.kids),
        ("adults", plan.packing_list.adults),
        ("indian", plan.packing_list.indian_essentials),
    ]
    items = []
    for category, titles in groups:
        for title in titles:
            items.append(PackingItem(
                title=title,
                category=category,
                is_packed=False,
                is_template=True,
                sort_order=len(items),
            ))
    return items
