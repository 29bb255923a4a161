"""
Progress Aggregator - Completion percentages over checklist and packing items.
"""
import math
from typing import Any, Callable, Iterable, Mapping, Optional
from pydantic import BaseModel, Field

from ..config import settings


DEFAULT_CATEGORY = "uncategorized"

# Minimum overall packing percentage before the packing step can be completed
PACKING_COMPLETE_THRESHOLD = 50

# Attribute / key names that carry an item's completion flag
_DONE_FIELDS = ("is_completed", "is_packed", "done", "packed", "checked")


class CategoryProgress(BaseModel):
    done: int = 0
    total: int = 0


class ProgressSummary(BaseModel):
    """Progress over one collection of items."""
    percent: int = Field(default=0, ge=0, le=100)
    done: int = 0
    total: int = 0
    by_category: dict[str, CategoryProgress] = Field(default_factory=dict)


class CompositeProgress(BaseModel):
    """Progress over several independently tracked groups."""
    percent: int = Field(default=0, ge=0, le=100)
    strategy: str
    groups: dict[str, ProgressSummary] = Field(default_factory=dict)


def round_half_up(value: float) -> int:
    """Round .5 upwards, as progress bars display it."""
    return int(math.floor(value + 0.5))


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _is_done(item: Any) -> bool:
    for name in _DONE_FIELDS:
        value = _field(item, name)
        if value is not None:
            return bool(value)
    return False


def _category(item: Any) -> str:
    return _field(item, "category") or DEFAULT_CATEGORY


def _percent(done: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(done / total * 100)


def aggregate_progress(items: Iterable[Any]) -> ProgressSummary:
    """
    Summarize completion over a collection of items.

    Items may be ChecklistItem / PackingItem models or plain dicts; the
    completion flag is read from the first of is_completed, is_packed, done,
    packed or checked that is present.

    Returns:
        ProgressSummary, percent 0 for an empty collection
    """
    by_category: dict[str, CategoryProgress] = {}
    done = 0
    total = 0

    for item in items:
        category = by_category.setdefault(_category(item), CategoryProgress())
        category.total += 1
        total += 1
        if _is_done(item):
            category.done += 1
            done += 1

    return ProgressSummary(
        percent=_percent(done, total),
        done=done,
        total=total,
        by_category=by_category,
    )


# Weighting strategies for composite progress

WeightingStrategy = Callable[[list[ProgressSummary]], int]


def equal_weighting(groups: list[ProgressSummary]) -> int:
    """Mean of each group's own percentage; every group counts the same."""
    if not groups:
        return 0
    return round_half_up(sum(group.percent for group in groups) / len(groups))


def item_count_weighting(groups: list[ProgressSummary]) -> int:
    """Pool all items together; bigger groups count for more."""
    return _percent(sum(g.done for g in groups), sum(g.total for g in groups))


WEIGHTING_STRATEGIES: dict[str, WeightingStrategy] = {
    "equal": equal_weighting,
    "item_count": item_count_weighting,
}


def get_weighting_strategy(name: Optional[str] = None) -> WeightingStrategy:
    """Look up a strategy by name, defaulting to the configured one."""
    name = name or settings.progress_weighting
    if name not in WEIGHTING_STRATEGIES:
        raise ValueError(f"Unknown progress weighting strategy: {name!r}")
    return WEIGHTING_STRATEGIES[name]


def composite_progress(
    groups: Mapping[str, Iterable[Any]],
    strategy: Optional[str] = None
) -> CompositeProgress:
    """
    Combine progress across separately tracked groups (e.g. kids and adults).

    Args:
        groups: Group name -> items
        strategy: Name from WEIGHTING_STRATEGIES, None for the configured one
    """
    name = strategy or settings.progress_weighting
    weigh = get_weighting_strategy(name)
    summaries = {group: aggregate_progress(items) for group, items in groups.items()}
    return CompositeProgress(
        percent=weigh(list(summaries.values())),
        strategy=name,
        groups=summaries,
    )


def packing_progress(
    kids_items: Iterable[Any],
    adult_items: Iterable[Any],
    num_kids: int,
    strategy: Optional[str] = None
) -> CompositeProgress:
    """Overall packing progress; the kids list only counts when the trip has kids."""
    groups: dict[str, Iterable[Any]] = {}
    if num_kids > 0:
        groups["kids"] = list(kids_items)
    groups["adults"] = list(adult_items)
    return composite_progress(groups, strategy)


def can_complete_packing(percent: int) -> bool:
    """Whether enough is packed to mark the packing step done."""
    return percent >= PACKING_COMPLETE_THRESHOLD
