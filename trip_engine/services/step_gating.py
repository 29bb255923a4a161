"""
Step Gating - Decides which pre-trip preparation steps are actionable.
"""
from typing import Iterable, Optional
from enum import Enum

from ..models.stage_data import STEP_ORDER, check_step_id


class StepStatus(str, Enum):
    """Availability of a preparation step."""
    LOCKED = "locked"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Steps unlocked by the calendar instead of by their predecessor.
# The value is how many days before departure the step opens.
TIME_GATED_STEPS = {
    "last-minute": 7,
}


def _is_locked(
    step_id: str,
    index: int,
    step_order: list[str],
    completed: set[str],
    days_until_trip: int
) -> bool:
    window = TIME_GATED_STEPS.get(step_id)
    if window is not None:
        # Inside the window the step is reachable whatever else is done
        return days_until_trip > window
    if index == 0:
        return False
    return step_order[index - 1] not in completed


def gate_step_statuses(
    step_order: Optional[Iterable[str]],
    completed_steps: Iterable[str],
    days_until_trip: int
) -> dict[str, StepStatus]:
    """
    Compute the status of every step in the sequence.

    Rules, in priority order:
    - a completed step is COMPLETED;
    - "last-minute" is LOCKED while more than 7 days remain, and otherwise
      open regardless of the other steps;
    - any other step is LOCKED until its immediate predecessor is completed;
    - the first open, incomplete step is IN_PROGRESS, later ones PENDING.

    Args:
        step_order: Step ids in sequence, None for the standard order
        completed_steps: Ids of steps already completed
        days_until_trip: Whole days left before departure

    Returns:
        Mapping of step id to StepStatus, in sequence order

    Raises:
        UnknownStepError: If any id is outside the step vocabulary
    """
    order = [check_step_id(step_id) for step_id in (step_order or STEP_ORDER)]
    completed = {check_step_id(step_id) for step_id in completed_steps}

    statuses: dict[str, StepStatus] = {}
    in_progress_assigned = False

    for index, step_id in enumerate(order):
        if step_id in completed:
            statuses[step_id] = StepStatus.COMPLETED
        elif _is_locked(step_id, index, order, completed, days_until_trip):
            statuses[step_id] = StepStatus.LOCKED
        elif not in_progress_assigned:
            statuses[step_id] = StepStatus.IN_PROGRESS
            in_progress_assigned = True
        else:
            statuses[step_id] = StepStatus.PENDING

    return statuses


def get_step_status(
    step_id: str,
    completed_steps: Iterable[str],
    days_until_trip: int,
    step_order: Optional[Iterable[str]] = None
) -> StepStatus:
    """Status of a single step. Raises UnknownStepError for unknown ids."""
    check_step_id(step_id)
    statuses = gate_step_statuses(step_order, completed_steps, days_until_trip)
    if step_id not in statuses:
        # Known id but not part of the supplied sequence
        return StepStatus.LOCKED
    return statuses[step_id]


def next_actionable_step(
    completed_steps: Iterable[str],
    days_until_trip: int,
    step_order: Optional[Iterable[str]] = None
) -> Optional[str]:
    """Id of the step currently in progress, or None when nothing is open."""
    statuses = gate_step_statuses(step_order, completed_steps, days_until_trip)
    for step_id, status in statuses.items():
        if status == StepStatus.IN_PROGRESS:
            return step_id
    return None
