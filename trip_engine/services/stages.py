"""
Stage Resolver - Derives a trip's lifecycle stage from its dates.
"""
from typing import Optional, Union
from datetime import date, datetime

from ..models.trip import Trip, TripStage, StageInfo


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_stage(
    now: Union[date, datetime],
    start: Union[date, datetime],
    end: Union[date, datetime]
) -> StageInfo:
    """
    Resolve the stage of a trip at a given moment.

    Works at calendar-day granularity with both trip dates inclusive, so
    every counter is a whole number of days. Nothing is cached; call it
    again whenever the current date may have changed.

    Args:
        now: Current date or datetime
        start: First day of the trip
        end: Last day of the trip

    Returns:
        StageInfo with the stage, total_days and the stage's counter
    """
    today = _as_date(now)
    start_day = _as_date(start)
    end_day = _as_date(end)

    total_days = max(1, (end_day - start_day).days + 1)

    if today < start_day:
        return StageInfo(
            stage=TripStage.PRE_TRIP,
            total_days=total_days,
            days_until=(start_day - today).days
        )

    if today <= end_day:
        return StageInfo(
            stage=TripStage.DURING_TRIP,
            total_days=total_days,
            current_day=(today - start_day).days + 1
        )

    return StageInfo(
        stage=TripStage.POST_TRIP,
        total_days=total_days,
        days_ago=(today - end_day).days
    )


def resolve_trip_stage(trip: Trip, now: Optional[Union[date, datetime]] = None) -> StageInfo:
    """Resolve the stage of a Trip, defaulting to today."""
    return resolve_stage(now or date.today(), trip.start_date, trip.end_date)
