"""Seasonal adjustment of recurrence intervals.

Plants drink more in summer heat and rest in winter. The policy is a heuristic,
not a botanical model:

- May-August: watering intervals shrink to 70% (floored, never below 1).
- November-February: watering and fertilizing intervals grow to 130% (ceiled).
- Everything else keeps its base interval.
"""

import math
from datetime import datetime

from src.core.config import constants
from src.domain.task import TaskType, TimeUnit


SUMMER_MONTHS = frozenset({5, 6, 7, 8})
WINTER_MONTHS = frozenset({11, 12, 1, 2})


# Products are rounded before floor/ceil so float noise cannot add a day
def _shorten(base_interval: int) -> int:
    return max(1, math.floor(round(base_interval * constants.SUMMER_WATERING_FACTOR, 9)))


def _lengthen(base_interval: int) -> int:
    return max(1, math.ceil(round(base_interval * constants.WINTER_SLOWDOWN_FACTOR, 9)))


def adjust_interval(
    base_interval: int,
    unit: TimeUnit,  # noqa: ARG001 - the result is expressed in the same unit
    task_type: TaskType | str,
    now: datetime,
    seasonal_adjustment: bool,  # noqa: FBT001
) -> int:
    """Return the interval to schedule with, in the same unit as ``base_interval``.

    Args:
        base_interval: Interval stored in the recurrence pattern
        unit: Unit of ``base_interval``
        task_type: Kind of task being scheduled
        now: Reference date; its calendar month selects the season
        seasonal_adjustment: Whether the pattern opted into seasonal adjustment

    Returns:
        Adjusted interval (always >= 1 for a base interval >= 1)
    """
    if not seasonal_adjustment:
        return base_interval

    month = now.month
    in_summer = month in SUMMER_MONTHS
    in_winter = month in WINTER_MONTHS

    match task_type:
        case TaskType.WATERING:
            if in_summer:
                return _shorten(base_interval)
            if in_winter:
                return _lengthen(base_interval)
            return base_interval
        case TaskType.FERTILIZING:
            if in_winter:
                return _lengthen(base_interval)
            return base_interval
        case TaskType.REPOTTING | TaskType.CLEANING | TaskType.PHOTO:
            return base_interval
        case _:
            return base_interval
