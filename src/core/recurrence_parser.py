"""Recurrence parsing utilities for care task scheduling.

Care tips arrive as German free text ("Gießen Sie alle 7-10 Tage"). The helpers
here pull a cadence out of such sentences and turn (value, unit) pairs into
absolute durations.
"""

import re
from datetime import timedelta

from src.core.config import constants
from src.domain.task import ParsedInterval, TimeUnit


_UNIT = r"(Tage?|Wochen?|Monate?)"

# Checked in this order; the first match wins
_RANGE_PATTERN = re.compile(rf"alle\s+(\d+)(?:\s*[-–]+\s*|\s+)(\d+)\s+{_UNIT}", re.IGNORECASE)
_SINGLE_PATTERN = re.compile(rf"alle\s+(\d+)\s+{_UNIT}", re.IGNORECASE)
_NUMBER_PATTERN = re.compile(rf"(\d+)\s+{_UNIT}", re.IGNORECASE)

_UNIT_TOKENS: dict[str, TimeUnit] = {
    "tag": TimeUnit.DAYS,
    "tage": TimeUnit.DAYS,
    "woche": TimeUnit.WEEKS,
    "wochen": TimeUnit.WEEKS,
    "monat": TimeUnit.MONTHS,
    "monate": TimeUnit.MONTHS,
}


def normalize_time_unit(unit: str) -> TimeUnit:
    """Map a German unit token to a TimeUnit, defaulting to days for anything unknown."""
    return _UNIT_TOKENS.get(unit.strip().lower(), TimeUnit.DAYS)


def parse_interval(text: str) -> ParsedInterval | None:
    """Extract a cadence from a free-text care instruction.

    Supports, in priority order:
    - "alle X-Y <Einheit>" (e.g., "alle 7-10 Tage", "alle 7 10 Tage") -> min X, max Y
    - "alle X <Einheit>" (e.g., "alle 2 Wochen") -> min = max = X
    - "X <Einheit>" anywhere (e.g., "in 3 Monaten umtopfen") -> min = max = X

    Args:
        text: Care tip sentence

    Returns:
        ParsedInterval, or None when the text carries no recognizable cadence
    """
    match = _RANGE_PATTERN.search(text)
    if match:
        # Bounds are kept as written, so "alle 10-7 Tage" yields min 10
        return ParsedInterval(
            min=int(match.group(1)),
            max=int(match.group(2)),
            unit=normalize_time_unit(match.group(3)),
        )

    for pattern in (_SINGLE_PATTERN, _NUMBER_PATTERN):
        match = pattern.search(text)
        if match:
            value = int(match.group(1))
            return ParsedInterval(min=value, max=value, unit=normalize_time_unit(match.group(2)))

    return None


def _days_per_unit(unit: TimeUnit) -> int:
    match unit:
        case TimeUnit.DAYS:
            return 1
        case TimeUnit.WEEKS:
            return constants.DAYS_PER_WEEK
        case TimeUnit.MONTHS:
            # Fixed 30-day month, not calendar-accurate
            return constants.DAYS_PER_MONTH
        case _:
            return 1


def to_days(value: int, unit: TimeUnit) -> int:
    """Convert an interval to whole days (months count as 30 days)."""
    return value * _days_per_unit(unit)


def to_milliseconds(value: int, unit: TimeUnit) -> int:
    """Convert an interval to milliseconds (months count as 30 days)."""
    return to_days(value, unit) * constants.DAY_MS


def to_timedelta(value: int, unit: TimeUnit) -> timedelta:
    """Convert an interval to a timedelta (months count as 30 days)."""
    return timedelta(milliseconds=to_milliseconds(value, unit))


def format_interval(value: int, unit: TimeUnit) -> str:
    """Render an interval as short German text.

    Examples: "täglich", "alle 3 Tage", "wöchentlich", "alle 2 Wochen", "monatlich".
    """
    if value == 1:
        return {TimeUnit.DAYS: "täglich", TimeUnit.WEEKS: "wöchentlich", TimeUnit.MONTHS: "monatlich"}[unit]

    names = {TimeUnit.DAYS: "Tage", TimeUnit.WEEKS: "Wochen", TimeUnit.MONTHS: "Monate"}
    return f"alle {value} {names[unit]}"
