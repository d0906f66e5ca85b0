"""Helper functions for due-date projection and cycle intervals."""

import logging
from datetime import date
from typing import TYPE_CHECKING, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .category import EventCategory, default_offset

if TYPE_CHECKING:
    from .health_event import HealthEvent

logger = logging.getLogger(__name__)


def suggest_next_due(category: EventCategory, occurred_on: date) -> date:
    """
    Project the next due date: occurred_on + the category's default offset.

    Month and year offsets clamp to the last day of the target month
    (2024-02-29 + 1 year = 2025-02-28, 2025-08-31 + 6 months = 2026-02-28).
    Results beyond the calendar range clamp to date.max.
    """
    unit, amount = default_offset(category)
    try:
        return occurred_on + relativedelta(**{unit: amount})
    except (OverflowError, ValueError):
        logger.debug(
            "Next %s date from %s is out of range, clamping to %s",
            category.value,
            occurred_on,
            date.max,
        )
        return date.max


def days_between(start: date, end: date) -> int:
    """Signed whole days from start to end."""
    return (end - start).days


def cycle_intervals(events: Iterable["HealthEvent"]) -> List[int]:
    """
    Day deltas between consecutive occurrences, oldest first.

    Fewer than two events yields an empty list.
    """
    ordered = sorted(events, key=lambda e: e.occurred_on)
    return [
        days_between(prev.occurred_on, curr.occurred_on)
        for prev, curr in zip(ordered, ordered[1:])
    ]


def average_interval(intervals: List[int]) -> Optional[int]:
    """Truncated integer mean of intervals, or None when there are none."""
    if not intervals:
        return None
    return sum(intervals) // len(intervals)
