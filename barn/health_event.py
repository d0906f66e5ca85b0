"""HealthEvent class for maintenance records."""

import uuid
from datetime import date
from typing import Optional

from .calculations import days_between, suggest_next_due
from .category import EventCategory


class HealthEvent:
    """One occurrence of a maintenance category, with an optional next due date."""

    def __init__(
            self,
            category: EventCategory,
            occurred_on: date,
            next_due_on: Optional[date] = None,
            cost: Optional[float] = None,
            notes: str = "",
            provider_name: Optional[str] = None,
            horse_id: Optional[str] = None,
            id: Optional[str] = None,
    ):
        self.id = id or uuid.uuid4().hex
        self.category = category
        self.occurred_on = occurred_on
        self.next_due_on = next_due_on
        self.cost = cost
        self.notes = notes or ""
        self.provider_name = provider_name
        self.horse_id = horse_id

    @classmethod
    def record(
            cls,
            category: EventCategory,
            occurred_on: date,
            next_due_on: Optional[date] = None,
            **kwargs,
    ) -> "HealthEvent":
        """
        Build a new event for a visit that just happened.

        The next due date defaults to the category's standard cycle unless
        the caller overrides it. Nothing is persisted here.
        """
        if next_due_on is None:
            next_due_on = suggest_next_due(category, occurred_on)
        return cls(category, occurred_on, next_due_on, **kwargs)

    def is_overdue(self, today: date) -> bool:
        if self.next_due_on is None:
            return False
        return self.next_due_on < today

    def days_until_due(self, today: date) -> Optional[int]:
        if self.next_due_on is None:
            return None
        return days_between(today, self.next_due_on)

    def due_status(self, today: date) -> str:
        """Short human description such as 'Due in 3 days' or 'Overdue by 1 day'."""
        days = self.days_until_due(today)
        if days is None:
            return "No date set"
        if days < 0:
            overdue = abs(days)
            return f"Overdue by {overdue} day{'' if overdue == 1 else 's'}"
        if days == 0:
            return "Due today"
        return f"Due in {days} day{'' if days == 1 else 's'}"

    def __repr__(self) -> str:
        return (
            f"HealthEvent({self.category.value}, {self.occurred_on.isoformat()}, "
            f"next_due_on={self.next_due_on})"
        )
