"""Horse class - the tracked animal and its health history."""

import uuid
from datetime import date, timedelta
from typing import List, Optional

from .category import EventCategory
from .feed import FeedSchedule
from .health_event import HealthEvent


class Horse:
    """A horse with its clip state, feed schedule and recorded health events."""

    def __init__(
        self,
        name: str,
        owner_name: str = "",
        is_clipped: bool = False,
        events: Optional[List[HealthEvent]] = None,
        date_added: Optional[date] = None,
        feed_schedule: Optional[FeedSchedule] = None,
        id: Optional[str] = None,
    ):
        self.id = id or uuid.uuid4().hex
        self.name = name
        self.owner_name = owner_name or ""
        self.is_clipped = bool(is_clipped)
        self.date_added = date_added
        self.feed_schedule = feed_schedule
        self.events = []
        for event in events or []:
            self.add_event(event)

    def add_event(self, event: HealthEvent) -> None:
        """Attach an event, stamping it with this horse's id."""
        event.horse_id = self.id
        self.events.append(event)

    def upcoming_events(self) -> List[HealthEvent]:
        """Events with a due date, soonest first."""
        return sorted(
            [e for e in self.events if e.next_due_on is not None],
            key=lambda e: e.next_due_on,
        )

    def overdue_events(self, today: date) -> List[HealthEvent]:
        return [e for e in self.events if e.is_overdue(today)]

    def recent_events(self, today: date, days: int = 30) -> List[HealthEvent]:
        """Events within the last `days` days, newest first."""
        cutoff = today - timedelta(days=days)
        return sorted(
            [e for e in self.events if e.occurred_on >= cutoff],
            key=lambda e: e.occurred_on,
            reverse=True,
        )

    def events_for(self, category: EventCategory) -> List[HealthEvent]:
        """Events of one category, oldest first."""
        return sorted(
            [e for e in self.events if e.category == category],
            key=lambda e: e.occurred_on,
        )

    @property
    def last_event(self) -> Optional[HealthEvent]:
        if not self.events:
            return None
        return max(self.events, key=lambda e: e.occurred_on)
