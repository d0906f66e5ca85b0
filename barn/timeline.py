"""
Maintenance timeline: groups due events into urgency buckets.

Buckets are evaluated against an explicit `today`, first match wins:
- OVERDUE:    due < today
- THIS_WEEK:  today <= due <= today + 7 days
- THIS_MONTH: today + 7 days < due <= today + 1 month
- UPCOMING:   everything later
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from .category import EventCategory
from .health_event import HealthEvent
from .horse import Horse
from .status import BucketStatus


@dataclass
class TimelineItem:
    """A due event paired with the identity of the horse that owns it."""

    event: HealthEvent
    horse_id: str
    horse_name: str


@dataclass
class MaintenanceBucket:
    status: BucketStatus
    items: List[TimelineItem] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.status.title

    @property
    def is_overdue(self) -> bool:
        return self.status == BucketStatus.OVERDUE


def classify_due_date(due: date, today: date) -> BucketStatus:
    """Bucket for a single due date relative to today."""
    if due < today:
        return BucketStatus.OVERDUE
    if due <= today + timedelta(days=7):
        return BucketStatus.THIS_WEEK
    if due <= today + relativedelta(months=1):
        return BucketStatus.THIS_MONTH
    return BucketStatus.UPCOMING


def flatten_due_events(
    horses: Iterable[Horse], category: Optional[EventCategory] = None
) -> List[TimelineItem]:
    """All events with a due date, soonest first (ties keep input order)."""
    items = [
        TimelineItem(event, horse.id, horse.name)
        for horse in horses
        for event in horse.events
        if event.next_due_on is not None
    ]
    if category is not None:
        items = [item for item in items if item.event.category == category]
    return sorted(items, key=lambda item: item.event.next_due_on)


def bucketize(
    horses: Iterable[Horse],
    today: date,
    category: Optional[EventCategory] = None,
) -> List[MaintenanceBucket]:
    """Group due events across horses into non-empty buckets, most urgent first."""
    buckets = {status: MaintenanceBucket(status) for status in BucketStatus}
    for item in flatten_due_events(horses, category):
        status = classify_due_date(item.event.next_due_on, today)
        buckets[status].items.append(item)
    return [
        buckets[status]
        for status in sorted(BucketStatus, key=lambda s: s.value)
        if buckets[status].items
    ]
