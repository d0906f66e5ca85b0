"""Barn class - the aggregate of horses loaded from a barn file."""

from datetime import date
from typing import List, Optional

from .analytics import HorseAnalysis, analyze
from .category import EventCategory
from .feed import FeedTemplate
from .horse import Horse
from .timeline import MaintenanceBucket, bucketize


class Barn:
    """All horses and feed templates in a barn file plus the optional as-of date."""

    def __init__(
        self,
        horses: Optional[List[Horse]] = None,
        state_as_of_date: Optional[str] = None,
        feed_templates: Optional[List[FeedTemplate]] = None,
    ):
        self.horses = horses or []
        self.feed_templates = feed_templates or []
        self._state_as_of_date = state_as_of_date

    @property
    def as_of_date(self) -> date:
        """Date of current state, defaults to today."""
        if self._state_as_of_date:
            return date.fromisoformat(self._state_as_of_date)
        return date.today()

    def get_horse(self, name: str) -> Optional[Horse]:
        """Find a horse by name (case-insensitive)."""
        wanted = name.strip().lower()
        for horse in self.horses:
            if horse.name.lower() == wanted:
                return horse
        return None

    def timeline(
        self, today: date, category: Optional[EventCategory] = None
    ) -> List[MaintenanceBucket]:
        return bucketize(self.horses, today, category)

    def analyze(self, name: str, today: date) -> Optional[HorseAnalysis]:
        horse = self.get_horse(name)
        if horse is None:
            return None
        return analyze(horse, today)

    def get_template(self, name: str) -> Optional[FeedTemplate]:
        """Find a feed template by name (case-insensitive)."""
        wanted = name.strip().lower()
        for template in self.feed_templates:
            if template.name.lower() == wanted:
                return template
        return None
