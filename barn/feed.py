"""Feed board: AM/PM feed schedules, reusable templates and daily fed status."""

import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

# Before this hour the board shows the AM slot; at or after it, PM.
PM_CUTOFF_HOUR = 14


class FeedSlot(Enum):
    AM = "AM"
    PM = "PM"

    @classmethod
    def current(cls, now: datetime) -> "FeedSlot":
        """Slot active at `now`."""
        return cls.AM if now.hour < PM_CUTOFF_HOUR else cls.PM


class FedFilter(Enum):
    ALL = "All"
    NEEDS_FEEDING = "Needs Feeding"
    FED = "Fed"


def parse_csv(text: Optional[str]) -> List[str]:
    """Split comma-separated text into trimmed, non-empty items."""
    return [part.strip() for part in (text or "").split(",") if part.strip()]


def _summary(grain: str, hay: str, empty: str) -> str:
    parts = [p for p in (grain, hay) if p]
    return " + ".join(parts) if parts else empty


class FeedSchedule:
    """A horse's AM and PM rations plus today's fed status for each slot."""

    def __init__(
            self,
            am_grain: str = "",
            am_hay: str = "",
            am_supplements: Optional[List[str]] = None,
            am_medications: Optional[List[str]] = None,
            pm_grain: str = "",
            pm_hay: str = "",
            pm_supplements: Optional[List[str]] = None,
            pm_medications: Optional[List[str]] = None,
            special_instructions: str = "",
            am_fed_today: bool = False,
            am_fed_at: Optional[datetime] = None,
            pm_fed_today: bool = False,
            pm_fed_at: Optional[datetime] = None,
    ):
        self.am_grain = am_grain or ""
        self.am_hay = am_hay or ""
        self.am_supplements = list(am_supplements or [])
        self.am_medications = list(am_medications or [])
        self.pm_grain = pm_grain or ""
        self.pm_hay = pm_hay or ""
        self.pm_supplements = list(pm_supplements or [])
        self.pm_medications = list(pm_medications or [])
        self.special_instructions = special_instructions or ""
        self.am_fed_today = bool(am_fed_today)
        self.am_fed_at = am_fed_at
        self.pm_fed_today = bool(pm_fed_today)
        self.pm_fed_at = pm_fed_at

    @property
    def am_summary(self) -> str:
        return _summary(self.am_grain, self.am_hay, "No AM feed set")

    @property
    def pm_summary(self) -> str:
        return _summary(self.pm_grain, self.pm_hay, "No PM feed set")

    def summary(self, slot: FeedSlot) -> str:
        return self.am_summary if slot == FeedSlot.AM else self.pm_summary

    @property
    def all_supplements(self) -> List[str]:
        """Supplements from both slots, deduplicated and sorted."""
        return sorted(set(self.am_supplements + self.pm_supplements))

    @property
    def all_medications(self) -> List[str]:
        return sorted(set(self.am_medications + self.pm_medications))

    def is_fed(self, slot: FeedSlot) -> bool:
        return self.am_fed_today if slot == FeedSlot.AM else self.pm_fed_today

    def fed_at(self, slot: FeedSlot) -> Optional[datetime]:
        return self.am_fed_at if slot == FeedSlot.AM else self.pm_fed_at

    def toggle_fed(self, slot: FeedSlot, now: datetime) -> bool:
        """Flip the slot's fed flag. Returns the new state."""
        fed = not self.is_fed(slot)
        fed_at = now if fed else None
        if slot == FeedSlot.AM:
            self.am_fed_today, self.am_fed_at = fed, fed_at
        else:
            self.pm_fed_today, self.pm_fed_at = fed, fed_at
        return fed

    def reset_daily_status(self) -> None:
        """Clear both slots' fed status for a new day."""
        self.am_fed_today = False
        self.am_fed_at = None
        self.pm_fed_today = False
        self.pm_fed_at = None

    def __repr__(self):
        return f"FeedSchedule(am={self.am_summary!r}, pm={self.pm_summary!r})"


class FeedTemplate:
    """A named ration that can be copied onto any horse."""

    def __init__(
            self,
            name: str,
            description: str = "",
            am_grain: str = "",
            am_hay: str = "",
            am_supplements: Optional[List[str]] = None,
            am_medications: Optional[List[str]] = None,
            pm_grain: str = "",
            pm_hay: str = "",
            pm_supplements: Optional[List[str]] = None,
            pm_medications: Optional[List[str]] = None,
            special_instructions: str = "",
            created_on: Optional[date] = None,
            usage_count: int = 0,
    ):
        self.name = name
        self.description = description or ""
        self.am_grain = am_grain or ""
        self.am_hay = am_hay or ""
        self.am_supplements = list(am_supplements or [])
        self.am_medications = list(am_medications or [])
        self.pm_grain = pm_grain or ""
        self.pm_hay = pm_hay or ""
        self.pm_supplements = list(pm_supplements or [])
        self.pm_medications = list(pm_medications or [])
        self.special_instructions = special_instructions or ""
        self.created_on = created_on
        self.usage_count = usage_count or 0

    @classmethod
    def from_schedule(
            cls,
            name: str,
            schedule: FeedSchedule,
            description: str = "",
            created_on: Optional[date] = None,
    ) -> "FeedTemplate":
        """Capture a horse's current rations (not its fed status)."""
        return cls(
            name,
            description,
            schedule.am_grain,
            schedule.am_hay,
            schedule.am_supplements,
            schedule.am_medications,
            schedule.pm_grain,
            schedule.pm_hay,
            schedule.pm_supplements,
            schedule.pm_medications,
            schedule.special_instructions,
            created_on=created_on,
        )

    @property
    def summary(self) -> str:
        parts = []
        if self.am_grain:
            parts.append(f"AM: {self.am_grain}")
        if self.pm_grain:
            parts.append(f"PM: {self.pm_grain}")
        return ", ".join(parts) if parts else "No feed details"

    def to_schedule(self) -> FeedSchedule:
        """A fresh, unfed schedule with this template's rations."""
        return FeedSchedule(
            self.am_grain,
            self.am_hay,
            self.am_supplements,
            self.am_medications,
            self.pm_grain,
            self.pm_hay,
            self.pm_supplements,
            self.pm_medications,
            self.special_instructions,
        )

    def apply_to(self, horse) -> FeedSchedule:
        """Replace the horse's schedule with this template and count the use."""
        horse.feed_schedule = self.to_schedule()
        self.usage_count += 1
        return horse.feed_schedule

    def __repr__(self):
        return f"FeedTemplate({self.name!r}, used={self.usage_count})"


# =============================================================================
# Board queries
# =============================================================================


def is_fed(horse, slot: FeedSlot) -> bool:
    """A horse without a schedule always counts as not fed."""
    schedule = horse.feed_schedule
    return schedule is not None and schedule.is_fed(slot)


def filter_horses(
        horses,
        slot: FeedSlot,
        fed_filter: FedFilter = FedFilter.ALL,
        search: str = "",
) -> list:
    """Horses for the board, sorted by name."""
    result = list(horses)

    wanted = search.strip().lower()
    if wanted:
        result = [
            h for h in result
            if wanted in h.name.lower() or wanted in (h.owner_name or "").lower()
        ]

    if fed_filter == FedFilter.NEEDS_FEEDING:
        result = [h for h in result if not is_fed(h, slot)]
    elif fed_filter == FedFilter.FED:
        result = [h for h in result if is_fed(h, slot)]

    return sorted(result, key=lambda h: h.name.lower())


def fed_count(horses, slot: FeedSlot) -> int:
    return sum(1 for h in horses if is_fed(h, slot))


def all_fed(horses, slot: FeedSlot) -> bool:
    """True once every horse on a non-empty board is fed for the slot."""
    horses = list(horses)
    return bool(horses) and all(is_fed(h, slot) for h in horses)


def reset_if_new_day(horses, today: date) -> list:
    """
    Clear fed status that was recorded on an earlier day.

    Returns the horses whose schedules were reset.
    """
    reset = []
    for horse in horses:
        schedule = horse.feed_schedule
        if schedule is None:
            continue
        stamps = [s for s in (schedule.am_fed_at, schedule.pm_fed_at) if s is not None]
        if any(s.date() != today for s in stamps):
            schedule.reset_daily_status()
            reset.append(horse)
            logger.debug("Reset feed status for %s", horse.name)
    return reset
