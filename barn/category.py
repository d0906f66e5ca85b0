"""Health event categories and their fixed cycle policies."""

from enum import Enum
from types import MappingProxyType
from typing import NamedTuple, Tuple


class EventCategory(Enum):
    """Kinds of recurring maintenance tracked per horse."""

    FARRIER = "Farrier"
    VET = "Vet"
    DEWORMING = "Deworming"
    DENTAL = "Dental"

    @property
    def cycle_description(self) -> str:
        return CYCLE_POLICIES[self].description


class CyclePolicy(NamedTuple):
    """Default recurrence offset and the maximum acceptable average interval."""

    unit: str  # relativedelta keyword: weeks, months or years
    amount: int
    threshold_days: int
    description: str


CYCLE_POLICIES = MappingProxyType(
    {
        EventCategory.FARRIER: CyclePolicy("weeks", 7, 56, "Every 6-8 weeks"),
        EventCategory.VET: CyclePolicy("months", 6, 200, "Biannual checkup"),
        EventCategory.DEWORMING: CyclePolicy("months", 2, 70, "Every 8 weeks"),
        EventCategory.DENTAL: CyclePolicy("years", 1, 395, "Annual float"),
    }
)

_missing = [c.value for c in EventCategory if c not in CYCLE_POLICIES]
if _missing:
    raise RuntimeError(f"No cycle policy for: {', '.join(_missing)}")


def default_offset(category: EventCategory) -> Tuple[str, int]:
    """Return the (unit, amount) added to an occurrence to project the next one."""
    policy = CYCLE_POLICIES[category]
    return policy.unit, policy.amount


def compliance_threshold_days(category: EventCategory) -> int:
    """Maximum average days between visits before a cycle is non-compliant."""
    return CYCLE_POLICIES[category].threshold_days


def parse_category(text: str) -> EventCategory:
    """Parse a category name case-insensitively (e.g. 'farrier' or 'Farrier')."""
    for category in EventCategory:
        if category.value.lower() == text.strip().lower():
            return category
    raise ValueError(f"Unknown category '{text}'")
