"""BucketStatus enum for timeline urgency levels."""

from enum import Enum


class BucketStatus(Enum):
    """Due-date buckets. Lower value = more urgent."""

    OVERDUE = 1
    THIS_WEEK = 2
    THIS_MONTH = 3
    UPCOMING = 4

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    BucketStatus.OVERDUE: "Overdue",
    BucketStatus.THIS_WEEK: "This Week",
    BucketStatus.THIS_MONTH: "This Month",
    BucketStatus.UPCOMING: "Upcoming",
}
