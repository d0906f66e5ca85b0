"""
Barn health maintenance models.

This package provides the rules and analytics for horse care tracking:
- EventCategory: Farrier, Vet, Deworming, Dental with fixed cycle policies
- HealthEvent: One recorded visit with an optional next due date
- Horse: A tracked horse and its health history
- Barn: Aggregate of all horses in a barn file
- bucketize: Groups due events into Overdue / This Week / This Month / Upcoming
- analyze: Cycle compliance, insights and projected annual cost per horse
- classify: Blanket recommendation from temperature and clip status
- FeedSchedule / FeedTemplate: AM/PM rations and daily fed status for the feed board
"""

from .category import (
    EventCategory,
    CyclePolicy,
    CYCLE_POLICIES,
    default_offset,
    compliance_threshold_days,
    parse_category,
)
from .status import BucketStatus
from .health_event import HealthEvent
from .horse import Horse
from .calculations import (
    suggest_next_due,
    days_between,
    cycle_intervals,
    average_interval,
)
from .timeline import TimelineItem, MaintenanceBucket, bucketize, classify_due_date
from .analytics import (
    ComplianceReport,
    CategoryCost,
    MonthlyCost,
    HorseAnalysis,
    analyze,
    compliance_report,
    cost_by_category,
    monthly_costs,
    projected_annual_cost,
    generate_insights,
    total_cost,
)
from .blanket import BlanketTier, classify, description
from .validation import (
    ValidationResult,
    validate_horse_name,
    validate_owner_name,
    validate_cost,
    validate_event_dates,
)
from .feed import (
    FeedSlot,
    FedFilter,
    FeedSchedule,
    FeedTemplate,
    PM_CUTOFF_HOUR,
    parse_csv,
    is_fed,
    filter_horses,
    fed_count,
    all_fed,
    reset_if_new_day,
)
from .stable import Barn
from .loader import (
    load_barn,
    create_barn,
    add_horse,
    delete_horse,
    save_health_event,
    update_health_event,
    delete_health_event,
    save_feed_schedule,
    save_feed_template,
)

__all__ = [
    "EventCategory",
    "CyclePolicy",
    "CYCLE_POLICIES",
    "default_offset",
    "compliance_threshold_days",
    "parse_category",
    "BucketStatus",
    "HealthEvent",
    "Horse",
    "suggest_next_due",
    "days_between",
    "cycle_intervals",
    "average_interval",
    "TimelineItem",
    "MaintenanceBucket",
    "bucketize",
    "classify_due_date",
    "ComplianceReport",
    "CategoryCost",
    "MonthlyCost",
    "HorseAnalysis",
    "analyze",
    "compliance_report",
    "cost_by_category",
    "monthly_costs",
    "projected_annual_cost",
    "generate_insights",
    "total_cost",
    "BlanketTier",
    "classify",
    "description",
    "ValidationResult",
    "validate_horse_name",
    "validate_owner_name",
    "validate_cost",
    "validate_event_dates",
    "FeedSlot",
    "FedFilter",
    "FeedSchedule",
    "FeedTemplate",
    "PM_CUTOFF_HOUR",
    "parse_csv",
    "is_fed",
    "filter_horses",
    "fed_count",
    "all_fed",
    "reset_if_new_day",
    "Barn",
    "load_barn",
    "create_barn",
    "add_horse",
    "delete_horse",
    "save_health_event",
    "update_health_event",
    "delete_health_event",
    "save_feed_schedule",
    "save_feed_template",
]
