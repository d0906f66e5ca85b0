"""
Cycle compliance, cost analytics and insights for a single horse.

Insights follow a fixed priority order, at most one per signal:
1. overdue item count
2. farrier cycle commentary (needs two or more farrier visits)
3. stale deworming warning (two or more dewormings, last one > threshold)
4. the category carrying the largest share of recorded cost
When none apply, a single "keep logging" message is returned.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from .calculations import average_interval, cycle_intervals, days_between
from .category import EventCategory, compliance_threshold_days
from .horse import Horse


@dataclass
class ComplianceReport:
    """Realized visit intervals for one category against its threshold."""

    category: EventCategory
    intervals: List[int]
    average_days: Optional[int]
    threshold_days: int

    @property
    def has_data(self) -> bool:
        return self.average_days is not None

    @property
    def is_compliant(self) -> Optional[bool]:
        """None when there are fewer than two visits to compare."""
        if self.average_days is None:
            return None
        return self.average_days <= self.threshold_days


@dataclass
class CategoryCost:
    category: EventCategory
    total: float
    count: int


@dataclass
class MonthlyCost:
    label: str
    year: int
    month: int
    total: float


@dataclass
class HorseAnalysis:
    compliance: Dict[EventCategory, ComplianceReport]
    insights: List[str] = field(default_factory=list)
    projected_annual_cost: float = 0.0


def compliance_report(horse: Horse, category: EventCategory) -> ComplianceReport:
    intervals = cycle_intervals(horse.events_for(category))
    return ComplianceReport(
        category=category,
        intervals=intervals,
        average_days=average_interval(intervals),
        threshold_days=compliance_threshold_days(category),
    )


def total_cost(horse: Horse) -> float:
    return sum(e.cost for e in horse.events if e.cost is not None)


def cost_by_category(horse: Horse) -> List[CategoryCost]:
    """Cost totals per category, skipping categories with no costed events."""
    results = []
    for category in EventCategory:
        costs = [
            e.cost for e in horse.events if e.category == category and e.cost is not None
        ]
        if costs:
            results.append(CategoryCost(category, sum(costs), len(costs)))
    return results


def monthly_costs(horse: Horse, today: date, months: int = 6) -> List[MonthlyCost]:
    """Cost per calendar month for the last `months` months, oldest first."""
    results = []
    for offset in reversed(range(months)):
        month_start = today.replace(day=1) - relativedelta(months=offset)
        total = sum(
            e.cost
            for e in horse.events
            if e.cost is not None
            and e.occurred_on.year == month_start.year
            and e.occurred_on.month == month_start.month
        )
        results.append(
            MonthlyCost(
                month_start.strftime("%b"), month_start.year, month_start.month, total
            )
        )
    return results


def projected_annual_cost(horse: Horse, today: date) -> float:
    """Spend over the trailing six months, doubled."""
    six_months_ago = today - relativedelta(months=6)
    recent = sum(
        e.cost
        for e in horse.events
        if e.cost is not None and e.occurred_on >= six_months_ago
    )
    return recent * 2


def generate_insights(horse: Horse, today: date) -> List[str]:
    insights = []

    overdue_count = len(horse.overdue_events(today))
    if overdue_count > 0:
        plural = "" if overdue_count == 1 else "s"
        insights.append(
            f"You have {overdue_count} overdue maintenance item{plural}. "
            "Scheduling these promptly can prevent more expensive interventions."
        )

    farrier = compliance_report(horse, EventCategory.FARRIER)
    if farrier.has_data:
        if farrier.is_compliant:
            insights.append(
                "Farrier schedule is on track with an average of "
                f"{farrier.average_days} days between visits."
            )
        else:
            insights.append(
                f"Farrier visits average {farrier.average_days} days apart. "
                "Consider tightening to 6-8 weeks to prevent hoof-related "
                "lameness issues."
            )

    dewormings = horse.events_for(EventCategory.DEWORMING)
    if len(dewormings) >= 2:
        days_since = days_between(dewormings[-1].occurred_on, today)
        if days_since > compliance_threshold_days(EventCategory.DEWORMING):
            insights.append(
                f"Last deworming was {days_since} days ago. Consider a fecal egg "
                "count to determine if deworming is needed."
            )

    overall = total_cost(horse)
    if overall > 0:
        # max() keeps the first of equal totals, so ties go to enum order
        top = max(cost_by_category(horse), key=lambda c: c.total)
        percentage = int(top.total / overall * 100)
        insights.append(
            f"{top.category.value} accounts for {percentage}% of total care costs. "
            "Consider preventative measures to reduce this."
        )

    if not insights:
        insights.append(
            "Keep logging health events and costs to unlock personalized "
            f"insights for {horse.name}."
        )
    return insights


def analyze(horse: Horse, today: date) -> HorseAnalysis:
    """Compliance per category, ordered insights and projected annual cost."""
    return HorseAnalysis(
        compliance={c: compliance_report(horse, c) for c in EventCategory},
        insights=generate_insights(horse, today),
        projected_annual_cost=projected_annual_cost(horse, today),
    )
