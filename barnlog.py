#!/usr/bin/env python3
"""
Unified CLI for barn health tracking.

Commands:
  horses     - List horses with overdue counts
  timeline   - Show due events grouped by urgency
  analytics  - Cycle compliance, costs and insights for a horse
  history    - View a horse's health events
  log        - Record a new health event
  blanket    - Blanket recommendation for a temperature
  feed       - Feed board for the current AM/PM slot
  feed-set   - Set a horse's feed schedule
  templates  - List or save feed templates
  cycles     - List the standard maintenance cycles
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from barn import (
    CYCLE_POLICIES,
    EventCategory,
    FedFilter,
    FeedSchedule,
    FeedSlot,
    FeedTemplate,
    HealthEvent,
    MaintenanceBucket,
    analyze,
    classify,
    cost_by_category,
    description,
    all_fed,
    fed_count,
    filter_horses,
    load_barn,
    parse_category,
    parse_csv,
    reset_if_new_day,
    save_feed_schedule,
    save_feed_template,
    save_health_event,
    validate_cost,
    validate_event_dates,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_date(value: Optional[date]) -> str:
    """Format a date for display."""
    return value.isoformat() if value is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format an interval in days for display."""
    return f"{days}d" if days is not None else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_date(text: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{text}' (use YYYY-MM-DD)")


def parse_datetime(text: str) -> datetime:
    """argparse type for YYYY-MM-DDTHH:MM timestamps."""
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid time '{text}' (use YYYY-MM-DDTHH:MM)"
        )


def parse_slot(text: str) -> FeedSlot:
    """argparse type for AM/PM feed slots."""
    try:
        return FeedSlot(text.strip().upper())
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid slot '{text}' (use am or pm)")


def parse_category_arg(text: str) -> EventCategory:
    """argparse type for event categories."""
    try:
        return parse_category(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


# =============================================================================
# Timeline command
# =============================================================================


def make_timeline_table(bucket: MaintenanceBucket, today: date) -> List[List[str]]:
    """Convert a bucket's items to table rows."""
    rows = []
    for item in bucket.items:
        event = item.event
        rows.append(
            [
                item.horse_name,
                event.category.value,
                format_date(event.occurred_on),
                format_date(event.next_due_on),
                event.due_status(today),
            ]
        )
    return rows


def cmd_timeline(args, barn, today: date):
    """Show due events grouped by urgency."""
    print(f"As of: {today.isoformat()}")
    if args.category:
        print(f"Filter: {args.category.value.upper()} ONLY")
    print()

    buckets = barn.timeline(today, args.category)
    if not buckets:
        print("Nothing scheduled.")
        return 0

    headers = ["Horse", "Category", "Last Done", "Next Due", "Status"]
    for bucket in buckets:
        print(f"{bucket.title.upper()}:")
        print(
            tabulate(
                make_timeline_table(bucket, today), headers=headers, tablefmt="simple"
            )
        )
        print()

    return 0


# =============================================================================
# Horses command
# =============================================================================


def cmd_horses(args, barn, today: date):
    """List horses with overdue counts."""
    print(f"Horses: {len(barn.horses)}")
    print()

    if not barn.horses:
        print("No horses found.")
        return 0

    rows = []
    for horse in sorted(barn.horses, key=lambda h: h.name.lower()):
        last = horse.last_event
        rows.append(
            [
                horse.name,
                horse.owner_name or "-",
                "yes" if horse.is_clipped else "no",
                len(horse.events),
                len(horse.overdue_events(today)),
                format_date(last.occurred_on) if last else "-",
            ]
        )

    headers = ["Horse", "Owner", "Clipped", "Events", "Overdue", "Last Event"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Analytics command
# =============================================================================


def make_compliance_table(analysis) -> List[List[str]]:
    """Convert compliance reports to table rows."""
    rows = []
    for category, report in analysis.compliance.items():
        if report.is_compliant is None:
            verdict = "not enough data"
        else:
            verdict = "on track" if report.is_compliant else "overdue cycle"
        rows.append(
            [
                category.value,
                category.cycle_description,
                format_days(report.average_days),
                format_days(report.threshold_days),
                verdict,
            ]
        )
    return rows


def cmd_analytics(args, barn, today: date):
    """Cycle compliance, costs and insights for a horse."""
    horse = barn.get_horse(args.horse)
    if horse is None:
        print(f"Error: Unknown horse '{args.horse}'")
        return 1

    analysis = analyze(horse, today)

    print(f"Horse: {horse.name}")
    print(f"As of: {today.isoformat()}")
    print()

    print("CYCLE COMPLIANCE:")
    headers = ["Category", "Standard Cycle", "Average", "Threshold", "Status"]
    print(
        tabulate(make_compliance_table(analysis), headers=headers, tablefmt="simple")
    )
    print()

    costs = cost_by_category(horse)
    if costs:
        print("COST BY CATEGORY:")
        rows = [[c.category.value, c.count, format_cost(c.total)] for c in costs]
        print(tabulate(rows, headers=["Category", "Events", "Total"], tablefmt="simple"))
        print()

    if analysis.projected_annual_cost > 0:
        print(f"Projected annual cost: {format_cost(analysis.projected_annual_cost)}")
        print()

    print("INSIGHTS:")
    for insight in analysis.insights:
        print(f"  - {insight}")

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(events: List[HealthEvent]) -> List[List[str]]:
    """Convert health events to table rows."""
    rows = []
    for event in events:
        rows.append(
            [
                format_date(event.occurred_on),
                event.category.value,
                event.provider_name or "-",
                format_cost(event.cost),
                format_date(event.next_due_on),
                truncate(event.notes),
            ]
        )
    return rows


def cmd_history(args, barn, today: date):
    """View a horse's health events."""
    horse = barn.get_horse(args.horse)
    if horse is None:
        print(f"Error: Unknown horse '{args.horse}'")
        return 1

    events = sorted(horse.events, key=lambda e: e.occurred_on, reverse=not args.asc)
    if args.category:
        events = [e for e in events if e.category == args.category]

    total = sum(e.cost for e in events if e.cost is not None)

    print(f"Horse: {horse.name}")
    print(f"Total events: {len(horse.events)}")
    if args.category:
        print(f"Showing: {len(events)} (filtered)")
    if total > 0:
        print(f"Total cost: {format_cost(total)}")
    print()

    if not events:
        print("No health events found.")
        return 0

    headers = ["Date", "Category", "Provider", "Cost", "Next Due", "Notes"]
    print(tabulate(make_history_table(events), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Log command
# =============================================================================


def cmd_log(args, barn, today: date):
    """Record a new health event."""
    horse = barn.get_horse(args.horse)
    if horse is None:
        print(f"Error: Unknown horse '{args.horse}'")
        print("\nAvailable horses:")
        for h in sorted(barn.horses, key=lambda h: h.name.lower()):
            print(f"  {h.name}")
        return 1

    occurred_on = args.date or today
    if occurred_on > today:
        print("Error: Event date cannot be in the future.")
        return 1

    for result in (
        validate_cost(args.cost),
        validate_event_dates(occurred_on, args.next_due),
    ):
        if not result.is_valid:
            print(f"Error: {result.message}")
            return 1

    event = HealthEvent.record(
        args.category,
        occurred_on,
        args.next_due,
        cost=args.cost,
        notes=args.notes,
        provider_name=args.by,
    )

    print(f"Adding health event to {args.barn_file}:")
    print(f"  Horse:    {horse.name}")
    print(f"  Category: {event.category.value}")
    print(f"  Date:     {format_date(event.occurred_on)}")
    print(f"  Next due: {format_date(event.next_due_on)}")
    if event.provider_name:
        print(f"  By:       {event.provider_name}")
    if event.notes:
        print(f"  Notes:    {event.notes}")
    if event.cost is not None:
        print(f"  Cost:     {format_cost(event.cost)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_health_event(args.barn_file, horse.name, event)
    print("Event saved.")
    return 0


# =============================================================================
# Blanket command
# =============================================================================


def make_blanket_rows(barn, temperature: float) -> List[List[str]]:
    """One recommendation row per horse."""
    rows = []
    for horse in sorted(barn.horses, key=lambda h: h.name.lower()):
        tier = classify(temperature, horse.is_clipped)
        rows.append([horse.name, "yes" if horse.is_clipped else "no", tier.value])
    return rows


def cmd_blanket(args, barn, today: date):
    """Blanket recommendation for a temperature."""
    print(f"Temperature: {args.temperature:.0f}°F")
    print()

    if args.horse:
        horse = barn.get_horse(args.horse)
        if horse is None:
            print(f"Error: Unknown horse '{args.horse}'")
            return 1
        tier = classify(args.temperature, horse.is_clipped)
        print(f"{horse.name}: {tier.value}")
        print(f"  {description(tier)}")
        return 0

    if args.clipped is not None or not barn.horses:
        tier = classify(args.temperature, bool(args.clipped))
        print(f"{'Clipped' if args.clipped else 'Unclipped'}: {tier.value}")
        print(f"  {description(tier)}")
        return 0

    headers = ["Horse", "Clipped", "Recommendation"]
    print(
        tabulate(
            make_blanket_rows(barn, args.temperature), headers=headers, tablefmt="simple"
        )
    )
    return 0


# =============================================================================
# Feed commands
# =============================================================================

FEED_FIELDS = {
    "am_grain": ("--am-grain", "AM grain ration"),
    "am_hay": ("--am-hay", "AM hay ration"),
    "am_supplements": ("--am-supplements", "AM supplements (comma-separated)"),
    "am_medications": ("--am-medications", "AM medications (comma-separated)"),
    "pm_grain": ("--pm-grain", "PM grain ration"),
    "pm_hay": ("--pm-hay", "PM hay ration"),
    "pm_supplements": ("--pm-supplements", "PM supplements (comma-separated)"),
    "pm_medications": ("--pm-medications", "PM medications (comma-separated)"),
    "special_instructions": ("--instructions", "Special feeding instructions"),
}


def make_feed_rows(horses, slot: FeedSlot) -> List[List[str]]:
    """Convert horses to feed board rows for one slot."""
    rows = []
    for horse in horses:
        schedule = horse.feed_schedule
        if schedule is None:
            rows.append([horse.name, "No feed schedule", "-", "-", "no"])
            continue
        rows.append(
            [
                horse.name,
                schedule.summary(slot),
                ", ".join(schedule.all_supplements) or "-",
                ", ".join(schedule.all_medications) or "-",
                "yes" if schedule.is_fed(slot) else "no",
            ]
        )
    return rows


def cmd_feed(args, barn, today: date):
    """Show the feed board, or toggle one horse's fed status."""
    now = args.at or datetime.combine(today, datetime.now().time())
    slot = args.slot or FeedSlot.current(now)

    reset = reset_if_new_day(barn.horses, now.date())
    if reset and not args.dry_run:
        for horse in reset:
            save_feed_schedule(args.barn_file, horse.name, horse.feed_schedule)
        print(f"Reset fed status from a previous day: {', '.join(h.name for h in reset)}")
        print()

    if args.mark:
        horse = barn.get_horse(args.mark)
        if horse is None:
            print(f"Error: Unknown horse '{args.mark}'")
            return 1
        if horse.feed_schedule is None:
            print(f"Error: {horse.name} has no feed schedule")
            return 1
        fed = horse.feed_schedule.toggle_fed(slot, now)
        print(f"{horse.name}: {'fed' if fed else 'not fed'} ({slot.value})")
        if args.dry_run:
            print("(dry run - no changes made)")
        else:
            save_feed_schedule(args.barn_file, horse.name, horse.feed_schedule)
        print()

    horses = filter_horses(barn.horses, slot, args.fed_filter, args.search or "")
    print(f"{slot.value} FEED: {fed_count(barn.horses, slot)}/{len(barn.horses)} fed")
    if args.fed_filter != FedFilter.ALL:
        print(f"Filter: {args.fed_filter.value}")
    print()

    if not horses:
        print("No horses found.")
        return 0

    headers = ["Horse", f"{slot.value} Feed", "Supplements", "Medications", "Fed"]
    print(tabulate(make_feed_rows(horses, slot), headers=headers, tablefmt="simple"))

    if all_fed(barn.horses, slot):
        print()
        print(f"All horses fed for {slot.value}!")
    return 0


def cmd_feed_set(args, barn, today: date):
    """Set a horse's feed schedule, field by field or from a template."""
    horse = barn.get_horse(args.horse)
    if horse is None:
        print(f"Error: Unknown horse '{args.horse}'")
        return 1

    template = None
    if args.template:
        template = barn.get_template(args.template)
        if template is None:
            print(f"Error: Unknown feed template '{args.template}'")
            return 1
        schedule = template.apply_to(horse)
    else:
        schedule = horse.feed_schedule or FeedSchedule()

    for field in FEED_FIELDS:
        value = getattr(args, field)
        if value is None:
            continue
        if field.endswith(("_supplements", "_medications")):
            value = parse_csv(value)
        setattr(schedule, field, value)
    horse.feed_schedule = schedule

    print(f"Feed schedule for {horse.name}:")
    print(f"  AM: {schedule.am_summary}")
    print(f"  PM: {schedule.pm_summary}")
    if schedule.all_supplements:
        print(f"  Supplements: {', '.join(schedule.all_supplements)}")
    if schedule.all_medications:
        print(f"  Medications: {', '.join(schedule.all_medications)}")
    if schedule.special_instructions:
        print(f"  Instructions: {schedule.special_instructions}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_feed_schedule(args.barn_file, horse.name, schedule)
    if template is not None:
        save_feed_template(args.barn_file, template)
    print("Feed schedule saved.")
    return 0


def cmd_templates(args, barn, today: date):
    """List feed templates, or save one from a horse's schedule."""
    if args.save:
        if not args.source:
            print("Error: --save needs --from HORSE")
            return 1
        horse = barn.get_horse(args.source)
        if horse is None:
            print(f"Error: Unknown horse '{args.source}'")
            return 1
        if horse.feed_schedule is None:
            print(f"Error: {horse.name} has no feed schedule")
            return 1
        template = FeedTemplate.from_schedule(
            args.save, horse.feed_schedule, args.description or "", created_on=today
        )
        save_feed_template(args.barn_file, template)
        print(f"Saved template '{template.name}': {template.summary}")
        return 0

    if not barn.feed_templates:
        print("No feed templates found.")
        return 0

    rows = [
        [t.name, t.summary, t.usage_count, truncate(t.description)]
        for t in sorted(barn.feed_templates, key=lambda t: -t.usage_count)
    ]
    headers = ["Template", "Summary", "Used", "Description"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Cycles command
# =============================================================================


def cmd_cycles(args, barn, today: date):
    """List the standard maintenance cycles."""
    rows = []
    for category, policy in CYCLE_POLICIES.items():
        rows.append(
            [
                category.value,
                policy.description,
                f"+{policy.amount} {policy.unit}",
                format_days(policy.threshold_days),
            ]
        )
    headers = ["Category", "Cycle", "Default Next Due", "Max Average"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================


COMMANDS = {
    "horses": cmd_horses,
    "timeline": cmd_timeline,
    "analytics": cmd_analytics,
    "history": cmd_history,
    "log": cmd_log,
    "blanket": cmd_blanket,
    "feed": cmd_feed,
    "feed-set": cmd_feed_set,
    "templates": cmd_templates,
    "cycles": cmd_cycles,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Barn health tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s barn.yaml timeline
  %(prog)s barn.yaml timeline --category farrier
  %(prog)s barn.yaml --as-of 2025-03-01 analytics Whiskey
  %(prog)s barn.yaml history Whiskey --category vet
  %(prog)s barn.yaml log Whiskey farrier --cost 180 --by "Sam Smith"
  %(prog)s barn.yaml blanket 42
  %(prog)s barn.yaml blanket 42 --clipped
  %(prog)s barn.yaml feed --needs-feeding
  %(prog)s barn.yaml feed --mark Whiskey
  %(prog)s barn.yaml feed-set Whiskey --am-grain "2 qt Senior" --am-supplements "SmartPak, Biotin"
  %(prog)s barn.yaml templates --save "Easy keeper" --from Whiskey
""",
    )
    parser.add_argument(
        "barn_file",
        type=Path,
        help="Path to barn YAML file",
    )
    parser.add_argument(
        "--as-of",
        type=parse_date,
        help="Evaluate as of this date (YYYY-MM-DD, default: file state or today)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("horses", help="List horses with overdue counts")

    timeline_parser = subparsers.add_parser(
        "timeline", help="Show due events grouped by urgency"
    )
    timeline_parser.add_argument(
        "--category",
        type=parse_category_arg,
        help="Only show one category (farrier, vet, deworming, dental)",
    )

    analytics_parser = subparsers.add_parser(
        "analytics", help="Cycle compliance, costs and insights for a horse"
    )
    analytics_parser.add_argument("horse", type=str, help="Horse name")

    history_parser = subparsers.add_parser("history", help="View health events")
    history_parser.add_argument("horse", type=str, help="Horse name")
    history_parser.add_argument(
        "--category",
        type=parse_category_arg,
        help="Only show one category",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort oldest first instead of newest first",
    )

    log_parser = subparsers.add_parser("log", help="Record a new health event")
    log_parser.add_argument("horse", type=str, help="Horse name")
    log_parser.add_argument(
        "category",
        type=parse_category_arg,
        help="Event category (farrier, vet, deworming, dental)",
    )
    log_parser.add_argument(
        "--date",
        type=parse_date,
        help="Event date in YYYY-MM-DD format (default: as-of date)",
    )
    log_parser.add_argument(
        "--next-due",
        type=parse_date,
        help="Override the suggested next due date (YYYY-MM-DD)",
    )
    log_parser.add_argument("--cost", type=float, help="Cost of the visit")
    log_parser.add_argument("--by", type=str, help="Provider name")
    log_parser.add_argument("--notes", type=str, default="", help="Notes")
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    blanket_parser = subparsers.add_parser(
        "blanket", help="Blanket recommendation for a temperature"
    )
    blanket_parser.add_argument(
        "temperature", type=float, help="Temperature in Fahrenheit"
    )
    group = blanket_parser.add_mutually_exclusive_group()
    group.add_argument("--horse", type=str, help="Recommend for one horse")
    group.add_argument(
        "--clipped",
        action="store_const",
        const=True,
        help="Recommend for a clipped horse",
    )
    group.add_argument(
        "--unclipped",
        dest="clipped",
        action="store_const",
        const=False,
        help="Recommend for an unclipped horse",
    )

    feed_parser = subparsers.add_parser(
        "feed", help="Feed board for the current AM/PM slot"
    )
    feed_parser.add_argument(
        "--slot",
        type=parse_slot,
        help="Show this slot (am or pm, default: by time of day)",
    )
    feed_parser.add_argument(
        "--at",
        type=parse_datetime,
        help="Board time (YYYY-MM-DDTHH:MM, default: now on the as-of date)",
    )
    feed_parser.add_argument("--mark", type=str, help="Toggle fed status for a horse")
    feed_parser.add_argument("--search", type=str, help="Filter by horse or owner name")
    fed_group = feed_parser.add_mutually_exclusive_group()
    fed_group.add_argument(
        "--needs-feeding",
        dest="fed_filter",
        action="store_const",
        const=FedFilter.NEEDS_FEEDING,
        default=FedFilter.ALL,
        help="Only horses not yet fed this slot",
    )
    fed_group.add_argument(
        "--fed",
        dest="fed_filter",
        action="store_const",
        const=FedFilter.FED,
        help="Only horses already fed this slot",
    )
    feed_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show changes without saving",
    )

    feed_set_parser = subparsers.add_parser(
        "feed-set", help="Set a horse's feed schedule"
    )
    feed_set_parser.add_argument("horse", type=str, help="Horse name")
    feed_set_parser.add_argument(
        "--template", type=str, help="Start from a saved feed template"
    )
    for field, (flag, help_text) in FEED_FIELDS.items():
        feed_set_parser.add_argument(flag, dest=field, type=str, help=help_text)
    feed_set_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the schedule without saving",
    )

    templates_parser = subparsers.add_parser(
        "templates", help="List or save feed templates"
    )
    templates_parser.add_argument(
        "--save", type=str, metavar="NAME", help="Save a template with this name"
    )
    templates_parser.add_argument(
        "--from",
        dest="source",
        type=str,
        metavar="HORSE",
        help="Horse whose schedule the template copies",
    )
    templates_parser.add_argument("--description", type=str, help="Template description")

    subparsers.add_parser("cycles", help="List the standard maintenance cycles")

    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate barn file exists
    if not args.barn_file.exists():
        print(f"Error: File not found: {args.barn_file}")
        return 1

    try:
        barn = load_barn(args.barn_file)
        today = args.as_of or barn.as_of_date
        logger.debug("Running %s as of %s", args.command, today)
        return COMMANDS[args.command](args, barn, today)
    except (KeyError, IndexError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
