"""Flask JSON API for barn health tracking."""

import logging
import os
from datetime import date, datetime
from pathlib import Path

from flask import Flask, current_app, jsonify, request

# Add parent directory to path for model imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from barn.analytics import analyze, cost_by_category, monthly_costs
from barn.blanket import classify, description
from barn.category import parse_category
from barn.feed import (
    FedFilter,
    FeedSlot,
    all_fed,
    fed_count,
    filter_horses,
    reset_if_new_day,
)
from barn.health_event import HealthEvent
from barn.loader import load_barn, save_feed_schedule, save_health_event
from barn.validation import validate_cost, validate_event_dates

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["BARN_FILE"] = os.environ.get(
    "BARN_FILE", str(Path(__file__).parent.parent / "barn.yaml")
)


class ApiError(Exception):
    """Error returned to the client as {"error": message}."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


@app.errorhandler(ApiError)
def handle_api_error(error: ApiError):
    return jsonify({"error": error.message}), error.status


def get_barn():
    """Load the configured barn file."""
    path = Path(current_app.config["BARN_FILE"])
    if not path.exists():
        raise ApiError(f"Barn file not found: {path.name}", 404)
    return load_barn(path)


def parse_date_arg(value, field: str):
    if not value:
        return None
    if not isinstance(value, str):
        raise ApiError(f"Invalid {field} '{value}' (use YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ApiError(f"Invalid {field} '{value}' (use YYYY-MM-DD)")


def parse_category_arg(value):
    if not value:
        return None
    if not isinstance(value, str):
        raise ApiError(f"Invalid category '{value}'")
    try:
        return parse_category(value)
    except ValueError as e:
        raise ApiError(str(e))


def get_today(barn) -> date:
    """as_of query parameter, else the barn's as-of date."""
    return parse_date_arg(request.args.get("as_of"), "as_of") or barn.as_of_date


def get_horse_or_404(barn, name: str):
    horse = barn.get_horse(name)
    if horse is None:
        raise ApiError(f"Horse '{name}' not found", 404)
    return horse


def event_to_json(event, today: date) -> dict:
    return {
        "id": event.id,
        "category": event.category.value,
        "date": event.occurred_on.isoformat(),
        "nextDueDate": event.next_due_on.isoformat() if event.next_due_on else None,
        "cost": event.cost,
        "providerName": event.provider_name,
        "notes": event.notes,
        "dueStatus": event.due_status(today),
    }


@app.route("/api/horses")
def horses():
    """All horses with overdue counts."""
    barn = get_barn()
    today = get_today(barn)
    return jsonify(
        {
            "asOf": today.isoformat(),
            "horses": [
                {
                    "id": horse.id,
                    "name": horse.name,
                    "ownerName": horse.owner_name,
                    "isClipped": horse.is_clipped,
                    "events": len(horse.events),
                    "overdue": len(horse.overdue_events(today)),
                }
                for horse in barn.horses
            ],
        }
    )


@app.route("/api/timeline")
def timeline():
    """Due events grouped into urgency buckets."""
    barn = get_barn()
    today = get_today(barn)
    category = parse_category_arg(request.args.get("category"))

    buckets = barn.timeline(today, category)
    return jsonify(
        {
            "asOf": today.isoformat(),
            "buckets": [
                {
                    "title": bucket.title,
                    "isOverdue": bucket.is_overdue,
                    "items": [
                        {
                            "horseId": item.horse_id,
                            "horseName": item.horse_name,
                            "event": event_to_json(item.event, today),
                        }
                        for item in bucket.items
                    ],
                }
                for bucket in buckets
            ],
        }
    )


@app.route("/api/horses/<name>/analytics")
def horse_analytics(name: str):
    """Compliance, costs and insights for one horse."""
    barn = get_barn()
    today = get_today(barn)
    horse = get_horse_or_404(barn, name)

    analysis = analyze(horse, today)
    return jsonify(
        {
            "horse": horse.name,
            "asOf": today.isoformat(),
            "compliance": {
                category.value: {
                    "intervals": report.intervals,
                    "averageDays": report.average_days,
                    "thresholdDays": report.threshold_days,
                    "isCompliant": report.is_compliant,
                }
                for category, report in analysis.compliance.items()
            },
            "costByCategory": {
                c.category.value: {"total": c.total, "count": c.count}
                for c in cost_by_category(horse)
            },
            "monthlyCosts": [
                {"label": m.label, "year": m.year, "month": m.month, "total": m.total}
                for m in monthly_costs(horse, today)
            ],
            "projectedAnnualCost": analysis.projected_annual_cost,
            "insights": analysis.insights,
        }
    )


@app.route("/api/blanket")
def blanket():
    """Blanket recommendation for ?temp=<F>&clipped=<true|false>."""
    temp = request.args.get("temp")
    try:
        temperature = float(temp)
    except (TypeError, ValueError):
        raise ApiError("Query parameter 'temp' must be a number")

    is_clipped = request.args.get("clipped", "").lower() == "true"
    try:
        tier = classify(temperature, is_clipped)
    except ValueError as e:
        raise ApiError(str(e))

    return jsonify(
        {
            "temperatureF": temperature,
            "isClipped": is_clipped,
            "tier": tier.name,
            "label": tier.value,
            "description": description(tier),
        }
    )


@app.route("/api/horses/<name>/events", methods=["POST"])
def log_event(name: str):
    """Record a health event; nextDueDate defaults to the standard cycle."""
    barn = get_barn()
    today = get_today(barn)
    horse = get_horse_or_404(barn, name)

    payload = request.get_json(silent=True) or {}
    category = parse_category_arg(payload.get("category"))
    if category is None:
        raise ApiError("Field 'category' is required")

    occurred_on = parse_date_arg(payload.get("date"), "date") or today
    if occurred_on > today:
        raise ApiError("Event date cannot be in the future.")
    next_due_on = parse_date_arg(payload.get("nextDueDate"), "nextDueDate")

    cost = payload.get("cost")
    if cost is not None:
        try:
            cost = float(cost)
        except (TypeError, ValueError):
            raise ApiError("Field 'cost' must be a number")

    for result in (
        validate_cost(cost),
        validate_event_dates(occurred_on, next_due_on),
    ):
        if not result.is_valid:
            raise ApiError(result.message)

    event = HealthEvent.record(
        category,
        occurred_on,
        next_due_on,
        cost=cost,
        notes=payload.get("notes") or "",
        provider_name=payload.get("providerName"),
    )
    save_health_event(current_app.config["BARN_FILE"], horse.name, event)
    logger.info("Logged %s for %s", category.value, horse.name)

    return jsonify(event_to_json(event, today)), 201


def parse_feed_time(value, today: date) -> datetime:
    """ISO timestamp, else the current time of day on `today`."""
    if not value:
        return datetime.combine(today, datetime.now().time())
    if not isinstance(value, str):
        raise ApiError(f"Invalid at '{value}' (use YYYY-MM-DDTHH:MM)")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ApiError(f"Invalid at '{value}' (use YYYY-MM-DDTHH:MM)")


def parse_slot_arg(value, now: datetime) -> FeedSlot:
    if not value:
        return FeedSlot.current(now)
    try:
        return FeedSlot(str(value).upper())
    except ValueError:
        raise ApiError(f"Invalid slot '{value}' (use AM or PM)")


def feed_schedule_to_json(schedule, slot: FeedSlot):
    if schedule is None:
        return None
    fed_at = schedule.fed_at(slot)
    return {
        "amSummary": schedule.am_summary,
        "pmSummary": schedule.pm_summary,
        "supplements": schedule.all_supplements,
        "medications": schedule.all_medications,
        "specialInstructions": schedule.special_instructions,
        "fed": schedule.is_fed(slot),
        "fedAt": fed_at.isoformat() if fed_at else None,
    }


@app.route("/api/feed")
def feed_board():
    """Feed board for ?slot=AM|PM (default by time) and ?filter=needs_feeding|fed."""
    barn = get_barn()
    now = parse_feed_time(request.args.get("at"), get_today(barn))
    slot = parse_slot_arg(request.args.get("slot"), now)

    filter_name = request.args.get("filter", "all").upper()
    try:
        fed_filter = FedFilter[filter_name]
    except KeyError:
        raise ApiError(f"Invalid filter '{filter_name.lower()}'")

    reset = reset_if_new_day(barn.horses, now.date())
    for horse in reset:
        save_feed_schedule(current_app.config["BARN_FILE"], horse.name, horse.feed_schedule)

    horses = filter_horses(barn.horses, slot, fed_filter, request.args.get("search", ""))
    return jsonify(
        {
            "slot": slot.value,
            "fedCount": fed_count(barn.horses, slot),
            "total": len(barn.horses),
            "allFed": all_fed(barn.horses, slot),
            "horses": [
                {
                    "name": horse.name,
                    "ownerName": horse.owner_name,
                    "feedSchedule": feed_schedule_to_json(horse.feed_schedule, slot),
                }
                for horse in horses
            ],
        }
    )


@app.route("/api/horses/<name>/fed", methods=["POST"])
def toggle_fed(name: str):
    """Toggle a horse's fed status for the current (or given) slot."""
    barn = get_barn()
    horse = get_horse_or_404(barn, name)
    if horse.feed_schedule is None:
        raise ApiError(f"Horse '{horse.name}' has no feed schedule")

    payload = request.get_json(silent=True) or {}
    now = parse_feed_time(payload.get("at"), get_today(barn))
    slot = parse_slot_arg(payload.get("slot"), now)

    reset_if_new_day([horse], now.date())
    horse.feed_schedule.toggle_fed(slot, now)
    save_feed_schedule(current_app.config["BARN_FILE"], horse.name, horse.feed_schedule)
    logger.info("Toggled %s feed for %s", slot.value, horse.name)

    return jsonify(
        {
            "name": horse.name,
            "slot": slot.value,
            "fedCount": fed_count(barn.horses, slot),
            "allFed": all_fed(barn.horses, slot),
            "feedSchedule": feed_schedule_to_json(horse.feed_schedule, slot),
        }
    )


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
