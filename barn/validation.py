"""Input checks applied before horses and events are written."""

import math
from datetime import date
from typing import NamedTuple, Optional


class ValidationResult(NamedTuple):
    is_valid: bool
    message: Optional[str] = None


VALID = ValidationResult(True)

MAX_COST = 99_999


def validate_horse_name(name: str) -> ValidationResult:
    trimmed = (name or "").strip()
    if not trimmed:
        return ValidationResult(False, "Horse name is required.")
    if len(trimmed) < 2:
        return ValidationResult(False, "Name must be at least 2 characters.")
    if len(trimmed) > 40:
        return ValidationResult(False, "Name must be under 40 characters.")
    return VALID


def validate_owner_name(name: str) -> ValidationResult:
    if not (name or "").strip():
        return ValidationResult(False, "Owner name is required.")
    return VALID


def validate_cost(cost: Optional[float]) -> ValidationResult:
    if cost is None:
        return VALID
    if not math.isfinite(cost):
        return ValidationResult(False, "Cost must be a number.")
    if cost < 0:
        return ValidationResult(False, "Cost cannot be negative.")
    if cost > MAX_COST:
        return ValidationResult(False, "Cost seems unusually high. Please verify.")
    return VALID


def validate_event_dates(
    occurred_on: date, next_due_on: Optional[date]
) -> ValidationResult:
    if next_due_on is not None and next_due_on < occurred_on:
        return ValidationResult(False, "Next due date must be after the event date.")
    return VALID
