"""YAML loading and saving utilities for barn data."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .category import EventCategory
from .feed import FeedSchedule, FeedTemplate
from .health_event import HealthEvent
from .horse import Horse
from .stable import Barn

logger = logging.getLogger(__name__)


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _parse_feed_schedule(dct: Optional[Dict[str, Any]]) -> Optional[FeedSchedule]:
    if dct is None:
        return None
    return FeedSchedule(
        dct.get("amGrain"),
        dct.get("amHay"),
        dct.get("amSupplements"),
        dct.get("amMedications"),
        dct.get("pmGrain"),
        dct.get("pmHay"),
        dct.get("pmSupplements"),
        dct.get("pmMedications"),
        dct.get("specialInstructions"),
        am_fed_today=dct.get("amFedToday"),
        am_fed_at=_parse_datetime(dct.get("amFedAt")),
        pm_fed_today=dct.get("pmFedToday"),
        pm_fed_at=_parse_datetime(dct.get("pmFedAt")),
    )


def _parse_object(
    dct: Dict[str, Any]
) -> Union[HealthEvent, FeedTemplate, Horse, Barn, dict]:
    """Parse dictionary into appropriate object type."""
    # Health event (inside a horse's 'events' list)
    if "category" in dct and "date" in dct:
        return HealthEvent(
            EventCategory(dct["category"]),
            _parse_date(dct["date"]),
            _parse_date(dct.get("nextDueDate")),
            dct.get("cost"),
            dct.get("notes"),
            dct.get("providerName"),
            id=dct.get("id"),
        )
    # Feed template (inside the top-level 'feedTemplates' list)
    elif "name" in dct and "usageCount" in dct:
        return FeedTemplate(
            dct["name"],
            dct.get("description"),
            dct.get("amGrain"),
            dct.get("amHay"),
            dct.get("amSupplements"),
            dct.get("amMedications"),
            dct.get("pmGrain"),
            dct.get("pmHay"),
            dct.get("pmSupplements"),
            dct.get("pmMedications"),
            dct.get("specialInstructions"),
            _parse_date(dct.get("createdOn")),
            dct["usageCount"],
        )
    # Horse
    elif "name" in dct:
        return Horse(
            dct["name"],
            dct.get("ownerName"),
            dct.get("isClipped"),
            dct.get("events"),
            _parse_date(dct.get("dateAdded")),
            _parse_feed_schedule(dct.get("feedSchedule")),
            id=dct.get("id"),
        )
    # Top-level barn object
    elif "horses" in dct:
        state = dct.get("state") or {}
        return Barn(dct["horses"], state.get("asOfDate"), dct.get("feedTemplates"))
    else:
        # Return dict as-is for unknown structures (like 'state' or 'feedSchedule')
        return dct


def load_barn(filename: Union[str, Path]) -> Barn:
    """Load a barn from a YAML file."""
    with open(filename, "rb") as fp:
        # default=str keeps unquoted YAML dates as ISO strings
        json_data = json.dumps(yaml.load(fp, Loader=yaml.SafeLoader), default=str)
    barn = json.loads(json_data, object_hook=_parse_object)
    if not isinstance(barn, Barn):
        # Files without a horses key still load as an empty Barn
        raw = barn or {}
        state = raw.get("state") or {}
        barn = Barn([], state.get("asOfDate"), raw.get("feedTemplates"))
    logger.debug("Loaded %d horses from %s", len(barn.horses), filename)
    return barn


def _read_yaml(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_yaml(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _event_to_dict(event: HealthEvent) -> Dict[str, Any]:
    """Serialize a HealthEvent to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": event.id,
        "category": event.category.value,
        "date": event.occurred_on.isoformat(),
    }
    if event.next_due_on is not None:
        d["nextDueDate"] = event.next_due_on.isoformat()
    if event.cost is not None:
        d["cost"] = event.cost
    if event.provider_name is not None:
        d["providerName"] = event.provider_name
    if event.notes:
        d["notes"] = event.notes
    return d


def _feed_schedule_to_dict(schedule: FeedSchedule) -> Dict[str, Any]:
    """Serialize a FeedSchedule, keeping both slots' fed status."""
    return {
        "amGrain": schedule.am_grain,
        "amHay": schedule.am_hay,
        "amSupplements": list(schedule.am_supplements),
        "amMedications": list(schedule.am_medications),
        "amFedToday": schedule.am_fed_today,
        "amFedAt": schedule.am_fed_at.isoformat() if schedule.am_fed_at else None,
        "pmGrain": schedule.pm_grain,
        "pmHay": schedule.pm_hay,
        "pmSupplements": list(schedule.pm_supplements),
        "pmMedications": list(schedule.pm_medications),
        "pmFedToday": schedule.pm_fed_today,
        "pmFedAt": schedule.pm_fed_at.isoformat() if schedule.pm_fed_at else None,
        "specialInstructions": schedule.special_instructions,
    }


def _feed_template_to_dict(template: FeedTemplate) -> Dict[str, Any]:
    d: Dict[str, Any] = {"name": template.name}
    if template.description:
        d["description"] = template.description
    d.update(
        {
            "amGrain": template.am_grain,
            "amHay": template.am_hay,
            "amSupplements": list(template.am_supplements),
            "amMedications": list(template.am_medications),
            "pmGrain": template.pm_grain,
            "pmHay": template.pm_hay,
            "pmSupplements": list(template.pm_supplements),
            "pmMedications": list(template.pm_medications),
            "specialInstructions": template.special_instructions,
        }
    )
    if template.created_on is not None:
        d["createdOn"] = template.created_on.isoformat()
    # usageCount is always written; the loader uses it to tell templates from horses
    d["usageCount"] = template.usage_count
    return d


def _horse_to_dict(horse: Horse) -> Dict[str, Any]:
    """Serialize a Horse (and its events) to the YAML dict format."""
    d: Dict[str, Any] = {"id": horse.id, "name": horse.name}
    if horse.owner_name:
        d["ownerName"] = horse.owner_name
    d["isClipped"] = horse.is_clipped
    if horse.date_added is not None:
        d["dateAdded"] = horse.date_added.isoformat()
    if horse.feed_schedule is not None:
        d["feedSchedule"] = _feed_schedule_to_dict(horse.feed_schedule)
    d["events"] = [_event_to_dict(e) for e in horse.events]
    return d


def _find_horse(data: Dict[str, Any], horse_name: str) -> Dict[str, Any]:
    """Return the raw horse dict matching horse_name (case-insensitive)."""
    wanted = horse_name.strip().lower()
    for horse in data.get("horses") or []:
        if str(horse.get("name", "")).lower() == wanted:
            return horse
    raise KeyError(f"Unknown horse '{horse_name}'")


def _events_of(horse: Dict[str, Any]) -> List[Dict[str, Any]]:
    if horse.get("events") is None:
        horse["events"] = []
    return horse["events"]


def create_barn(filename: Union[str, Path], as_of_date: Optional[str] = None) -> None:
    """Create a new, empty barn YAML file."""
    data: Dict[str, Any] = {"state": {}, "horses": []}
    if as_of_date is not None:
        data["state"]["asOfDate"] = as_of_date
    _write_yaml(filename, data)


def add_horse(filename: Union[str, Path], horse: Horse) -> None:
    """
    Append a horse to a barn YAML file.

    Raises ValueError if a horse with the same name already exists.
    """
    data = _read_yaml(filename)
    if data.get("horses") is None:
        data["horses"] = []
    try:
        _find_horse(data, horse.name)
    except KeyError:
        pass
    else:
        raise ValueError(f"Horse '{horse.name}' already exists")

    data["horses"].append(_horse_to_dict(horse))
    _write_yaml(filename, data)
    logger.debug("Added horse %s to %s", horse.name, filename)


def delete_horse(filename: Union[str, Path], horse_name: str) -> None:
    """Remove a horse and all of its events from a barn YAML file."""
    data = _read_yaml(filename)
    horse = _find_horse(data, horse_name)
    data["horses"].remove(horse)
    _write_yaml(filename, data)


def save_health_event(
    filename: Union[str, Path], horse_name: str, event: HealthEvent
) -> None:
    """
    Append a health event to a horse in a barn YAML file.

    Loads the raw YAML, appends the event to the horse's events list,
    and writes back to the file.
    """
    data = _read_yaml(filename)
    horse = _find_horse(data, horse_name)
    _events_of(horse).append(_event_to_dict(event))
    _write_yaml(filename, data)
    logger.debug(
        "Saved %s event for %s to %s", event.category.value, horse_name, filename
    )


def update_health_event(
    filename: Union[str, Path], horse_name: str, index: int, event: HealthEvent
) -> None:
    """Replace the event at events[index] for a horse in a barn YAML file."""
    data = _read_yaml(filename)
    events = _events_of(_find_horse(data, horse_name))
    if index < 0 or index >= len(events):
        raise IndexError(f"Event index {index} out of range (0..{len(events) - 1})")

    events[index] = _event_to_dict(event)
    _write_yaml(filename, data)


def delete_health_event(
    filename: Union[str, Path], horse_name: str, index: int
) -> None:
    """Remove the event at events[index] for a horse in a barn YAML file."""
    data = _read_yaml(filename)
    events = _events_of(_find_horse(data, horse_name))
    if index < 0 or index >= len(events):
        raise IndexError(f"Event index {index} out of range (0..{len(events) - 1})")

    del events[index]
    _write_yaml(filename, data)


def save_feed_schedule(
    filename: Union[str, Path], horse_name: str, schedule: Optional[FeedSchedule]
) -> None:
    """Replace a horse's feed schedule in a barn YAML file (None removes it)."""
    data = _read_yaml(filename)
    horse = _find_horse(data, horse_name)
    if schedule is None:
        horse.pop("feedSchedule", None)
    else:
        horse["feedSchedule"] = _feed_schedule_to_dict(schedule)
    _write_yaml(filename, data)
    logger.debug("Saved feed schedule for %s to %s", horse_name, filename)


def save_feed_template(filename: Union[str, Path], template: FeedTemplate) -> None:
    """Add a feed template, replacing any template with the same name."""
    data = _read_yaml(filename)
    if data.get("horses") is None:
        data["horses"] = []
    templates = data.get("feedTemplates") or []
    wanted = template.name.strip().lower()
    templates = [t for t in templates if str(t.get("name", "")).lower() != wanted]
    templates.append(_feed_template_to_dict(template))
    data["feedTemplates"] = templates
    _write_yaml(filename, data)
    logger.debug("Saved feed template %s to %s", template.name, filename)
