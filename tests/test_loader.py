#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""
from datetime import date, datetime

import pytest
import yaml

from barn import (
    Barn,
    EventCategory,
    FeedSchedule,
    FeedSlot,
    FeedTemplate,
    HealthEvent,
    Horse,
    add_horse,
    create_barn,
    delete_health_event,
    delete_horse,
    load_barn,
    save_feed_schedule,
    save_feed_template,
    save_health_event,
    update_health_event,
)

# =============================================================================
# load_barn tests
# =============================================================================


class TestLoadBarn:
    """Tests for load_barn function."""

    def test_loads_horses_and_events(self, barn_file):
        barn = load_barn(barn_file)

        assert isinstance(barn, Barn)
        assert [h.name for h in barn.horses] == ["Whiskey", "Pepper"]
        whiskey = barn.horses[0]
        assert isinstance(whiskey, Horse)
        assert whiskey.id == "h-whiskey"
        assert whiskey.owner_name == "Jane"
        assert whiskey.is_clipped is False
        assert whiskey.date_added == date(2024, 1, 1)
        assert len(whiskey.events) == 2

        event = whiskey.events[1]
        assert isinstance(event, HealthEvent)
        assert event.category == EventCategory.FARRIER
        assert event.occurred_on == date(2025, 2, 19)
        assert event.next_due_on == date(2025, 4, 9)
        assert event.cost == 180.0
        assert event.provider_name == "Sam"
        assert event.notes == "Front shoes reset"
        assert event.horse_id == "h-whiskey"

    def test_optional_event_fields(self, barn_file):
        event = load_barn(barn_file).horses[0].events[0]
        assert event.next_due_on is None
        assert event.cost is None
        assert event.notes == ""

    def test_state_as_of_date(self, barn_file):
        assert load_barn(barn_file).as_of_date == date(2025, 4, 1)

    def test_as_of_defaults_to_today(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text("horses: []\n")
        barn = load_barn(path)
        assert barn.horses == []
        assert barn.as_of_date == date.today()

    def test_unquoted_dates(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text(
            "horses:\n"
            "  - name: Biscuit\n"
            "    events:\n"
            "      - category: Dental\n"
            "        date: 2025-01-05\n"
        )
        event = load_barn(path).horses[0].events[0]
        assert event.occurred_on == date(2025, 1, 5)

    def test_empty_file_loads_as_empty_barn(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text("")
        assert load_barn(path).horses == []

    def test_unknown_category_raises(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text(
            "horses:\n"
            "  - name: Biscuit\n"
            "    events:\n"
            "      - category: Chiropractor\n"
            "        date: '2025-01-05'\n"
        )
        with pytest.raises(ValueError):
            load_barn(path)

    def test_get_horse_case_insensitive(self, barn_file):
        barn = load_barn(barn_file)
        assert barn.get_horse("whiskey").name == "Whiskey"
        assert barn.get_horse("Nobody") is None


# =============================================================================
# Write tests
# =============================================================================


class TestSaveHealthEvent:
    """Tests for save_health_event."""

    def test_appends_event(self, barn_file):
        event = HealthEvent.record(
            EventCategory.FARRIER, date(2025, 4, 1), cost=185.0, provider_name="Sam"
        )
        save_health_event(barn_file, "whiskey", event)

        whiskey = load_barn(barn_file).get_horse("Whiskey")
        assert len(whiskey.events) == 3
        saved = whiskey.events[-1]
        assert saved.id == event.id
        assert saved.occurred_on == date(2025, 4, 1)
        assert saved.next_due_on == date(2025, 5, 20)
        assert saved.cost == 185.0

    def test_omits_empty_fields(self, barn_file):
        save_health_event(barn_file, "Pepper", HealthEvent(EventCategory.DENTAL, date(2025, 4, 1)))
        data = yaml.safe_load(barn_file.read_text())
        raw = data["horses"][1]["events"][-1]
        assert set(raw) == {"id", "category", "date"}
        assert raw["date"] == "2025-04-01"

    def test_preserves_state(self, barn_file):
        save_health_event(barn_file, "Pepper", HealthEvent(EventCategory.DENTAL, date(2025, 4, 1)))
        assert load_barn(barn_file).as_of_date == date(2025, 4, 1)

    def test_unknown_horse_raises(self, barn_file):
        with pytest.raises(KeyError):
            save_health_event(barn_file, "Nobody", HealthEvent(EventCategory.VET, date(2025, 4, 1)))

    def test_horse_without_events_list(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text("horses:\n  - name: Biscuit\n")
        save_health_event(path, "Biscuit", HealthEvent(EventCategory.VET, date(2025, 4, 1)))
        assert len(load_barn(path).horses[0].events) == 1


class TestUpdateDeleteHealthEvent:
    def test_update(self, barn_file):
        replacement = HealthEvent(EventCategory.FARRIER, date(2025, 1, 2), cost=90.0)
        update_health_event(barn_file, "Whiskey", 0, replacement)
        event = load_barn(barn_file).horses[0].events[0]
        assert event.occurred_on == date(2025, 1, 2)
        assert event.cost == 90.0

    def test_update_bad_index(self, barn_file):
        with pytest.raises(IndexError):
            update_health_event(barn_file, "Whiskey", 5, HealthEvent(EventCategory.VET, date(2025, 1, 1)))

    def test_delete(self, barn_file):
        delete_health_event(barn_file, "Whiskey", 0)
        events = load_barn(barn_file).horses[0].events
        assert len(events) == 1
        assert events[0].occurred_on == date(2025, 2, 19)

    def test_delete_bad_index(self, barn_file):
        with pytest.raises(IndexError):
            delete_health_event(barn_file, "Pepper", -1)


class TestHorseWrites:
    def test_create_and_add_horse(self, tmp_path):
        path = tmp_path / "new.yaml"
        create_barn(path, as_of_date="2025-01-01")
        add_horse(path, Horse("Biscuit", "Ann", is_clipped=True, date_added=date(2025, 1, 1)))

        barn = load_barn(path)
        assert barn.as_of_date == date(2025, 1, 1)
        assert len(barn.horses) == 1
        assert barn.horses[0].name == "Biscuit"
        assert barn.horses[0].is_clipped is True
        assert barn.horses[0].date_added == date(2025, 1, 1)

    def test_add_duplicate_name_raises(self, barn_file):
        with pytest.raises(ValueError, match="already exists"):
            add_horse(barn_file, Horse("WHISKEY"))

    def test_delete_horse(self, barn_file):
        delete_horse(barn_file, "Pepper")
        assert [h.name for h in load_barn(barn_file).horses] == ["Whiskey"]

    def test_delete_unknown_horse(self, barn_file):
        with pytest.raises(KeyError):
            delete_horse(barn_file, "Nobody")


class TestFeedPersistence:
    """Tests for feed schedules and templates in barn files."""

    def test_loads_feed_schedule(self, barn_file):
        barn = load_barn(barn_file)
        schedule = barn.get_horse("Whiskey").feed_schedule
        assert isinstance(schedule, FeedSchedule)
        assert schedule.am_summary == "2 qt Senior + 2 flakes"
        assert schedule.all_supplements == ["Biotin", "SmartPak"]
        assert schedule.pm_medications == ["Bute"]
        assert schedule.am_medications == []
        assert schedule.am_fed_at == datetime(2025, 4, 1, 7, 30)
        assert schedule.is_fed(FeedSlot.AM)
        assert not schedule.is_fed(FeedSlot.PM)
        assert barn.get_horse("Pepper").feed_schedule is None

    def test_loads_feed_templates(self, barn_file):
        barn = load_barn(barn_file)
        assert [h.name for h in barn.horses] == ["Whiskey", "Pepper"]
        template = barn.get_template("easy KEEPER")
        assert isinstance(template, FeedTemplate)
        assert template.description == "Hay only"
        assert template.usage_count == 2
        assert template.created_on == date(2025, 1, 15)

    def test_unquoted_fed_at(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text("""
horses:
  - name: Biscuit
    feedSchedule:
      pmFedToday: true
      pmFedAt: 2025-04-01 17:05:00
""")
        schedule = load_barn(path).horses[0].feed_schedule
        assert schedule.pm_fed_at == datetime(2025, 4, 1, 17, 5)

    def test_save_feed_schedule_round_trip(self, barn_file):
        schedule = FeedSchedule(am_grain="1 qt Ration Balancer", pm_medications=["Bute"])
        schedule.toggle_fed(FeedSlot.PM, datetime(2025, 4, 1, 16, 0))
        save_feed_schedule(barn_file, "pepper", schedule)

        barn = load_barn(barn_file)
        saved = barn.get_horse("Pepper").feed_schedule
        assert saved.am_grain == "1 qt Ration Balancer"
        assert saved.pm_fed_at == datetime(2025, 4, 1, 16, 0)
        assert saved.is_fed(FeedSlot.PM)
        assert len(barn.get_horse("Pepper").events) == 1

    def test_save_none_removes_schedule(self, barn_file):
        save_feed_schedule(barn_file, "Whiskey", None)
        assert load_barn(barn_file).get_horse("Whiskey").feed_schedule is None

    def test_save_feed_template_replaces_same_name(self, barn_file):
        template = FeedTemplate("EASY KEEPER", am_grain="1 qt", usage_count=5)
        save_feed_template(barn_file, template)
        save_feed_template(barn_file, FeedTemplate("Senior"))

        templates = load_barn(barn_file).feed_templates
        assert [t.name for t in templates] == ["EASY KEEPER", "Senior"]
        assert templates[0].usage_count == 5
        assert templates[1].usage_count == 0

    def test_template_file_without_horses_loads(self, tmp_path):
        path = tmp_path / "barn.yaml"
        path.write_text("feedTemplates:\n  - name: Senior\n    usageCount: 1\n")
        barn = load_barn(path)
        assert barn.horses == []
        assert barn.get_template("Senior").usage_count == 1

    def test_horse_writes_keep_feed_schedule(self, tmp_path):
        path = tmp_path / "new.yaml"
        create_barn(path)
        add_horse(path, Horse("Biscuit", feed_schedule=FeedSchedule(am_hay="2 flakes")))
        assert load_barn(path).horses[0].feed_schedule.am_summary == "2 flakes"
