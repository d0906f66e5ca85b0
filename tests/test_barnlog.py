#!/usr/bin/env python3
"""Tests for barnlog CLI formatting helpers and commands."""
from datetime import date, datetime

import pytest

from barn import (
    EventCategory,
    FeedSchedule,
    FeedSlot,
    HealthEvent,
    Horse,
    analyze,
    bucketize,
    load_barn,
)
from barnlog import (
    format_cost,
    format_date,
    format_days,
    truncate,
    make_timeline_table,
    make_compliance_table,
    make_history_table,
    make_blanket_rows,
    make_feed_rows,
    main,
)


class TestFormatCost:
    def test_formats_number(self):
        assert format_cost(75.50) == "$75.50"
        assert format_cost(1250) == "$1,250.00"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatDate:
    def test_formats_date(self):
        assert format_date(date(2025, 1, 15)) == "2025-01-15"

    def test_none_returns_dash(self):
        assert format_date(None) == "-"


class TestFormatDays:
    def test_formats(self):
        assert format_days(49) == "49d"
        assert format_days(None) == "-"


class TestTruncate:
    def test_empty_returns_dash(self):
        assert truncate(None) == "-"
        assert truncate("") == "-"

    def test_long_text_truncated_with_ellipsis(self):
        assert truncate("this is a very long note", max_len=15) == "this is a ve..."


class TestTables:
    """Tests for table row builders."""

    def test_timeline_rows(self):
        today = date(2025, 3, 1)
        horse = Horse(
            "Whiskey",
            events=[HealthEvent(EventCategory.VET, date(2024, 9, 1), date(2025, 2, 15))],
        )
        bucket = bucketize([horse], today)[0]
        rows = make_timeline_table(bucket, today)
        assert rows == [["Whiskey", "Vet", "2024-09-01", "2025-02-15", "Overdue by 14 days"]]

    def test_compliance_rows(self):
        horse = Horse(
            "Whiskey",
            events=[
                HealthEvent(EventCategory.FARRIER, date(2025, 1, 1)),
                HealthEvent(EventCategory.FARRIER, date(2025, 2, 19)),
            ],
        )
        rows = make_compliance_table(analyze(horse, date(2025, 3, 1)))
        assert rows[0] == ["Farrier", "Every 6-8 weeks", "49d", "56d", "on track"]
        assert rows[1][-1] == "not enough data"

    def test_history_rows(self):
        event = HealthEvent(
            EventCategory.DENTAL, date(2025, 1, 5), cost=300.0, provider_name="Dr. Lee"
        )
        rows = make_history_table([event])
        assert rows == [["2025-01-05", "Dental", "Dr. Lee", "$300.00", "-", "-"]]

    def test_blanket_rows(self, barn_file):
        rows = make_blanket_rows(load_barn(barn_file), 45)
        assert rows == [
            ["Pepper", "yes", "Medium Weight"],
            ["Whiskey", "no", "Light Sheet"],
        ]

    def test_feed_rows(self):
        schedule = FeedSchedule(am_grain="2 qt", am_supplements=["Biotin"], pm_medications=["Bute"])
        schedule.toggle_fed(FeedSlot.AM, datetime(2025, 4, 1, 7, 0))
        horses = [Horse("Whiskey", feed_schedule=schedule), Horse("Biscuit")]
        assert make_feed_rows(horses, FeedSlot.AM) == [
            ["Whiskey", "2 qt", "Biotin", "Bute", "yes"],
            ["Biscuit", "No feed schedule", "-", "-", "no"],
        ]


class TestMain:
    """End-to-end tests for the CLI entry point."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml"), "horses"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_timeline(self, barn_file, capsys):
        assert main([str(barn_file), "timeline"]) == 0
        out = capsys.readouterr().out
        assert "OVERDUE:" in out
        assert "THIS MONTH:" in out
        assert out.index("OVERDUE:") < out.index("THIS MONTH:")

    def test_timeline_as_of(self, barn_file, capsys):
        assert main([str(barn_file), "--as-of", "2025-03-01", "timeline"]) == 0
        out = capsys.readouterr().out
        assert "OVERDUE:" not in out
        assert "THIS MONTH:" in out

    def test_timeline_category_filter(self, barn_file, capsys):
        assert main([str(barn_file), "timeline", "--category", "vet"]) == 0
        out = capsys.readouterr().out
        assert "Pepper" in out
        assert "Whiskey" not in out

    def test_analytics(self, barn_file, capsys):
        assert main([str(barn_file), "analytics", "whiskey"]) == 0
        out = capsys.readouterr().out
        assert "Farrier schedule is on track with an average of 49 days" in out
        assert "Projected annual cost: $360.00" in out

    def test_analytics_unknown_horse(self, barn_file, capsys):
        assert main([str(barn_file), "analytics", "Nobody"]) == 1
        assert "Unknown horse" in capsys.readouterr().out

    def test_history(self, barn_file, capsys):
        assert main([str(barn_file), "history", "Whiskey"]) == 0
        out = capsys.readouterr().out
        assert "Total cost: $180.00" in out

    def test_log_saves_event(self, barn_file, capsys):
        code = main([str(barn_file), "log", "Pepper", "dental", "--cost", "320", "--by", "Dr. Lee"])
        assert code == 0
        assert "Event saved." in capsys.readouterr().out
        event = load_barn(barn_file).get_horse("Pepper").events[-1]
        assert event.category == EventCategory.DENTAL
        assert event.occurred_on == date(2025, 4, 1)
        assert event.next_due_on == date(2026, 4, 1)

    def test_log_dry_run(self, barn_file, capsys):
        assert main([str(barn_file), "log", "Pepper", "vet", "--dry-run"]) == 0
        assert "dry run" in capsys.readouterr().out
        assert len(load_barn(barn_file).get_horse("Pepper").events) == 1

    def test_log_rejects_negative_cost(self, barn_file, capsys):
        assert main([str(barn_file), "log", "Pepper", "vet", "--cost", "-5"]) == 1
        assert "Cost cannot be negative." in capsys.readouterr().out

    def test_log_rejects_nan_cost(self, barn_file, capsys):
        assert main([str(barn_file), "log", "Pepper", "vet", "--cost", "nan"]) == 1
        assert "Cost must be a number." in capsys.readouterr().out
        assert len(load_barn(barn_file).get_horse("Pepper").events) == 1

    def test_log_rejects_future_date(self, barn_file, capsys):
        assert main([str(barn_file), "log", "Pepper", "vet", "--date", "2025-05-01"]) == 1
        assert "future" in capsys.readouterr().out

    def test_log_rejects_due_before_event(self, barn_file, capsys):
        code = main(
            [str(barn_file), "log", "Pepper", "vet", "--date", "2025-03-01", "--next-due", "2025-02-01"]
        )
        assert code == 1
        assert "Next due date must be after the event date." in capsys.readouterr().out

    def test_unknown_category_is_usage_error(self, barn_file):
        with pytest.raises(SystemExit):
            main([str(barn_file), "log", "Pepper", "massage"])

    def test_blanket_for_horse(self, barn_file, capsys):
        assert main([str(barn_file), "blanket", "50", "--horse", "Pepper"]) == 0
        assert "Pepper: Light Sheet" in capsys.readouterr().out

    def test_blanket_clipped_flag(self, barn_file, capsys):
        assert main([str(barn_file), "blanket", "25", "--clipped"]) == 0
        assert "Heavy Weight + Liner / Neck Cover" in capsys.readouterr().out

    def test_cycles(self, barn_file, capsys):
        assert main([str(barn_file), "cycles"]) == 0
        out = capsys.readouterr().out
        assert "+7 weeks" in out
        assert "Annual float" in out


class TestFeedCommands:
    """End-to-end tests for the feed, feed-set and templates commands."""

    def test_board(self, barn_file, capsys):
        assert main([str(barn_file), "feed", "--at", "2025-04-01T08:00"]) == 0
        out = capsys.readouterr().out
        assert "AM FEED: 1/2 fed" in out
        assert "2 qt Senior + 2 flakes" in out
        assert "No feed schedule" in out
        assert "Reset" not in out

    def test_board_slot_override(self, barn_file, capsys):
        assert main([str(barn_file), "feed", "--at", "2025-04-01T08:00", "--slot", "pm"]) == 0
        out = capsys.readouterr().out
        assert "PM FEED: 0/2 fed" in out
        assert "1 qt Senior + 3 flakes" in out

    def test_needs_feeding_filter(self, barn_file, capsys):
        assert main([str(barn_file), "feed", "--at", "2025-04-01T08:00", "--needs-feeding"]) == 0
        out = capsys.readouterr().out
        assert "Filter: Needs Feeding" in out
        assert "Pepper" in out
        assert "Whiskey" not in out

    def test_new_day_resets_and_saves(self, barn_file, capsys):
        assert main([str(barn_file), "feed", "--at", "2025-04-02T08:00"]) == 0
        out = capsys.readouterr().out
        assert "Reset fed status from a previous day: Whiskey" in out
        assert "AM FEED: 0/2 fed" in out
        schedule = load_barn(barn_file).get_horse("Whiskey").feed_schedule
        assert not schedule.is_fed(FeedSlot.AM)
        assert schedule.am_fed_at is None

    def test_mark_fed(self, barn_file, capsys):
        code = main(
            [str(barn_file), "feed", "--at", "2025-04-01T16:30", "--mark", "whiskey"]
        )
        assert code == 0
        out = capsys.readouterr().out
        assert "Whiskey: fed (PM)" in out
        assert "All horses fed" not in out
        schedule = load_barn(barn_file).get_horse("Whiskey").feed_schedule
        assert schedule.pm_fed_at == datetime(2025, 4, 1, 16, 30)
        assert schedule.is_fed(FeedSlot.AM)

    def test_mark_fed_dry_run(self, barn_file, capsys):
        code = main(
            [str(barn_file), "feed", "--at", "2025-04-01T16:30", "--mark", "Whiskey", "--dry-run"]
        )
        assert code == 0
        assert "dry run" in capsys.readouterr().out
        assert not load_barn(barn_file).get_horse("Whiskey").feed_schedule.is_fed(FeedSlot.PM)

    def test_mark_horse_without_schedule(self, barn_file, capsys):
        assert main([str(barn_file), "feed", "--mark", "Pepper"]) == 1
        assert "Pepper has no feed schedule" in capsys.readouterr().out

    def test_bad_slot_is_usage_error(self, barn_file):
        with pytest.raises(SystemExit):
            main([str(barn_file), "feed", "--slot", "noon"])

    def test_feed_set_fields(self, barn_file, capsys):
        code = main(
            [
                str(barn_file),
                "feed-set",
                "Pepper",
                "--am-grain",
                "1 qt Ration Balancer",
                "--am-supplements",
                "Flax, Biotin,",
                "--instructions",
                "Feed last",
            ]
        )
        assert code == 0
        out = capsys.readouterr().out
        assert "AM: 1 qt Ration Balancer" in out
        assert "Feed schedule saved." in out
        schedule = load_barn(barn_file).get_horse("Pepper").feed_schedule
        assert schedule.am_supplements == ["Flax", "Biotin"]
        assert schedule.special_instructions == "Feed last"

    def test_feed_set_keeps_other_fields(self, barn_file, capsys):
        assert main([str(barn_file), "feed-set", "Whiskey", "--pm-hay", "4 flakes"]) == 0
        schedule = load_barn(barn_file).get_horse("Whiskey").feed_schedule
        assert schedule.pm_summary == "1 qt Senior + 4 flakes"
        assert schedule.am_grain == "2 qt Senior"

    def test_feed_set_from_template(self, barn_file, capsys):
        assert main([str(barn_file), "feed-set", "Pepper", "--template", "easy keeper"]) == 0
        barn = load_barn(barn_file)
        assert barn.get_horse("Pepper").feed_schedule.am_summary == "2 flakes"
        assert barn.get_template("Easy keeper").usage_count == 3

    def test_feed_set_unknown_template(self, barn_file, capsys):
        assert main([str(barn_file), "feed-set", "Pepper", "--template", "Nope"]) == 1
        assert "Unknown feed template" in capsys.readouterr().out

    def test_templates_list(self, barn_file, capsys):
        assert main([str(barn_file), "templates"]) == 0
        out = capsys.readouterr().out
        assert "Easy keeper" in out
        assert "No feed details" in out

    def test_templates_save(self, barn_file, capsys):
        code = main([str(barn_file), "templates", "--save", "Senior", "--from", "Whiskey"])
        assert code == 0
        assert "AM: 2 qt Senior, PM: 1 qt Senior" in capsys.readouterr().out
        template = load_barn(barn_file).get_template("Senior")
        assert template.pm_medications == ["Bute"]
        assert template.created_on == date(2025, 4, 1)

    def test_templates_save_needs_source(self, barn_file, capsys):
        assert main([str(barn_file), "templates", "--save", "Senior"]) == 1
        assert "--from" in capsys.readouterr().out
