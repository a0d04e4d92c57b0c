"""Tests for schedule extraction and title derivation."""

from datetime import datetime

import pytest

from ai_scheduler.services.extractor import (
    UNRESOLVED_TIME_MESSAGE,
    ScheduleExtractor,
    derive_title,
    extract_schedule,
)
from ai_scheduler.services.schedule import FailureKind, ParsedSchedule, ScheduleResult

# Monday, 10:30
NOW = datetime(2026, 10, 19, 10, 30)


class TestScheduleExtractor:
    def setup_method(self):
        self.extractor = ScheduleExtractor(default_remind="15")

    def test_standup_with_duration(self):
        result = self.extractor.extract("schedule standup tomorrow at 9am for 15m", NOW)

        assert result.ok
        schedule = result.schedule
        assert schedule.title == "standup"
        assert schedule.who == ""
        assert schedule.start == datetime(2026, 10, 20, 9, 0)
        assert schedule.end == datetime(2026, 10, 20, 9, 15)

    def test_call_with_participant(self):
        result = self.extractor.extract("schedule call next monday 3pm with John", NOW)

        assert result.ok
        schedule = result.schedule
        assert schedule.title == "call"
        assert schedule.who == "John"
        assert schedule.start == datetime(2026, 10, 26, 15, 0)
        assert schedule.end is None

    def test_review_on_day_month(self):
        result = self.extractor.extract(
            "add review on 25 Aug 3:30pm for 30m with Sara", NOW
        )

        schedule = result.schedule
        assert schedule.title == "review"
        assert schedule.who == "Sara"
        assert schedule.start == datetime(2026, 8, 25, 15, 30)
        assert schedule.end == datetime(2026, 8, 25, 16, 0)

    def test_hours_duration(self):
        result = self.extractor.extract("create workshop 2024-06-01 at 1pm for 2 hours", NOW)
        assert result.schedule.end == datetime(2024, 6, 1, 15, 0)

    def test_defaults(self):
        schedule = self.extractor.extract("schedule standup tomorrow", NOW).schedule
        assert schedule.repeat == "none"
        assert schedule.remind == "15"
        assert schedule.notes == ""

    def test_default_remind_is_configurable(self):
        extractor = ScheduleExtractor(default_remind="none")
        assert extractor.extract("standup tomorrow", NOW).schedule.remind == "none"

    def test_title_keeps_case(self):
        schedule = self.extractor.extract("Schedule Team Sync tomorrow at 4pm", NOW).schedule
        assert schedule.title == "Team Sync"

    def test_untitled_when_only_tokens(self):
        schedule = self.extractor.extract("schedule tomorrow at 3pm for 1h", NOW).schedule
        assert schedule.title == "Untitled"

    def test_no_time_token_fails(self):
        result = self.extractor.extract("blah blah", NOW)

        assert not result.ok
        assert result.schedule is None
        assert result.failure.kind == FailureKind.UNRESOLVED_TIME
        assert result.failure.kind.value == "UnresolvedTime"
        assert result.failure.message == UNRESOLVED_TIME_MESSAGE

    def test_invalid_date_fails(self):
        result = self.extractor.extract("schedule dinner on 31 feb at 7pm", NOW)
        assert result.failure.kind == FailureKind.UNRESOLVED_TIME

    def test_out_of_range_duration_fails(self):
        result = self.extractor.extract("schedule trip tomorrow for 99999999999 minutes", NOW)

        assert not result.ok
        assert result.failure.kind == FailureKind.UNRESOLVED_TIME
        assert result.failure.message == UNRESOLVED_TIME_MESSAGE

    def test_extract_does_not_mutate_inputs(self):
        now = datetime(2026, 10, 19, 10, 30)
        self.extractor.extract("schedule standup tomorrow", now)
        assert now == datetime(2026, 10, 19, 10, 30)

    def test_extract_schedule_wrapper(self):
        result = extract_schedule("schedule standup tomorrow", NOW)
        assert isinstance(result, ScheduleResult)
        assert result.schedule.title == "standup"


class TestDeriveTitle:
    @pytest.mark.parametrize(
        "text,title",
        [
            ("schedule standup tomorrow at 9am for 15m", "standup"),
            ("schedule call next monday 3pm with John", "call"),
            ("add dentist on 2024-06-01 at 14:30", "dentist"),
            ("create gym session tomorrow morning", "gym session"),
            ("schedule   plan   roadmap   friday", "plan roadmap"),
            ("meeting at 9", "meeting"),
            ("lunch w/ Bob and Ann", "lunch"),
            ("", "Untitled"),
        ],
    )
    def test_derive(self, text, title):
        assert derive_title(text) == title

    def test_nested_verbs_are_fully_stripped(self):
        assert derive_title("schedule add review") == "review"

    @pytest.mark.parametrize(
        "text",
        [
            "schedule standup tomorrow at 9am for 15m",
            "schedule add review",
            "create create",
            "review notes at 9 for 10m on 3 sept",
            "Untitled",
        ],
    )
    def test_idempotent(self, text):
        once = derive_title(text)
        assert derive_title(once) == once


class TestParsedSchedule:
    def test_to_dict(self):
        schedule = ParsedSchedule(
            title="standup",
            start=datetime(2026, 10, 20, 9, 0),
            end=datetime(2026, 10, 20, 9, 15),
        )

        assert schedule.to_dict() == {
            "title": "standup",
            "who": "",
            "start": "2026-10-20T09:00:00",
            "end": "2026-10-20T09:15:00",
            "repeat": "none",
            "remind": "15",
            "notes": "",
        }

    def test_to_dict_without_end(self):
        schedule = ParsedSchedule(title="call", start=datetime(2026, 10, 26, 15, 0))
        assert schedule.to_dict()["end"] is None

    def test_fields_are_editable(self):
        schedule = ParsedSchedule(title="call", start=datetime(2026, 10, 26, 15, 0))
        schedule.title = "call mom"
        assert schedule.title == "call mom"
