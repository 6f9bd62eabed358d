"""Tests for schedule normalisation."""

import json

import pytest

from ncert_tutor.booking.schedule import (
    ScheduleShape,
    TimeWindow,
    WeeklyAvailability,
    format_clock,
    normalize_schedule,
    parse_clock,
)
from tests.conftest import LIST_SCHEDULE, MAP_SCHEDULE


class TestParseClock:
    def test_parses_padded_and_unpadded(self):
        assert parse_clock("09:30") == 570
        assert parse_clock("9:30") == 570

    def test_midnight_and_end_of_day(self):
        assert parse_clock("00:00") == 0
        assert parse_clock("24:00") == 1440

    @pytest.mark.parametrize("text", ["24:30", "12:60", "noon", "", "9", "25:00"])
    def test_rejects_invalid(self, text):
        with pytest.raises(ValueError):
            parse_clock(text)

    def test_format_clock_pads(self):
        assert format_clock(545) == "09:05"


class TestTimeWindow:
    def test_start_inclusive_end_exclusive(self):
        window = TimeWindow(1, 540, 720)
        assert window.contains(540)
        assert window.contains(719)
        assert not window.contains(720)
        assert not window.contains(539)

    def test_str(self):
        assert str(TimeWindow(1, 540, 720)) == "monday 09:00-12:00"


class TestNormalizeSchedule:
    def test_list_form(self):
        schedule = normalize_schedule(LIST_SCHEDULE)
        assert schedule.shape == ScheduleShape.LIST
        assert schedule.windows == (TimeWindow(1, 540, 720), TimeWindow(3, 840, 960))

    def test_map_form_matches_list_form(self):
        assert normalize_schedule(MAP_SCHEDULE).windows == normalize_schedule(LIST_SCHEDULE).windows

    def test_map_form_skips_unavailable_days(self):
        schedule = normalize_schedule(MAP_SCHEDULE)
        assert 5 not in schedule.available_days()

    def test_string_and_object_slots_are_equivalent(self):
        as_string = normalize_schedule({"monday": {"available": True, "slots": ["09:00-12:00"]}})
        as_object = normalize_schedule(
            {"monday": {"available": True, "slots": [{"start": "09:00", "end": "12:00"}]}}
        )
        as_long_keys = normalize_schedule(
            {"monday": {"available": True, "slots": [{"startTime": "09:00", "endTime": "12:00"}]}}
        )
        assert as_string.windows == as_object.windows == as_long_keys.windows

    def test_day_names_are_case_insensitive(self):
        schedule = normalize_schedule({"Monday": {"available": True, "slots": ["09:00-10:00"]}})
        assert schedule.available_days() == [1]

    def test_json_string_is_decoded(self):
        assert normalize_schedule(json.dumps(LIST_SCHEDULE)).windows == normalize_schedule(LIST_SCHEDULE).windows

    @pytest.mark.parametrize("raw", [None, [], {}, "not json", 42])
    def test_unusable_input_is_empty(self, raw):
        assert normalize_schedule(raw).is_empty

    def test_invalid_slots_are_dropped(self):
        schedule = normalize_schedule([
            {"dayOfWeek": 1, "startTime": "12:00", "endTime": "09:00"},
            {"dayOfWeek": 1, "startTime": "09:00", "endTime": "09:00"},
            {"dayOfWeek": 7, "startTime": "09:00", "endTime": "10:00"},
            {"dayOfWeek": True, "startTime": "09:00", "endTime": "10:00"},
            {"dayOfWeek": 2, "startTime": "nine", "endTime": "10:00"},
            "monday",
            {"dayOfWeek": 2, "startTime": "09:00", "endTime": "10:00"},
        ])
        assert schedule.windows == (TimeWindow(2, 540, 600),)

    def test_string_slot_without_dash_is_dropped(self):
        schedule = normalize_schedule({"monday": {"available": True, "slots": ["09:00"]}})
        assert schedule.is_empty

    def test_overlapping_windows_are_kept(self):
        schedule = normalize_schedule([
            {"dayOfWeek": 1, "startTime": "09:00", "endTime": "11:00"},
            {"dayOfWeek": 1, "startTime": "10:00", "endTime": "12:00"},
        ])
        assert len(schedule.windows_for_day(1)) == 2

    def test_weekly_availability_passes_through(self):
        schedule = WeeklyAvailability((TimeWindow(0, 0, 60),), ScheduleShape.LIST)
        assert normalize_schedule(schedule) is schedule
